"""Localized message catalogue for the certificate resource.

Messages are keyed by a short identifier and formatted with
:meth:`str.format` keyword parameters. Each culture maps keys to
templates; lookups for an unknown culture, or a key missing from a
culture's table, fall back to ``en-US``.
"""
from __future__ import annotations

import os

DEFAULT_CULTURE = "en-US"

_selected_culture: str | None = None

_CATALOGUE: dict[str, dict[str, str]] = {
    "en-US": {
        "getting_state": (
            "Getting certificate '{thumbprint}' state from store '{store_path}'."
        ),
        "testing_state": (
            "Testing certificate '{thumbprint}' in store '{store_path}'."
        ),
        "certificate_found": (
            "Certificate '{thumbprint}' found in store '{store_path}'."
        ),
        "certificate_not_found": (
            "Certificate '{thumbprint}' not found in store '{store_path}'."
        ),
        "state_mismatch": (
            "Certificate '{thumbprint}' in store '{store_path}' is {actual} "
            "but should be {desired}."
        ),
        "state_in_sync": (
            "Certificate '{thumbprint}' in store '{store_path}' is {actual} as desired."
        ),
        "importing_certificate": (
            "Importing certificate '{path}' into store '{store_path}'."
        ),
        "certificate_imported": (
            "Certificate '{thumbprint}' imported into store '{store_path}'."
        ),
        "thumbprint_mismatch": (
            "Certificate file '{path}' has thumbprint '{actual}', which does not "
            "match the requested thumbprint '{thumbprint}'."
        ),
        "removing_certificate": (
            "Removing certificate '{thumbprint}' from store '{store_path}'."
        ),
        "certificate_removed": (
            "Certificate '{thumbprint}' removed from store '{store_path}'."
        ),
        "certificate_already_absent": (
            "Certificate '{thumbprint}' already absent from store '{store_path}'."
        ),
        "invalid_thumbprint": (
            "Thumbprint '{thumbprint}' is not a valid hexadecimal hash. Expected "
            "{lengths} hexadecimal characters."
        ),
        "invalid_path": (
            "Path '{path}' is not a valid certificate file path. Expected one of "
            "the extensions {extensions}."
        ),
        "source_missing": (
            "Certificate file '{path}' was not found. It is required when Ensure "
            "is 'Present'."
        ),
        "invalid_location": (
            "Location '{location}' is not valid. Expected one of {locations}."
        ),
        "invalid_store_name": "Store name '{store}' is not valid.",
        "invalid_presence": (
            "Ensure '{presence}' is not valid. Expected one of {presences}."
        ),
        "invalid_store_path": (
            "Store path '{store_path}' is not a valid certificate store path."
        ),
        "store_not_found": "Certificate store '{store_path}' could not be opened.",
        "invalid_configuration": (
            "Configuration file '{path}' could not be loaded: {reason}"
        ),
        "certificate_parse_failed": (
            "Certificate file '{path}' could not be parsed: {reason}"
        ),
        "certificate_write_failed": (
            "Certificate '{thumbprint}' could not be written to store "
            "'{store_path}': {reason}"
        ),
    },
    "de-DE": {
        "getting_state": (
            "Zustand von Zertifikat '{thumbprint}' im Speicher '{store_path}' "
            "wird abgerufen."
        ),
        "testing_state": (
            "Zertifikat '{thumbprint}' im Speicher '{store_path}' wird getestet."
        ),
        "certificate_found": (
            "Zertifikat '{thumbprint}' im Speicher '{store_path}' gefunden."
        ),
        "certificate_not_found": (
            "Zertifikat '{thumbprint}' im Speicher '{store_path}' nicht gefunden."
        ),
        "importing_certificate": (
            "Zertifikat '{path}' wird in den Speicher '{store_path}' importiert."
        ),
        "removing_certificate": (
            "Zertifikat '{thumbprint}' wird aus dem Speicher '{store_path}' entfernt."
        ),
        "source_missing": (
            "Zertifikatsdatei '{path}' wurde nicht gefunden. Sie ist erforderlich, "
            "wenn Ensure 'Present' ist."
        ),
        "store_not_found": (
            "Zertifikatspeicher '{store_path}' konnte nicht geöffnet werden."
        ),
    },
}


def available_cultures() -> list[str]:
    """Return the sorted list of cultures that have a message table."""
    return sorted(_CATALOGUE)


def set_culture(culture: str | None) -> None:
    """Select the culture used when :func:`get_message` is not given one.

    Passing None restores the ``CERT_PRESENCE_CULTURE`` environment lookup.
    """
    global _selected_culture
    _selected_culture = culture


def current_culture() -> str:
    """Return the selected culture, else ``CERT_PRESENCE_CULTURE``, else the default."""
    if _selected_culture:
        return _selected_culture
    return os.environ.get("CERT_PRESENCE_CULTURE", DEFAULT_CULTURE)


def get_message(key: str, culture: str | None = None, **params: object) -> str:
    """Look up and format a message template.

    Parameters
    ----------
    key:
        Message identifier, e.g. ``"source_missing"``.
    culture:
        Culture name such as ``"de-DE"``. Defaults to :func:`current_culture`.
    **params:
        Values substituted into the template.

    Raises
    ------
    KeyError
        If *key* is not defined in the default culture.
    """
    table = _CATALOGUE.get(culture or current_culture(), {})
    template = table.get(key) or _CATALOGUE[DEFAULT_CULTURE][key]
    return template.format(**params)
