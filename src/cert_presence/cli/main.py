"""CLI entry point for cert-presence.

Invoked as::

    cert-presence [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m cert_presence.cli.main

Commands
--------
get          Show the observed state of a certificate
test         Exit 0 if the certificate is in the desired state, 1 otherwise
set          Import or remove a certificate
apply        Test-then-set every resource in a JSON configuration document
store list   List certificates in a store
thumbprint   Print the thumbprint of a certificate file
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Callable, NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cert_presence.certificates.address import StoreAddress, StoreLocation
from cert_presence.certificates.thumbprint import THUMBPRINT_ALGORITHMS
from cert_presence.config import Settings
from cert_presence.errors import CertificateResourceError
from cert_presence.messages import set_culture
from cert_presence.resource.state import DesiredState, Presence

console = Console()

_LOCATIONS = [loc.value for loc in StoreLocation]
_PRESENCES = [p.value for p in Presence]
_HASH_LENGTHS = {cls.name: length for length, cls in THUMBPRINT_ALGORITHMS.items()}


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="cert-presence")
@click.option(
    "--store-root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="CERT_PRESENCE_STORE_ROOT",
    default=None,
    help="Base directory of the certificate store.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="CERT_PRESENCE_LOG_LEVEL",
    default=None,
    help="Logging level.",
)
@click.option(
    "--audit-log",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="CERT_PRESENCE_AUDIT_LOG",
    default=None,
    help="Append store changes to this JSONL file.",
)
@click.option(
    "--culture",
    envvar="CERT_PRESENCE_CULTURE",
    default=None,
    help="Message culture, e.g. en-US or de-DE.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    store_root: Path | None,
    log_level: str | None,
    audit_log: Path | None,
    culture: str | None,
) -> None:
    """Declarative presence of X.509 certificates in certificate stores"""
    settings = Settings.from_env()
    overrides: dict[str, object] = {}
    if store_root is not None:
        overrides["store_root"] = store_root
    if log_level is not None:
        overrides["log_level"] = log_level
    if audit_log is not None:
        overrides["audit_log"] = audit_log
    if culture is not None:
        overrides["culture"] = culture
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper()))
    set_culture(settings.culture)
    ctx.obj = settings


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from cert_presence import __version__

    console.print(f"[bold]cert-presence[/bold] v{__version__}")


# ------------------------------------------------------------------
# Shared resource parameters
# ------------------------------------------------------------------


_RESOURCE_OPTIONS = [
    click.option("--thumbprint", "-t", required=True, help="Hex thumbprint of the certificate."),
    click.option(
        "--path",
        "-p",
        "cert_path",
        required=True,
        type=click.Path(dir_okay=False, path_type=Path),
        help="Certificate file to import when --ensure is Present.",
    ),
    click.option(
        "--location",
        "-l",
        type=click.Choice(_LOCATIONS, case_sensitive=False),
        default=StoreLocation.LOCAL_MACHINE.value,
        show_default=True,
        help="Store location.",
    ),
    click.option("--store", "-s", "store_name", default="My", show_default=True, help="Store name."),
    click.option(
        "--ensure",
        "-e",
        type=click.Choice(_PRESENCES, case_sensitive=False),
        default=Presence.PRESENT.value,
        show_default=True,
        help="Whether the certificate should be present or absent.",
    ),
]


def resource_options(func: Callable[..., None]) -> Callable[..., None]:
    """Attach the five resource parameters as options."""
    for option in reversed(_RESOURCE_OPTIONS):
        func = option(func)
    return func


def _desired(
    thumbprint: str, cert_path: Path, location: str, store_name: str, ensure: str
) -> DesiredState:
    return DesiredState.from_parameters(
        thumbprint=thumbprint,
        path=cert_path,
        location=location,
        store=store_name,
        ensure=ensure,
    )


# ------------------------------------------------------------------
# get / test / set
# ------------------------------------------------------------------


@cli.command(name="get")
@resource_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON output.")
@click.pass_obj
def get_command(
    settings: Settings,
    thumbprint: str,
    cert_path: Path,
    location: str,
    store_name: str,
    ensure: str,
    as_json: bool,
) -> None:
    """Show the observed state of a certificate."""
    try:
        resource = _build_resource(settings)
        observed = resource.read(_desired(thumbprint, cert_path, location, store_name, ensure))
    except CertificateResourceError as exc:
        _fail(exc)

    state = observed.to_dict()
    if as_json:
        click.echo(json.dumps(state, indent=2))
        return

    table = Table(title=f"Certificate — {observed.thumbprint}", show_header=True)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for key in ("Thumbprint", "Path", "Location", "Store", "Ensure"):
        table.add_row(key, str(state[key]))
    if observed.certificate is not None:
        table.add_row("Subject", observed.certificate.subject)
        table.add_row("Issuer", observed.certificate.issuer)
        table.add_row("NotAfter", observed.certificate.not_after.isoformat())
    console.print(table)


@cli.command(name="test")
@resource_options
@click.pass_obj
def test_command(
    settings: Settings,
    thumbprint: str,
    cert_path: Path,
    location: str,
    store_name: str,
    ensure: str,
) -> None:
    """Exit 0 if the certificate is in the desired state, 1 otherwise."""
    try:
        desired = _desired(thumbprint, cert_path, location, store_name, ensure)
        in_sync = _build_resource(settings).test(desired)
    except CertificateResourceError as exc:
        _fail(exc)

    if in_sync:
        console.print(f"[green]In desired state[/green] ({desired.presence.value})")
    else:
        console.print(f"[yellow]Not in desired state[/yellow] (want {desired.presence.value})")
        sys.exit(1)


@cli.command(name="set")
@resource_options
@click.pass_obj
def set_command(
    settings: Settings,
    thumbprint: str,
    cert_path: Path,
    location: str,
    store_name: str,
    ensure: str,
) -> None:
    """Import or remove a certificate."""
    try:
        desired = _desired(thumbprint, cert_path, location, store_name, ensure)
        _build_resource(settings).apply(desired)
    except CertificateResourceError as exc:
        _fail(exc)

    verb = "Imported" if desired.presence is Presence.PRESENT else "Removed"
    console.print(
        f"[green]{verb}[/green] [bold]{desired.thumbprint}[/bold] "
        f"({desired.address.store_path})"
    )


# ------------------------------------------------------------------
# apply
# ------------------------------------------------------------------


@cli.command(name="apply")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--what-if",
    is_flag=True,
    default=False,
    help="Only test; report resources that would change.",
)
@click.pass_obj
def apply_command(settings: Settings, config_file: Path, what_if: bool) -> None:
    """Bring every resource in CONFIG_FILE into its desired state."""
    from cert_presence.config import load_configuration

    try:
        _, desired_states = load_configuration(config_file)
        resource = _build_resource(settings)
    except CertificateResourceError as exc:
        _fail(exc)

    table = Table(title=f"Configuration — {config_file.name}", show_header=True)
    table.add_column("Thumbprint", style="cyan")
    table.add_column("Store")
    table.add_column("Ensure")
    table.add_column("Result")

    counts = {"in desired state": 0, "would change": 0, "changed": 0, "failed": 0}
    for desired in desired_states:
        try:
            if resource.test(desired):
                outcome = "in desired state"
            elif what_if:
                outcome = "would change"
            else:
                resource.apply(desired)
                outcome = "changed"
            result = outcome
        except CertificateResourceError as exc:
            outcome = "failed"
            result = f"[red]failed:[/red] {escape(str(exc))}"
        counts[outcome] += 1
        table.add_row(
            desired.thumbprint,
            desired.address.store_path,
            desired.presence.value,
            result,
        )

    console.print(table)
    console.print(
        "\nSummary: " + ", ".join(f"{count} {outcome}" for outcome, count in counts.items())
    )
    if counts["failed"]:
        sys.exit(1)


# ------------------------------------------------------------------
# store list
# ------------------------------------------------------------------


@cli.group(name="store")
def store_group() -> None:
    """Inspect certificate stores."""


@store_group.command(name="list")
@click.option(
    "--location",
    "-l",
    type=click.Choice(_LOCATIONS, case_sensitive=False),
    default=StoreLocation.LOCAL_MACHINE.value,
    show_default=True,
)
@click.option("--store", "-s", "store_name", default="My", show_default=True)
@click.pass_obj
def store_list_command(settings: Settings, location: str, store_name: str) -> None:
    """List certificates in a store."""
    try:
        address = StoreAddress(location=location, store_name=store_name)
        certs = _build_resource(settings).store.list_certificates(address)
    except CertificateResourceError as exc:
        _fail(exc)

    if not certs:
        console.print(f"[yellow]No certificates in {address.store_path}.[/yellow]")
        return

    table = Table(title=address.store_path, show_header=True)
    table.add_column("Thumbprint", style="cyan")
    table.add_column("Subject")
    table.add_column("NotAfter")
    for cert in certs:
        table.add_row(cert.thumbprint, cert.subject, cert.not_after.date().isoformat())
    console.print(table)
    console.print(f"\nTotal: {len(certs)} certificate(s)")


# ------------------------------------------------------------------
# thumbprint
# ------------------------------------------------------------------


@cli.command(name="thumbprint")
@click.argument("cert_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--algorithm",
    "-a",
    type=click.Choice(sorted(_HASH_LENGTHS), case_sensitive=False),
    default="sha1",
    show_default=True,
)
def thumbprint_command(cert_file: Path, algorithm: str) -> None:
    """Print the thumbprint of CERT_FILE."""
    from cert_presence.certificates.stored_cert import load_certificate_file
    from cert_presence.certificates.thumbprint import compute_thumbprint

    try:
        cert = load_certificate_file(cert_file)
    except CertificateResourceError as exc:
        _fail(exc)

    algorithm_cls = THUMBPRINT_ALGORITHMS[_HASH_LENGTHS[algorithm.lower()]]
    click.echo(compute_thumbprint(cert, algorithm_cls()))


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _build_resource(settings: Settings):  # type: ignore[no-untyped-def]
    """Return a CertificateResource over the filesystem store in *settings*."""
    from cert_presence.certificates.store import FilesystemCertStore
    from cert_presence.middleware.audit import ResourceAuditLogger
    from cert_presence.resource.certificate_resource import CertificateResource

    audit_logger = ResourceAuditLogger(settings.audit_log) if settings.audit_log else None
    return CertificateResource(
        FilesystemCertStore(base_dir=settings.store_root),
        audit_logger=audit_logger,
    )


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
