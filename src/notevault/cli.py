"""
NoteVault maintenance CLI.

Usage:
    notevault --help
    notevault encrypt-existing
    notevault audit-encryption --verbose
    notevault fix-share-tokens
"""

import asyncio
import sys

import click

from .core.logging import get_logger, setup_logging
from .core.services.maintenance_service import MaintenanceService
from .database import AsyncSessionLocal, dispose_engine


async def _run_job(job_name: str):
    try:
        async with AsyncSessionLocal() as session:
            service = MaintenanceService(session)
            return await getattr(service, job_name)()
    finally:
        await dispose_engine()


@click.group()
@click.option("--verbose", is_flag=True, help="Log to the console as well")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Maintenance commands for stored notes."""
    if verbose:
        setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["logger"] = get_logger("cli")


@cli.command("encrypt-existing")
@click.pass_context
def encrypt_existing(ctx: click.Context) -> None:
    """Encrypt note content still stored as plaintext."""
    report = asyncio.run(_run_job("encrypt_existing_notes"))
    ctx.obj["logger"].info("encrypt-existing finished", extra={"encrypted": report.encrypted})

    click.echo(f"Notes processed:        {report.total}")
    click.echo(f"Encrypted now:          {report.encrypted}")
    click.echo(f"Already encrypted:      {report.already_encrypted}")
    click.echo(f"Errors:                 {len(report.errors)}")
    for note_id in report.errors:
        click.echo(click.style(f"  failed: {note_id}", fg="red"), err=True)
    if report.errors:
        sys.exit(1)


@cli.command("audit-encryption")
@click.pass_context
def audit_encryption(ctx: click.Context) -> None:
    """Report notes that are plaintext or can't be decrypted with the current key."""
    report = asyncio.run(_run_job("audit_encryption"))
    ctx.obj["logger"].info("audit-encryption finished", extra={"undecryptable": len(report.undecryptable)})

    click.echo(f"Notes checked:          {report.total}")
    click.echo(f"Encrypted and readable: {report.ok}")
    click.echo(f"Plaintext:              {len(report.plaintext)}")
    click.echo(f"Undecryptable:          {len(report.undecryptable)}")
    for note_id in report.plaintext:
        click.echo(click.style(f"  plaintext: {note_id}", fg="yellow"))
    for note_id in report.undecryptable:
        click.echo(click.style(f"  undecryptable: {note_id}", fg="red"))
    if report.undecryptable:
        click.echo(
            "Undecryptable notes were written with another key, are corrupted, "
            "or are plaintext starting with the ciphertext marker."
        )
        sys.exit(1)


@cli.command("fix-share-tokens")
@click.pass_context
def fix_share_tokens(ctx: click.Context) -> None:
    """Give public notes without a share token a new one."""
    report = asyncio.run(_run_job("fix_missing_share_tokens"))
    ctx.obj["logger"].info("fix-share-tokens finished", extra={"fixed": report.fixed})

    if not report.found:
        click.echo("All public notes already have a share token.")
        return

    click.echo(f"Public notes without token: {report.found}")
    click.echo(f"Fixed:                      {report.fixed}")
    for note_id in report.failed:
        click.echo(click.style(f"  failed: {note_id}", fg="red"), err=True)
    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
