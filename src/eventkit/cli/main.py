"""eventkit CLI entry point."""

from __future__ import annotations

import logging
import sys

import click

from eventkit import __version__
from eventkit.config import EventkitConfig


@click.group()
@click.version_option(version=__version__, prog_name="eventkit")
def cli() -> None:
    """eventkit - typed synchronous events with scoped subscriptions."""


@cli.command()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
@click.option("--fail-fast/--no-fail-fast", default=False, help="Stop at the first failing check")
def check(log_level: str, fail_fast: bool) -> None:
    """Run the behavioural self-check of Event and Subscription.

    Prints one line per check and exits with code 1 if any check failed.
    """
    from eventkit.selfcheck import run_checks

    config = EventkitConfig(log_level=log_level.upper(), fail_fast=fail_fast)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    results = run_checks(config)
    for result in results:
        if result.passed:
            click.echo(f"PASS {result.name}")
        else:
            click.echo(f"FAIL {result.name}: {result.detail}")

    failed = [r for r in results if not r.passed]
    click.echo()
    click.echo(f"Summary: {len(results) - len(failed)} passed, {len(failed)} failed")
    if failed:
        sys.exit(1)
