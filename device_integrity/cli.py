"""Command line interface for the device integrity checks."""

from __future__ import annotations

import dataclasses
import json
import logging

import click

from device_integrity.checker import IntegrityChecker
from device_integrity.policy import load_policy

EXIT_RESTRICTED = 3


def _emit(value: object, as_json: bool) -> None:
    if as_json:
        if dataclasses.is_dataclass(value):
            value = dataclasses.asdict(value)
        click.echo(json.dumps(value, ensure_ascii=False, sort_keys=True))
    else:
        click.echo(value)


@click.group()
@click.option(
    "--platform",
    "platform_override",
    type=click.Choice(["android", "editor", "other"]),
    default=None,
    help="Force the detected platform.",
)
@click.option("--trusted-dev-host", is_flag=True, help="Treat this desktop host as an emulator.")
@click.option("-v", "--verbose", is_flag=True, help="Log every probe.")
@click.pass_context
def main(ctx: click.Context, platform_override: str | None, trusted_dev_host: bool, verbose: bool) -> None:
    """Report whether this device is rooted or an emulator."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    policy = load_policy()
    overrides = {}
    if platform_override:
        overrides["platform_override"] = platform_override
    if trusted_dev_host:
        overrides["trusted_dev_host"] = True
    if overrides:
        policy = dataclasses.replace(policy, **overrides)
    ctx.obj = IntegrityChecker(policy=policy)


@main.command()
@click.pass_obj
def summary(checker: IntegrityChecker) -> None:
    """Print the one-line diagnostic summary."""

    click.echo(checker.get_diagnostic_summary())


@main.command()
@click.option("--json", "as_json", is_flag=True)
@click.pass_obj
def root(checker: IntegrityChecker, as_json: bool) -> None:
    """Run the root checks."""

    verdict = checker.is_rooted()
    if as_json:
        _emit(verdict, True)
    else:
        _emit(f"rooted: {verdict.is_rooted} {verdict.reason}".rstrip(), False)


@main.command()
@click.option("--json", "as_json", is_flag=True)
@click.pass_obj
def emulator(checker: IntegrityChecker, as_json: bool) -> None:
    """Run the emulator checks."""

    verdict = checker.explain_emulator()
    if as_json:
        _emit(verdict, True)
    else:
        _emit(f"emulator: {verdict.is_emulator} {verdict.reason}".rstrip(), False)


@main.command()
@click.option("--json", "as_json", is_flag=True)
@click.option("--strict", is_flag=True, help=f"Exit with status {EXIT_RESTRICTED} when restricted.")
@click.pass_obj
def restrict(checker: IntegrityChecker, as_json: bool, strict: bool) -> None:
    """Decide whether sensitive features must be disabled."""

    decision = checker.should_restrict_sensitive_features()
    if as_json:
        _emit(decision, True)
    else:
        _emit(f"restrict: {decision.restrict} {decision.reason}".rstrip(), False)
    if strict and decision.restrict:
        raise SystemExit(EXIT_RESTRICTED)


if __name__ == "__main__":
    main()
