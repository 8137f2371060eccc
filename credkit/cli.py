"""
Command-line interface for credkit.
"""

import json
from typing import Dict, Optional, Tuple

import click

from . import __version__
from .config import load_settings
from .engine import Engine
from .errors import CredkitError
from .importer import ImportAttempt
from .loader import load_credential_types
from .loggingx import mask_values, setup_logging
from .plugins import builtin_credential_types


def _build_engine(types_file: Optional[str]) -> Engine:
    credential_types = builtin_credential_types()
    if types_file:
        credential_types.extend(load_credential_types(types_file))
    return Engine(credential_types)


def _parse_fields(pairs: Tuple[str, ...]) -> Dict[str, str]:
    values = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--field")
        key, value = pair.split("=", 1)
        values[key.strip()] = value
    return values


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
              help='Logging level (overrides CREDKIT_LOG_LEVEL)')
@click.option('-v', '--verbose', is_flag=True, help='Human readable log output')
@click.option('--types-file', type=click.Path(exists=True, dir_okay=False), default=None,
              help='YAML file declaring extra credential types')
@click.pass_context
def cli(ctx, log_level: Optional[str], verbose: bool, types_file: Optional[str]):
    """credkit - discover and provision credentials for command-line tools."""
    try:
        settings = load_settings()
    except CredkitError as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise click.Abort()

    setup_logging(
        level=log_level or settings.log_level,
        verbose=verbose or settings.verbose,
        log_file=settings.log_file,
    )
    ctx.obj = {
        'types_file': types_file or settings.types_file,
        'max_workers': settings.max_workers,
    }


@cli.command('types')
@click.pass_context
def list_types(ctx):
    """List all known credential types."""
    try:
        engine = _build_engine(ctx.obj['types_file'])
    except CredkitError as e:
        click.echo(f"Error loading credential types: {e}", err=True)
        raise click.Abort()

    click.echo("Available credential types:")
    for name in engine.names():
        credential_type = engine.get(name)
        fields = ", ".join(
            f"{f.name}{'*' if f.secret else ''}{'?' if f.optional else ''}"
            for f in credential_type.fields
        )
        click.echo(f"  {name}: {fields}")


def _attempt_to_dict(attempt: ImportAttempt, secret_fields) -> dict:
    return {
        'candidates': [
            {
                'source': candidate.source,
                'name_hint': candidate.name_hint,
                'trusted': candidate.trusted,
                'fields': mask_values(candidate.values(), secret_fields),
                'mismatches': [str(m) for m in candidate.mismatches],
            }
            for candidate in attempt.candidates
        ],
        'errors': [str(error) for error in attempt.errors],
    }


@cli.command()
@click.argument('credential_type', required=False)
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.pass_context
def discover(ctx, credential_type: Optional[str], as_json: bool):
    """Discover candidate values for one or all credential types."""
    try:
        engine = _build_engine(ctx.obj['types_file'])
        if credential_type:
            name = engine.get(credential_type).qualified_name
            attempts = {name: engine.discover(name)}
        else:
            attempts = engine.discover_all(max_workers=ctx.obj['max_workers'])
    except CredkitError as e:
        click.echo(f"Discovery failed: {e}", err=True)
        raise click.Abort()

    report = {
        name: _attempt_to_dict(attempt, engine.get(name).secret_fields)
        for name, attempt in attempts.items()
    }

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    for name, result in report.items():
        click.echo(f"{name}: {len(result['candidates'])} candidate(s)")
        for index, candidate in enumerate(result['candidates']):
            marker = "" if candidate['trusted'] else " [untrusted]"
            click.echo(f"  [{index}] {candidate['source']}{marker}")
            for field_name, value in candidate['fields'].items():
                click.echo(f"      {field_name}={value}")
            for mismatch in candidate['mismatches']:
                click.echo(f"      ! {mismatch}")
        for error in result['errors']:
            click.echo(f"  error: {error}", err=True)


@cli.command('exec', context_settings={'ignore_unknown_options': True})
@click.argument('credential_type')
@click.argument('command', nargs=-1, required=True, type=click.UNPROCESSED)
@click.option('-f', '--field', 'fields', multiple=True, help='Field value as key=value')
@click.option('-c', '--candidate', type=int, default=None,
              help='Index of a discovered candidate to use')
@click.option('--timeout', type=float, default=None, help='Command timeout in seconds')
@click.pass_context
def exec_command(ctx, credential_type: str, command: Tuple[str, ...],
                 fields: Tuple[str, ...], candidate: Optional[int], timeout: Optional[float]):
    """Run COMMAND with a credential provisioned for it."""
    try:
        engine = _build_engine(ctx.obj['types_file'])
        name = engine.get(credential_type).qualified_name

        values: Dict[str, str] = {}
        if candidate is not None:
            attempt = engine.discover(name)
            if not 0 <= candidate < len(attempt.candidates):
                click.echo(f"No candidate with index {candidate} "
                           f"({len(attempt.candidates)} found)", err=True)
                raise click.Abort()
            values.update(attempt.candidates[candidate].values())
        values.update(_parse_fields(fields))

        result = engine.run(name, values, list(command), timeout=timeout)
    except CredkitError as e:
        click.echo(f"Execution failed: {e}", err=True)
        raise click.Abort()

    ctx.exit(result.return_code)


if __name__ == '__main__':
    cli()
