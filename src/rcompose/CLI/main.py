"""
Command Line Interface for rcompose.
"""
import json
import logging
import os

import click
import yaml

from ..CONVERTERS.to_host_config import HostConfigConverter
from ..CONVERTERS.to_run_config import RunConfigConverter
from ..exceptions import MalformedConfigError, NotManagedError, SpecParseError
from ..MODELS.container_spec import ContainerName
from ..PARSERS.label_recovery import spec_from_container
from ..PARSERS.spec_parser import SpecParser


def _parse_vars(ctx, param, values):
    """
    Click callback turning KEY=VALUE options into a dict.
    """
    result = {}
    for item in values:
        if '=' not in item:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}")
        key, value = item.split('=', 1)
        result[key] = value
    return result


@click.group()
@click.option('--file', '-f', default='compose.yml', help='Compose file path')
@click.option('--var', 'variables', multiple=True, callback=_parse_vars, help='Template variable, KEY=VALUE')
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False), help='Read template variables from a .env file')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, file, variables, env_file, verbose):
    """
    rcompose - translate container specs to Docker Engine API payloads and back.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj['file'] = file
    ctx.obj['parser'] = SpecParser(variables=variables, env_file=env_file)


@cli.command()
@click.argument('names', nargs=-1)
@click.option('--embed', is_flag=True, help='Embed the spec into the container labels')
@click.pass_context
def render(ctx, names, embed):
    """Render containers as Engine API create payloads."""
    file = ctx.obj['file']
    if not os.path.exists(file):
        click.echo(f"Error: {file} not found.", err=True)
        ctx.exit(1)

    try:
        config = ctx.obj['parser'].parse(file)
    except SpecParseError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    unknown = [n for n in names if n not in config.containers]
    if unknown:
        click.echo(f"Error: unknown container(s): {', '.join(unknown)}", err=True)
        ctx.exit(1)

    output = {}
    for name, spec in config.containers.items():
        if names and name not in names:
            continue
        full_name = str(ContainerName(namespace=config.namespace, name=name))
        output[full_name] = {
            "Config": RunConfigConverter(spec, embed=embed).convert().to_api(),
            "HostConfig": HostConfigConverter(spec).convert().to_api(),
        }
    click.echo(json.dumps(output, indent=2, sort_keys=True))


@cli.command()
@click.argument('inspect_file', type=click.File('r'))
@click.option('--output', '-o', type=click.File('w'), default='-', help='Where to write the recovered specs')
@click.pass_context
def recover(ctx, inspect_file, output):
    """Recover container specs from `docker inspect` output."""
    try:
        records = json.load(inspect_file)
    except json.JSONDecodeError as e:
        click.echo(f"Error: invalid inspect output: {e}", err=True)
        ctx.exit(1)
    if isinstance(records, dict):
        records = [records]

    failed = False
    containers = {}
    for container in records:
        name = (container.get('Name') or '').lstrip('/') or container.get('Id', '')[:12]
        try:
            spec = spec_from_container(container)
        except NotManagedError as e:
            click.echo(f"Skipping: {e}", err=True)
            continue
        except MalformedConfigError as e:
            click.echo(f"Error: {e}", err=True)
            failed = True
            continue
        containers[name] = spec.model_dump(mode="json", exclude_none=True)

    click.echo(yaml.safe_dump({'containers': containers}, default_flow_style=False, sort_keys=True),
               file=output, nl=False)
    if failed:
        ctx.exit(1)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
