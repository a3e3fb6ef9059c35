import sys
from typing import List, Tuple, Any

import click

from . import pass_config
from ...probe import HttpProbe
from ...uri import Uri


def _fields(uri: Uri, verbose: bool) -> List[Tuple[str, Any]]:
    fields = [
        ("scheme", uri.scheme),
        ("user", uri.user),
        ("password", uri.password),
        ("host", uri.host),
        ("port", uri.port),
        ("path", uri.path),
        ("query", uri.query),
        ("fragment", uri.fragment),
        ("domain suffix", uri.domain_suffix),
        ("file name", uri.file_name),
    ]
    if verbose:
        fields.insert(1, ("authority", uri.authority))
        fields.extend((f"query[{k}]", v) for k, v in uri.query_map.items())
    return fields


@click.group()
def uri():
    """Inspect and check URIs.
    """
    pass


@uri.command()
@pass_config
@click.argument("value")
def show(config, value):
    """Show the components of the URI VALUE.
    """
    parsed = Uri(value)
    fields = _fields(parsed, config.verbose)
    width = max(len(name) for name, _ in fields)
    for name, field in fields:
        click.echo(f"{name}:{' ' * (width - len(name) + 1)}{'' if field is None else field}")


@uri.command()
@click.argument("value")
@click.option("--suffix", "suffixes", multiple=True, help="Accepted domain suffix, can be given multiple times.")
def check(value, suffixes):
    """Check whether VALUE is a valid URI.
    """
    predicate = (lambda u: u.domain_suffix in suffixes) if suffixes else None
    if Uri.is_valid(value, predicate):
        click.echo("valid")
    else:
        click.echo("invalid")
        sys.exit(1)


@uri.command()
@pass_config
@click.argument("value")
def exists(config, value):
    """Check whether the resource at the URI VALUE exists.
    """
    with HttpProbe.from_config(config) as probe:
        found = Uri(value).exists(probe)
    if found:
        click.echo("exists")
    else:
        click.echo("missing")
        sys.exit(1)
