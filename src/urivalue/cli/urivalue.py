import logging
import sys

import click

from .commands.config import config
from .commands.uri import uri
from ..config import Config, ConfigError
from ..errors import InvalidUriError
from .. import __version__

logger = logging.getLogger(__name__)

# Errors caused by the user's input or configuration
USER_ERRORS = (InvalidUriError, ConfigError, KeyError, PermissionError)


@click.group("urivalue")
@click.version_option(__version__)
@click.option("-d", "--debug", is_flag=True, help="Log debug output and show tracebacks for errors.")
@click.option("-v", "--verbose", is_flag=True, help="Show derived components as well.")
@click.option("-c", "--config-file", type=click.File('r'), help="Config file to load instead of the site and user "
                                                                "config files.")
@click.pass_context
def cli(ctx, debug, verbose, config_file):
    """Validate, inspect and check URIs.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)
    if not ctx.obj:
        ctx.obj = Config()
        ctx.obj.load(config_file)
        ctx.obj.set_verbose(verbose)


cli.add_command(uri)
cli.add_command(config)


def main() -> None:
    """
    Main CLI entry function

    Errors caused by the input or the configuration are reported as a single line, with the traceback logged at
    debug level. Anything else propagates.

    :return: None
    """
    try:
        cli()
    except USER_ERRORS as ex:
        logger.debug("command failed", exc_info=ex)
        message = ex.args[0] if isinstance(ex, KeyError) and ex.args else ex
        click.echo(f"Error: {message}", err=True)
        sys.exit(1)
