import click

from . import pass_config


@click.group()
def config():
    """Show and change the user configuration.

    Options are named SECTION.OPTION. The probe section accepts timeout (seconds), verify (a boolean or the path of
    a CA bundle) and agent (the User-Agent header).
    """
    pass


@config.command()
@pass_config
@click.argument("option")
def get(config, option):
    """Print the value of OPTION.
    """
    click.echo(config.get_option(option))


@config.command("set")
@pass_config
@click.argument("option")
@click.argument("value")
def set_option(config, option, value):
    """Set OPTION to VALUE and save the user configuration.
    """
    config.set_option(option, value)
    config.save()
    click.echo(f"Saved {option} to {config.user_config_path}.")


@config.command()
@pass_config
@click.argument("option")
def delete(config, option):
    """Remove OPTION and save the user configuration.
    """
    config.delete_option(option)
    config.save()
    click.echo(f"Removed {option} from {config.user_config_path}.")


@config.command("list")
@pass_config
def list_options(config):
    """Print every option that is set.
    """
    for line in config.list_options():
        click.echo(line)


@config.command()
@pass_config
def probe(config):
    """Print the settings used by `uri exists`, defaults included.
    """
    settings = config.probe_settings()
    for name, value in settings._asdict().items():
        click.echo(f"{name}: {'' if value is None else value}")
