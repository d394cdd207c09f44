# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
CLI commands for managing dependabot-approve configuration.

Users can configure defaults for:
- The GitHub user and repository owner
- Where the api key is read from
- Which status context / status user to correlate
- Which bot accounts count as dependency-upgrade authors
"""

import json

import click
from rich.markup import escape

from dependabot_approve.cli.helpers import CONFIG_FILE, console, load_config
from dependabot_approve.cli.tables import build_options_table

# key -> help text
CONFIG_KEYS = {
    'user': 'GitHub user tied to the api key (sent as User-Agent)',
    'owner': 'Default repository owner',
    'key_path': 'Path to a file holding the api key',
    'status_context': 'Status context to correlate (e.g. ci/circleci)',
    'status_user': 'Login of the account posting statuses',
    'authors': 'Comma separated bot accounts to approve',
    'base_url': 'GitHub API base URL',
    'timeout': 'HTTP timeout in seconds',
}


def save_config(config: dict) -> bool:
    """Save configuration to file."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, 'w') as f:
            json.dump(config, f, indent=2)
        return True
    except IOError as e:
        console.print(f'[red]Failed to save config: {e}[/red]')
        return False


def _display(value) -> str:
    if isinstance(value, list):
        return ', '.join(str(v) for v in value)
    return str(value)


def _coerce_value(key: str, value: str):
    if key == 'authors':
        authors = [a.strip() for a in value.split(',') if a.strip()]
        if not authors:
            raise click.BadParameter('authors cannot be empty', param_hint='VALUE')
        return authors
    if key == 'timeout':
        try:
            timeout = float(value)
        except ValueError:
            raise click.BadParameter(f'timeout must be a number (got {value})', param_hint='VALUE')
        if timeout <= 0:
            raise click.BadParameter('timeout must be positive', param_hint='VALUE')
        return timeout
    return value


@click.group(name='config', invoke_without_command=True)
@click.pass_context
def config(ctx):
    """Manage CLI configuration.

    Show current configuration (default) or set config values.
    These defaults are used when not given as command options.

    \b
    Examples:
        dependabot-approve config                          # Show current config
        dependabot-approve config set user octocat
        dependabot-approve config set key_path ~/.gh-token
        dependabot-approve config unset status_context
    """
    # If no subcommand, show current config
    if ctx.invoked_subcommand is None:
        show_config()


def show_config():
    """Display current configuration."""
    config = load_config()

    if not config:
        console.print('\n[yellow]No configuration set.[/yellow]')
        console.print('[dim]Use "dependabot-approve config set <key> <value>" to set values.[/dim]')
        console.print(f'\n[dim]Available keys: {", ".join(CONFIG_KEYS)}[/dim]')
        return

    rows = [(key, _display(value)) for key, value in sorted(config.items())]
    console.print('\n[bold cyan]dependabot-approve configuration[/bold cyan]')
    console.print(build_options_table(rows))
    console.print(f'\n[dim]Config file: {CONFIG_FILE}[/dim]')


@config.command('set')
@click.argument('key', type=click.Choice(sorted(CONFIG_KEYS)))
@click.argument('value', type=str)
def config_set(key: str, value: str):
    """Set a configuration value.

    \b
    Keys:
        user              GitHub user tied to the api key
        owner             Default repository owner
        key_path          Path to a file holding the api key
        status_context    Status context to correlate
        status_user       Login of the account posting statuses
        authors           Comma separated bot accounts
        base_url          GitHub API base URL
        timeout           HTTP timeout in seconds

    \b
    Examples:
        dependabot-approve config set owner octo-org
        dependabot-approve config set authors "dependabot[bot],renovate[bot]"
    """
    config = load_config()
    old_value = config.get(key)
    config[key] = _coerce_value(key, value)

    if not save_config(config):
        return

    if old_value is not None:
        console.print(f'[green]Updated {key}:[/green] {escape(_display(old_value))} → {escape(_display(config[key]))}')
    else:
        console.print(f'[green]Set {key}:[/green] {escape(_display(config[key]))}')


@config.command('unset')
@click.argument('key', type=str)
def config_unset(key: str):
    """Remove a single configuration value."""
    config = load_config()
    if key not in config:
        console.print(f'[yellow]{key} is not set.[/yellow]')
        return

    del config[key]
    if save_config(config):
        console.print(f'[green]Removed {key}[/green]')


@config.command('get')
@click.argument('key', type=click.Choice(sorted(CONFIG_KEYS)))
def config_get(key: str):
    """Show one configuration value."""
    value = load_config().get(key)
    console.print(f'[cyan]{key}:[/cyan] {"(not set)" if value is None else escape(_display(value))}')


@config.command('clear')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
def config_clear(force: bool):
    """Clear all configuration.

    \b
    Example:
        dependabot-approve config clear
        dependabot-approve config clear --force
    """
    if not CONFIG_FILE.exists():
        console.print('[yellow]No configuration to clear.[/yellow]')
        return

    if not force and not click.confirm('Clear all configuration?', default=False):
        console.print('[yellow]Cancelled.[/yellow]')
        return

    try:
        CONFIG_FILE.unlink()
        console.print('[green]Configuration cleared.[/green]')
    except IOError as e:
        console.print(f'[red]Failed to clear config: {e}[/red]')


def register_config_commands(cli):
    """Register config commands with a parent CLI group."""
    cli.add_command(config)
