# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
dependabot-approve CLI - Main entry point

Usage:
    dependabot-approve approve ...      - Approve dependency-upgrade PRs (alias: a)
    dependabot-approve clear-junk ...   - Dismiss junk reviews on your PRs (alias: cj)
    dependabot-approve config           - Show/set CLI configuration
"""

from typing import Dict, Iterable, Optional

import click

from dependabot_approve import __version__
from dependabot_approve.cli.approve_commands import approve, clear_junk
from dependabot_approve.cli.config_commands import register_config_commands


class AliasGroup(click.Group):
    """click.Group where a command can also be invoked by a short alias.

    Aliases are listed next to their command in --help instead of as
    separate entries.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases: Dict[str, str] = {}

    def add_command(self, cmd: click.Command, name: Optional[str] = None, aliases: Iterable[str] = ()) -> None:
        super().add_command(cmd, name)
        for alias in aliases:
            self.aliases[alias] = name or cmd.name

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def format_commands(self, ctx, formatter):
        rows = []
        for name in self.list_commands(ctx):
            cmd = self.commands.get(name)
            if cmd is None or cmd.hidden:
                continue
            shortcuts = sorted(alias for alias, target in self.aliases.items() if target == name)
            rows.append((', '.join([name] + shortcuts), cmd.get_short_help_str(limit=150)))

        if rows:
            with formatter.section('Commands'):
                formatter.write_dl(rows)


@click.group(cls=AliasGroup)
@click.version_option(version=__version__, prog_name='dependabot-approve')
def cli():
    """dependabot-approve - Approve your dependabot pull requests in bulk"""


cli.add_command(approve, aliases=('a',))
cli.add_command(clear_junk, aliases=('cj',))
register_config_commands(cli)


def main():
    """Console script entry point"""
    cli()


if __name__ == '__main__':
    main()
