"""tradeboard CLI main entry point."""

import click

from tradeboard import __version__
from tradeboard.cli.commands import analyze_command


@click.group()
@click.version_option(version=__version__)
def main():
    """tradeboard - Trading Performance Analysis"""
    pass


# Register commands
main.add_command(analyze_command)


if __name__ == "__main__":
    main()
