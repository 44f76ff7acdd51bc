# trigeval/cli/main.py

"""
Main entry point for the trigeval CLI application.
Uses Click for command-line interface handling.
"""

import logging

import click

from trigeval.version import __version__
from .base_cmd import ConfigGroup, verbose_option, quiet_option
from .eval_cmd import validate_cmd, eval_cmd
from .sample_cmd import sample_cmd
from .bench_cmd import benchmark_cmd

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


# --- Main CLI Group ---
@click.group(context_settings=CONTEXT_SETTINGS, cls=ConfigGroup)
@click.version_option(__version__, '-V', '--version', package_name='trigeval', prog_name='trigeval')
@verbose_option
@quiet_option
@click.pass_context
def main_cli(ctx, verbose: int, quiet: bool):
    """
    trigeval: validate, evaluate and sample formulas over t and time.

    Configuration is loaded from:
    Defaults -> ./trigeval.toml -> ~/.config/trigeval/trigeval.toml -> Env Vars

    Use -v for verbose output, -vv for debug output, -q for quiet mode.
    """
    logger.debug("trigeval CLI group invoked.")


# --- Register Commands ---
main_cli.add_command(validate_cmd)
main_cli.add_command(eval_cmd)
main_cli.add_command(sample_cmd)
main_cli.add_command(benchmark_cmd)

cli = main_cli

if __name__ == "__main__":
    cli()
