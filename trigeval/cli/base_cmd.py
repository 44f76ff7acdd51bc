# trigeval/cli/base_cmd.py

"""
Base setup for CLI commands: configuration loading, logging initialization
and creation of the expression evaluator shared by subcommands.
"""

import logging
import sys
from typing import Dict, Optional, Tuple

import click

from trigeval.config import TrigevalConfig, load_configuration
from trigeval.core.evaluator import ExpressionEvaluator
from trigeval.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


class ConfigGroup(click.Group):
    """
    A custom Click Group that loads configuration, sets up logging and builds
    the evaluator before invoking the group or its subcommands.
    Passes config and evaluator via the context object (ctx.obj).
    """
    def invoke(self, ctx: click.Context):
        if ctx.obj is None:
            ctx.obj = {}

        setup_success = False
        try:
            if 'config' not in ctx.obj:
                config = load_configuration()
                ctx.obj['config'] = config
            else:
                config: TrigevalConfig = ctx.obj['config']
                logger.debug("Configuration already loaded in context.")

            verbosity = 0
            if ctx.params.get('quiet', False):
                verbosity = -1
            elif ctx.params.get('verbose', 0) > 0:
                verbosity = ctx.params['verbose']
            setup_logging(config, verbosity)

            if 'evaluator' not in ctx.obj:
                ctx.obj['evaluator'] = ExpressionEvaluator.from_config(config.engine)
                logger.debug("Expression evaluator created from configuration.")

            setup_success = True
            return super().invoke(ctx)

        except click.exceptions.Exit:
            raise
        except Exception as e:
            if not setup_success:
                logging.getLogger("trigeval.error").critical(f"Critical error during CLI setup: {e!r}", exc_info=True)
                print(f"CRITICAL SETUP ERROR: {e!r}", file=sys.stderr)
                ctx.exit(1)
            raise


def get_evaluator(ctx: click.Context) -> ExpressionEvaluator:
    """Fetches the evaluator set up by ConfigGroup (or a fresh one)."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and 'evaluator' in obj:
        return obj['evaluator']
    logger.debug("No evaluator in context; creating a default one.")
    return ExpressionEvaluator()


def get_config(ctx: click.Context) -> TrigevalConfig:
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and 'config' in obj:
        return obj['config']
    return TrigevalConfig()


def parse_variables(ctx: Optional[click.Context], param, values: Tuple[str, ...]) -> Dict[str, float]:
    """Parses repeated NAME=VALUE options into a dict of floats."""
    variables: Dict[str, float] = {}
    for item in values or ():
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name.isidentifier():
            raise click.BadParameter(f"'{item}' must look like NAME=VALUE (e.g. 'a=2.5').")
        try:
            variables[name] = float(raw)
        except ValueError:
            raise click.BadParameter(f"value for '{name}' must be a number, got '{raw}'.")
    return variables


# --- Common CLI Options ---
verbose_option = click.option(
    '-v', '--verbose',
    count=True,
    help="Increase verbosity level (-v for INFO, -vv for DEBUG)."
)
quiet_option = click.option(
    '-q', '--quiet',
    is_flag=True,
    default=False,
    help="Suppress all console output except critical errors."
)
variables_option = click.option(
    '--var', 'variables',
    multiple=True,
    callback=parse_variables,
    metavar="NAME=VALUE",
    help="Extra variable available to the expression (repeatable)."
)
