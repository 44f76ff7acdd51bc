# trigeval/cli/eval_cmd.py

"""
CLI commands for validating and evaluating single expressions.
"""

import json
import logging
from typing import Dict

import click
from rich.console import Console
from rich.table import Table

from .base_cmd import get_evaluator, variables_option

logger = logging.getLogger(__name__)
console = Console()


@click.command("validate")
@click.argument("expression", type=str)
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the validation result as JSON.")
@click.pass_context
def validate_cmd(ctx, expression: str, as_json: bool):
    """
    Validate EXPRESSION without evaluating it.

    Exits with status 1 when the expression is rejected. Warnings never
    change the exit status.
    """
    evaluator = get_evaluator(ctx)
    result = evaluator.validate_expression(expression)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        status = "[green]valid[/green]" if result.is_valid else "[bold red]invalid[/bold red]"
        table = Table(title="Expression Validation", show_header=True, header_style="bold magenta")
        table.add_column("Field", style="dim cyan", width=16)
        table.add_column("Value")
        table.add_row("Status", status)
        table.add_row("Complexity", str(result.complexity))
        table.add_row("Functions", ", ".join(result.functions_used) or "-")
        table.add_row("Variables", ", ".join(result.variables_used) or "-")
        for error in result.errors:
            table.add_row("[red]Error[/red]", error)
        for warning in result.warnings:
            table.add_row("[yellow]Warning[/yellow]", warning)
        console.print(table)

    if not result.is_valid:
        ctx.exit(1)


@click.command("eval")
@click.argument("expression", type=str)
@click.option("-t", "t_value", type=float, default=0.0, show_default=True,
              help="Value of the curve parameter t.")
@click.option("--time", "time_value", type=float, default=0.0, show_default=True,
              help="Value of the animation time.")
@variables_option
@click.option("--strict", is_flag=True, default=False,
              help="Exit with status 1 if the evaluation fell back to 0.")
@click.pass_context
def eval_cmd(ctx, expression: str, t_value: float, time_value: float,
             variables: Dict[str, float], strict: bool):
    """
    Evaluate EXPRESSION and print the result.

    Invalid or failing expressions print 0 (the engine never raises); use
    --strict to turn that into a non-zero exit status.
    """
    evaluator = get_evaluator(ctx)
    context = {**variables, "t": t_value, "time": time_value}
    failures_before = evaluator.stats.failed_evaluations

    value = evaluator.evaluate(expression, context)
    click.echo(repr(value))

    if evaluator.stats.failed_evaluations > failures_before:
        message = evaluator.last_error.message if evaluator.last_error else "evaluation failed"
        if strict:
            click.echo(f"Error: {message}", err=True)
            ctx.exit(1)
        logger.info(f"Evaluation fell back to 0: {message}")
