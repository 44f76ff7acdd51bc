# trigeval/cli/sample_cmd.py

"""
CLI command for sampling a parametric curve and exporting the points.
"""

import logging
from typing import Dict, Optional

import click
from rich.console import Console
from rich.table import Table

from trigeval.core.sampling import sample_curve, save_samples
from .base_cmd import get_config, get_evaluator, variables_option

logger = logging.getLogger(__name__)
console = Console()


@click.command("sample")
@click.argument("x_expression", type=str)
@click.argument("y_expression", type=str)
@click.option("--time", "time_value", type=float, default=0.0, show_default=True,
              help="Animation time for this frame.")
@click.option("--steps", type=click.IntRange(min=1), default=None,
              help="Number of intervals over t (default from config, clamped to sampling.max_steps).")
@variables_option
@click.option("-o", "--output", type=click.Path(dir_okay=False, resolve_path=True), default=None,
              help="Write the points to a .csv, .json or .npz file.")
@click.pass_context
def sample_cmd(ctx, x_expression: str, y_expression: str, time_value: float,
               steps: Optional[int], variables: Dict[str, float], output: Optional[str]):
    """
    Sample the curve (X_EXPRESSION, Y_EXPRESSION) for one animation frame.

    t sweeps evenly over [0, 2*pi*turns]; failing evaluations plot at 0.
    Without --output a short summary is printed.
    """
    config = get_config(ctx)
    evaluator = get_evaluator(ctx)

    for label, expression in (("x", x_expression), ("y", y_expression)):
        validation = evaluator.validate_expression(expression)
        if not validation.is_valid:
            console.print(f"[bold red]Error:[/bold red] {label} expression is invalid: {', '.join(validation.errors)}")
            ctx.exit(1)

    samples = sample_curve(
        x_expression,
        y_expression,
        time=time_value,
        steps=steps or config.sampling.default_steps,
        turns=config.sampling.turns,
        max_steps=config.sampling.max_steps,
        variables=variables,
        evaluator=evaluator,
    )

    if output:
        try:
            path = save_samples(samples, output)
        except ValueError as e:
            raise click.UsageError(str(e))
        click.echo(f"Saved {len(samples)} points to {path}")
        return

    bounds = samples.bounds()
    table = Table(title="Curve Samples", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="dim cyan", width=12)
    table.add_column("Value")
    table.add_row("points", str(len(samples)))
    table.add_row("time", f"{samples.time:g}")
    for key, value in bounds.items():
        table.add_row(key, f"{value:.4f}")
    console.print(table)
