# trigeval/cli/bench_cmd.py

"""
CLI command for benchmarking the expression engine.
"""

import json
import logging

import click
from rich.console import Console
from rich.table import Table

from .base_cmd import get_evaluator

logger = logging.getLogger(__name__)
console = Console()


@click.command("benchmark")
@click.option("-n", "--iterations", type=click.IntRange(min=1), default=1000, show_default=True,
              help="Number of evaluations to run.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print results and engine statistics as JSON.")
@click.pass_context
def benchmark_cmd(ctx, iterations: int, as_json: bool):
    """Run the built-in benchmark suite and report timings and cache use."""
    evaluator = get_evaluator(ctx)
    logger.info(f"Running benchmark with {iterations} iterations.")
    result = evaluator.run_benchmark(iterations)
    eval_stats = evaluator.get_evaluation_stats()
    cache_stats = evaluator.get_cache_stats()

    if as_json:
        click.echo(json.dumps({
            "iterations": result.iterations,
            "total_time_ms": result.total_time,
            "average_time_ms": result.average_time,
            "operations_per_second": result.operations_per_second,
            "success_rate": result.success_rate,
            "evaluation_stats": eval_stats,
            "cache_stats": cache_stats,
        }, indent=2))
        return

    table = Table(title="Benchmark", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="dim cyan", width=24)
    table.add_column("Value")
    table.add_row("Iterations", str(result.iterations))
    table.add_row("Total time", f"{result.total_time:.2f} ms")
    table.add_row("Average time", f"{result.average_time:.4f} ms")
    table.add_row("Operations / second", f"{result.operations_per_second:,.0f}")
    table.add_row("Success rate", f"{result.success_rate:.1f}%")
    table.add_row("Cache hit rate", f"{eval_stats['cache_hit_rate']:.1f}%")
    table.add_row("Compiled cache", f"{cache_stats['expression_cache_size']}/{cache_stats['max_cache_size']}")
    table.add_row("Validation cache", f"{cache_stats['validation_cache_size']}/{cache_stats['max_cache_size']}")
    table.add_row("Cache memory (est.)", cache_stats['total_cache_memory_estimate'])
    console.print(table)
