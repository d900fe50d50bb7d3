"""
Tabulated summaries of bound searches.

Used by the CLI and the batch scripts to print one row per bound.
"""

import math
from typing import Dict, Iterable, Sequence, Tuple

from tabulate import tabulate

HEADERS = ["Bound", "Value", "Theta", "Hoelder (p, q)", "Iterations", "Evaluations", "Converged"]


def format_hoelders(hoelders: Dict[int, Tuple[float, float]]) -> str:
    """Render ``{id: (p, q)}`` as ``1:(2.000,1.950) 2:(...)``."""
    if not hoelders:
        return "-"
    return " ".join(f"{i}:({p:.3f},{q:.3f})" for i, (p, q) in sorted(hoelders.items()))


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "n/a"
    if math.isinf(value):
        return "inf (overload)"
    return f"{value:.6g}"


def result_row(label: str, result) -> list:
    return [
        label,
        _format_value(result.value),
        f"{result.theta:.4g}",
        format_hoelders(result.hoelders),
        result.iterations,
        result.evaluations,
        "yes" if result.converged else "NO",
    ]


def format_results(rows: Iterable[Sequence], tablefmt: str = 'grid') -> str:
    """
    Format ``(label, OptimizationResult)`` pairs as a table.

    Args:
        rows: Iterable of (label, result) pairs.
        tablefmt: Any tabulate format name.
    """
    table = [result_row(label, result) for label, result in rows]
    return tabulate(table, headers=HEADERS, tablefmt=tablefmt)
