"""Batch collaborators: topic file reader, batch runner and results file."""

from .formatter import (
    output_path_for,
    render_outcome,
    render_outcomes,
    write_results_file,
)
from .reader import BatchEntry, parse_line, read_batch_file
from .runner import BatchOutcome, run_batch

__all__ = [
    "BatchEntry",
    "BatchOutcome",
    "output_path_for",
    "parse_line",
    "read_batch_file",
    "render_outcome",
    "render_outcomes",
    "run_batch",
    "write_results_file",
]
