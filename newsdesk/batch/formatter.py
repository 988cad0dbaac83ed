"""Plain-text rendering of batch outcomes."""

from __future__ import annotations

from pathlib import Path

from .runner import BatchOutcome


def render_outcome(outcome: BatchOutcome) -> str:
    topic = outcome.entry.topic
    result = outcome.result

    if result.error is not None:
        return f'Results for "{topic}" (error: {result.error})\n\n'

    label = result.provenance.label if result.provenance else "?"
    lines = [f'Results for "{topic}" (Fetched from: {label}):']
    if not result.items:
        lines.append("- No results found")
    else:
        lines.extend(f"- {item.title} ({item.url})" for item in result.items)
    return "\n".join(lines) + "\n\n"


def render_outcomes(outcomes: list[BatchOutcome]) -> str:
    return "".join(render_outcome(outcome) for outcome in outcomes)


def output_path_for(input_path: Path, output_dir: Path) -> Path:
    """``Outputs_<input stem>.txt`` inside ``output_dir``."""
    return output_dir / f"Outputs_{input_path.stem}.txt"


def write_results_file(
    outcomes: list[BatchOutcome],
    input_path: Path,
    output_dir: Path,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_path_for(input_path, output_dir)
    path.write_text(render_outcomes(outcomes), encoding="utf-8")
    return path
