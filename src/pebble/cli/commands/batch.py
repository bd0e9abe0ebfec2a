"""Run a mutation over several issue references, reporting each outcome."""

from collections.abc import Callable
from dataclasses import dataclass

import click

from pebble.cli.core import split_ids
from pebble.cli.output import echo_json, user_output
from pebble.core.errors import PebbleError, ValidationError
from pebble.core.types import Issue


@dataclass(frozen=True)
class BatchResult:
    reference: str
    issue: Issue | None
    error: str | None


def run_batch(raw_ids: tuple[str, ...], action: Callable[[str], Issue]) -> list[BatchResult]:
    """Apply action to each reference.

    With a single reference, errors propagate unchanged. With several, each
    failure is recorded and the remaining references are still processed.
    """
    references = split_ids(raw_ids)
    if not references:
        raise ValidationError("No issue IDs provided")
    if len(references) == 1:
        return [BatchResult(reference=references[0], issue=action(references[0]), error=None)]

    results: list[BatchResult] = []
    for reference in references:
        try:
            results.append(BatchResult(reference=reference, issue=action(reference), error=None))
        except PebbleError as e:
            results.append(BatchResult(reference=reference, issue=None, error=str(e)))
    return results


def report_batch(results: list[BatchResult], *, json_mode: bool) -> None:
    """Print per-reference results; exit 1 if any failed."""
    if json_mode:
        echo_json(
            [
                {"id": r.issue.id, "success": True}
                if r.issue is not None
                else {"id": r.reference, "success": False, "error": r.error}
                for r in results
            ]
        )
    else:
        for r in results:
            if r.issue is not None:
                user_output(click.style("✓ ", fg="green") + r.issue.id)
            else:
                user_output(click.style("✗ ", fg="red") + f"{r.reference}: {r.error}")

    if any(r.issue is None for r in results):
        raise SystemExit(1)
