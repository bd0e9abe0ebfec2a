"""Merge several event logs into one read-only view."""

import json
import logging

import click

from pebble.cli.output import merged_issue_to_dict, user_output
from pebble.core.context import PebbleContext
from pebble.core.errors import ValidationError
from pebble.core.events import decode_event_log, encode_event
from pebble.core.merge import EventSource, merge_events, merge_issues

logger = logging.getLogger(__name__)


def _read_sources(ctx: PebbleContext, files: tuple[str, ...]) -> list[EventSource]:
    sources: list[EventSource] = []
    for file in files:
        path = ctx.cwd / file
        content = ctx.event_log.read_text(path)
        if content is None:
            raise ValidationError(f"File not found: {file}")
        sources.append(EventSource(name=str(path), events=decode_event_log(content, path=path)))
        logger.debug("Loaded %d events from %s", len(sources[-1].events), path)
    return sources


@click.command("merge")
@click.argument("files", nargs=-1, required=True)
@click.option(
    "-o", "--output", "output_file", type=str, default=None, help="Write to file instead of stdout"
)
@click.option(
    "--events", "raw_events", is_flag=True, default=False, help="Output merged raw events as JSONL"
)
@click.option(
    "--show-sources",
    is_flag=True,
    default=False,
    help="Include a _sources field listing the logs that contained each issue",
)
@click.pass_obj
def merge_cmd(
    ctx: PebbleContext,
    files: tuple[str, ...],
    output_file: str | None,
    *,
    raw_events: bool,
    show_sources: bool,
) -> None:
    """Merge two or more issues.jsonl FILES.

    By default prints the merged issues as a JSON array; when the same id
    appears in several files, the most recently updated version wins. Nothing
    is written back to the source logs.
    """
    sources = _read_sources(ctx, files)
    if len(sources) < 2:
        raise ValidationError("At least 2 files required for merge")

    if raw_events:
        output = "".join(encode_event(event) + "\n" for event in merge_events(sources))
    else:
        merged = [merged_issue_to_dict(m, show_sources=show_sources) for m in merge_issues(sources)]
        output = json.dumps(merged, ensure_ascii=False) + "\n"

    if output_file is None:
        click.echo(output, nl=False)
        return
    ctx.event_log.write_text(ctx.cwd / output_file, output)
    user_output(click.style("✓ ", fg="green") + f"Merged {len(sources)} files to {output_file}")
