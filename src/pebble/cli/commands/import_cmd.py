"""Import issues from a Beads export."""

from pathlib import Path

import click

from pebble.cli.core import ensure_pebble_dir
from pebble.cli.output import echo_json, user_output
from pebble.core.beads_import import BeadsConversion, convert_beads_records, parse_beads_export
from pebble.core.context import PebbleContext
from pebble.core.errors import ValidationError
from pebble.core.ids import derive_prefix, generate_id


def _print_conversion(conversion: BeadsConversion, *, dry_run: bool) -> None:
    stats = conversion.stats
    heading = "Dry run - would import:" if dry_run else "Imported:"
    click.echo(heading)
    click.echo(f"  {stats.created} issues")
    click.echo(f"  {stats.closed} closed issues")
    click.echo(f"  {stats.dependencies} block dependencies")
    click.echo(f"  {stats.parent_child} parent-child relationships")
    if dry_run:
        click.echo("")
        click.echo("ID mapping (beads -> pebble):")
        for beads_id, pebble_id in conversion.id_map.items():
            click.echo(f"  {beads_id} -> {pebble_id}")


@click.command("import")
@click.argument("file", type=str)
@click.option("--dry-run", is_flag=True, default=False, help="Show what would be imported")
@click.option("--prefix", type=str, default=None, help="Id prefix for imported issues")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def import_cmd(
    ctx: PebbleContext,
    file: str,
    prefix: str | None,
    *,
    dry_run: bool,
    json_mode: bool,
) -> None:
    """Import issues from a Beads (bd) issues.jsonl FILE.

    Every Beads issue gets a fresh pebble id. Blocking and parent-child
    dependencies are carried over; other dependency kinds are dropped.
    """
    path = ctx.cwd / file
    content = ctx.event_log.read_text(path)
    if content is None:
        raise ValidationError(f"File not found: {file}")
    records = parse_beads_export(content, path=path)

    pebble_dir: Path | None = None
    if dry_run:
        id_prefix = prefix.upper() if prefix is not None else derive_prefix(ctx.cwd.name)
    else:
        pebble_dir = ensure_pebble_dir(ctx)
        if prefix is not None:
            id_prefix = prefix.upper()
        else:
            id_prefix = ctx.event_log.load_config(pebble_dir).prefix

    conversion = convert_beads_records(records, id_factory=lambda: generate_id(id_prefix))

    if pebble_dir is not None:
        ctx.issue_service(pebble_dir).append_imported(conversion.events)

    if json_mode:
        stats = conversion.stats
        echo_json(
            {
                "dryRun": dry_run,
                "stats": {
                    "created": stats.created,
                    "closed": stats.closed,
                    "dependencies": stats.dependencies,
                    "parentChild": stats.parent_child,
                },
                "idMap": conversion.id_map,
            }
        )
        return
    if not records:
        user_output("No issues found in file.")
        return
    _print_conversion(conversion, dry_run=dry_run)
