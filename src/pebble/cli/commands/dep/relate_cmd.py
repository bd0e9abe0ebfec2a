"""Bidirectional "related to" links."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import user_output
from pebble.core.context import PebbleContext


@click.command("relate")
@click.argument("first_ref", type=str)
@click.argument("second_ref", type=str)
@click.pass_obj
def relate_dep(ctx: PebbleContext, first_ref: str, second_ref: str) -> None:
    """Mark two issues as related. Relations never block."""
    first, second = ctx.issue_service(require_pebble_dir(ctx)).relate(first_ref, second_ref)
    user_output(click.style("✓ ", fg="green") + f"Related {first.id} <-> {second.id}")


@click.command("unrelate")
@click.argument("first_ref", type=str)
@click.argument("second_ref", type=str)
@click.pass_obj
def unrelate_dep(ctx: PebbleContext, first_ref: str, second_ref: str) -> None:
    """Remove the relation between two issues."""
    first, second = ctx.issue_service(require_pebble_dir(ctx)).unrelate(first_ref, second_ref)
    user_output(click.style("✓ ", fg="green") + f"Unrelated {first.id} <-> {second.id}")
