"""Dependency management commands."""

import click

from pebble.cli.commands.dep.add_cmd import add_dep
from pebble.cli.commands.dep.list_cmd import list_deps
from pebble.cli.commands.dep.relate_cmd import relate_dep, unrelate_dep
from pebble.cli.commands.dep.remove_cmd import remove_dep
from pebble.cli.commands.dep.tree_cmd import tree_deps


@click.group("dep")
def dep_group() -> None:
    """Manage blocking dependencies and relations between issues."""
    pass


dep_group.add_command(add_dep)
dep_group.add_command(remove_dep)
dep_group.add_command(relate_dep)
dep_group.add_command(unrelate_dep)
dep_group.add_command(list_deps)
dep_group.add_command(tree_deps)
