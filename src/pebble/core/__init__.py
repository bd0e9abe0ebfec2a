"""Event-sourced state engine: reducer, id resolution, dependency graph and merge."""
