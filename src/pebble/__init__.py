"""pebble: an event-sourced issue tracker.

The authoritative record is an append-only JSONL log of issue events; every
issue snapshot is recomputed from it. See `pb --help` for the CLI.
"""
