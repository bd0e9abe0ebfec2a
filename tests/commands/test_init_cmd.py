"""Tests for pb init."""

from pathlib import Path

from click.testing import CliRunner

from pebble.cli.cli import cli
from pebble.core.context import PebbleContext
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.fake import FakeEventLog

PEBBLE_DIR = Path("/fake/project/.pebble")


def test_init_derives_prefix_from_folder() -> None:
    runner = CliRunner()
    event_log = FakeEventLog()
    ctx = PebbleContext.for_test(event_log=event_log)

    result = runner.invoke(cli, ["init"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert event_log.load_config(PEBBLE_DIR).prefix == "PROJ"
    assert "Initialized" in result.output


def test_init_with_explicit_prefix() -> None:
    runner = CliRunner()
    event_log = FakeEventLog()
    ctx = PebbleContext.for_test(event_log=event_log)

    result = runner.invoke(cli, ["init", "--prefix", "abcd"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert event_log.load_config(PEBBLE_DIR).prefix == "ABCD"


def test_init_rejects_bad_prefix() -> None:
    runner = CliRunner()
    ctx = PebbleContext.for_test()

    result = runner.invoke(cli, ["init", "--prefix", "toolong"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: " in result.output
    assert "4 alphanumeric" in result.output


def test_init_is_idempotent() -> None:
    runner = CliRunner()
    event_log = FakeEventLog(configs={PEBBLE_DIR: PebbleConfig(prefix="PEBL", version="0.1.0")})
    ctx = PebbleContext.for_test(event_log=event_log, pebble_dir=PEBBLE_DIR)

    result = runner.invoke(cli, ["init", "--prefix", "ZZZZ"], obj=ctx)

    assert result.exit_code == 0
    assert "Already initialized" in result.output
    assert event_log.load_config(PEBBLE_DIR).prefix == "PEBL"
