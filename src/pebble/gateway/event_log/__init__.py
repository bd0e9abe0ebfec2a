"""Event log gateway for `.pebble` directories.

Import from submodules:
- pebble.gateway.event_log.abc: EventLog (ABC), path helpers
- pebble.gateway.event_log.real: RealEventLog
- pebble.gateway.event_log.fake: FakeEventLog
"""
