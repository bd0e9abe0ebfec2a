"""Time gateway.

Import from submodules:
- pebble.gateway.time.abc: Time (ABC)
- pebble.gateway.time.real: RealTime
- pebble.gateway.time.fake: FakeTime
"""
