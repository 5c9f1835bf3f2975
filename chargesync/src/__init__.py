"""
Wallbox charger state mirror.

Polls a Wallbox charger through its cloud API, normalizes the status payload,
reconciles the result against the locally held observable state, and writes
only the differences to a capability sink while emitting lifecycle events
(charging started/ended, car connected/unplugged).

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""
