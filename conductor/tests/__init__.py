"""
Test suite for the conductor state core.

Focus areas:
- Event name codec
- Effect fold order and atomicity
- Store lifecycle through deferred dispatch
- Recoverable vs fatal dispatch failures
"""
