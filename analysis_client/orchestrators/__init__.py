"""Orchestration layer.

- poller: Bounded exponential-backoff job poller
- client: Authenticated-call client (login, refresh-once, replay)
"""
