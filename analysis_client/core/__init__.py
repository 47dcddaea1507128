"""Core utilities and shared infrastructure.

- clock: Time source and delay abstraction
- config: Configuration loading and validation
- constants: API paths, default timings, poll ceiling
- exceptions: Client exception taxonomy
"""
