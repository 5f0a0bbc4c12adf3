"""Domain layer: entities, lifecycle rules, recurrence engine.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
Every function here is pure: no clock reads, no I/O, no raising for
expected failures (errors come back inside a Result).
"""
