"""Core interfaces.

Protocols implemented by the adapters (process runner); the core depends
on these contracts, never on `subprocess` directly.
"""
