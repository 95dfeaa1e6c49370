"""
Command implementations for the vvm CLI.

Each module exposes `run(args) -> int`.
"""
