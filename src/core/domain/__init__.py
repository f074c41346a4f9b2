"""Domain models and enumerations.

Pure, strict data structures (Pydantic v2). The domain knows nothing about
subprocesses, git or the CLI.
"""
