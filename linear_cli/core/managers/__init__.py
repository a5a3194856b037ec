"""Local state managers for the CLI.

Each module encapsulates one piece of persisted state and its business
rules.  Managers raise domain exceptions (``LookupError``, ``ValueError``,
``RuntimeError`` subclasses) and never print -- turning them into user
messages and exit codes is the CLI's responsibility.
"""
