"""
Exception types raised by Biscuit.

Library code raises these; only the CLI catches them and turns them into
exit codes.
"""


class BiscuitError(Exception):
    """Base class for all Biscuit errors."""


class DatabaseError(BiscuitError):
    """Opening or reading the package database failed."""


class WriteError(BiscuitError):
    """Serializing or writing a snapshot file failed."""
