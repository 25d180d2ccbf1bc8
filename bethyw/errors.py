"""
Errors
======

Beth Yw? raises three kinds of error:

- `NotFoundError`: a lookup of a missing language code, measure, year or area.
- `InvalidArgumentError`: a malformed language code or command-line argument.
- `ParseError`: a dataset file that does not have the expected structure.

All of them derive from `BethYwError`, so the CLI can catch everything the
tool raises on purpose with a single `except`.
"""

from __future__ import annotations


class BethYwError(Exception):
    """Base class for errors raised by Beth Yw?."""


class NotFoundError(BethYwError, KeyError):
    """A key (language, codename, year, authority code) was not found."""

    def __str__(self) -> str:
        # KeyError would wrap the message in quotes
        return str(self.args[0]) if self.args else ""


class InvalidArgumentError(BethYwError, ValueError):
    """An argument was rejected (bad language code, bad year range, ...)."""


class ParseError(BethYwError, ValueError):
    """A source file is structurally malformed."""
