# src/notesave/errors.py

"""
Error taxonomy.

Only conditions the caller has to react to are exceptions. Persistence outcomes are
plain return values: a failed read is "no value", a failed write is False.
"""

from __future__ import annotations


class NotesaveError(Exception):
    """Base class for all notesave errors."""


class ValidationRejected(NotesaveError):
    """A create/update was refused (e.g. blank title). Nothing was changed."""


class SuggestionFailed(NotesaveError):
    """
    The sub-step suggestion call failed (network, service, empty or malformed reply).

    str(err) is safe to show to the user as a transient notice.
    """
