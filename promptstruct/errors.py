"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from PromptStructUserError.

The control engine itself never raises for user-authored text:
malformed syntax simply produces no declaration. User errors come from
the outer layers only (reading files, values and CLI arguments).
"""

from __future__ import annotations


class PromptStructUserError(Exception):
    """
    Base class for all user-facing errors in promptstruct.

    These errors indicate problems that the user can fix:
    missing files, malformed YAML, invalid value assignments, etc.
    """
    pass


__all__ = ["PromptStructUserError"]
