"""
Exceptions raised by SideQuest.

The optimisation core is a set of pure computations, so none of these
errors are transient and nothing is retried. The Streamlit front end turns
them into messages for the user.
"""

from __future__ import annotations


class SideQuestError(Exception):
    """Base class for all SideQuest errors."""


class InvalidInput(SideQuestError, ValueError):
    """Raised when the points, indices or files given to an operation are unusable."""


class DegenerateInput(SideQuestError, ValueError):
    """Raised when an anchored topology is requested without an anchor."""


class NumericalAnomaly(SideQuestError, ArithmeticError):
    """Raised when a computed route cost is not a finite number."""
