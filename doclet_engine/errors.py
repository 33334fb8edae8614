# doclet_engine/errors.py

"""
Exceptions and diagnostic kinds for the doclet engine.

Only a broken caller contract raises. Everything wrong with the source text
itself is reported as a Diagnostic and parsing carries on.
"""

from enum import Enum


class DocletError(Exception):
    """Base class for errors raised by the doclet engine."""


class InvalidInput(DocletError, ValueError):
    """Raised before parsing when the caller passes unusable input."""


class DiagnosticKind(Enum):
    """Non-fatal problems collected during a parse run."""
    MALFORMED_COMMENT = "MalformedComment"
    UNRECOGNIZED_CONSTRUCT = "UnrecognizedConstruct"
    DUPLICATE_SYMBOL = "DuplicateSymbol"
    DANGLING_REFERENCE = "DanglingReference"

    @property
    def severity(self) -> str:
        if self is DiagnosticKind.UNRECOGNIZED_CONSTRUCT:
            return "info"
        return "warning"
