"""Custom exceptions.
"""

from .result import ErrorKind

__all__ = ("IssuanceError", "MalformedInput", "IdentifierError", "SigningError")


class IssuanceError(Exception):
    """Base class for failures of parse or sign calls."""
    kind: ErrorKind = ErrorKind.SIGNING


class MalformedInput(IssuanceError, ValueError):
    """PEM block missing or its contents do not parse."""
    kind = ErrorKind.MALFORMED_INPUT


class IdentifierError(IssuanceError):
    """Serial number or key identifier could not be generated."""
    kind = ErrorKind.IDENTIFIER_GENERATION


class SigningError(IssuanceError):
    """Issuer key unusable or signature generation failed."""
    kind = ErrorKind.SIGNING
