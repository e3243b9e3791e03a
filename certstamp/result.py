"""Discriminated results for the boundary operations.
"""

import enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

__all__ = ("ErrorKind", "Success", "Failure", "Result")

T = TypeVar("T")


class ErrorKind(enum.Enum):
    """Failure causes visible to callers.
    """
    MALFORMED_INPUT = "malformed_input"
    IDENTIFIER_GENERATION = "identifier_generation"
    SIGNING = "signing"


class Success(Generic[T]):
    """Successful call, carries payload.
    """
    ok = True

    def __init__(self, value: T) -> None:
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return "Success(%r)" % (self.value,)


class Failure:
    """Failed call, carries error kind and message.

    The raised exception is kept in ``cause`` for callers that want the
    details; it is not part of ``to_dict()``.
    """
    ok = False

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None) -> None:
        self.kind = kind
        self.message = message
        self.cause = cause

    @property
    def value(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"kind": self.kind.value, "message": self.message}}

    def __repr__(self) -> str:
        return "Failure(%s, %r)" % (self.kind.value, self.message)


Result = Union[Success[T], Failure]
