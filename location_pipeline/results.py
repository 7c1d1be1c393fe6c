"""
Result types returned by the storage layer.

Storage calls never raise for expected failures. They return either ``Ok``
holding the value or ``Err`` tagged with an ``ErrorKind``; the kind decides
whether the run must abort (configuration, read) or may continue with the
next record (mutation).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    READ = "read"
    MUTATION = "mutation"


FATAL_KINDS = frozenset({ErrorKind.CONFIGURATION, ErrorKind.READ})


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    ok = False

    @property
    def fatal(self) -> bool:
        """Configuration and read errors abort the run; mutation errors do not."""
        return self.kind in FATAL_KINDS


Result = Union[Ok[Any], Err]


@dataclass(frozen=True)
class MutationError:
    """A single failed update/delete, collected instead of raised."""

    location_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.location_id}: {self.message}"
