import dataclasses as dt
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from . import const


@dt.dataclass(frozen=True)
class Parsed:
    """
    The outcome of a successful parse.

    Attributes:
        flags: Long names of the boolean flags that were set.
        values: Long name of each value-bearing flag that was given, mapped to its value.
        operands: Positional parameters, in the order they were encountered.
    """

    flags: frozenset[str] = frozenset()
    values: Mapping[str, str] = dt.field(default_factory=lambda: MappingProxyType({}))
    operands: tuple[str, ...] = ()

    def isSet(self, key: str) -> bool:
        return key in self.flags

    def value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.flags or key in self.values


@dt.dataclass(frozen=True)
class Help:
    """Help was requested, nothing else was parsed."""

    usage: str


class FailureKind(Enum):
    MISSING_VALUE = "missing-value"
    UNKNOWN_FLAG = "unknown-flag"


@dt.dataclass(frozen=True)
class Failure:
    kind: FailureKind
    token: str
    message: str
    exitCode: int = const.ERROR_EXIT_CODE


Result = Union[Parsed, Help, Failure]


def freeze(
    flags: set[str], values: dict[str, str], operands: list[str]
) -> Parsed:
    """Snapshots the scanner's accumulators into an immutable `Parsed`."""
    return Parsed(frozenset(flags), MappingProxyType(dict(values)), tuple(operands))
