"""Tagged value model for template data.

Every piece of data a template can see is a Value: absent, bool, string,
number, list or record. Catalog dicts are converted once with Value.of();
after that, lookups go through Value.field() and never care whether the
source was a dict or an object.

Truthiness:
    Absent, Bool(False) and Str("") are falsy.
    Everything else is truthy, including Num(0) and empty lists.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any


class Kind(Enum):
    """Value variants."""

    ABSENT = auto()
    BOOL = auto()
    STR = auto()
    NUM = auto()
    LIST = auto()
    RECORD = auto()


@dataclass(frozen=True, eq=False)
class Value:
    """Immutable tagged value.

    Lists hold a tuple of Values, records a read-only mapping of str -> Value.
    Build instances with the constructors below rather than directly.
    """

    kind: Kind
    data: Any = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """Convert plain Python data (JSON-like) into a Value tree."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return ABSENT
        # bool before int: bool is an int subclass
        if isinstance(obj, bool):
            return cls(Kind.BOOL, obj)
        if isinstance(obj, (int, float)):
            return cls(Kind.NUM, obj)
        if isinstance(obj, str):
            return cls(Kind.STR, obj)
        if isinstance(obj, Mapping):
            return cls.record({str(k): cls.of(v) for k, v in obj.items()})
        if isinstance(obj, Sequence):
            return cls.list(cls.of(item) for item in obj)
        raise TypeError(f"Cannot convert {type(obj).__name__} to a template value")

    @classmethod
    def list(cls, items) -> "Value":
        return cls(Kind.LIST, tuple(cls.of(item) for item in items))

    @classmethod
    def record(cls, fields: Mapping[str, Any]) -> "Value":
        return cls(
            Kind.RECORD,
            MappingProxyType({key: cls.of(val) for key, val in fields.items()}),
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def is_absent(self) -> bool:
        return self.kind is Kind.ABSENT

    def is_truthy(self) -> bool:
        if self.kind is Kind.ABSENT:
            return False
        if self.kind in (Kind.BOOL, Kind.STR):
            return bool(self.data)
        return True

    def field(self, name: str) -> "Value":
        """Single-level lookup. Anything but a record yields ABSENT."""
        if self.kind is not Kind.RECORD:
            return ABSENT
        return self.data.get(name, ABSENT)

    def lookup(self, path: Sequence[str]) -> "Value":
        """Resolve successive field lookups; ABSENT as soon as one fails."""
        current = self
        for name in path:
            current = current.field(name)
            if current.is_absent:
                return ABSENT
        return current

    def items(self) -> tuple["Value", ...]:
        """List elements, or an empty tuple for any other kind."""
        if self.kind is Kind.LIST:
            return self.data
        return ()

    def __len__(self) -> int:
        if self.kind in (Kind.LIST, Kind.RECORD):
            return len(self.data)
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is Kind.RECORD:
            return dict(self.data) == dict(other.data)
        return self.data == other.data

    __hash__ = None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Text form used by interpolation."""
        kind = self.kind
        if kind is Kind.ABSENT or kind is Kind.RECORD:
            return ""
        if kind is Kind.BOOL:
            return "true" if self.data else "false"
        if kind is Kind.NUM:
            if isinstance(self.data, float) and self.data.is_integer():
                return str(int(self.data))
            return str(self.data)
        if kind is Kind.LIST:
            return ",".join(item.render() for item in self.data)
        return self.data

    def to_python(self) -> Any:
        """Convert back to plain Python data (for debugging and tests)."""
        if self.kind is Kind.LIST:
            return [item.to_python() for item in self.data]
        if self.kind is Kind.RECORD:
            return {key: val.to_python() for key, val in self.data.items()}
        return self.data

    def __repr__(self) -> str:
        if self.kind is Kind.ABSENT:
            return "Value.ABSENT"
        return f"Value({self.kind.name}, {self.to_python()!r})"


ABSENT = Value(Kind.ABSENT)
