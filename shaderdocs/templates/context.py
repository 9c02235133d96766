"""Root template context.

The Context is built once per run by the context builder and shared,
read-only, by every document render.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property

from shaderdocs.templates.value import Value


@dataclass(frozen=True)
class Context:
    """Catalog data as seen by templates.

    Attributes:
        grouped: Category key -> entries, in category order
        flattened: All entries, group by group
        adapted: Entries with credits.originalAuthor
        original: Entries without it
        version: Project version, when configured
    """

    grouped: Mapping[str, tuple[Value, ...]]
    flattened: tuple[Value, ...]
    adapted: tuple[Value, ...]
    original: tuple[Value, ...]
    version: str | None = None

    @property
    def total(self) -> int:
        return len(self.flattened)

    def counts(self) -> dict[str, int]:
        """Per-category entry counts."""
        return {key: len(entries) for key, entries in self.grouped.items()}

    @cached_property
    def scope(self) -> Value:
        """The root scope record exposed to templates."""
        fields = {
            "statistics": {
                "total": self.total,
                "byType": self.counts(),
                "adapted": len(self.adapted),
                "original": len(self.original),
            },
            "grouped": {key: Value.list(entries) for key, entries in self.grouped.items()},
            "flattened": Value.list(self.flattened),
            "adapted": Value.list(self.adapted),
            "original": Value.list(self.original),
        }
        if self.version:
            fields["version"] = self.version
        return Value.record(fields)
