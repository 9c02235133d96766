"""Context builder for document rendering.

Assembles the root Context from catalog entries:
    entries -> licence suppression -> grouping -> flattening -> partition

This is the bridge between the catalog and the template engine.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from types import MappingProxyType

from shaderdocs.core import CatalogEntry, LicenceDefaults
from shaderdocs.templates.context import Context
from shaderdocs.templates.value import Value

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ORDER = ("BGX", "GFX", "LFX", "VFX", "AFX")


def suppress_default_licence(entry: CatalogEntry, defaults: LicenceDefaults) -> CatalogEntry:
    """Return a copy of entry with licence fields equal to the defaults removed.

    The entry and its credits are checked independently.
    """
    changes = {}
    if defaults.text is not None and entry.licence == defaults.text:
        changes["licence"] = None
    if defaults.code is not None and entry.licence_code == defaults.code:
        changes["licence_code"] = None

    credits = entry.credits
    if credits is not None:
        credit_changes = {}
        if defaults.text is not None and credits.licence == defaults.text:
            credit_changes["licence"] = None
        if defaults.code is not None and credits.licence_code == defaults.code:
            credit_changes["licence_code"] = None
        if credit_changes:
            changes["credits"] = replace(credits, **credit_changes)

    return replace(entry, **changes) if changes else entry


def group_entries(
    entries: Iterable[CatalogEntry],
    category_order: Sequence[str] = DEFAULT_CATEGORY_ORDER,
) -> dict[str, list[CatalogEntry]]:
    """Group entries by type, keeping input order inside each group.

    Every category in category_order gets a group, even if empty.
    Types outside category_order are appended after, in first-seen order.
    """
    grouped: dict[str, list[CatalogEntry]] = {key: [] for key in category_order}
    for entry in entries:
        grouped.setdefault(entry.type, []).append(entry)
    return grouped


class ContextBuilder:
    """Builds the root Context from catalog entries.

    Usage:
        builder = ContextBuilder(LicenceDefaults("CC BY 4.0", "CC-BY-4.0"))
        context = builder.build(entries, version="1.2.0")
        # Share context across every document render
    """

    def __init__(
        self,
        licence_defaults: LicenceDefaults | None = None,
        category_order: Sequence[str] = DEFAULT_CATEGORY_ORDER,
    ):
        self._defaults = licence_defaults or LicenceDefaults()
        self._category_order = tuple(category_order)

    def build(
        self,
        entries: Iterable[CatalogEntry],
        version: str | None = None,
    ) -> Context:
        """Build a Context from a flat list of entries."""
        suppressed = [suppress_default_licence(e, self._defaults) for e in entries]
        return self._assemble(group_entries(suppressed, self._category_order), version)

    def build_from_groups(
        self,
        groups: Mapping[str, Iterable[CatalogEntry]],
        version: str | None = None,
    ) -> Context:
        """Build a Context from a pre-grouped map.

        Group order follows the configured category order; unknown groups
        keep the order of the input map.
        """
        ordered: dict[str, list[CatalogEntry]] = {key: [] for key in self._category_order}
        for key, group in groups.items():
            ordered.setdefault(key, []).extend(
                suppress_default_licence(e, self._defaults) for e in group
            )
        return self._assemble(ordered, version)

    def _assemble(
        self,
        grouped: dict[str, list[CatalogEntry]],
        version: str | None,
    ) -> Context:
        grouped_values: dict[str, tuple[Value, ...]] = {}
        flattened: list[Value] = []
        adapted: list[Value] = []
        original: list[Value] = []

        for key, group in grouped.items():
            values = tuple(Value.of(entry.to_dict()) for entry in group)
            grouped_values[key] = values
            for entry, value in zip(group, values):
                flattened.append(value)
                if entry.is_adapted:
                    adapted.append(value)
                else:
                    original.append(value)

        context = Context(
            grouped=MappingProxyType(grouped_values),
            flattened=tuple(flattened),
            adapted=tuple(adapted),
            original=tuple(original),
            version=version,
        )
        # Root record is built here; renders only read it
        context.scope
        logger.info(
            "Built context: %d entries (%d adapted, %d original) across %d categories",
            context.total,
            len(context.adapted),
            len(context.original),
            len(grouped_values),
        )
        logger.debug("Category counts: %s", context.counts())
        return context


def build_context(
    entries: Iterable[CatalogEntry],
    licence_defaults: LicenceDefaults | None = None,
    category_order: Sequence[str] = DEFAULT_CATEGORY_ORDER,
    version: str | None = None,
) -> Context:
    """Convenience function to build a Context in one call."""
    return ContextBuilder(licence_defaults, category_order).build(entries, version)
