"""Catalog loading and validation.

Reads the persisted shader catalog (JSON) and validates every entry with
pydantic before anything is rendered. Accepted shapes:

    [ {entry}, ... ]                          flat list
    {"shaders": [ {entry}, ... ]}             wrapped list ("entries" also works)
    {"grouped": {"BGX": [ {entry} ], ...}}    pre-grouped map
    {"BGX": [ {entry} ], "VFX": [...]}        bare category map

Any problem raises CatalogError. A malformed catalog aborts the whole run.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from shaderdocs.core import CatalogEntry, Credits

logger = logging.getLogger(__name__)

LIST_KEYS = ("shaders", "entries")


class CatalogError(ValueError):
    """Catalog input is unreadable or malformed."""


# =============================================================================
# VALIDATION MODELS
# =============================================================================


class _LicensedModel(BaseModel):
    """Fields shared by entries and credits.

    Either spelling is accepted, but only one per field.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    licence: str | None = None
    license: str | None = None
    licence_code: str | None = Field(default=None, alias="licenceCode")
    license_code: str | None = Field(default=None, alias="licenseCode")

    @model_validator(mode="after")
    def check_single_spelling(self):
        if self.licence is not None and self.license is not None:
            raise ValueError("give either 'licence' or 'license', not both")
        if self.licence_code is not None and self.license_code is not None:
            raise ValueError("give either 'licenceCode' or 'licenseCode', not both")
        return self

    def licence_text(self) -> tuple[str | None, str]:
        """(value, key as supplied)."""
        if self.licence is not None:
            return self.licence, "licence"
        if self.license is not None:
            return self.license, "license"
        return None, "licence"

    def licence_code_value(self) -> tuple[str | None, str]:
        if self.license_code is not None:
            return self.license_code, "licenseCode"
        if self.licence_code is not None:
            return self.licence_code, "licenceCode"
        return None, "licenseCode"


class CreditsModel(_LicensedModel):
    """Third-party attribution block."""

    original_author: str | None = Field(default=None, alias="originalAuthor")
    original_title: str | None = Field(default=None, alias="originalTitle")
    description: str | None = None
    external_url: str | None = Field(default=None, alias="externalUrl")

    def to_credits(self) -> Credits:
        licence, licence_key = self.licence_text()
        code, code_key = self.licence_code_value()
        return Credits(
            original_author=self.original_author,
            original_title=self.original_title,
            description=self.description,
            external_url=self.external_url,
            licence=licence,
            licence_code=code,
            extra=dict(self.model_extra or {}),
            licence_key=licence_key,
            licence_code_key=code_key,
        )


class CatalogEntryModel(_LicensedModel):
    """One catalog entry as stored on disk."""

    name: str
    filename: str
    type: str | None = None
    short_description: str | None = Field(default=None, alias="shortDescription")
    long_description: str | None = Field(default=None, alias="longDescription")
    image_url: str | None = Field(default=None, alias="imageUrl")
    credits: CreditsModel | None = None

    def to_entry(self, entry_type: str) -> CatalogEntry:
        licence, licence_key = self.licence_text()
        code, code_key = self.licence_code_value()
        return CatalogEntry(
            name=self.name,
            filename=self.filename,
            type=entry_type,
            short_description=self.short_description,
            long_description=self.long_description,
            image_url=self.image_url,
            licence=licence,
            licence_code=code,
            credits=self.credits.to_credits() if self.credits else None,
            extra=dict(self.model_extra or {}),
            licence_key=licence_key,
            licence_code_key=code_key,
        )


# =============================================================================
# LOADING
# =============================================================================


@dataclass(frozen=True)
class Catalog:
    """Validated catalog.

    groups is set when the input was pre-grouped; entries is always the
    flat list in input order.
    """

    entries: tuple[CatalogEntry, ...]
    groups: dict[str, tuple[CatalogEntry, ...]] | None = None

    def __len__(self) -> int:
        return len(self.entries)


def load_catalog(path: str | Path, categories: Sequence[str]) -> Catalog:
    """Read and validate a catalog file.

    Raises:
        CatalogError: file missing or unreadable, invalid JSON, bad entries
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        raise CatalogError(f"Invalid JSON in catalog {path}: {e}") from e

    catalog = parse_catalog(data, categories)
    logger.info(f"Loaded {len(catalog)} catalog entries from {path}")
    return catalog


def parse_catalog(data: Any, categories: Sequence[str]) -> Catalog:
    """Validate already-decoded catalog data."""
    known = tuple(categories)

    if isinstance(data, list):
        entries = [_parse_entry(item, f"[{i}]", known) for i, item in enumerate(data)]
        return _finish(entries, None)

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog must be a list or an object, got {type(data).__name__}")

    if isinstance(data.get("grouped"), dict):
        return _parse_groups(data["grouped"], known)

    for key in LIST_KEYS:
        if isinstance(data.get(key), list):
            entries = [
                _parse_entry(item, f"{key}[{i}]", known) for i, item in enumerate(data[key])
            ]
            return _finish(entries, None)

    if data and all(key in known for key in data):
        return _parse_groups(data, known)

    raise CatalogError(
        "Catalog object has no 'grouped', 'shaders' or 'entries' section "
        "and is not a category map"
    )


def _parse_groups(groups: dict, known: tuple[str, ...]) -> Catalog:
    parsed: dict[str, tuple[CatalogEntry, ...]] = {}
    for key, items in groups.items():
        if key not in known:
            raise CatalogError(f"Unknown category '{key}' (expected one of {', '.join(known)})")
        if not isinstance(items, list):
            raise CatalogError(f"Category '{key}' must hold a list of entries")
        parsed[key] = tuple(
            _parse_entry(item, f"grouped.{key}[{i}]", known, group=key)
            for i, item in enumerate(items)
        )
    entries = [entry for group in parsed.values() for entry in group]
    return _finish(entries, parsed)


def _parse_entry(
    item: Any,
    where: str,
    known: tuple[str, ...],
    group: str | None = None,
) -> CatalogEntry:
    if not isinstance(item, dict):
        raise CatalogError(f"Entry {where} must be an object")
    try:
        model = CatalogEntryModel.model_validate(item)
    except ValidationError as e:
        raise CatalogError(f"Invalid entry {where}: {e}") from e

    entry_type = model.type or group
    if entry_type is None:
        raise CatalogError(f"Entry {where} ({model.filename}) has no type")
    if group is not None and entry_type != group:
        raise CatalogError(
            f"Entry {where} ({model.filename}) has type '{entry_type}' but is grouped under '{group}'"
        )
    if entry_type not in known:
        raise CatalogError(
            f"Entry {where} ({model.filename}) has unknown type '{entry_type}' "
            f"(expected one of {', '.join(known)})"
        )
    return model.to_entry(entry_type)


def _finish(
    entries: list[CatalogEntry],
    groups: dict[str, tuple[CatalogEntry, ...]] | None,
) -> Catalog:
    seen: set[str] = set()
    for entry in entries:
        if entry.filename in seen:
            raise CatalogError(f"Duplicate catalog filename '{entry.filename}'")
        seen.add(entry.filename)
    return Catalog(entries=tuple(entries), groups=groups)
