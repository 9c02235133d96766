"""Core catalog types.

Plain dataclasses describing catalog entries. The catalog loader produces
these; the context builder turns them into template values.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LicenceDefaults:
    """Project-wide default licence. Matching fields are suppressed."""

    text: str | None = None
    code: str | None = None


@dataclass(frozen=True)
class Credits:
    """Third-party attribution for an adapted effect."""

    original_author: str | None = None
    original_title: str | None = None
    description: str | None = None
    external_url: str | None = None
    licence: str | None = None
    licence_code: str | None = None

    # Extra keys from the catalog, passed through to templates untouched
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    # Key names as they were supplied (licence vs license)
    licence_key: str = "licence"
    licence_code_key: str = "licenseCode"

    def to_dict(self) -> dict[str, Any]:
        """Template-facing record. Absent fields are omitted."""
        data = dict(self.extra)
        _put(data, "originalAuthor", self.original_author)
        _put(data, "originalTitle", self.original_title)
        _put(data, "description", self.description)
        _put(data, "externalUrl", self.external_url)
        _put(data, self.licence_key, self.licence)
        _put(data, self.licence_code_key, self.licence_code)
        return data


@dataclass(frozen=True)
class CatalogEntry:
    """One cataloged effect."""

    name: str
    filename: str
    type: str
    short_description: str | None = None
    long_description: str | None = None
    image_url: str | None = None
    licence: str | None = None
    licence_code: str | None = None
    credits: Credits | None = None

    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    licence_key: str = "licence"
    licence_code_key: str = "licenseCode"

    @property
    def is_adapted(self) -> bool:
        """True when the entry carries third-party attribution."""
        return self.credits is not None and bool(self.credits.original_author)

    def to_dict(self) -> dict[str, Any]:
        """Template-facing record. Absent fields are omitted."""
        data = dict(self.extra)
        data["name"] = self.name
        data["filename"] = self.filename
        data["type"] = self.type
        _put(data, "shortDescription", self.short_description)
        _put(data, "longDescription", self.long_description)
        _put(data, "imageUrl", self.image_url)
        _put(data, self.licence_key, self.licence)
        _put(data, self.licence_code_key, self.licence_code)
        if self.credits is not None:
            data["credits"] = self.credits.to_dict()
        return data


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value
