"""Application configuration.

Single source of truth for configuration values.
Environment variables (with .env file support) provide defaults; the
project's package-config.json may override licence and category settings
and lists the documents to render.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from shaderdocs.core import LicenceDefaults

logger = logging.getLogger(__name__)

# Load .env file from project root
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_FILE)

_DEFAULT_CATEGORIES = "BGX,GFX,LFX,VFX,AFX"


class ConfigError(ValueError):
    """Project configuration file is unreadable or malformed."""


class Config:
    """Environment configuration.

    All configuration values should be accessed through this class.
    Values are loaded from environment variables with sensible defaults.
    """

    CATALOG_PATH: str = os.getenv("SHADERDOCS_CATALOG_PATH", "config/shader-catalog.json")
    PROJECT_CONFIG_PATH: str = os.getenv(
        "SHADERDOCS_PROJECT_CONFIG", "config/package-config.json"
    )

    DEFAULT_LICENCE: str = os.getenv(
        "SHADERDOCS_DEFAULT_LICENCE", "Creative Commons Attribution 4.0 International"
    )
    DEFAULT_LICENCE_CODE: str = os.getenv("SHADERDOCS_DEFAULT_LICENCE_CODE", "CC BY 4.0")
    CATEGORY_ORDER: tuple[str, ...] = tuple(
        os.getenv("SHADERDOCS_CATEGORIES", _DEFAULT_CATEGORIES).split(",")
    )

    MAX_RENDER_DEPTH: int = int(os.getenv("SHADERDOCS_MAX_RENDER_DEPTH", "32"))
    RENDER_WORKERS: int = int(os.getenv("SHADERDOCS_RENDER_WORKERS", "4"))

    LOG_DIR: str | None = os.getenv("LOG_DIR") or None
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def licence_defaults(cls) -> LicenceDefaults:
        return LicenceDefaults(text=cls.DEFAULT_LICENCE, code=cls.DEFAULT_LICENCE_CODE)

    @classmethod
    def reload(cls) -> None:
        """Reload configuration from environment.

        Useful for testing or runtime config changes.
        """
        load_dotenv(_ENV_FILE, override=True)
        cls.CATALOG_PATH = os.getenv("SHADERDOCS_CATALOG_PATH", "config/shader-catalog.json")
        cls.PROJECT_CONFIG_PATH = os.getenv(
            "SHADERDOCS_PROJECT_CONFIG", "config/package-config.json"
        )
        cls.DEFAULT_LICENCE = os.getenv(
            "SHADERDOCS_DEFAULT_LICENCE", "Creative Commons Attribution 4.0 International"
        )
        cls.DEFAULT_LICENCE_CODE = os.getenv("SHADERDOCS_DEFAULT_LICENCE_CODE", "CC BY 4.0")
        cls.CATEGORY_ORDER = tuple(
            os.getenv("SHADERDOCS_CATEGORIES", _DEFAULT_CATEGORIES).split(",")
        )
        cls.MAX_RENDER_DEPTH = int(os.getenv("SHADERDOCS_MAX_RENDER_DEPTH", "32"))
        cls.RENDER_WORKERS = int(os.getenv("SHADERDOCS_RENDER_WORKERS", "4"))
        cls.LOG_DIR = os.getenv("LOG_DIR") or None
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class DocumentJob:
    """A template and where its rendered output goes."""

    template: Path
    output: Path


@dataclass(frozen=True)
class ProjectConfig:
    """Settings from package-config.json merged over environment defaults."""

    root: Path
    version: str | None = None
    licence: LicenceDefaults = field(default_factory=Config.licence_defaults)
    category_order: tuple[str, ...] = field(default_factory=lambda: Config.CATEGORY_ORDER)
    documents: tuple[DocumentJob, ...] = ()


def load_project_config(path: str | Path | None = None) -> ProjectConfig:
    """Load package-config.json.

    Relative template/output paths are resolved against the project root,
    which is the parent of the config directory when the file lives in
    "config/", otherwise the file's own directory.

    A missing file yields environment defaults.

    Raises:
        ConfigError: file exists but is not valid JSON or has bad fields
    """
    path = Path(path or Config.PROJECT_CONFIG_PATH)
    root = path.parent.parent if path.parent.name == "config" else path.parent

    if not path.exists():
        logger.info(f"No project config at {path}, using environment defaults")
        return ProjectConfig(root=root)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot load project config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Project config {path} must be a JSON object")

    licence = Config.licence_defaults()
    licence_data = data.get("defaultLicence")
    if licence_data is not None:
        if not isinstance(licence_data, dict):
            raise ConfigError("'defaultLicence' must be an object with 'text' and 'code'")
        licence = LicenceDefaults(
            text=licence_data.get("text", licence.text),
            code=licence_data.get("code", licence.code),
        )

    categories = data.get("categoryOrder", list(Config.CATEGORY_ORDER))
    if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
        raise ConfigError("'categoryOrder' must be a list of category keys")

    documents = []
    for i, doc in enumerate(data.get("documents", [])):
        if not isinstance(doc, dict) or "template" not in doc or "output" not in doc:
            raise ConfigError(f"documents[{i}] needs 'template' and 'output'")
        documents.append(
            DocumentJob(template=root / doc["template"], output=root / doc["output"])
        )

    version = data.get("version")
    return ProjectConfig(
        root=root,
        version=str(version) if version is not None else None,
        licence=licence,
        category_order=tuple(categories),
        documents=tuple(documents),
    )
