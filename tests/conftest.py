"""Shared fixtures for shaderdocs tests."""

import pytest

from shaderdocs.core import CatalogEntry, Credits, LicenceDefaults
from shaderdocs.templates import ContextBuilder, Evaluator, parse_template

DEFAULT_LICENCE = "CC BY 4.0"
DEFAULT_CODE = "CC-BY-4.0"


@pytest.fixture
def licence_defaults() -> LicenceDefaults:
    return LicenceDefaults(text=DEFAULT_LICENCE, code=DEFAULT_CODE)


@pytest.fixture
def entries() -> list[CatalogEntry]:
    """A small catalog spanning three categories."""
    return [
        CatalogEntry(
            name="Vortex",
            filename="AS_BGX_Vortex.1.fx",
            type="BGX",
            short_description="Swirling vortex",
            licence=DEFAULT_LICENCE,
        ),
        CatalogEntry(
            name="Motion Trails",
            filename="AS_VFX_MotionTrails.1.fx",
            type="VFX",
            licence="MIT",
            licence_code=DEFAULT_CODE,
        ),
        CatalogEntry(
            name="BlueCorona",
            filename="AS_BGX_BlueCorona.1.fx",
            type="BGX",
            licence=DEFAULT_LICENCE,
            credits=Credits(
                original_author="Foo",
                original_title="Blue Corona",
                licence=DEFAULT_LICENCE,
                licence_code="CC BY-NC-SA 3.0",
            ),
        ),
        CatalogEntry(
            name="Stage Spotlights",
            filename="AS_LFX_StageSpotlights.1.fx",
            type="LFX",
            credits=Credits(original_title="No author given"),
        ),
    ]


@pytest.fixture
def context(entries, licence_defaults):
    return ContextBuilder(licence_defaults).build(entries, version="1.9.2")


@pytest.fixture
def render(context):
    """Render template text against the shared context."""
    evaluator = Evaluator()

    def _render(text: str, scope=None) -> str:
        return evaluator.render(parse_template(text), context if scope is None else scope)

    return _render
