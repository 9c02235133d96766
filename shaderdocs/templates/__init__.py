"""Template engine module.

Renders catalog data into documents (galleries, README, credits).
Directives are substituted in template text like:
    "{{#each grouped.BGX}}{{name}}{{/each}}" -> "Vortex\nBlueCorona"

Supports:
    {{path}}                          - property interpolation
    {{#each path}} ... {{/each}}      - iteration, item becomes the scope
    {{#if predicate}} ... {{/if}}     - conditional block
    (eq field "x") / (ne field "x")   - equality predicates
"""

from shaderdocs.templates.context import Context
from shaderdocs.templates.context_builder import (
    DEFAULT_CATEGORY_ORDER,
    ContextBuilder,
    build_context,
    group_entries,
    suppress_default_licence,
)
from shaderdocs.templates.evaluator import (
    DEFAULT_MAX_DEPTH,
    Evaluator,
    RenderDepthError,
    sanitize_output,
)
from shaderdocs.templates.parser import Template, TemplateSyntaxError, parse_template
from shaderdocs.templates.value import ABSENT, Kind, Value

__all__ = [
    # Value model
    "ABSENT",
    "Kind",
    "Value",
    # Context
    "Context",
    "ContextBuilder",
    "DEFAULT_CATEGORY_ORDER",
    "build_context",
    "group_entries",
    "suppress_default_licence",
    # Parser
    "Template",
    "TemplateSyntaxError",
    "parse_template",
    # Evaluator
    "DEFAULT_MAX_DEPTH",
    "Evaluator",
    "RenderDepthError",
    "sanitize_output",
]
