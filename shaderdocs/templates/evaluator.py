"""Template evaluator.

Walks a parsed Template against a scope and produces text.

Evaluation happens in two phases over the tree:
    1. Every {{#each}} block is expanded, depth-first and left to right.
       Each list item gets a fresh scope holding only that item.
    2. Remaining {{#if}} blocks and interpolations are evaluated against
       the root scope.

Unresolvable paths render as "" and unresolvable predicates are false.
Only exceeding the nesting depth limit is an error.
"""

import logging
import re

from shaderdocs.templates.context import Context
from shaderdocs.templates.parser import (
    Comparison,
    Each,
    Expression,
    If,
    Interpolation,
    Literal,
    Node,
    Path,
    Template,
)
from shaderdocs.templates.value import Kind, Value

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32

ROW_SEPARATOR = "\n"

_DIRECTIVE_RE = re.compile(r"\{\{[^{}\n]*\}\}")
_BRACE_RE = re.compile(r"\{\{|\}\}")


class RenderDepthError(RuntimeError):
    """Block nesting went deeper than the configured limit."""

    def __init__(self, depth: int, limit: int, line: int = 0, column: int = 0):
        self.depth = depth
        self.limit = limit
        self.line = line
        self.column = column
        super().__init__(
            f"Nesting depth {depth} exceeds limit {limit} (line {line}, column {column})"
        )


class Evaluator:
    """Evaluates templates against a Context or any record Value.

    Usage:
        evaluator = Evaluator()
        text = evaluator.render(parse_template(source), context)

    An Evaluator holds no per-render state and can be shared across threads.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def render(self, template: Template, context: Context | Value) -> str:
        """Render a template. Pure: same inputs, same output."""
        root = context.scope if isinstance(context, Context) else Value.of(context)
        expanded = self._expand_each(template.nodes, root, depth=0)
        return self._render_nodes(expanded, root, depth=0)

    # =========================================================================
    # Phase 1: each expansion
    # =========================================================================

    def _expand_each(self, nodes: tuple[Node, ...], root: Value, depth: int) -> tuple[Node, ...]:
        expanded: list[Node] = []
        for node in nodes:
            if isinstance(node, Each):
                expanded.append(Literal(self._render_each(node, root, depth + 1)))
            elif isinstance(node, If):
                self._check_depth(depth + 1, node)
                children = self._expand_each(node.children, root, depth + 1)
                expanded.append(If(node.predicate, children, node.line, node.column))
            else:
                expanded.append(node)
        return tuple(expanded)

    def _render_each(self, node: Each, scope: Value, depth: int) -> str:
        self._check_depth(depth, node)
        items = scope.lookup(node.path.parts)
        if items.kind is not Kind.LIST or not items.items():
            return ""
        rows = [self._render_nodes(node.children, item, depth) for item in items.items()]
        return ROW_SEPARATOR.join(rows)

    # =========================================================================
    # Phase 2: conditionals and interpolation
    # =========================================================================

    def _render_nodes(self, nodes: tuple[Node, ...], scope: Value, depth: int) -> str:
        parts: list[str] = []
        for node in nodes:
            if isinstance(node, Literal):
                parts.append(node.text)
            elif isinstance(node, Interpolation):
                parts.append(self._interpolate(node.expression, scope))
            elif isinstance(node, If):
                self._check_depth(depth + 1, node)
                if self.evaluate_predicate(node.predicate, scope):
                    parts.append(self._render_nodes(node.children, scope, depth + 1))
            elif isinstance(node, Each):
                parts.append(self._render_each(node, scope, depth + 1))
        return "".join(parts)

    def _interpolate(self, expression: Expression, scope: Value) -> str:
        if isinstance(expression, Path):
            return scope.lookup(expression.parts).render()
        if isinstance(expression, Comparison):
            return "true" if self.evaluate_predicate(expression, scope) else "false"
        return ""

    @staticmethod
    def evaluate_predicate(predicate: Expression, scope: Value) -> bool:
        """Truthiness of a path, or the result of an eq/ne comparison.

        Comparisons look the field up in the current scope only and compare
        its text form to the literal. An absent field equals nothing.
        """
        if isinstance(predicate, Path):
            return scope.lookup(predicate.parts).is_truthy()
        if isinstance(predicate, Comparison):
            value = scope.field(predicate.field)
            equal = not value.is_absent and value.render() == predicate.literal
            return equal if predicate.op == "eq" else not equal
        return False

    def _check_depth(self, depth: int, node: Node) -> None:
        if depth > self.max_depth:
            raise RenderDepthError(depth, self.max_depth, node.line, node.column)


def sanitize_output(text: str, name: str = "<document>") -> str:
    """Strip directive markers that survived evaluation.

    Catalog values are inserted verbatim, so a value containing "{{x}}"
    would otherwise leak into the output.
    """
    cleaned, directives = _DIRECTIVE_RE.subn("", text)
    cleaned, braces = _BRACE_RE.subn("", cleaned)
    if directives or braces:
        logger.warning(
            "Removed %d leftover directive(s) and %d stray brace pair(s) from %s",
            directives,
            braces,
            name,
        )
    return cleaned
