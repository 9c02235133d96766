"""Directive parser.

Turns template text into a tree of nodes:

    Literal        plain text, emitted unchanged
    Interpolation  {{ path }} or {{ (eq field "value") }}
    Each           {{#each path}} ... {{/each}}
    If             {{#if predicate}} ... {{/if}}

Predicates are a bare path (truthiness) or (eq field "literal") /
(ne field "literal"), where field is looked up in the current scope only.

Block nesting is resolved structurally with a stack. {{#each}} inside
{{#each}} is rejected, as are {{else}}, unknown block tags and any
unterminated or mismatched block.
"""

import bisect
import re
from dataclasses import dataclass, field
from typing import Union

OPEN = "{{"
CLOSE = "}}"

# "this" (or ".") refers to the current scope itself
SELF_PATHS = ("this", ".")

_PATH_RE = re.compile(r"^[A-Za-z_][\w-]*(?:\.[\w-]+)*$")
_COMPARISON_RE = re.compile(r'^\(\s*(eq|ne)\s+([\w.-]+)\s+"([^"]*)"\s*\)$')
_BLOCK_RE = re.compile(r"^([#/])\s*(\w+)\s*(.*)$", re.DOTALL)


class TemplateSyntaxError(ValueError):
    """Template could not be parsed. Carries the directive's location."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


# =============================================================================
# EXPRESSIONS
# =============================================================================


@dataclass(frozen=True)
class Path:
    """Dot-separated field path. Empty parts means the scope itself."""

    parts: tuple[str, ...]

    def __str__(self) -> str:
        return ".".join(self.parts) or "this"


@dataclass(frozen=True)
class Comparison:
    """(eq field "literal") or (ne field "literal")."""

    op: str
    field: str
    literal: str


@dataclass(frozen=True)
class Invalid:
    """Expression that is neither a path nor a comparison."""

    raw: str


Expression = Union[Path, Comparison, Invalid]


def parse_expression(raw: str) -> Expression:
    """Classify the inside of a directive. Never raises."""
    text = raw.strip()
    if text in SELF_PATHS:
        return Path(())
    if _PATH_RE.match(text):
        return Path(tuple(text.split(".")))
    match = _COMPARISON_RE.match(text)
    if match:
        op, name, literal = match.groups()
        return Comparison(op=op, field=name, literal=literal)
    return Invalid(text)


# =============================================================================
# NODES
# =============================================================================


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Interpolation:
    expression: Expression
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Each:
    path: Path
    children: tuple["Node", ...]
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class If:
    predicate: Expression
    children: tuple["Node", ...]
    line: int = 0
    column: int = 0


Node = Union[Literal, Interpolation, Each, If]


@dataclass(frozen=True)
class Template:
    """A parsed template."""

    nodes: tuple[Node, ...]
    name: str = "<template>"


# =============================================================================
# PARSING
# =============================================================================


@dataclass
class _Frame:
    """An open block while parsing."""

    tag: str
    argument: Expression
    line: int
    column: int
    children: list = field(default_factory=list)


class _Locator:
    """Maps string offsets to 1-based line/column."""

    def __init__(self, text: str):
        self._starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]

    def locate(self, offset: int) -> tuple[int, int]:
        index = bisect.bisect_right(self._starts, offset) - 1
        return index + 1, offset - self._starts[index] + 1


def parse_template(text: str, name: str = "<template>") -> Template:
    """Parse template text into a Template.

    Raises:
        TemplateSyntaxError: unterminated directive, unknown or unsupported
            block tag, mismatched or unclosed block, nested {{#each}}
    """
    locator = _Locator(text)
    root: list[Node] = []
    stack: list[_Frame] = []

    def add(node: Node) -> None:
        (stack[-1].children if stack else root).append(node)

    pos = 0
    while True:
        start = text.find(OPEN, pos)
        if start == -1:
            if pos < len(text):
                add(Literal(text[pos:]))
            break

        if start > pos:
            add(Literal(text[pos:start]))

        line, column = locator.locate(start)
        end = text.find(CLOSE, start + len(OPEN))
        if end == -1:
            raise TemplateSyntaxError("Unterminated directive", line, column)

        raw = text[start + len(OPEN):end].strip()
        pos = end + len(CLOSE)

        if raw == "else":
            raise TemplateSyntaxError("{{else}} is not supported", line, column)

        block = _BLOCK_RE.match(raw)
        if not block:
            add(Interpolation(parse_expression(raw), line, column))
            continue

        marker, tag, argument = block.groups()
        if tag not in ("each", "if"):
            raise TemplateSyntaxError(f"Unknown block tag '{marker}{tag}'", line, column)

        if marker == "#":
            stack.append(_open_block(tag, argument, stack, line, column))
        else:
            if argument.strip():
                raise TemplateSyntaxError(f"Closing tag '/{tag}' takes no argument", line, column)
            if not stack:
                raise TemplateSyntaxError(f"Unexpected '{{{{/{tag}}}}}'", line, column)
            frame = stack[-1]
            if frame.tag != tag:
                raise TemplateSyntaxError(
                    f"'{{{{/{tag}}}}}' closes '{{{{#{frame.tag}}}}}' opened at "
                    f"line {frame.line}, column {frame.column}",
                    line,
                    column,
                )
            stack.pop()
            add(_close_block(frame))

    if stack:
        frame = stack[-1]
        raise TemplateSyntaxError(f"Unclosed '{{{{#{frame.tag}}}}}'", frame.line, frame.column)

    return Template(nodes=tuple(root), name=name)


def _open_block(tag: str, argument: str, stack: list[_Frame], line: int, column: int) -> _Frame:
    if not argument.strip():
        raise TemplateSyntaxError(f"'#{tag}' requires an argument", line, column)

    expression = parse_expression(argument)
    if tag == "each":
        outer = next((f for f in stack if f.tag == "each"), None)
        if outer is not None:
            raise TemplateSyntaxError(
                f"Nested '{{{{#each}}}}' is not supported (outer block at line {outer.line})",
                line,
                column,
            )
        if not isinstance(expression, Path):
            raise TemplateSyntaxError(f"'#each' expects a path, got '{argument.strip()}'", line, column)

    return _Frame(tag=tag, argument=expression, line=line, column=column)


def _close_block(frame: _Frame) -> Node:
    if frame.tag == "each":
        return Each(
            path=frame.argument,
            children=_trim_body(frame.children),
            line=frame.line,
            column=frame.column,
        )
    return If(
        predicate=frame.argument,
        children=tuple(frame.children),
        line=frame.line,
        column=frame.column,
    )


def _trim_body(children: list[Node]) -> tuple[Node, ...]:
    """Strip whitespace at both ends of an each-block body."""
    nodes = list(children)
    if nodes and isinstance(nodes[0], Literal):
        nodes[0] = Literal(nodes[0].text.lstrip())
    if nodes and isinstance(nodes[-1], Literal):
        nodes[-1] = Literal(nodes[-1].text.rstrip())
    return tuple(n for n in nodes if not (isinstance(n, Literal) and not n.text))
