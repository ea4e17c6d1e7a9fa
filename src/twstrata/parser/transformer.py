"""Lark Transformer that converts a CSS parse tree into a twstrata tree."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from twstrata.model.tree import AtRule, Comment, Declaration, Node, Root, Rule
from twstrata.parser.errors import ParseError

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_AT_RULE_RE = re.compile(r"@([-\w]+)\s*(.*)", re.DOTALL)

# Escapes and strings are matched first so comment markers inside them survive.
_COMMENT_SCAN_RE = re.compile(
    r"""\\.|"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|/\*.*?\*/""",
    re.DOTALL,
)


def _strip_comments(text: str) -> str:
    return _COMMENT_SCAN_RE.sub(
        lambda m: "" if m.group(0).startswith("/*") else m.group(0), text
    )


def _prelude(token: Token) -> str:
    return _strip_comments(str(token)).strip()


def _at_rule(text: str) -> AtRule:
    match = _AT_RULE_RE.match(text)
    if match is None:
        return AtRule(name="", params=text[1:].strip())
    return AtRule(name=match.group(1), params=match.group(2).strip())


class CssTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into Root/Rule/AtRule/Declaration nodes."""

    def __init__(self, source: str) -> None:
        super().__init__()
        self._source = source

    @v_args(meta=True)
    def prelude(self, meta: Any, children: list[Token]) -> Token:
        return Token(
            "PRELUDE",
            self._source[meta.start_pos : meta.end_pos],
            start_pos=meta.start_pos,
            line=meta.line,
            column=meta.column,
        )

    def comment(self, items: list[Token]) -> Comment:
        return Comment(text=str(items[0])[2:-2])

    def statement(self, items: list[Token]) -> Node:
        token = items[0]
        text = _prelude(token)
        if text.startswith("@"):
            at_rule = _at_rule(text)
            at_rule.nodes = None
            return at_rule
        prop, sep, value = text.partition(":")
        if not sep or not prop.strip():
            raise ParseError(
                f"Expected a declaration, got {text!r}",
                line=token.line,
                column=token.column,
            )
        return Declaration(prop=prop.strip(), value=value.strip())

    def block(self, items: list[object]) -> Node:
        text = _prelude(items[0])  # type: ignore[arg-type]
        container: AtRule | Rule
        if text.startswith("@"):
            container = _at_rule(text)
        else:
            container = Rule(selector=text)
        container.append(*items[1:])  # type: ignore[arg-type]
        return container

    def start(self, items: list[Node]) -> Root:
        root = Root()
        root.append(*items)
        return root


@lru_cache(maxsize=None)
def _parser() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        parser="lalr",
        start="start",
        propagate_positions=True,
    )


def parse_css(source: str, source_name: str = "") -> Root:
    """Parse CSS text into a Root node.

    Only the block structure is interpreted; selectors, at-rule params and
    declaration values are kept as written, minus comments and surrounding
    whitespace.
    """
    try:
        tree = _parser().parse(source)
    except UnexpectedInput as e:
        raise ParseError(
            str(e), line=e.line, column=e.column, source_name=source_name
        ) from e
    try:
        return CssTransformer(source).transform(tree)
    except VisitError as e:
        orig = e.orig_exc
        if isinstance(orig, ParseError):
            orig.source_name = source_name
            raise orig from e
        raise
