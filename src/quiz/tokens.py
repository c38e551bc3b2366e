"""
Typed Markdown token tree consumed by the quiz compiler.

The tree comes from an external, marked-compatible lexer. This module does
not lex Markdown; `tokens_from_lexer` only re-types the lexer's JSON nodes
(`type`, `depth`, `text`, `items`, `tokens`, `href` keys) into dataclasses
and fails fast when a node does not have the shape the compiler relies on.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class QuizCompilerError(Exception):
    """Base class for errors raised by the quiz compiler package."""
    pass


class TokenContractError(QuizCompilerError, ValueError):
    """Raised when a token tree does not match the lexer contract."""
    pass


class TokenType(str, Enum):
    """Node kinds the compiler distinguishes."""
    HEADING = "heading"
    LIST = "list"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"
    CODE = "code"
    TEXT = "text"
    CODESPAN = "codespan"
    IMAGE = "image"


HEADING_DEPTHS = range(1, 7)


# =============================================================================
# Inline nodes
# =============================================================================


@dataclass(frozen=True)
class InlineToken:
    """
    Inline node (text run, code span, image, emphasis, link, ...).

    For images `text` is the alt text and `href` the target.
    """
    type: str
    text: str = ""
    href: str | None = None
    tokens: tuple[InlineToken, ...] = ()

    @property
    def is_text(self) -> bool:
        return self.type == TokenType.TEXT.value

    @property
    def is_codespan(self) -> bool:
        return self.type == TokenType.CODESPAN.value

    @property
    def is_image(self) -> bool:
        return self.type == TokenType.IMAGE.value


# =============================================================================
# Block nodes
# =============================================================================


@dataclass(frozen=True)
class HeadingToken:
    depth: int
    text: str
    tokens: tuple[InlineToken, ...] = ()
    type: str = TokenType.HEADING.value

    def __post_init__(self):
        if self.depth not in HEADING_DEPTHS:
            raise TokenContractError(f"Heading depth must be 1-6, got {self.depth!r}")


@dataclass(frozen=True)
class ParagraphToken:
    tokens: tuple[InlineToken, ...] = ()
    text: str = ""
    type: str = TokenType.PARAGRAPH.value


@dataclass(frozen=True)
class CodeToken:
    text: str
    lang: str | None = None
    type: str = TokenType.CODE.value


@dataclass(frozen=True)
class TextBlockToken:
    """Bare text block, as found directly inside tight list items."""
    text: str
    tokens: tuple[InlineToken, ...] = ()
    type: str = TokenType.TEXT.value


@dataclass(frozen=True)
class OtherToken:
    """Any block node the compiler ignores (hr, blockquote, space, ...)."""
    type: str
    text: str = ""
    tokens: tuple[InlineToken, ...] = ()


@dataclass(frozen=True)
class ListItemToken:
    tokens: tuple[BlockToken, ...]
    type: str = TokenType.LIST_ITEM.value

    def __post_init__(self):
        if not self.tokens:
            raise TokenContractError("List item carries no tokens")


@dataclass(frozen=True)
class ListToken:
    items: tuple[ListItemToken, ...] = field(default_factory=tuple)
    ordered: bool = False
    type: str = TokenType.LIST.value


BlockToken = Union[
    HeadingToken,
    ListToken,
    ParagraphToken,
    CodeToken,
    TextBlockToken,
    OtherToken,
]


def inline_children(token: Any) -> tuple[InlineToken, ...]:
    """Inline children of a block node, empty when it has none."""
    return getattr(token, "tokens", ()) or ()


def token_text(token: Any) -> str:
    """Text carried by a node, empty when it has none."""
    return getattr(token, "text", "") or ""


# =============================================================================
# Lexer adapter
# =============================================================================


def _require(node: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in node:
        raise TokenContractError(f"{kind} node is missing required field '{key}'")
    return node[key]


def _require_sequence(value: Any, what: str) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)):
        raise TokenContractError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _children(node: Mapping[str, Any], what: str) -> Sequence[Any]:
    """Optional `tokens` children; absent or null means none."""
    children = node.get("tokens")
    if children is None:
        return ()
    return _require_sequence(children, what)


def _inline_from_lexer(node: Mapping[str, Any]) -> InlineToken:
    if not isinstance(node, Mapping):
        raise TokenContractError(f"Inline node must be a mapping, got {type(node).__name__}")

    node_type = _require(node, "type", "inline")
    if node_type == TokenType.IMAGE.value:
        _require(node, "href", "image")

    return InlineToken(
        type=node_type,
        text=node.get("text") or "",
        href=node.get("href"),
        tokens=tuple(_inline_from_lexer(child) for child in _children(node, f"{node_type} tokens")),
    )


def _inlines(node: Mapping[str, Any]) -> tuple[InlineToken, ...]:
    return tuple(_inline_from_lexer(child) for child in _children(node, f"{node.get('type')} tokens"))


def _list_item_from_lexer(node: Mapping[str, Any]) -> ListItemToken:
    if not isinstance(node, Mapping):
        raise TokenContractError(f"List item must be a mapping, got {type(node).__name__}")
    children = _require_sequence(_require(node, "tokens", "list_item"), "list_item tokens")
    return ListItemToken(tokens=tuple(block_from_lexer(child) for child in children))


def block_from_lexer(node: Mapping[str, Any]) -> BlockToken:
    """Convert a single lexer node into its typed block token."""
    if not isinstance(node, Mapping):
        raise TokenContractError(f"Block node must be a mapping, got {type(node).__name__}")

    node_type = _require(node, "type", "block")

    if node_type == TokenType.HEADING.value:
        depth = _require(node, "depth", "heading")
        if not isinstance(depth, int) or isinstance(depth, bool):
            raise TokenContractError(f"Heading depth must be an integer, got {depth!r}")
        return HeadingToken(
            depth=depth,
            text=_require(node, "text", "heading"),
            tokens=_inlines(node),
        )

    if node_type == TokenType.LIST.value:
        items = _require_sequence(_require(node, "items", "list"), "list items")
        return ListToken(
            items=tuple(_list_item_from_lexer(item) for item in items),
            ordered=bool(node.get("ordered", False)),
        )

    if node_type == TokenType.PARAGRAPH.value:
        return ParagraphToken(tokens=_inlines(node), text=node.get("text") or "")

    if node_type == TokenType.CODE.value:
        return CodeToken(text=_require(node, "text", "code"), lang=node.get("lang") or None)

    if node_type == TokenType.TEXT.value:
        return TextBlockToken(text=node.get("text") or "", tokens=_inlines(node))

    return OtherToken(type=node_type, text=node.get("text") or "", tokens=_inlines(node))


def tokens_from_lexer(nodes: Sequence[Mapping[str, Any]]) -> list[BlockToken]:
    """
    Convert a lexer's top-level node list into typed block tokens.

    Raises:
        TokenContractError: If the tree or a child list is not a list,
            a node lacks a field the compiler needs, a heading depth is
            outside 1-6, or a list item is empty.
    """
    return [block_from_lexer(node) for node in _require_sequence(nodes, "Token tree")]
