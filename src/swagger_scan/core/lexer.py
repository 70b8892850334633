"""Flatten a tree-sitter PHP parse into the token stream the walker consumes."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from swagger_scan.core.languages import detect_language_from_path


class TokenKind(str, Enum):
    DOC_COMMENT = "doc_comment"
    NAMESPACE = "namespace"
    USE = "use"
    CLASS = "class"
    ABSTRACT = "abstract"
    EXTENDS = "extends"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    VAR = "var"
    FUNCTION = "function"
    AS = "as"
    IDENT = "ident"
    VARIABLE = "variable"
    KEYWORD = "keyword"
    PUNCT = "punct"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int


VISIBILITY = frozenset({TokenKind.PUBLIC, TokenKind.PROTECTED, TokenKind.PRIVATE})

_KEYWORDS = {
    "namespace": TokenKind.NAMESPACE,
    "use": TokenKind.USE,
    "class": TokenKind.CLASS,
    "abstract": TokenKind.ABSTRACT,
    "extends": TokenKind.EXTENDS,
    "public": TokenKind.PUBLIC,
    "protected": TokenKind.PROTECTED,
    "private": TokenKind.PRIVATE,
    "static": TokenKind.STATIC,
    "var": TokenKind.VAR,
    "function": TokenKind.FUNCTION,
    "as": TokenKind.AS,
}

# Nodes emitted as a single token instead of being descended into.
_NAME_NODES = frozenset({"name", "qualified_name", "namespace_name", "primitive_type"})
_ATOMIC_NODES = _NAME_NODES | {
    "comment",
    "variable_name",
    "string",
    "encapsed_string",
    "heredoc",
    "nowdoc",
}


def _classify(node: Node, text: str) -> TokenKind | None:
    if node.type == "comment":
        return TokenKind.DOC_COMMENT if text.startswith("/**") else None
    if node.type == "variable_name":
        return TokenKind.VARIABLE
    if node.type in _NAME_NODES:
        return TokenKind.IDENT
    lowered = text.lower()
    # Keyword leaves are typed by their literal, modifier leaves by "*_modifier".
    if node.type.lower() == lowered or node.type.endswith("_modifier"):
        if lowered in _KEYWORDS:
            return _KEYWORDS[lowered]
        if lowered.isalpha():
            return TokenKind.KEYWORD
    if not node.is_named:
        return TokenKind.PUNCT
    return TokenKind.OTHER


def _node_text(node: Node) -> str:
    raw = node.text or b""
    return raw.decode("utf-8", errors="replace")


def tokenize(source_bytes: bytes) -> list[Token]:
    parser = get_parser(cast(SupportedLanguage, "php"))
    tree = parser.parse(source_bytes)
    tokens: list[Token] = []

    def visit(node: Node) -> None:
        if node.child_count == 0 or node.type in _ATOMIC_NODES:
            text = _node_text(node)
            if not text.strip():
                return
            kind = _classify(node, text)
            if kind is not None:
                tokens.append(Token(kind=kind, text=text, line=node.start_point[0] + 1))
            return
        for child in node.children:
            visit(child)

    visit(tree.root_node)
    return tokens


def tokenize_file(path: str) -> list[Token]:
    file_path = Path(path)
    detect_language_from_path(file_path)

    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    return tokenize(source_bytes)
