"""Single pass over the token stream that pairs doc-comments with what follows them.

Comments attach by adjacency: a held doc-comment goes to the next class,
property or method declaration; any other statement releases it as a
file-level comment. No grammar beyond a handful of keywords is needed.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from swagger_scan.core.context import NS_SEPARATOR, ScanContext, resolve_reference
from swagger_scan.core.lexer import VISIBILITY, Token, TokenKind
from swagger_scan.core.router import (
    CommentRouter,
    CommentTarget,
    MethodTarget,
    PropertyTarget,
    TypeTarget,
    UnattachedTarget,
)


class WalkerState(str, Enum):
    SCANNING = "scanning"
    AFTER_MODIFIER = "after_modifier"
    AFTER_STATIC = "after_static"
    IN_TYPE_HEADER = "in_type_header"


@dataclass(frozen=True)
class PendingComment:
    text: str
    line: int


# Type material allowed between modifiers and a typed property's variable.
_TYPE_PUNCT = frozenset({"?", "|", "&", "\\"})
_MEMBER_KEYWORDS = frozenset({"final", "readonly"})


class _Cursor:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def next(self) -> Token | None:
        if self._index >= len(self._tokens):
            return None
        token = self._tokens[self._index]
        self._index += 1
        return token

    def peek(self) -> Token | None:
        if self._index >= len(self._tokens):
            return None
        return self._tokens[self._index]


def _is_punct(token: Token | None, *texts: str) -> bool:
    return token is not None and token.kind is TokenKind.PUNCT and token.text in texts


def _is_modifier(token: Token) -> bool:
    if token.kind in VISIBILITY or token.kind in (TokenKind.VAR, TokenKind.ABSTRACT):
        return True
    return token.kind is TokenKind.KEYWORD and token.text.lower() in _MEMBER_KEYWORDS


def _is_type_material(token: Token) -> bool:
    return token.kind is TokenKind.IDENT or (token.kind is TokenKind.PUNCT and token.text in _TYPE_PUNCT)


class StructuralWalker:
    def __init__(self, path: str, router: CommentRouter, context: ScanContext | None = None) -> None:
        self.path = path
        self.router = router
        self.context = context or ScanContext()
        self.state = WalkerState.SCANNING
        self.pending: PendingComment | None = None
        self._static = False
        self._cursor = _Cursor(())

    def walk(self, tokens: Sequence[Token]) -> None:
        self._cursor = _Cursor(tokens)
        while (token := self._cursor.next()) is not None:
            self._step(token)
        self.state = WalkerState.SCANNING
        self._flush()

    def _step(self, token: Token) -> None:
        if self.state is WalkerState.IN_TYPE_HEADER:
            self._in_type_header(token)
        elif self.state is WalkerState.AFTER_MODIFIER:
            self._after_modifier(token)
        elif self.state is WalkerState.AFTER_STATIC:
            self._after_static(token)
        else:
            self._scanning(token)

    # -- states ---------------------------------------------------------------

    def _scanning(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.DOC_COMMENT:
            self._flush()
            self.pending = PendingComment(token.text, token.line)
        elif kind in (TokenKind.PUNCT, TokenKind.ABSTRACT):
            return
        elif kind is TokenKind.NAMESPACE:
            self.context.namespace = self._read_name()
        elif kind is TokenKind.USE:
            self._read_imports()
        elif kind is TokenKind.CLASS:
            self.state = WalkerState.IN_TYPE_HEADER
        elif self.pending is None:
            return
        elif kind in VISIBILITY or kind is TokenKind.VAR:
            self._static = False
            self.state = WalkerState.AFTER_MODIFIER
        elif kind is TokenKind.STATIC:
            self._static = True
            self.state = WalkerState.AFTER_STATIC
        elif kind is TokenKind.FUNCTION:
            self._function()
        else:
            self._flush()

    def _in_type_header(self, token: Token) -> None:
        self.state = WalkerState.SCANNING
        if token.kind is not TokenKind.IDENT:
            self._scanning(token)
            return
        self.context.type_name = self.context.qualify(token.text)
        self.context.parent_type = None
        if self.pending is None:
            return
        next_token = self._cursor.peek()
        if next_token is not None and next_token.kind is TokenKind.EXTENDS:
            self._cursor.next()
            parent = self._read_name()
            if parent:
                self.context.parent_type = resolve_reference(
                    parent, self.context.namespace, self.context.imports.snapshot()
                )
        self._route(
            TypeTarget(self.context.type_name, self.context.parent_type),
            f"{self.context.type_name} in {self._location()}",
        )

    def _after_modifier(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.STATIC:
            self._static = True
        elif kind is TokenKind.VARIABLE:
            self._property(token)
        elif kind is TokenKind.FUNCTION:
            self.state = WalkerState.SCANNING
            self._function()
        elif _is_modifier(token) or _is_type_material(token):
            return
        else:
            self._release(token)

    def _after_static(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.VARIABLE:
            self._property(token)
        elif kind in VISIBILITY:
            self.state = WalkerState.AFTER_MODIFIER
        elif kind is TokenKind.FUNCTION:
            self.state = WalkerState.SCANNING
            self._function()
        elif _is_type_material(token):
            return
        else:
            self._release(token)

    # -- transitions ----------------------------------------------------------

    def _release(self, token: Token) -> None:
        """Leave member context and handle ``token`` as ordinary material."""
        self.state = WalkerState.SCANNING
        self._scanning(token)

    def _property(self, token: Token) -> None:
        self.state = WalkerState.SCANNING
        name = token.text.lstrip("$")
        owner = self.context.type_name or ""
        label = f"{owner}::${name}" if self._static else f"{owner}->{name}"
        self._route(PropertyTarget(name), f"{label} in {self._location()}")

    def _function(self) -> None:
        if _is_punct(self._cursor.peek(), "&"):
            self._cursor.next()
        next_token = self._cursor.peek()
        if next_token is None or next_token.kind is not TokenKind.IDENT:
            # Closure: the comment documents no member.
            self._flush()
            return
        self._cursor.next()
        owner = self.context.type_name or ""
        label = f"{owner}->{next_token.text}(...)" if owner else f"{next_token.text}(...)"
        self._route(MethodTarget(next_token.text), f"{label} in {self._location()}")

    def _flush(self) -> None:
        if self.pending is not None:
            self._route(UnattachedTarget(), self._location())

    def _route(self, target: CommentTarget, location: str) -> None:
        assert self.pending is not None
        comment = self.pending.text
        self.pending = None
        self.router.route(comment, location, self.context.annotation_imports.snapshot(), target)

    def _location(self) -> str:
        line = self.pending.line if self.pending is not None else 0
        return f"{self.path} on line {line}"

    # -- statement readers ----------------------------------------------------

    def _read_name(self) -> str:
        """Consume a possibly qualified name made of identifiers and separators."""
        parts: list[str] = []
        while (token := self._cursor.peek()) is not None:
            if _is_punct(token, NS_SEPARATOR):
                parts.append(NS_SEPARATOR)
            elif token.kind is TokenKind.IDENT and (not parts or parts[-1] == NS_SEPARATOR):
                parts.append(token.text)
            else:
                break
            self._cursor.next()
        return "".join(parts)

    def _read_imports(self) -> None:
        """Consume ``use A\\B [as C], ...;`` including ``use A\\{B, C as D};`` groups."""
        prefix = ""
        while True:
            name = self._read_name()
            if not name:
                break
            target = prefix + name if prefix else name
            alias = target.rstrip(NS_SEPARATOR).rsplit(NS_SEPARATOR, 1)[-1]
            token = self._cursor.peek()
            if token is not None and token.kind is TokenKind.AS:
                self._cursor.next()
                alias_token = self._cursor.peek()
                if alias_token is None or alias_token.kind is not TokenKind.IDENT:
                    break
                self._cursor.next()
                alias = alias_token.text
                token = self._cursor.peek()
            if _is_punct(token, "{"):
                self._cursor.next()
                prefix = target if target.endswith(NS_SEPARATOR) else target + NS_SEPARATOR
                continue
            self.context.add_import(alias, target)
            if _is_punct(token, "}"):
                self._cursor.next()
                prefix = ""
                token = self._cursor.peek()
            if not _is_punct(token, ","):
                break
            self._cursor.next()
