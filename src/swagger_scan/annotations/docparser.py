"""Doctrine-style annotation parser for Swagger doc-comments.

Only annotations that resolve into the ``Swagger\\Annotations`` namespace are
parsed; everything else in the comment (prose, ``@var``, ``@param``, foreign
annotations) is skipped.
"""

import re
from collections.abc import Mapping
from typing import Any

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import LarkError, VisitError
from pydantic import ValidationError

from swagger_scan.annotations.base import AbstractAnnotation, AnnotationError, AnnotationGroup
from swagger_scan.annotations.swagger import ANNOTATION_TYPES, Partial
from swagger_scan.core.context import ANNOTATION_NAMESPACE, NS_SEPARATOR

grammar = r"""
    start: annotation

    annotation: "@" NAME arguments?
    arguments: "(" [value ("," value)* ","?] ")"

    ?value: assignment | plain
    assignment: NAME "=" plain

    ?plain: annotation
          | array
          | string
          | number
          | constant
    string: STRING
    number: NUMBER
    constant: NAME

    array: "{" [entry ("," entry)* ","?] "}"
    ?entry: pair | plain
    pair: key ("=" | ":") plain
    key: STRING | NAME | NUMBER

    NAME: /\\?\$?[A-Za-z_][A-Za-z0-9_]*(?:\\[A-Za-z_][A-Za-z0-9_]*)*/
    STRING: /"(?:[^"]|"")*"/
    NUMBER: /-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?/

    %import common.WS
    %ignore WS
"""

parser = Lark(grammar, start="start", parser="lalr")

_CANDIDATE = re.compile(r"(?:(?<=\s)|^)@(\\?[A-Za-z_][A-Za-z0-9_]*(?:\\[A-Za-z_][A-Za-z0-9_]*)*)")
_PREFIX = ANNOTATION_NAMESPACE.lower() + NS_SEPARATOR
_CONSTANTS: dict[str, Any] = {"true": True, "false": False, "null": None}


def strip_comment(comment: str) -> str:
    """Remove ``/**``, ``*/`` and the leading ``*`` of every line."""
    body = comment.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]
    lines = [re.sub(r"^\s*\*(?!/)", "", line) for line in body.splitlines()]
    return "\n".join(lines)


def resolve_annotation_name(name: str, imports: Mapping[str, str]) -> str | None:
    """Fully-qualified class for an annotation name, or ``None`` when not imported."""
    if name.startswith(NS_SEPARATOR):
        return name[1:]
    head, sep, rest = name.partition(NS_SEPARATOR)
    target = imports.get(head.lower())
    if target is None:
        return None
    return f"{target}{NS_SEPARATOR}{rest}" if sep else target


def _lookup(name: str, imports: Mapping[str, str], context: str) -> type[AbstractAnnotation] | None:
    resolved = resolve_annotation_name(name, imports)
    if resolved is None or not resolved.lower().startswith(_PREFIX):
        return None
    cls = ANNOTATION_TYPES.get(resolved[len(_PREFIX) :].lower())
    if cls is None:
        raise AnnotationError(f'[Semantical Error] The annotation "@{name}" does not exist', context)
    return cls


def _closing_paren(text: str, start: int) -> int:
    """Index just past the ``)`` matching the ``(`` at ``start``, or -1."""
    depth = 0
    in_string = False
    i = start
    while i < len(text):
        char = text[i]
        if in_string:
            if char == '"':
                if text[i + 1 : i + 2] == '"':
                    i += 1
                else:
                    in_string = False
        elif char == '"':
            in_string = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return -1


def build_annotation(cls: type[AbstractAnnotation], values: list[Any], context: str) -> AbstractAnnotation:
    """Instantiate ``cls`` from parsed positional and named values."""
    attrs: dict[str, Any] = {}
    partial_refs: list[str] = []
    for value in values:
        if isinstance(value, tuple):
            field_name, field_value = value
            attrs[field_name] = field_value
        elif isinstance(value, Partial):
            if value.value:
                partial_refs.append(value.value)
        elif isinstance(value, AbstractAnnotation):
            target = cls.nested.get(value.kind)
            if target is None:
                raise AnnotationError(f"Unexpected {value.tag} inside @SWG\\{cls.kind.value}()", context)
            field_name, repeated = target
            members = value.members if isinstance(value, AnnotationGroup) else [value]
            if repeated:
                attrs.setdefault(field_name, []).extend(members)
            else:
                attrs[field_name] = members[-1]
        elif cls.default_field is not None:
            attrs[cls.default_field] = value
        else:
            raise AnnotationError(f"@SWG\\{cls.kind.value}() does not accept an unnamed value", context)
    try:
        annotation = cls.model_validate(attrs)
    except ValidationError as exc:
        raise AnnotationError(f"Invalid @SWG\\{cls.kind.value}(): {exc}", context) from exc
    annotation.partials.extend(partial_refs)
    return annotation


class _Skip:
    """Placeholder for nested annotations outside the Swagger namespace."""


_SKIP = _Skip()


class AnnotationTransformer(Transformer):
    def __init__(self, imports: Mapping[str, str], context: str) -> None:
        super().__init__()
        self._imports = imports
        self._context = context

    def start(self, items: list[Any]) -> Any:
        return items[0]

    def annotation(self, items: list[Any]) -> Any:
        name = str(items[0])
        values = items[1] if len(items) > 1 else []
        cls = _lookup(name, self._imports, self._context)
        if cls is None:
            return _SKIP
        return build_annotation(cls, values, self._context)

    def arguments(self, items: list[Any]) -> list[Any]:
        return [item for item in items if item is not None and item is not _SKIP]

    def assignment(self, items: list[Any]) -> tuple[str, Any]:
        return str(items[0]), items[1]

    @v_args(inline=True)
    def string(self, token: Token) -> str:
        return str(token)[1:-1].replace('""', '"')

    @v_args(inline=True)
    def number(self, token: Token) -> int | float:
        text = str(token)
        return float(text) if any(c in text for c in ".eE") else int(text)

    @v_args(inline=True)
    def constant(self, token: Token) -> Any:
        lowered = str(token).lower()
        return _CONSTANTS[lowered] if lowered in _CONSTANTS else str(token)

    def array(self, items: list[Any]) -> list[Any] | dict[Any, Any]:
        entries = [item for item in items if item is not None and item is not _SKIP]
        if entries and all(isinstance(entry, _Pair) for entry in entries):
            return {entry.key: entry.value for entry in entries}
        return [entry.value if isinstance(entry, _Pair) else entry for entry in entries]

    @v_args(inline=True)
    def pair(self, key: Any, value: Any) -> "_Pair":
        return _Pair(key, value)

    @v_args(inline=True)
    def key(self, token: Token) -> Any:
        text = str(token)
        if token.type == "STRING":
            return text[1:-1].replace('""', '"')
        if token.type == "NUMBER":
            return int(text) if text.lstrip("-").isdigit() else float(text)
        return text


class _Pair:
    __slots__ = ("key", "value")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value


class DocParser:
    """Turns the text of a doc-comment into Swagger annotation objects."""

    def parse(self, comment: str, imports: Mapping[str, str], context: str) -> list[AbstractAnnotation]:
        text = strip_comment(comment)
        annotations: list[AbstractAnnotation] = []
        position = 0
        for match in _CANDIDATE.finditer(text):
            if match.start() < position:
                continue
            cls = _lookup(match.group(1), imports, context)
            if cls is None:
                continue
            end = match.end()
            rest = text[end:]
            if rest.lstrip().startswith("("):
                opening = end + len(rest) - len(rest.lstrip())
                end = _closing_paren(text, opening)
                if end == -1:
                    raise AnnotationError(f"[Syntax Error] Expected ')' to close @{match.group(1)}(", context)
            annotations.append(self._parse_annotation(text[match.start() : end], imports, context))
            position = end
        return annotations

    def _parse_annotation(self, source: str, imports: Mapping[str, str], context: str) -> AbstractAnnotation:
        try:
            tree = parser.parse(source)
            return AnnotationTransformer(imports, context).transform(tree)
        except VisitError as exc:
            if isinstance(exc.orig_exc, AnnotationError):
                raise exc.orig_exc from None
            raise AnnotationError(str(exc.orig_exc), context) from exc
        except LarkError as exc:
            raise AnnotationError(f"[Syntax Error] {exc}", context) from exc
