from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

ANNOTATION_NAMESPACE = "Swagger\\Annotations"
_BUILTIN_ALIAS = "swg"
NS_SEPARATOR = "\\"
_SWAGGER_PREFIX = "swagger" + NS_SEPARATOR


class ImportTable(Mapping[str, str]):
    """Alias to fully-qualified name, keyed case-insensitively."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            self.add(alias, target)

    @classmethod
    def for_file(cls) -> "ImportTable":
        """Fresh table for one source file, seeded with ``@SWG\\...`` support."""
        return cls({_BUILTIN_ALIAS: ANNOTATION_NAMESPACE})

    def add(self, alias: str, target: str) -> None:
        self._aliases[alias.lower()] = target.lstrip(NS_SEPARATOR)

    def snapshot(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._aliases))

    def __getitem__(self, alias: str) -> str:
        return self._aliases[alias.lower()]

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.lower() in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __repr__(self) -> str:
        return f"ImportTable({self._aliases!r})"


@dataclass
class ScanContext:
    """Per-file state of the walker.

    ``imports`` resolves class references and holds every ``use`` statement.
    ``annotation_imports`` is what the annotation parser sees: the built-in
    ``SWG`` alias plus imports that point into the ``Swagger`` namespace, so
    an unrelated ``use Other\\Thing as SWG;`` cannot hide ``@SWG\\...``.
    """

    namespace: str = ""
    imports: ImportTable = field(default_factory=ImportTable)
    annotation_imports: ImportTable = field(default_factory=ImportTable.for_file)
    type_name: str | None = None
    parent_type: str | None = None

    def qualify(self, name: str) -> str:
        return f"{self.namespace}{NS_SEPARATOR}{name}" if self.namespace else name

    def add_import(self, alias: str, target: str) -> None:
        self.imports.add(alias, target)
        if target.lstrip(NS_SEPARATOR).lower().startswith(_SWAGGER_PREFIX):
            self.annotation_imports.add(alias, target)


def basename(full_name: str) -> str:
    return full_name.rsplit(NS_SEPARATOR, 1)[-1]


def resolve_reference(name: str, namespace: str, imports: Mapping[str, str]) -> str:
    """Resolve a class reference the way PHP resolves names in a file.

    ``\\Foo\\Bar`` is fully qualified, ``Foo\\Bar`` substitutes an imported
    ``Foo`` prefix, ``Bar`` may itself be an alias. Anything else is relative
    to the active namespace.
    """
    if name.startswith(NS_SEPARATOR):
        return name[1:]
    lowered = {alias.lower(): target for alias, target in imports.items()}
    head, sep, rest = name.partition(NS_SEPARATOR)
    if head.lower() in lowered:
        target = lowered[head.lower()]
        return f"{target}{NS_SEPARATOR}{rest}" if sep else target
    if not namespace:
        return name
    return f"{namespace}{NS_SEPARATOR}{name}"
