from swagger_scan.annotations import AbstractAnnotation, DocParser, Model, Resource
from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.lexer import Token, tokenize, tokenize_file
from swagger_scan.core.registry import ModelRegistry
from swagger_scan.core.router import AnnotationParser, CommentRouter
from swagger_scan.core.walker import StructuralWalker


class SwaggerParser:
    """Extracts Swagger resources, models and partials from one PHP file.

    The file is scanned once on construction. Each instance owns its context,
    registry and diagnostics, so files can be parsed independently.
    """

    def __init__(
        self,
        path: str,
        tokens: list[Token] | None = None,
        diagnostics: DiagnosticLog | None = None,
        annotation_parser: AnnotationParser | None = None,
    ) -> None:
        self.path = path
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._registry = ModelRegistry(path, self.diagnostics)
        self._router = CommentRouter(annotation_parser or DocParser(), self._registry, self.diagnostics)
        walker = StructuralWalker(path, self._router)
        walker.walk(tokens if tokens is not None else tokenize_file(path))

    @classmethod
    def from_source(
        cls, source: str, path: str = "<string>", diagnostics: DiagnosticLog | None = None
    ) -> "SwaggerParser":
        return cls(path, tokens=tokenize(source.encode("utf-8")), diagnostics=diagnostics)

    def get_resources(self) -> list[Resource]:
        return self._registry.resources()

    def get_models(self) -> list[Model]:
        return self._registry.models()

    def get_partials(self) -> dict[str, AbstractAnnotation]:
        return self._registry.partials()

    def collected(self) -> list[AbstractAnnotation]:
        """Unvalidated resources and models, for expanding partials before the views are read."""
        return self._registry.collected()
