from swagger_scan.annotations import AbstractAnnotation, Model, Resource
from swagger_scan.core.diagnostics import DiagnosticLog


class ModelRegistry:
    """Everything collected from one file; validated lazily on read."""

    def __init__(self, context: str, diagnostics: DiagnosticLog) -> None:
        self._context = context
        self._diagnostics = diagnostics
        self._resources: list[Resource] = []
        self._models: list[Model] = []
        self._partials: dict[str, AbstractAnnotation] = {}

    def add_resource(self, resource: Resource) -> None:
        self._resources.append(resource)

    def add_model(self, model: Model) -> None:
        self._models.append(model)

    def has_partial(self, partial_id: str) -> bool:
        return partial_id in self._partials

    def add_partial(self, partial_id: str, annotation: AbstractAnnotation) -> None:
        self._partials[partial_id] = annotation

    def resources(self) -> list[Resource]:
        self._resources = [r for r in self._resources if r.is_valid(self._diagnostics, self._context)]
        return list(self._resources)

    def models(self) -> list[Model]:
        self._models = [m for m in self._models if m.is_valid(self._diagnostics, self._context)]
        return list(self._models)

    def partials(self) -> dict[str, AbstractAnnotation]:
        return dict(self._partials)

    def collected(self) -> list[AbstractAnnotation]:
        """Resources and models as routed, before any validation."""
        return [*self._resources, *self._models]
