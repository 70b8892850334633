from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from swagger_scan.annotations import AbstractAnnotation, AnnotationError, AnnotationKind, Api, Model, Property, Resource
from swagger_scan.core.defaults import apply_method_defaults, apply_property_defaults, apply_type_defaults
from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.registry import ModelRegistry


class AnnotationParser(Protocol):
    def parse(self, comment: str, imports: Mapping[str, str], context: str) -> list[AbstractAnnotation]: ...


@dataclass(frozen=True)
class UnattachedTarget:
    pass


@dataclass(frozen=True)
class TypeTarget:
    full_name: str
    parent: str | None = None


@dataclass(frozen=True)
class PropertyTarget:
    name: str


@dataclass(frozen=True)
class MethodTarget:
    name: str


CommentTarget = UnattachedTarget | TypeTarget | PropertyTarget | MethodTarget


class CommentRouter:
    """Parses doc-comments and files the annotations into the registry.

    The current resource and model are the containers that subsequent
    ``@SWG\\Api`` and ``@SWG\\Property`` annotations attach to.
    """

    def __init__(self, parser: AnnotationParser, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        self._parser = parser
        self._registry = registry
        self._diagnostics = diagnostics
        self.resource: Resource | None = None
        self.model: Model | None = None

    def route(
        self,
        comment: str,
        location: str,
        imports: Mapping[str, str],
        target: CommentTarget = UnattachedTarget(),
    ) -> list[AbstractAnnotation]:
        try:
            annotations = self._parser.parse(comment, imports, location)
        except AnnotationError as exc:
            self._diagnostics.warning(exc.message, location)
            return []

        for annotation in annotations:
            self._classify(annotation, location)

        if isinstance(target, TypeTarget):
            apply_type_defaults(annotations, target.full_name, target.parent)
        elif isinstance(target, MethodTarget):
            apply_method_defaults(annotations, target.name, self.resource)
        elif isinstance(target, PropertyTarget):
            apply_property_defaults(annotations, target.name, comment)
        return annotations

    def _classify(self, annotation: AbstractAnnotation, location: str) -> None:
        kind = annotation.kind
        name = annotation.tag
        if kind is AnnotationKind.PARTIAL:
            self._diagnostics.notice(
                f'Unexpected "{name}", @SWG\\Partial is a pointer to a partial and should be inside another annotation',
                location,
            )
        elif annotation.partial_id is not None:
            if self._registry.has_partial(annotation.partial_id):
                self._diagnostics.notice(
                    f'partial="{annotation.partial_id}" is not unique. another was found', location
                )
            self._registry.add_partial(annotation.partial_id, annotation)
        elif kind is AnnotationKind.RESOURCE:
            assert isinstance(annotation, Resource)
            self.resource = annotation
            self._registry.add_resource(annotation)
        elif kind is AnnotationKind.MODEL:
            assert isinstance(annotation, Model)
            self.model = annotation
            self._registry.add_model(annotation)
        elif kind is AnnotationKind.API:
            assert isinstance(annotation, Api)
            if self.resource is not None:
                self.resource.apis.append(annotation)
            else:
                self._diagnostics.notice(
                    f'Unexpected "{name}", should be inside or after a "Resource" declaration', location
                )
        elif kind is AnnotationKind.PROPERTY:
            assert isinstance(annotation, Property)
            if self.model is not None:
                self.model.properties.append(annotation)
            else:
                self._diagnostics.notice(
                    f'Unexpected "{name}", should be inside or after a "Model" declaration', location
                )
        else:
            self._diagnostics.notice(
                f'Unexpected "{name}", Expecting a "Resource", "Model" or partial declaration', location
            )
