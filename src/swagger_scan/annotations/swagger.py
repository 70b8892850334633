"""The Swagger 1.2 annotation kinds recognised inside doc-comments."""

from typing import Any, ClassVar

from pydantic import Field

from swagger_scan.annotations.base import AbstractAnnotation, AnnotationGroup, AnnotationKind, keep_valid
from swagger_scan.core.diagnostics import DiagnosticLog


class Items(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.ITEMS
    default_field: ClassVar[str | None] = "type"

    type: str | None = None
    ref: str | None = Field(default=None, alias="$ref")


class Partial(AbstractAnnotation):
    """Reference to a partial declared elsewhere with ``partial="id"``."""

    kind: ClassVar[AnnotationKind] = AnnotationKind.PARTIAL
    default_field: ClassVar[str | None] = "value"

    value: str | None = None


class Parameter(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.PARAMETER
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.ITEMS: ("items", False)}
    mandatory: ClassVar[tuple[str, ...]] = ("name",)

    name: str | None = None
    description: str | None = None
    param_type: str | None = None
    type: str | None = None
    format: str | None = None
    items: Items | None = None
    is_required: bool | None = Field(default=None, alias="required")
    allow_multiple: bool | None = None
    default_value: Any = None
    enum: list[Any] | None = None
    minimum: Any = None
    maximum: Any = None


class Parameters(AnnotationGroup):
    kind: ClassVar[AnnotationKind] = AnnotationKind.PARAMETERS
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.PARAMETER: ("members", True)}


class ResponseMessage(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.RESPONSE_MESSAGE
    mandatory: ClassVar[tuple[str, ...]] = ("code", "message")

    code: int | None = None
    message: str | None = None
    response_model: str | None = None


class ResponseMessages(AnnotationGroup):
    kind: ClassVar[AnnotationKind] = AnnotationKind.RESPONSE_MESSAGES
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {
        AnnotationKind.RESPONSE_MESSAGE: ("members", True),
    }


class Operation(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.OPERATION
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {
        AnnotationKind.PARAMETER: ("parameters", True),
        AnnotationKind.PARAMETERS: ("parameters", True),
        AnnotationKind.RESPONSE_MESSAGE: ("response_messages", True),
        AnnotationKind.RESPONSE_MESSAGES: ("response_messages", True),
        AnnotationKind.ITEMS: ("items", False),
    }
    mandatory: ClassVar[tuple[str, ...]] = ("method", "nickname")

    method: str | None = None
    summary: str | None = None
    notes: str | None = None
    nickname: str | None = None
    type: str | None = None
    items: Items | None = None
    produces: list[str] | None = None
    consumes: list[str] | None = None
    deprecated: bool | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    response_messages: list[ResponseMessage] = Field(default_factory=list)

    def is_valid(self, diagnostics: DiagnosticLog, context: str) -> bool:
        valid = super().is_valid(diagnostics, context)
        self.parameters = keep_valid(self, self.parameters, diagnostics, context)
        self.response_messages = keep_valid(self, self.response_messages, diagnostics, context)
        return valid


class Operations(AnnotationGroup):
    kind: ClassVar[AnnotationKind] = AnnotationKind.OPERATIONS
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.OPERATION: ("members", True)}


class Api(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.API
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {
        AnnotationKind.OPERATION: ("operations", True),
        AnnotationKind.OPERATIONS: ("operations", True),
    }
    mandatory: ClassVar[tuple[str, ...]] = ("path",)

    path: str | None = None
    description: str | None = None
    operations: list[Operation] = Field(default_factory=list)

    def is_valid(self, diagnostics: DiagnosticLog, context: str) -> bool:
        valid = super().is_valid(diagnostics, context)
        self.operations = keep_valid(self, self.operations, diagnostics, context)
        return valid


class Resource(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.RESOURCE
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.API: ("apis", True)}
    mandatory: ClassVar[tuple[str, ...]] = ("resource_path",)

    swagger_version: str | None = None
    api_version: str | None = None
    base_path: str | None = None
    resource_path: str | None = None
    description: str | None = None
    produces: list[str] | None = None
    consumes: list[str] | None = None
    apis: list[Api] = Field(default_factory=list)

    def is_valid(self, diagnostics: DiagnosticLog, context: str) -> bool:
        valid = super().is_valid(diagnostics, context)
        self.apis = keep_valid(self, self.apis, diagnostics, context)
        return valid


class Property(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.PROPERTY
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.ITEMS: ("items", False)}
    mandatory: ClassVar[tuple[str, ...]] = ("name", "type")

    name: str | None = None
    type: str | None = None
    format: str | None = None
    description: str | None = None
    items: Items | None = None
    is_required: bool | None = Field(default=None, alias="required")
    enum: list[Any] | None = None
    minimum: Any = None
    maximum: Any = None


class Model(AbstractAnnotation):
    kind: ClassVar[AnnotationKind] = AnnotationKind.MODEL
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {AnnotationKind.PROPERTY: ("properties", True)}
    mandatory: ClassVar[tuple[str, ...]] = ("id",)

    id: str | None = None
    description: str | None = None
    sub_types: list[str] | None = None
    discriminator: str | None = None
    properties: list[Property] = Field(default_factory=list)
    php_class: str | None = Field(default=None, exclude=True)
    php_extends: str | None = Field(default=None, exclude=True)

    def is_valid(self, diagnostics: DiagnosticLog, context: str) -> bool:
        valid = super().is_valid(diagnostics, context)
        self.properties = keep_valid(self, self.properties, diagnostics, context)
        return valid


ANNOTATION_TYPES: dict[str, type[AbstractAnnotation]] = {
    cls.kind.value.lower(): cls
    for cls in (
        Resource,
        Api,
        Operations,
        Operation,
        Parameters,
        Parameter,
        ResponseMessages,
        ResponseMessage,
        Model,
        Property,
        Items,
        Partial,
    )
}
