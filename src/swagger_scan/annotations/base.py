from collections.abc import Iterable
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from swagger_scan.core.diagnostics import DiagnosticLog


class AnnotationError(Exception):
    """Raised when a doc-comment cannot be turned into annotations."""

    def __init__(self, message: str, context: str | None = None) -> None:
        super().__init__(f"{message} in {context}" if context else message)
        self.message = message
        self.context = context


class AnnotationKind(str, Enum):
    RESOURCE = "Resource"
    API = "Api"
    OPERATIONS = "Operations"
    OPERATION = "Operation"
    PARAMETERS = "Parameters"
    PARAMETER = "Parameter"
    RESPONSE_MESSAGES = "ResponseMessages"
    RESPONSE_MESSAGE = "ResponseMessage"
    MODEL = "Model"
    PROPERTY = "Property"
    ITEMS = "Items"
    PARTIAL = "Partial"


class AbstractAnnotation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    kind: ClassVar[AnnotationKind]
    # Nested annotation kind -> (field name, repeated)
    nested: ClassVar[dict[AnnotationKind, tuple[str, bool]]] = {}
    # Field filled by a lone positional scalar, e.g. @SWG\Partial("id")
    default_field: ClassVar[str | None] = None
    mandatory: ClassVar[tuple[str, ...]] = ()

    partial_id: str | None = Field(default=None, alias="partial", exclude=True)
    partials: list[str] = Field(default_factory=list, exclude=True)

    @property
    def tag(self) -> str:
        return f"@SWG\\{self.kind.value}()"

    def is_valid(self, diagnostics: DiagnosticLog, context: str) -> bool:
        valid = True
        for name in self.mandatory:
            if getattr(self, name) is None:
                alias = type(self).model_fields[name].alias or name
                diagnostics.warning(f'{self.tag} is missing "{alias}"', context)
                valid = False
        return valid

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AnnotationGroup(AbstractAnnotation):
    """Wrapper such as @SWG\\Operations(...) whose members are hoisted into the parent."""

    members: list[Any] = Field(default_factory=list)


def keep_valid(
    owner: AbstractAnnotation,
    children: Iterable[AbstractAnnotation],
    diagnostics: DiagnosticLog,
    context: str,
) -> list[Any]:
    valid: list[Any] = []
    for child in children:
        if child.is_valid(diagnostics, context):
            valid.append(child)
        else:
            diagnostics.notice(f"Skipped invalid {child.tag} inside {owner.tag}", context)
    return valid
