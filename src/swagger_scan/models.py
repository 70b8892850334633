from typing import Any

from pydantic import BaseModel, Field, SerializeAsAny

from swagger_scan.annotations import AbstractAnnotation, Model, Resource
from swagger_scan.core.diagnostics import Diagnostic


class ScanReport(BaseModel):
    files: list[str] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    models: list[Model] = Field(default_factory=list)
    partials: dict[str, SerializeAsAny[AbstractAnnotation]] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
