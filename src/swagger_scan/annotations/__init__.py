from swagger_scan.annotations.base import (
    AbstractAnnotation,
    AnnotationError,
    AnnotationGroup,
    AnnotationKind,
)
from swagger_scan.annotations.docparser import DocParser
from swagger_scan.annotations.swagger import (
    ANNOTATION_TYPES,
    Api,
    Items,
    Model,
    Operation,
    Operations,
    Parameter,
    Parameters,
    Partial,
    Property,
    Resource,
    ResponseMessage,
    ResponseMessages,
)

__all__ = [
    "ANNOTATION_TYPES",
    "AbstractAnnotation",
    "AnnotationError",
    "AnnotationGroup",
    "AnnotationKind",
    "Api",
    "DocParser",
    "Items",
    "Model",
    "Operation",
    "Operations",
    "Parameter",
    "Parameters",
    "Partial",
    "Property",
    "Resource",
    "ResponseMessage",
    "ResponseMessages",
]
