import re
from collections.abc import Iterable

from swagger_scan.annotations import AbstractAnnotation, Api, Model, Property, Resource
from swagger_scan.core.context import basename

_CONTROLLER_SUFFIX = re.compile(r"Controller$", re.IGNORECASE)
_ACTION_SUFFIX = re.compile(r"Action$", re.IGNORECASE)
_VAR_TAG = re.compile(r"@var\s+(\\?\w+(?:\\\w+)*)", re.IGNORECASE)

_TYPE_ALIASES = {
    "array": "Array",
    "byte": "byte",
    "boolean": "boolean",
    "bool": "boolean",
    "int": "int",
    "integer": "int",
    "long": "long",
    "float": "float",
    "double": "double",
    "string": "string",
    "date": "Date",
    "datetime": "Date",
    "\\datetime": "Date",
    "list": "List",
    "set": "Set",
}


def lcfirst(value: str) -> str:
    return value[:1].lower() + value[1:]


def resource_path_for(type_name: str) -> str:
    """``App\\UserController`` -> ``/user``."""
    return _CONTROLLER_SUFFIX.sub("", "/" + lcfirst(basename(type_name)))


def api_path_for(resource_path: str, method: str) -> str:
    return f"{resource_path}/{_ACTION_SUFFIX.sub('', method)}"


def normalize_type(value: str) -> str:
    return _TYPE_ALIASES.get(value.lower(), value)


def type_from_comment(comment: str) -> str | None:
    """Type named by the ``@var`` tag of a property doc-comment, if any."""
    match = _VAR_TAG.search(comment)
    if match is None:
        return None
    return normalize_type(match.group(1))


def apply_type_defaults(annotations: Iterable[AbstractAnnotation], type_name: str, parent: str | None) -> None:
    for annotation in annotations:
        if isinstance(annotation, Resource):
            if annotation.resource_path is None:
                annotation.resource_path = resource_path_for(type_name)
        elif isinstance(annotation, Model):
            annotation.php_class = type_name
            if annotation.id is None:
                annotation.id = basename(type_name)
            annotation.php_extends = parent


def apply_method_defaults(
    annotations: Iterable[AbstractAnnotation], method: str, resource: Resource | None
) -> None:
    for annotation in annotations:
        if not isinstance(annotation, Api):
            continue
        if annotation.path is None and resource is not None and resource.resource_path:
            annotation.path = api_path_for(resource.resource_path, method)
        for operation in annotation.operations:
            if operation.nickname is None:
                operation.nickname = method


def apply_property_defaults(annotations: Iterable[AbstractAnnotation], name: str, comment: str) -> None:
    for annotation in annotations:
        if not isinstance(annotation, Property):
            continue
        if annotation.name is None:
            annotation.name = name
        if annotation.type is None:
            annotation.type = type_from_comment(comment)
