from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from swagger_scan.annotations import AbstractAnnotation, AnnotationGroup
from swagger_scan.core.config import get_exclude_dirs
from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.languages import is_supported_path
from swagger_scan.core.parser import SwaggerParser
from swagger_scan.models import ScanReport

# Bookkeeping fields that never travel with a partial.
_PARTIAL_FIELDS = frozenset({"partial_id", "partials"})


def collect_source_files(paths: Iterable[str | Path], exclude: Iterable[str] | None = None) -> list[Path]:
    """Expand files and directories into the sorted list of PHP files to scan."""
    excluded = set(get_exclude_dirs() if exclude is None else exclude)
    found: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {raw}")
        if path.is_file():
            found.append(path)
            continue
        for candidate in sorted(path.rglob("*")):
            relative = candidate.relative_to(path)
            if any(part in excluded for part in relative.parts[:-1]):
                continue
            if candidate.is_file() and is_supported_path(candidate):
                found.append(candidate)
    return found


def _copy(value: Any) -> Any:
    return value.model_copy(deep=True) if isinstance(value, AbstractAnnotation) else value


def _merge(target: AbstractAnnotation, partial: AbstractAnnotation) -> None:
    for name in partial.model_fields_set - _PARTIAL_FIELDS:
        value = getattr(partial, name)
        current = getattr(target, name)
        if isinstance(current, list) and isinstance(value, list):
            current.extend(_copy(item) for item in value)
        elif current is None:
            setattr(target, name, _copy(value))


def _children(annotation: AbstractAnnotation) -> list[AbstractAnnotation]:
    children: list[AbstractAnnotation] = []
    for field_name, repeated in set(type(annotation).nested.values()):
        value = getattr(annotation, field_name)
        if repeated:
            children.extend(value)
        elif value is not None:
            children.append(value)
    return children


def apply_partials(
    annotation: AbstractAnnotation,
    partials: Mapping[str, AbstractAnnotation],
    diagnostics: DiagnosticLog,
    location: str,
    _chain: tuple[str, ...] = (),
) -> None:
    """Expand ``@SWG\\Partial("id")`` references in ``annotation`` and below.

    A partial of the same kind fills the fields left unset; a partial of a
    kind the annotation can nest is inserted as a copy.
    """
    for partial_id in annotation.partials:
        partial = partials.get(partial_id)
        if partial is None:
            diagnostics.warning(f'Partial "{partial_id}" not found', location)
            continue
        if partial_id in _chain:
            diagnostics.warning(f'Partial "{partial_id}" references itself', location)
            continue
        if partial.kind is annotation.kind:
            _merge(annotation, partial)
            for nested_id in partial.partials:
                if nested_id not in annotation.partials:
                    annotation.partials.append(nested_id)
            continue
        target = type(annotation).nested.get(partial.kind)
        if target is None or isinstance(partial, AnnotationGroup):
            diagnostics.warning(
                f'Partial "{partial_id}" ({partial.tag}) is not allowed inside {annotation.tag}', location
            )
            continue
        copy = partial.model_copy(deep=True)
        copy.partial_id = None
        field_name, repeated = target
        if repeated:
            getattr(annotation, field_name).append(copy)
        else:
            setattr(annotation, field_name, copy)
        apply_partials(copy, partials, diagnostics, location, (*_chain, partial_id))
    annotation.partials = []
    for child in _children(annotation):
        apply_partials(child, partials, diagnostics, location, _chain)


def scan_paths(
    paths: Iterable[str | Path],
    exclude: Iterable[str] | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> ScanReport:
    """Scan every PHP file below ``paths`` with its own parser and merge the results."""
    log = diagnostics if diagnostics is not None else DiagnosticLog()
    files = collect_source_files(paths, exclude)
    report = ScanReport(files=[str(f) for f in files])
    parsed: list[tuple[str, SwaggerParser]] = []

    for file_path in files:
        location = str(file_path)
        parser = SwaggerParser(location)
        for partial_id, partial in parser.get_partials().items():
            if partial_id in report.partials:
                log.notice(f'partial="{partial_id}" is not unique. another was found', location)
            report.partials[partial_id] = partial
        parsed.append((location, parser))

    # Expand before validating so fields supplied by a partial count.
    for location, parser in parsed:
        for annotation in parser.collected():
            apply_partials(annotation, report.partials, parser.diagnostics, location)
        report.resources.extend(parser.get_resources())
        report.models.extend(parser.get_models())
        log.extend(parser.diagnostics)

    report.diagnostics = list(log.records)
    return report
