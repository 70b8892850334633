"""Tests for routing parsed annotations to their containers."""

from collections.abc import Mapping

import pytest

from swagger_scan.annotations import AbstractAnnotation, AnnotationError, Api, Model, Property, Resource
from swagger_scan.annotations.swagger import Parameter, Partial
from swagger_scan.core.context import ImportTable
from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.registry import ModelRegistry
from swagger_scan.core.router import CommentRouter, MethodTarget, PropertyTarget, TypeTarget

LOCATION = "Example.php on line 2"


class FakeParser:
    """Returns canned annotations instead of parsing the comment."""

    def __init__(self, *annotations: AbstractAnnotation, error: AnnotationError | None = None) -> None:
        self.annotations = list(annotations)
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def parse(self, comment: str, imports: Mapping[str, str], context: str) -> list[AbstractAnnotation]:
        self.calls.append((comment, context))
        if self.error is not None:
            raise self.error
        return self.annotations


@pytest.fixture
def registry(diagnostics: DiagnosticLog) -> ModelRegistry:
    return ModelRegistry("Example.php", diagnostics)


def _route(router: CommentRouter, target=None) -> list[AbstractAnnotation]:
    imports = ImportTable.for_file().snapshot()
    if target is None:
        return router.route("/** */", LOCATION, imports)
    return router.route("/** @var int */", LOCATION, imports, target)


class TestCommentRouter:
    def test_resource_becomes_current(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        resource = Resource(resource_path="/a")
        router = CommentRouter(FakeParser(resource), registry, diagnostics)
        _route(router)
        assert router.resource is resource
        assert registry.resources() == [resource]

    def test_api_attaches_to_current_resource(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        resource = Resource(resource_path="/a")
        router = CommentRouter(FakeParser(resource), registry, diagnostics)
        _route(router)
        api = Api(path="/a/b")
        router._parser = FakeParser(api)
        _route(router)
        assert resource.apis == [api]

    def test_api_without_resource(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        router = CommentRouter(FakeParser(Api(path="/x")), registry, diagnostics)
        _route(router)
        [record] = diagnostics.records
        assert record.severity == "notice"
        assert '"Resource"' in record.message
        assert record.location == LOCATION

    def test_property_without_model(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        router = CommentRouter(FakeParser(Property(name="a", type="int")), registry, diagnostics)
        _route(router)
        assert '"Model"' in diagnostics.records[0].message

    def test_property_attaches_to_current_model(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        model = Model(id="Pet")
        prop = Property(name="a", type="int")
        router = CommentRouter(FakeParser(model, prop), registry, diagnostics)
        _route(router)
        assert model.properties == [prop]

    def test_partial_declaration_is_stored(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        parameter = Parameter(partial_id="id", name="id")
        router = CommentRouter(FakeParser(parameter), registry, diagnostics)
        _route(router)
        assert registry.partials() == {"id": parameter}
        assert len(diagnostics) == 0

    def test_duplicate_partial_last_wins(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        first = Parameter(partial_id="id", name="first")
        second = Parameter(partial_id="id", name="second")
        router = CommentRouter(FakeParser(first, second), registry, diagnostics)
        _route(router)
        assert registry.partials()["id"] is second
        assert "not unique" in diagnostics.records[0].message

    def test_loose_partial_reference(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        router = CommentRouter(FakeParser(Partial(value="id")), registry, diagnostics)
        _route(router)
        assert "pointer to a partial" in diagnostics.records[0].message

    def test_unexpected_kind(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        router = CommentRouter(FakeParser(Parameter(name="x")), registry, diagnostics)
        _route(router)
        assert "Expecting" in diagnostics.records[0].message

    def test_parse_error_becomes_warning(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        error = AnnotationError("[Syntax Error] broken", LOCATION)
        router = CommentRouter(FakeParser(error=error), registry, diagnostics)
        assert _route(router) == []
        [record] = diagnostics.records
        assert record.severity == "warning"
        assert record.message == "[Syntax Error] broken"
        assert record.location == LOCATION

    def test_type_target_applies_defaults(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        resource = Resource()
        router = CommentRouter(FakeParser(resource), registry, diagnostics)
        _route(router, TypeTarget("App\\UserController"))
        assert resource.resource_path == "/user"

    def test_method_target_uses_current_resource(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        router = CommentRouter(FakeParser(Resource(resource_path="/user")), registry, diagnostics)
        _route(router)
        api = Api()
        router._parser = FakeParser(api)
        _route(router, MethodTarget("listAction"))
        assert api.path == "/user/list"

    def test_property_target_reads_var_tag(self, registry: ModelRegistry, diagnostics: DiagnosticLog) -> None:
        model = Model(id="Pet")
        prop = Property()
        router = CommentRouter(FakeParser(model, prop), registry, diagnostics)
        _route(router, PropertyTarget("age"))
        assert (prop.name, prop.type) == ("age", "int")
