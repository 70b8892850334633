"""End-to-end tests: PHP source in, resources, models and partials out."""

from collections.abc import Callable

from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.parser import SwaggerParser

ParsePhp = Callable[[str], SwaggerParser]

USER_CONTROLLER = r"""
    namespace App\Http;

    use Swagger\Annotations as SWG;

    /**
     * @SWG\Resource(basePath="http://example.com/api")
     */
    class UserController extends BaseController
    {
        /**
         * @SWG\Api(
         *   @SWG\Operation(method="GET", summary="List users")
         * )
         */
        public function listAction()
        {
            return [];
        }
    }
"""


class TestEmptySources:
    def test_file_without_doc_comments(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parser = parse_php(
            """
            // just a comment
            /* and a block comment */
            class Plain { public $x; }
            """
        )
        assert parser.get_resources() == []
        assert parser.get_models() == []
        assert parser.get_partials() == {}
        assert len(diagnostics) == 0

    def test_empty_file(self, parse_php: ParsePhp) -> None:
        parser = parse_php("")
        assert parser.get_resources() == []
        assert parser.get_models() == []
        assert parser.get_partials() == {}


class TestResources:
    def test_resource_path_from_controller(self, parse_php: ParsePhp) -> None:
        [resource] = parse_php(USER_CONTROLLER).get_resources()
        assert resource.resource_path == "/user"
        assert resource.base_path == "http://example.com/api"

    def test_resource_path_keeps_inner_casing(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Resource() */
            class FooBarController {}
            """
        )
        assert [r.resource_path for r in parser.get_resources()] == ["/fooBar"]

    def test_api_path_from_method(self, parse_php: ParsePhp) -> None:
        [resource] = parse_php(USER_CONTROLLER).get_resources()
        [api] = resource.apis
        assert api.path == "/user/list"

    def test_nickname_is_raw_method_name(self, parse_php: ParsePhp) -> None:
        [resource] = parse_php(USER_CONTROLLER).get_resources()
        [operation] = resource.apis[0].operations
        assert operation.nickname == "listAction"
        assert operation.summary == "List users"

    def test_abstract_class(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Resource() */
            abstract class StoreController {}
            """
        )
        assert [r.resource_path for r in parser.get_resources()] == ["/store"]

    def test_comment_before_final_class_is_not_bound(
        self, parse_php: ParsePhp, diagnostics: DiagnosticLog
    ) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Resource() */
            final class StoreController {}
            """
        )
        assert parser.get_resources() == []
        assert any('missing "resourcePath"' in r.message for r in diagnostics.records)

    def test_api_without_resource(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parser = parse_php(
            r"""
            class Loose
            {
                /** @SWG\Api(path="/loose", @SWG\Operation(method="GET")) */
                public function show() {}
            }
            """
        )
        assert parser.get_resources() == []
        [record] = diagnostics.records
        assert record.severity == "notice"
        assert "Resource" in record.message
        assert record.location == "Loose->show(...) in Example.php on line 4"

    def test_static_method_and_reference_return(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Resource() */
            class PetController
            {
                /** @SWG\Api(@SWG\Operation(method="POST")) */
                public static function createAction() {}

                /** @SWG\Api(@SWG\Operation(method="GET")) */
                public function &findAction() {}
            }
            """
        )
        [resource] = parser.get_resources()
        assert [api.path for api in resource.apis] == ["/pet/create", "/pet/find"]
        assert [api.operations[0].nickname for api in resource.apis] == ["createAction", "findAction"]


class TestModels:
    def test_model_id_from_class(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Model() */
            class Pet {}
            """
        )
        assert [m.id for m in parser.get_models()] == ["Pet"]

    def test_model_id_is_basename(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            namespace App\Models;

            /** @SWG\Model() */
            class Pet {}
            """
        )
        [model] = parser.get_models()
        assert model.id == "Pet"
        assert model.php_class == "App\\Models\\Pet"

    def test_parent_class_is_resolved(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            namespace App\Models;

            use Domain\Base as Animal;

            /** @SWG\Model() */
            class Pet extends Animal {}

            /** @SWG\Model() */
            class Cat extends Pet {}

            /** @SWG\Model() */
            class Dog extends \Vendor\Dog {}
            """
        )
        assert [m.php_extends for m in parser.get_models()] == ["Domain\\Base", "App\\Models\\Pet", "Vendor\\Dog"]

    def test_property_types_from_var_tag(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Model() */
            class Pet
            {
                /**
                 * @var int
                 * @SWG\Property()
                 */
                public $id;

                /**
                 * @var INTEGER
                 * @SWG\Property()
                 */
                protected $age;

                /**
                 * @var Foo
                 * @SWG\Property()
                 */
                private $owner;
            }
            """
        )
        [model] = parser.get_models()
        assert [(p.name, p.type) for p in model.properties] == [("id", "int"), ("age", "int"), ("owner", "Foo")]

    def test_static_var_and_typed_properties(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Model(id="Pet") */
            class Pet
            {
                /** @SWG\Property(type="string") */
                public static $kind;

                /** @SWG\Property(type="string") */
                var $name;

                /** @SWG\Property(type="int") */
                public ?int $age;
            }
            """
        )
        [model] = parser.get_models()
        assert [p.name for p in model.properties] == ["kind", "name", "age"]

    def test_property_without_type_is_dropped(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Model() */
            class Pet
            {
                /** @SWG\Property() */
                public $untyped;
            }
            """
        )
        [model] = parser.get_models()
        assert model.properties == []
        assert any('missing "type"' in r.message for r in diagnostics.records)


class TestPartials:
    def test_duplicate_partial_second_wins(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Parameter(partial="id", name="id") */
            /** @SWG\Parameter(partial="id", name="petId") */
            """
        )
        partials = parser.get_partials()
        assert list(partials) == ["id"]
        assert partials["id"].name == "petId"
        assert any("not unique" in r.message for r in diagnostics.records)


class TestImports:
    def test_aliased_annotation_namespace(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            use Swagger\Annotations\Model, Swagger\Annotations\Property as Prop;

            /**
             * @Model(id="Tag")
             * @Prop(name="label", type="string")
             */
            class Tag {}
            """
        )
        [model] = parser.get_models()
        assert model.id == "Tag"
        assert [p.name for p in model.properties] == ["label"]

    def test_unrelated_swg_import_keeps_annotations(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            use Other\Thing as SWG;

            /** @SWG\Model(id="A") */
            class A extends SWG {}
            """
        )
        [model] = parser.get_models()
        assert model.id == "A"
        assert model.php_extends == "Other\\Thing"

    def test_unimported_annotations_are_ignored(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parser = parse_php(
            r"""
            /** @Model(id="Tag") */
            class Tag {}
            """
        )
        assert parser.get_models() == []
        assert len(diagnostics) == 0


class TestDiagnostics:
    def test_parse_error_location_names_the_class(self, parse_php: ParsePhp, diagnostics: DiagnosticLog) -> None:
        parse_php(
            r"""
            /** @SWG\Model(id=) */
            class Pet {}
            """
        )
        [record] = diagnostics.records
        assert record.severity == "warning"
        assert record.location == "Pet in Example.php on line 2"

    def test_parse_error_location_names_static_property(
        self, parse_php: ParsePhp, diagnostics: DiagnosticLog
    ) -> None:
        parse_php(
            r"""
            /** @SWG\Model(id="Pet") */
            class Pet
            {
                /** @SWG\Property(name=) */
                public static $count;
            }
            """
        )
        [record] = diagnostics.records
        assert record.location == "Pet::$count in Example.php on line 5"

    def test_scan_continues_after_error(self, parse_php: ParsePhp) -> None:
        parser = parse_php(
            r"""
            /** @SWG\Nope() */
            class Broken {}

            /** @SWG\Model() */
            class Pet {}
            """
        )
        assert [m.id for m in parser.get_models()] == ["Pet"]


class TestIdempotence:
    def test_views_are_stable(self, parse_php: ParsePhp) -> None:
        parser = parse_php(USER_CONTROLLER)
        assert parser.get_resources() == parser.get_resources()
        assert parser.get_models() == parser.get_models()
        assert parser.get_partials() == parser.get_partials()


class TestFiles:
    def test_parse_file_from_disk(self, write_php: Callable[[str, str], object]) -> None:
        path = write_php("app/UserController.php", USER_CONTROLLER)
        parser = SwaggerParser(str(path))
        [resource] = parser.get_resources()
        assert resource.resource_path == "/user"
