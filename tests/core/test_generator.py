"""Tests for the generator driver contract and generate_code."""

import pytest

from tests.conftest import COLOR, POINT, SHAPE
from transgen.codegen.core.generator import (
    GenerationResult,
    GeneratorError,
    generate_code,
)
from transgen.codegen.core.schema import (
    Field,
    Map,
    OneOf,
    Option,
    Primitive,
    Struct,
    Vec,
)
from transgen.codegen.languages.fsharp import FSharpGenerator


class TestDriver:
    def test_visit_inserts_one_file_per_declaration(self) -> None:
        generator = FSharpGenerator("example", "1.0.0")
        generator.visit(POINT)
        generator.visit(COLOR)
        generator.visit(SHAPE)
        assert set(generator.finish()) == {"Model/Point.fs", "Model/Color.fs", "Model/Shape.fs"}

    @pytest.mark.parametrize(
        "schema",
        [Primitive.BOOL, Primitive.STRING, Option(POINT), Vec(Primitive.INT32), Map(Primitive.STRING, POINT)],
    )
    def test_visit_non_declaration_is_noop(self, schema) -> None:
        generator = FSharpGenerator("example", "1.0.0")
        generator.visit(schema)
        assert generator.finish() == {}

    def test_visit_unknown_node(self) -> None:
        with pytest.raises(GeneratorError, match="Unsupported schema"):
            FSharpGenerator("example", "1.0.0").visit("Point")

    def test_visit_after_finish(self) -> None:
        generator = FSharpGenerator("example", "1.0.0")
        generator.finish()
        with pytest.raises(GeneratorError, match="already finished"):
            generator.visit(POINT)

    def test_duplicate_declaration_rejected(self) -> None:
        generator = FSharpGenerator("example", "1.0.0")
        generator.visit(POINT)
        with pytest.raises(GeneratorError, match="Duplicate output file"):
            generator.visit(Struct("point"))

    def test_runs_are_independent(self) -> None:
        first = FSharpGenerator("first", "1.0.0")
        second = FSharpGenerator("second", "1.0.0")
        first.visit(POINT)
        assert second.finish() == {}
        assert "namespace First.Model" in first.finish()["Model/Point.fs"]

    def test_format_code_collapses_blank_lines(self) -> None:
        generator = FSharpGenerator("example", "1.0.0")
        assert generator.format_code("a  \n\n\n\n\nb\n") == "a\n\n\nb\n"


class TestGenerateCode:
    def test_collects_dependencies(self) -> None:
        line = Struct("Line", [Field("start", POINT), Field("end", POINT)])
        result = generate_code(FSharpGenerator("example", "1.0.0"), [line])
        assert result.success
        assert list(result.files) == ["Model/Point.fs", "Model/Line.fs"]
        assert result.metadata["declarations"] == ["Point", "Line"]
        assert result.metadata["language"] == "fsharp"
        assert result.metadata["file_count"] == 2

    def test_warnings_for_empty_declarations(self) -> None:
        result = generate_code(
            FSharpGenerator("example", "1.0.0"), [Struct("Nothing"), OneOf("Never", [])]
        )
        assert result.success
        assert any("Nothing" in warning for warning in result.warnings)
        assert any("Never" in warning for warning in result.warnings)

    def test_config_warnings_reported(self) -> None:
        result = generate_code(FSharpGenerator("example", "1.0.0", {"model_dir": "/abs"}), [POINT])
        assert result.success
        assert result.warnings == ["model_dir must be a relative path: '/abs'"]

    def test_failure_returns_no_files(self) -> None:
        clash = Struct(
            "Holder",
            [Field("a", Struct("Params")), Field("b", Struct("Parameters", [Field("z", Primitive.BOOL)]))],
        )
        result = generate_code(FSharpGenerator("example", "1.0.0"), [clash])
        assert not result.success
        assert result.files == {}
        assert isinstance(result.exception, GeneratorError)
        assert "Duplicate output file" in result.error_message

    def test_error_result(self) -> None:
        error = ValueError("boom")
        result = GenerationResult.error("failed", error)
        assert not result.success
        assert result.exception is error
        assert result.error_message == "failed"
