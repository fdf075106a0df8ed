"""Tests for the F# generator output."""

import pytest

from tests.conftest import COLOR, POINT, SHAPE
from transgen.codegen.core.generator import generate_code
from transgen.codegen.core.schema import Field, Map, Option, Primitive, Struct, Vec
from transgen.codegen.languages.fsharp import FSharpGenerator


def generate(*schemas, name="example", config=None):
    result = generate_code(FSharpGenerator(name, "1.0.0", config), list(schemas))
    assert result.success, result.error_message
    return result.files


# ###############
# Declarations
# ###############


class TestStruct:
    def test_point(self) -> None:
        files = generate(POINT)
        assert files["Model/Point.fs"] == (
            '#nowarn "0058"\n'
            "namespace Example.Model\n"
            "type Point = {\n"
            "    X: int;\n"
            "    Y: int;\n"
            "} with\n"
            "    member this.writeTo(writer: System.IO.BinaryWriter) =\n"
            "        writer.Write this.X\n"
            "        writer.Write this.Y\n"
            "    static member readFrom(reader: System.IO.BinaryReader) = {\n"
            "        X = reader.ReadInt32()\n"
            "        Y = reader.ReadInt32()\n"
            "    }\n"
        )

    def test_empty_struct(self) -> None:
        code = generate(Struct("Nothing"))["Model/Nothing.fs"]
        assert "type Nothing = struct end with" in code
        assert "        ()\n" in code
        assert "static member readFrom(reader: System.IO.BinaryReader) = new Nothing()" in code

    def test_magic_is_written_but_not_read(self) -> None:
        header = Struct("Header", [Field("size", Primitive.INT32)], magic=0x1234)
        code = generate(header)["Model/Header.fs"]
        assert "        writer.Write 4660\n        writer.Write this.Size\n" in code
        assert "/// Does not read the magic value 4660 written by writeTo" in code
        reader = code.split("static member readFrom", 1)[1]
        assert reader.count("reader.Read") == 1

    def test_string_field(self) -> None:
        code = generate(Struct("Message", [Field("label", Primitive.STRING)]))["Model/Message.fs"]
        assert "let LabelData : byte[] = System.Text.Encoding.UTF8.GetBytes this.Label" in code
        assert "writer.Write LabelData.Length" in code
        assert (
            "Label = reader.ReadInt32() |> reader.ReadBytes |> System.Text.Encoding.UTF8.GetString"
            in code
        )

    def test_dependencies_referenced_by_name(self) -> None:
        files = generate(Struct("Line", [Field("start", POINT), Field("end", POINT)]))
        assert list(files) == ["Model/Point.fs", "Model/Line.fs"]
        code = files["Model/Line.fs"]
        assert "Start: Point;" in code
        assert "this.Start.writeTo writer" in code
        assert "End = Point.readFrom reader" in code


class TestEnum:
    def test_discriminants_are_positions(self) -> None:
        assert generate(COLOR)["Model/Color.fs"] == (
            '#nowarn "0058"\n'
            "namespace Example.Model\n"
            "type Color =\n"
            "    | Red = 0\n"
            "    | Green = 1\n"
            "    | Blue = 2\n"
        )

    def test_enum_field_written_as_int(self) -> None:
        code = generate(Struct("Pixel", [Field("color", COLOR)]))["Model/Pixel.fs"]
        assert "writer.Write (int this.Color)" in code
        assert "Color = reader.ReadInt32() |> enum" in code


class TestOneOf:
    @pytest.fixture
    def code(self) -> str:
        return generate(SHAPE)["Model/Shape.fs"]

    def test_variant_records(self, code: str) -> None:
        assert "type ShapeCircle = {" in code
        assert "type ShapeRectangle = {" in code
        assert "type ShapeEmpty = struct end with" in code
        assert "new ShapeEmpty()" in code

    def test_variants_write_their_tag_first(self, code: str) -> None:
        circle = code.split("type ShapeCircle", 1)[1]
        writer = circle.split("member this.writeTo(writer: System.IO.BinaryWriter) =\n", 1)[1]
        assert writer.startswith("        writer.Write 0\n")
        assert "        writer.Write 2\n" in code.split("type ShapeEmpty", 1)[1]

    def test_union_type(self, code: str) -> None:
        assert "type Shape =\n" in code
        assert "    | Circle of ShapeCircle\n" in code
        assert "            | Rectangle value -> value.writeTo writer\n" in code
        assert "            | 0 -> Circle (ShapeCircle.readFrom reader)\n" in code
        assert "            | 2 -> Empty (ShapeEmpty.readFrom reader)\n" in code
        assert '            | x -> failwith (sprintf "Unexpected tag value %d" x)\n' in code

    def test_variants_precede_union(self, code: str) -> None:
        assert code.index("type ShapeEmpty") < code.index("type Shape =")


# ###############
# Types and naming
# ###############


class TestTypes:
    @pytest.mark.parametrize(
        "schema,expected",
        [
            (Primitive.BOOL, "bool"),
            (Primitive.INT64, "long"),
            (Primitive.FLOAT32, "single"),
            (Primitive.FLOAT64, "double"),
            (Option(Primitive.STRING), "option<string>"),
            (Vec(Primitive.INT32), "int[]"),
            (Vec(Vec(Primitive.INT32)), "int[][]"),
            (Vec(Option(POINT)), "option<Point>[]"),
            (Map(Primitive.STRING, Option(POINT)), "Map<string, option<Point>>"),
            (SHAPE, "Shape"),
        ],
    )
    def test_type_ref(self, schema, expected: str) -> None:
        assert FSharpGenerator("example", "1.0.0").type_ref(schema) == expected

    def test_substitutions(self) -> None:
        files = generate(Struct("Int32Params", [Field("float64_value", Primitive.FLOAT64)]))
        code = files["Model/IntParameters.fs"]
        assert "type IntParameters = {" in code
        assert "DoubleValue: double;" in code

    def test_config_substitutions(self) -> None:
        files = generate(POINT, config={"substitutions": {"Point": "Vertex"}})
        assert "type Vertex = {" in files["Model/Vertex.fs"]

    def test_namespace_and_model_dir(self) -> None:
        files = generate(POINT, name="my-game", config={"model_dir": "Types"})
        assert "namespace MyGame.Types\n" in files["Types/Point.fs"]


class TestContainers:
    @pytest.fixture
    def code(self) -> str:
        bag = Struct(
            "Bag",
            [
                Field("items", Vec(Primitive.INT32)),
                Field("index", Map(Primitive.STRING, Primitive.INT64)),
                Field("note", Option(Primitive.STRING)),
            ],
        )
        return generate(bag)["Model/Bag.fs"]

    def test_vec(self, code: str) -> None:
        assert "writer.Write this.Items.Length\n" in code
        assert "this.Items |> Array.iter (fun value ->\n" in code
        assert (
            "Items = [|for _ in 1 .. reader.ReadInt32() do\n"
            "            yield reader.ReadInt32()\n"
            "        |]\n"
        ) in code

    def test_map(self, code: str) -> None:
        assert "writer.Write this.Index.Count\n" in code
        assert "this.Index |> Map.iter (fun key value ->\n" in code
        assert "            let key = reader.ReadInt32() |> reader.ReadBytes" in code
        assert "            let value = reader.ReadInt64()\n" in code
        assert "            yield (key, value)\n        ] |> Map.ofList\n" in code

    def test_option(self, code: str) -> None:
        assert (
            "        match this.Note with\n"
            "            | Some value ->\n"
            "                writer.Write true\n"
        ) in code
        assert "            | None -> writer.Write false\n" in code
        assert "Note = match reader.ReadBoolean() with\n" in code
        assert "            | false -> None\n" in code
