"""
F# code generator implementation.

Emits one F# source file per declaration: records for structs,
discriminated unions for one_of and integer-backed enums, each with
``writeTo``/``readFrom`` members over ``System.IO.BinaryWriter`` and
``System.IO.BinaryReader``.
"""

from pathlib import Path
from typing import Optional, Tuple

from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import Name
from ...core.schema import (
    Enumeration,
    Map,
    OneOf,
    Option,
    Primitive,
    Schema,
    Struct,
    Vec,
)
from ...core.writer import Writer
from .naming import (
    FSHARP_PRIMITIVE_TYPES,
    FSHARP_READ_METHODS,
    FSHARP_SUBSTITUTIONS,
    var_name,
)


class FSharpGenerator(CodeGenerator):
    """Code generator for F# records and unions with binary codecs."""

    substitutions = FSHARP_SUBSTITUTIONS

    @property
    def language_name(self) -> str:
        return "fsharp"

    @property
    def file_extension(self) -> str:
        return ".fs"

    def get_template_directory(self) -> Optional[Path]:
        return Path(__file__).parent / "templates"

    @property
    def main_namespace(self) -> str:
        return Name(self.name).camel_case(self.conv)

    def file_name(self, name: Name) -> str:
        return f"{self.config.model_dir}/{self.type_name(name)}{self.file_extension}"

    def _start_file(self) -> Writer:
        writer = self.new_writer()
        self.write_template(
            writer,
            "header.fs.j2",
            {
                "namespace": self.main_namespace,
                "model_namespace": self.config.model_dir.replace("/", "."),
            },
        )
        return writer

    # Type names

    def type_ref(self, schema: Schema) -> str:
        """F# type expression for a field of ``schema``."""
        return self._type_ref_prearray(schema) + self._type_post_array(schema)

    def _type_ref_prearray(self, schema: Schema) -> str:
        if isinstance(schema, Primitive):
            return FSHARP_PRIMITIVE_TYPES[schema]
        elif isinstance(schema, Struct):
            return self.type_name(schema.name)
        elif isinstance(schema, (OneOf, Enumeration)):
            return self.type_name(schema.base_name)
        elif isinstance(schema, Option):
            return f"option<{self.type_ref(schema.inner)}>"
        elif isinstance(schema, Vec):
            return self._type_ref_prearray(schema.inner)
        elif isinstance(schema, Map):
            return f"Map<{self.type_ref(schema.key)}, {self.type_ref(schema.value)}>"
        raise GeneratorError(f"Unsupported schema: {schema!r}")

    def _type_post_array(self, schema: Schema) -> str:
        if isinstance(schema, Vec):
            return "[]" + self._type_post_array(schema.inner)
        return ""

    # Codec

    def write_value(self, writer: Writer, value: str, schema: Schema):
        """Emit statements writing ``value`` of type ``schema``."""
        if isinstance(schema, Primitive):
            if schema == Primitive.STRING:
                data_var = f"{var_name(value)}Data"
                writer.write_line(
                    f"let {data_var} : byte[] = System.Text.Encoding.UTF8.GetBytes {value}"
                )
                writer.write_line(f"writer.Write {data_var}.Length")
                writer.write_line(f"writer.Write {data_var}")
            else:
                writer.write_line(f"writer.Write {value}")
        elif isinstance(schema, (Struct, OneOf)):
            writer.write_line(f"{value}.writeTo writer")
        elif isinstance(schema, Enumeration):
            writer.write_line(f"writer.Write (int {value})")
        elif isinstance(schema, Option):
            writer.write_line(f"match {value} with")
            with writer.indented():
                writer.write_line("| Some value ->")
                with writer.indented():
                    writer.write_line("writer.Write true")
                    self.write_value(writer, "value", schema.inner)
                writer.write_line("| None -> writer.Write false")
        elif isinstance(schema, Vec):
            writer.write_line(f"writer.Write {value}.Length")
            writer.write_line(f"{value} |> Array.iter (fun value ->")
            with writer.indented():
                self.write_value(writer, "value", schema.inner)
            writer.write_line(")")
        elif isinstance(schema, Map):
            writer.write_line(f"writer.Write {value}.Count")
            writer.write_line(f"{value} |> Map.iter (fun key value ->")
            with writer.indented():
                self.write_value(writer, "key", schema.key)
                self.write_value(writer, "value", schema.value)
            writer.write_line(")")
        else:
            raise GeneratorError(f"Unsupported schema: {schema!r}")

    def read_value(self, writer: Writer, schema: Schema):
        """Emit an expression reading a value of type ``schema``.

        The expression continues the current line, so callers may write a
        prefix such as ``X = `` first.
        """
        if isinstance(schema, Primitive):
            if schema == Primitive.STRING:
                writer.write_line(
                    "reader.ReadInt32() |> reader.ReadBytes |> System.Text.Encoding.UTF8.GetString"
                )
            else:
                writer.write_line(f"reader.{FSHARP_READ_METHODS[schema]}()")
        elif isinstance(schema, Struct):
            writer.write_line(f"{self.type_name(schema.name)}.readFrom reader")
        elif isinstance(schema, OneOf):
            writer.write_line(f"{self.type_name(schema.base_name)}.readFrom reader")
        elif isinstance(schema, Enumeration):
            writer.write_line("reader.ReadInt32() |> enum")
        elif isinstance(schema, Option):
            writer.write_line("match reader.ReadBoolean() with")
            with writer.indented():
                writer.write_line("| true ->")
                with writer.indented():
                    writer.write_line("Some(")
                    with writer.indented():
                        self.read_value(writer, schema.inner)
                    writer.write_line(")")
                writer.write_line("| false -> None")
        elif isinstance(schema, Vec):
            writer.write_line("[|for _ in 1 .. reader.ReadInt32() do")
            with writer.indented():
                writer.write("yield ")
                self.read_value(writer, schema.inner)
            writer.write_line("|]")
        elif isinstance(schema, Map):
            writer.write_line("[for _ in 1 .. reader.ReadInt32() do")
            with writer.indented():
                writer.write("let key = ")
                self.read_value(writer, schema.key)
                writer.write("let value = ")
                self.read_value(writer, schema.value)
                writer.write_line("yield (key, value)")
            writer.write_line("] |> Map.ofList")
        else:
            raise GeneratorError(f"Unsupported schema: {schema!r}")

    # Declarations

    def struct_name(self, struct: Struct, base: Optional[Tuple[Name, int]] = None) -> str:
        if base is not None:
            return self.type_name(base[0]) + self.type_name(struct.name)
        return self.type_name(struct.name)

    def write_struct(
        self, writer: Writer, struct: Struct, base: Optional[Tuple[Name, int]] = None
    ):
        """Emit a record declaration with its writeTo/readFrom members."""
        struct_name = self.struct_name(struct, base)

        if not struct.fields:
            writer.write_line(f"type {struct_name} = struct end with")
        else:
            writer.write_line(f"type {struct_name} = {{")
            with writer.indented():
                for field in struct.fields:
                    writer.write_line(
                        f"{self.type_name(field.name)}: {self.type_ref(field.schema)};"
                    )
            writer.write_line("} with")

        with writer.indented():
            writer.write_line("member this.writeTo(writer: System.IO.BinaryWriter) =")
            with writer.indented():
                wrote_anything = False
                if base is not None:
                    writer.write_line(f"writer.Write {base[1]}")
                    wrote_anything = True
                if struct.magic is not None:
                    writer.write_line(f"writer.Write {struct.magic}")
                    wrote_anything = True
                for field in struct.fields:
                    self.write_value(writer, f"this.{self.type_name(field.name)}", field.schema)
                    wrote_anything = True
                if not wrote_anything:
                    writer.write_line("()")

            if struct.magic is not None:
                writer.write_line(
                    f"/// Does not read the magic value {struct.magic} written by writeTo"
                )
            if not struct.fields:
                writer.write_line(
                    f"static member readFrom(reader: System.IO.BinaryReader) = new {struct_name}()"
                )
            else:
                writer.write_line("static member readFrom(reader: System.IO.BinaryReader) = {")
                with writer.indented():
                    for field in struct.fields:
                        writer.write(f"{self.type_name(field.name)} = ")
                        self.read_value(writer, field.schema)
                writer.write_line("}")

    def visit_struct(self, struct: Struct):
        writer = self._start_file()
        self.write_struct(writer, struct)
        self.add_file(self.file_name(struct.name), writer.get())

    def visit_one_of(self, one_of: OneOf):
        base_name = self.type_name(one_of.base_name)
        writer = self._start_file()

        for discriminant, variant in enumerate(one_of.variants):
            writer.write_line()
            self.write_struct(writer, variant, (one_of.base_name, discriminant))

        writer.write_line(f"type {base_name} =")
        with writer.indented():
            for variant in one_of.variants:
                writer.write_line(
                    f"| {self.type_name(variant.name)} of {self.struct_name(variant, (one_of.base_name, 0))}"
                )
            writer.write_line("with")

            writer.write_line("member this.writeTo(writer: System.IO.BinaryWriter) =")
            with writer.indented():
                writer.write_line("match this with")
                with writer.indented():
                    for variant in one_of.variants:
                        writer.write_line(
                            f"| {self.type_name(variant.name)} value -> value.writeTo writer"
                        )

            writer.write_line("static member readFrom(reader: System.IO.BinaryReader) =")
            with writer.indented():
                writer.write_line("match reader.ReadInt32() with")
                with writer.indented():
                    for discriminant, variant in enumerate(one_of.variants):
                        variant_name = self.type_name(variant.name)
                        writer.write_line(
                            f"| {discriminant} -> {variant_name} "
                            f"({base_name}{variant_name}.readFrom reader)"
                        )
                    writer.write_line(
                        '| x -> failwith (sprintf "Unexpected tag value %d" x)'
                    )

        self.add_file(self.file_name(one_of.base_name), writer.get())

    def visit_enum(self, enum: Enumeration):
        writer = self._start_file()
        writer.write_line(f"type {self.type_name(enum.base_name)} =")
        with writer.indented():
            for discriminant, variant in enumerate(enum.variants):
                writer.write_line(f"| {self.type_name(variant)} = {discriminant}")
        self.add_file(self.file_name(enum.base_name), writer.get())
