"""
Python code generator implementation.

Emits an importable package: one module per declaration holding a
dataclass (structs), a base class with dataclass variants (one_of) or an
``IntEnum`` (enums). Codecs use the ``struct`` module, little-endian, over
any binary stream with ``read``/``write``.
"""

from pathlib import Path
from typing import List, Optional, Set, Tuple

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
    declaration_name,
)
from ...core.writer import Writer
from .naming import PYTHON_SUBSTITUTIONS, create_python_sanitizer

PYTHON_PRIMITIVE_TYPES = {
    Primitive.BOOL: "bool",
    Primitive.INT32: "int",
    Primitive.INT64: "int",
    Primitive.FLOAT32: "float",
    Primitive.FLOAT64: "float",
    Primitive.STRING: "str",
}

# struct format and byte size per fixed-width primitive
STRUCT_FORMATS = {
    Primitive.BOOL: ("<?", 1),
    Primitive.INT32: ("<i", 4),
    Primitive.INT64: ("<q", 8),
    Primitive.FLOAT32: ("<f", 4),
    Primitive.FLOAT64: ("<d", 8),
}

INT32_FORMAT = STRUCT_FORMATS[Primitive.INT32]


def _pack(fmt: Tuple[str, int], value: str) -> str:
    return f'stream.write(struct.pack("{fmt[0]}", {value}))'


def _unpack(fmt: Tuple[str, int]) -> str:
    return f'struct.unpack("{fmt[0]}", stream.read({fmt[1]}))[0]'


class PythonGenerator(CodeGenerator):
    """Code generator for Python dataclasses with binary codecs."""

    substitutions = PYTHON_SUBSTITUTIONS

    def __init__(self, name: str, version: str, config=None):
        super().__init__(name, version, config)
        self.sanitizer = create_python_sanitizer()
        self._exports: List[Tuple[str, str]] = []

    @property
    def language_name(self) -> str:
        return "python"

    @property
    def file_extension(self) -> str:
        return ".py"

    def get_template_directory(self) -> Optional[Path]:
        return Path(__file__).parent / "templates"

    # Naming

    def type_name(self, name: Name) -> str:
        return self.sanitizer.sanitize_name(name.camel_case(self.conv))

    @property
    def package_name(self) -> str:
        return self.sanitizer.sanitize_name(Name(self.name).snake_case(self.conv))

    @property
    def model_package(self) -> str:
        return self.config.model_dir.replace("/", ".")

    def module_name(self, name: Name) -> str:
        return self.sanitizer.sanitize_name(name.snake_case(self.conv))

    def field_name(self, name: Name) -> str:
        return self.sanitizer.sanitize_name(name.snake_case(self.conv))

    def member_name(self, name: Name) -> str:
        return name.shouty_snake_case(self.conv)

    def file_name(self, name: Name) -> str:
        return (
            f"{self.package_name}/{self.config.model_dir}/"
            f"{self.module_name(name)}{self.file_extension}"
        )

    def type_ref(self, schema: Schema) -> str:
        """Python annotation for a field of ``schema``."""
        if isinstance(schema, Primitive):
            return PYTHON_PRIMITIVE_TYPES[schema]
        elif isinstance(schema, Struct):
            return self.type_name(schema.name)
        elif isinstance(schema, (OneOf, Enumeration)):
            return self.type_name(schema.base_name)
        elif isinstance(schema, Option):
            return f"{self.type_ref(schema.inner)} | None"
        elif isinstance(schema, Vec):
            return f"list[{self.type_ref(schema.inner)}]"
        elif isinstance(schema, Map):
            if not self._hashable(schema.key):
                raise GeneratorError(
                    f"Map key type {self.type_ref(schema.key)} is not hashable in Python"
                )
            return f"dict[{self.type_ref(schema.key)}, {self.type_ref(schema.value)}]"
        raise GeneratorError(f"Unsupported schema: {schema!r}")

    def _hashable(self, schema: Schema) -> bool:
        """Whether generated values of ``schema`` can be used as dict keys."""
        if isinstance(schema, (Primitive, Enumeration)):
            return True
        elif isinstance(schema, Option):
            return self._hashable(schema.inner)
        elif isinstance(schema, Struct):
            return all(self._hashable(field.schema) for field in schema.fields)
        elif isinstance(schema, OneOf):
            return all(self._hashable(variant) for variant in schema.variants)
        return False

    def _referenced_types(self, schema: Schema, found: Set[Name]):
        if isinstance(schema, Option):
            self._referenced_types(schema.inner, found)
        elif isinstance(schema, Vec):
            self._referenced_types(schema.inner, found)
        elif isinstance(schema, Map):
            self._referenced_types(schema.key, found)
            self._referenced_types(schema.value, found)
        elif not isinstance(schema, Primitive):
            found.add(declaration_name(schema))

    def _imports_for(self, structs, own_name: Name) -> List[Tuple[str, str]]:
        found: Set[Name] = set()
        for struct in structs:
            for field in struct.fields:
                self._referenced_types(field.schema, found)
        found.discard(own_name)
        return sorted((self.module_name(name), self.type_name(name)) for name in found)

    def _start_file(
        self,
        description: str,
        exports: List[str],
        imports: List[Tuple[str, str]] = (),
        needs_struct: bool = True,
        needs_dataclass: bool = False,
        needs_enum: bool = False,
    ) -> Writer:
        writer = self.new_writer()
        self.write_template(
            writer,
            "module_header.py.j2",
            {
                "description": description,
                "name": self.name,
                "version": self.version,
                "imports": list(imports),
                "exports": exports,
                "needs_struct": needs_struct,
                "needs_dataclass": needs_dataclass,
                "needs_enum": needs_enum,
            },
        )
        return writer

    # Codec

    def write_value(self, writer: Writer, value: str, schema: Schema, depth: int = 0):
        """Emit statements writing the expression ``value`` of type ``schema``."""
        if isinstance(schema, Primitive):
            if schema == Primitive.STRING:
                writer.write_line(f'_data = {value}.encode("utf-8")')
                writer.write_line(_pack(INT32_FORMAT, "len(_data)"))
                writer.write_line("stream.write(_data)")
            else:
                writer.write_line(_pack(STRUCT_FORMATS[schema], value))
        elif isinstance(schema, (Struct, OneOf)):
            writer.write_line(f"{value}.write_to(stream)")
        elif isinstance(schema, Enumeration):
            writer.write_line(_pack(INT32_FORMAT, f"int({value})"))
        elif isinstance(schema, Option):
            flag = STRUCT_FORMATS[Primitive.BOOL]
            writer.write_line(f"if {value} is None:")
            with writer.indented():
                writer.write_line(_pack(flag, "False"))
            writer.write_line("else:")
            with writer.indented():
                writer.write_line(_pack(flag, "True"))
                self.write_value(writer, value, schema.inner, depth)
        elif isinstance(schema, Vec):
            element = f"_element{depth}"
            writer.write_line(_pack(INT32_FORMAT, f"len({value})"))
            writer.write_line(f"for {element} in {value}:")
            with writer.indented():
                self.write_value(writer, element, schema.inner, depth + 1)
        elif isinstance(schema, Map):
            key, item = f"_key{depth}", f"_value{depth}"
            writer.write_line(_pack(INT32_FORMAT, f"len({value})"))
            writer.write_line(f"for {key}, {item} in {value}.items():")
            with writer.indented():
                self.write_value(writer, key, schema.key, depth + 1)
                self.write_value(writer, item, schema.value, depth + 1)
        else:
            raise GeneratorError(f"Unsupported schema: {schema!r}")

    def read_value(self, writer: Writer, target: str, schema: Schema, depth: int = 0):
        """Emit statements reading a value of type ``schema`` into ``target``."""
        if isinstance(schema, Primitive):
            if schema == Primitive.STRING:
                writer.write_line(f"_size = {_unpack(INT32_FORMAT)}")
                writer.write_line(f'{target} = stream.read(_size).decode("utf-8")')
            else:
                writer.write_line(f"{target} = {_unpack(STRUCT_FORMATS[schema])}")
        elif isinstance(schema, Struct):
            writer.write_line(f"{target} = {self.type_name(schema.name)}.read_from(stream)")
        elif isinstance(schema, OneOf):
            writer.write_line(f"{target} = {self.type_name(schema.base_name)}.read_from(stream)")
        elif isinstance(schema, Enumeration):
            writer.write_line(
                f"{target} = {self.type_name(schema.base_name)}({_unpack(INT32_FORMAT)})"
            )
        elif isinstance(schema, Option):
            writer.write_line(f"if {_unpack(STRUCT_FORMATS[Primitive.BOOL])}:")
            with writer.indented():
                self.read_value(writer, target, schema.inner, depth)
            writer.write_line("else:")
            with writer.indented():
                writer.write_line(f"{target} = None")
        elif isinstance(schema, Vec):
            element = f"_element{depth}"
            writer.write_line(f"{target} = []")
            writer.write_line(f"for _ in range({_unpack(INT32_FORMAT)}):")
            with writer.indented():
                self.read_value(writer, element, schema.inner, depth + 1)
                writer.write_line(f"{target}.append({element})")
        elif isinstance(schema, Map):
            key, item = f"_key{depth}", f"_value{depth}"
            writer.write_line(f"{target} = {{}}")
            writer.write_line(f"for _ in range({_unpack(INT32_FORMAT)}):")
            with writer.indented():
                self.read_value(writer, key, schema.key, depth + 1)
                self.read_value(writer, item, schema.value, depth + 1)
                writer.write_line(f"{target}[{key}] = {item}")
        else:
            raise GeneratorError(f"Unsupported schema: {schema!r}")

    # Declarations

    def struct_name(self, struct: Struct, base: Optional[Tuple[Name, int]] = None) -> str:
        if base is not None:
            return self.sanitizer.sanitize_name(
                base[0].camel_case(self.conv) + struct.name.camel_case(self.conv)
            )
        return self.type_name(struct.name)

    def write_struct(
        self, writer: Writer, struct: Struct, base: Optional[Tuple[Name, int]] = None
    ):
        """Emit a dataclass with ``write_to``/``read_from``.

        ``base`` is ``(union name, discriminant)`` for union variants; the
        class then subclasses the union and writes its tag first.
        """
        class_name = self.struct_name(struct, base)
        parent = f"({self.type_name(base[0])})" if base is not None else ""

        writer.write_line("@dataclass(frozen=True)")
        writer.write_line(f"class {class_name}{parent}:")
        with writer.indented():
            if self.config.add_comments:
                writer.write_line(f'"""{self._struct_doc(struct, base)}"""')
                writer.write_line()
            if base is not None:
                writer.write_line(f"TAG = {base[1]}")
                writer.write_line()
            if struct.magic is not None:
                writer.write_line(f"MAGIC = {struct.magic}")
                writer.write_line()
            for field in struct.fields:
                writer.write_line(f"{self.field_name(field.name)}: {self.type_ref(field.schema)}")
            if struct.fields:
                writer.write_line()

            writer.write_line("def write_to(self, stream: BinaryIO) -> None:")
            with writer.indented():
                if self.config.add_comments:
                    writer.write_line('"""Write the binary encoding of this value to ``stream``."""')
                wrote_anything = False
                if base is not None:
                    writer.write_line(_pack(INT32_FORMAT, "self.TAG"))
                    wrote_anything = True
                if struct.magic is not None:
                    writer.write_line(_pack(INT32_FORMAT, "self.MAGIC"))
                    wrote_anything = True
                for field in struct.fields:
                    self.write_value(writer, f"self.{self.field_name(field.name)}", field.schema)
                    wrote_anything = True
                if not wrote_anything:
                    writer.write_line("pass")
            writer.write_line()

            writer.write_line("@classmethod")
            writer.write_line(f"def read_from(cls, stream: BinaryIO) -> {class_name}:")
            with writer.indented():
                self._write_docstring(writer, self._reader_doc(struct, base))
                for field in struct.fields:
                    self.read_value(writer, self.field_name(field.name), field.schema)
                arguments = ", ".join(
                    f"{self.field_name(field.name)}={self.field_name(field.name)}"
                    for field in struct.fields
                )
                writer.write_line(f"return cls({arguments})")

    def _struct_doc(self, struct: Struct, base: Optional[Tuple[Name, int]]) -> str:
        if base is not None:
            return f"Variant {self.type_name(struct.name)} of {self.type_name(base[0])} (tag {base[1]})."
        return f"{self.type_name(struct.name)} record."

    def _reader_doc(self, struct: Struct, base: Optional[Tuple[Name, int]]) -> List[str]:
        lines = []
        if self.config.add_comments:
            lines.append("Read a value from ``stream``.")
            if base is not None:
                lines.append("")
                lines.append("The tag must already have been consumed by the union reader.")
        # The magic is write-only; readers never check it.
        if struct.magic is not None:
            if lines:
                lines.append("")
            lines.append(
                f"The magic value {struct.magic} emitted by ``write_to`` is not consumed here."
            )
        return lines

    @staticmethod
    def _write_docstring(writer: Writer, lines: List[str]):
        if not lines:
            return
        if len(lines) == 1:
            writer.write_line(f'"""{lines[0]}"""')
            return
        writer.write_line(f'"""{lines[0]}')
        for line in lines[1:]:
            writer.write_line(line)
        writer.write_line('"""')

    def visit_struct(self, struct: Struct):
        class_name = self.type_name(struct.name)
        writer = self._start_file(
            f"{class_name} record and its binary codec.",
            [class_name],
            self._imports_for([struct], struct.name),
            needs_dataclass=True,
        )
        writer.write_line()
        writer.write_line()
        self.write_struct(writer, struct)
        self._exports.append((self.module_name(struct.name), class_name))
        self.add_file(self.file_name(struct.name), writer.get())

    def visit_one_of(self, one_of: OneOf):
        base_name = self.type_name(one_of.base_name)
        variant_names = [self.struct_name(v, (one_of.base_name, 0)) for v in one_of.variants]
        writer = self._start_file(
            f"{base_name} tagged union and its binary codec.",
            [base_name, *variant_names],
            self._imports_for(one_of.variants, one_of.base_name),
            needs_dataclass=bool(one_of.variants),
        )
        writer.write_line()
        writer.write_line()

        writer.write_line(f"class {base_name}:")
        with writer.indented():
            if self.config.add_comments:
                writer.write_line(
                    '"""Tagged union; every value is an instance of one variant subclass."""'
                )
                writer.write_line()
            writer.write_line("def write_to(self, stream: BinaryIO) -> None:")
            with writer.indented():
                writer.write_line("raise NotImplementedError")
            writer.write_line()
            writer.write_line("@staticmethod")
            writer.write_line(f"def read_from(stream: BinaryIO) -> {base_name}:")
            with writer.indented():
                if self.config.add_comments:
                    writer.write_line('"""Read a tag, then the matching variant."""')
                writer.write_line(f"tag = {_unpack(INT32_FORMAT)}")
                for discriminant, variant_name in enumerate(variant_names):
                    writer.write_line(f"if tag == {discriminant}:")
                    with writer.indented():
                        writer.write_line(f"return {variant_name}.read_from(stream)")
                writer.write_line('raise ValueError(f"Unexpected tag value {tag}")')

        for discriminant, variant in enumerate(one_of.variants):
            writer.write_line()
            writer.write_line()
            self.write_struct(writer, variant, (one_of.base_name, discriminant))

        if one_of.variants:
            writer.write_line()
            writer.write_line()
        for variant, variant_name in zip(one_of.variants, variant_names):
            writer.write_line(f"{base_name}.{self.type_name(variant.name)} = {variant_name}")

        module = self.module_name(one_of.base_name)
        self._exports.append((module, base_name))
        self._exports.extend((module, variant_name) for variant_name in variant_names)
        self.add_file(self.file_name(one_of.base_name), writer.get())

    def visit_enum(self, enum: Enumeration):
        enum_name = self.type_name(enum.base_name)
        writer = self._start_file(
            f"{enum_name} enumeration.",
            [enum_name],
            needs_struct=False,
            needs_enum=True,
        )
        writer.write_line()
        writer.write_line()
        writer.write_line(f"class {enum_name}(IntEnum):")
        with writer.indented():
            if self.config.add_comments:
                writer.write_line('"""Encoded on the wire as a 4-byte integer."""')
                writer.write_line()
            for discriminant, variant in enumerate(enum.variants):
                writer.write_line(f"{self.member_name(variant)} = {discriminant}")
            if not enum.variants:
                writer.write_line("pass")

        self._exports.append((self.module_name(enum.base_name), enum_name))
        self.add_file(self.file_name(enum.base_name), writer.get())

    def finish_files(self):
        """Emit the package and model ``__init__`` modules."""
        context = {
            "name": self.name,
            "version": self.version,
            "exports": self._exports,
            "model_package": self.model_package,
        }

        writer = self.new_writer()
        self.write_template(writer, "model_init.py.j2", context)
        self.add_file(f"{self.package_name}/{self.config.model_dir}/__init__.py", writer.get())

        writer = self.new_writer()
        self.write_template(writer, "package_init.py.j2", context)
        self.add_file(f"{self.package_name}/__init__.py", writer.get())
