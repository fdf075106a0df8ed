"""
Core schema representation for code generation.

The schema is a closed set of shapes: primitives, structs, tagged unions
(``OneOf``), enumerations and the ``Option``/``Vec``/``Map`` containers.
Every node is immutable. Generators only read it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .naming import Name


class SchemaError(Exception):
    """Exception raised for malformed schema documents."""

    pass


class Primitive(Enum):
    """Leaf types with a fixed wire encoding."""

    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"


def _as_name(value) -> Name:
    return value if isinstance(value, Name) else Name(value)


@dataclass(frozen=True)
class Field:
    """A named, typed member of a struct."""

    name: Name
    schema: "Schema"

    def __post_init__(self):
        object.__setattr__(self, "name", _as_name(self.name))


@dataclass(frozen=True)
class Struct:
    """Product type; field order is both declaration and wire order."""

    name: Name
    fields: Tuple[Field, ...] = field(default_factory=tuple)
    magic: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "name", _as_name(self.name))
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class OneOf:
    """Tagged union. A variant's discriminant is its index in ``variants``."""

    base_name: Name
    variants: Tuple[Struct, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "base_name", _as_name(self.base_name))
        object.__setattr__(self, "variants", tuple(self.variants))


@dataclass(frozen=True)
class Enumeration:
    """Integer-backed enumeration; a variant's value is its position."""

    base_name: Name
    variants: Tuple[Name, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "base_name", _as_name(self.base_name))
        object.__setattr__(
            self, "variants", tuple(_as_name(variant) for variant in self.variants)
        )


@dataclass(frozen=True)
class Option:
    inner: "Schema"


@dataclass(frozen=True)
class Vec:
    inner: "Schema"


@dataclass(frozen=True)
class Map:
    key: "Schema"
    value: "Schema"


Schema = Union[Primitive, Struct, OneOf, Enumeration, Option, Vec, Map]

DECLARATION_TYPES = (Struct, OneOf, Enumeration)


def declaration_name(schema: Schema) -> Optional[Name]:
    """Return the declared name of a struct, union or enum, else None."""
    if isinstance(schema, Struct):
        return schema.name
    if isinstance(schema, (OneOf, Enumeration)):
        return schema.base_name
    return None


def collect_declarations(schemas) -> List[Schema]:
    """
    Collect every top-level declaration reachable from ``schemas``.

    Dependencies come before the declarations that use them, and each name
    appears once. Variant structs of a ``OneOf`` are not declarations of
    their own, but their field types are walked.

    Args:
        schemas: Iterable of schema nodes

    Returns:
        List of Struct/OneOf/Enumeration nodes in generation order
    """
    ordered: List[Schema] = []
    seen = set()

    def visit_fields(fields):
        for struct_field in fields:
            visit(struct_field.schema)

    def visit(schema):
        if isinstance(schema, Primitive):
            return
        if isinstance(schema, Option):
            visit(schema.inner)
            return
        if isinstance(schema, Vec):
            visit(schema.inner)
            return
        if isinstance(schema, Map):
            visit(schema.key)
            visit(schema.value)
            return

        name = declaration_name(schema)
        if name is None:
            raise SchemaError(f"Unsupported schema node: {schema!r}")
        if name in seen:
            return
        seen.add(name)

        if isinstance(schema, Struct):
            visit_fields(schema.fields)
        elif isinstance(schema, OneOf):
            for variant in schema.variants:
                visit_fields(variant.fields)
        ordered.append(schema)

    for schema in schemas:
        visit(schema)
    return ordered


# Schema documents


def _doc_name(value: Any) -> Name:
    if not isinstance(value, str):
        raise SchemaError(f"Names must be strings, got {value!r}")
    try:
        return Name(value)
    except ValueError as e:
        raise SchemaError(str(e)) from e


def _struct_from_dict(data: Dict[str, Any], declared: Dict[Name, Schema]) -> Struct:
    if not isinstance(data, dict) or "name" not in data:
        raise SchemaError(f"Struct definition needs a name: {data!r}")
    fields = []
    for field_data in data.get("fields", []):
        if not isinstance(field_data, dict) or "name" not in field_data or "type" not in field_data:
            raise SchemaError(f"Field definition needs a name and a type: {field_data!r}")
        fields.append(
            Field(_doc_name(field_data["name"]), schema_from_dict(field_data["type"], declared))
        )
    magic = data.get("magic")
    if magic is not None and (isinstance(magic, bool) or not isinstance(magic, int)):
        raise SchemaError(f"Magic value of {data['name']} must be an integer")
    return Struct(_doc_name(data["name"]), tuple(fields), magic)


def schema_from_dict(data: Any, declared: Optional[Dict[Name, Schema]] = None) -> Schema:
    """
    Convert a JSON-style description into a schema node.

    Args:
        data: A primitive name string or a single-key dict
            (``struct``, ``one_of``, ``enum``, ``option``, ``vec``,
            ``map`` or ``ref``)
        declared: Declarations that ``ref`` entries may point to

    Returns:
        The schema node
    """
    declared = declared if declared is not None else {}

    if isinstance(data, str):
        try:
            return Primitive(data.lower())
        except ValueError:
            raise SchemaError(f"Unknown primitive type: {data}") from None

    if not isinstance(data, dict) or len(data) != 1:
        raise SchemaError(f"Expected a type name or a single-key object, got {data!r}")

    (kind, body), = data.items()

    if kind == "struct":
        return _struct_from_dict(body, declared)
    elif kind == "one_of":
        if not isinstance(body, dict) or "name" not in body:
            raise SchemaError(f"one_of definition needs a name: {body!r}")
        variants = [_struct_from_dict(variant, declared) for variant in body.get("variants", [])]
        return OneOf(_doc_name(body["name"]), tuple(variants))
    elif kind == "enum":
        if not isinstance(body, dict) or "name" not in body:
            raise SchemaError(f"enum definition needs a name: {body!r}")
        return Enumeration(_doc_name(body["name"]), tuple(_doc_name(v) for v in body.get("variants", [])))
    elif kind == "option":
        return Option(schema_from_dict(body, declared))
    elif kind == "vec":
        return Vec(schema_from_dict(body, declared))
    elif kind == "map":
        if not isinstance(body, list) or len(body) != 2:
            raise SchemaError(f"map expects [key, value], got {body!r}")
        return Map(schema_from_dict(body[0], declared), schema_from_dict(body[1], declared))
    elif kind == "ref":
        name = _doc_name(body)
        if name not in declared:
            raise SchemaError(f"Reference to undeclared type: {body}")
        return declared[name]

    raise SchemaError(f"Unknown schema kind: {kind}")


@dataclass
class SchemaDocument:
    """A loaded schema: namespace name, version and top-level declarations."""

    name: str
    version: str
    declarations: List[Schema] = field(default_factory=list)


def load_schema_document(data: Dict[str, Any]) -> SchemaDocument:
    """
    Build a SchemaDocument from parsed JSON.

    ``ref`` entries resolve against declarations listed earlier in ``types``.
    """
    if not isinstance(data, dict):
        raise SchemaError("Schema document must be a JSON object")
    if "name" not in data:
        raise SchemaError("Schema document needs a 'name'")

    declared: Dict[Name, Schema] = {}
    declarations = []
    for entry in data.get("types", []):
        schema = schema_from_dict(entry, declared)
        name = declaration_name(schema)
        if name is None:
            raise SchemaError(f"Top-level types must be struct, one_of or enum: {entry!r}")
        declared[name] = schema
        declarations.append(schema)

    return SchemaDocument(str(data["name"]), str(data.get("version", "0.0.0")), declarations)
