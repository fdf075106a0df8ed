"""
F#-specific naming: substitution table and primitive type names.
"""

from ...core.schema import Primitive

# Applied in order to every rendered identifier
FSHARP_SUBSTITUTIONS = {
    "Int32": "Int",
    "Int64": "Long",
    "Float32": "Single",
    "Float64": "Double",
    "Params": "Parameters",
}

FSHARP_PRIMITIVE_TYPES = {
    Primitive.BOOL: "bool",
    Primitive.INT32: "int",
    Primitive.INT64: "long",
    Primitive.FLOAT32: "single",
    Primitive.FLOAT64: "double",
    Primitive.STRING: "string",
}

# BinaryReader method per primitive (strings are length-prefixed by hand)
FSHARP_READ_METHODS = {
    Primitive.BOOL: "ReadBoolean",
    Primitive.INT32: "ReadInt32",
    Primitive.INT64: "ReadInt64",
    Primitive.FLOAT32: "ReadSingle",
    Primitive.FLOAT64: "ReadDouble",
}


def var_name(expression: str) -> str:
    """Last member of a dotted expression (``this.Name`` -> ``Name``)."""
    return expression.rsplit(".", 1)[-1]
