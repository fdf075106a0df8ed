"""
F# code generator module.

Generates F# records, discriminated unions and enums with BinaryWriter /
BinaryReader codecs.
"""

from .generator import FSharpGenerator
from .naming import FSHARP_PRIMITIVE_TYPES, FSHARP_SUBSTITUTIONS

__all__ = [
    "FSharpGenerator",
    "FSHARP_PRIMITIVE_TYPES",
    "FSHARP_SUBSTITUTIONS",
]
