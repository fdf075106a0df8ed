"""
Python code generator module.

Generates an importable package of dataclasses and IntEnums with
struct-based binary codecs.
"""

from .generator import PythonGenerator
from .naming import (
    PYTHON_BUILTIN_TYPES,
    PYTHON_RESERVED_WORDS,
    PYTHON_SUBSTITUTIONS,
    create_python_sanitizer,
)

__all__ = [
    "PythonGenerator",
    "create_python_sanitizer",
    "PYTHON_BUILTIN_TYPES",
    "PYTHON_RESERVED_WORDS",
    "PYTHON_SUBSTITUTIONS",
]
