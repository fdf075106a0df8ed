"""
Language-specific code generators.

This module contains generators for different programming languages.
"""

from .fsharp import FSharpGenerator
from .python import PythonGenerator

__all__ = [
    "FSharpGenerator",
    "PythonGenerator",
]
