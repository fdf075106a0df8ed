"""
Naming utilities for safe code generation.

A schema name is kept as a structured ``Name`` (lower-case word parts) and
rendered into a target identifier on demand. Backends differ only in the
substitution table applied to the rendered text and in their reserved words.
"""

import re
from collections.abc import Callable, Mapping
from typing import Dict, Optional, Set, Tuple

Conversion = Callable[[str], str]

_SEPARATORS = re.compile(r"[^a-zA-Z0-9]+")
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")


def split_words(raw: str) -> Tuple[str, ...]:
    """Split a raw identifier into lower-case word parts.

    Digits stay attached to the word before them, so ``Int32Value``
    becomes ``("int32", "value")``.
    """
    text = _ACRONYM.sub(r"\1 \2", raw)
    text = _LOWER_UPPER.sub(r"\1 \2", text)
    return tuple(part.lower() for part in _SEPARATORS.split(text) if part)


class Name:
    """Structured identifier rendered per target language."""

    __slots__ = ("parts",)

    def __init__(self, raw: str):
        parts = split_words(raw)
        if not parts:
            raise ValueError(f"Cannot build a name from {raw!r}")
        self.parts = parts

    def __eq__(self, other):
        if not isinstance(other, Name):
            return NotImplemented
        return self.parts == other.parts

    def __hash__(self):
        return hash(self.parts)

    def __repr__(self):
        return f"Name({self.camel_case()!r})"

    def camel_case(self, conv: Optional[Conversion] = None) -> str:
        """Render as ``PascalCase`` then apply ``conv``."""
        rendered = "".join(part.capitalize() for part in self.parts)
        return conv(rendered) if conv else rendered

    def mixed_case(self, conv: Optional[Conversion] = None) -> str:
        """Render as ``camelCase`` then apply ``conv``."""
        rendered = self.camel_case(conv)
        return rendered[:1].lower() + rendered[1:]

    def snake_case(self, conv: Optional[Conversion] = None) -> str:
        """Render as ``snake_case``.

        The substitution runs on the camel form so that the same table
        serves every case style.
        """
        return "_".join(split_words(self.camel_case(conv)))

    def shouty_snake_case(self, conv: Optional[Conversion] = None) -> str:
        return self.snake_case(conv).upper()


class Substitutions:
    """Ordered literal substring replacements applied to rendered names."""

    def __init__(self, table: Optional[Mapping[str, str]] = None):
        self.table: Dict[str, str] = dict(table or {})

    def __call__(self, text: str) -> str:
        for old, new in self.table.items():
            text = text.replace(old, new)
        return text

    def merged(self, overrides: Optional[Mapping[str, str]]) -> "Substitutions":
        """Return a new table with ``overrides`` applied on top."""
        table = dict(self.table)
        table.update(overrides or {})
        return Substitutions(table)

    def __repr__(self):
        return f"Substitutions({self.table!r})"


class NameSanitizer:
    """Escapes rendered identifiers that collide with reserved words."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin names that generated code relies on
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, identifier: str, suffix_on_conflict: str = "_") -> str:
        """
        Return ``identifier`` with ``suffix_on_conflict`` appended when it
        collides with a reserved word or builtin.
        """
        cache_key = f"{identifier}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        final_name = identifier
        if identifier in self.reserved_words or identifier in self.builtin_types:
            final_name = f"{identifier}{suffix_on_conflict}"

        self._name_cache[cache_key] = final_name
        return final_name
