"""
Python-specific naming utilities and sanitization.

Handles Python reserved words, builtins, and the local names that the
generated codecs rely on.
"""

from ...core.naming import NameSanitizer

PYTHON_SUBSTITUTIONS = {
    "Params": "Parameters",
}

# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
}

# Builtins and module-level names referenced by generated code
PYTHON_BUILTIN_TYPES = {
    "int",
    "float",
    "str",
    "bool",
    "list",
    "dict",
    "bytes",
    "object",
    "type",
    "len",
    "range",
    "super",
    "isinstance",
    "print",
    "ValueError",
    "NotImplementedError",
    # Generated codec names
    "struct",
    "stream",
    "cls",
    "self",
    "tag",
    "dataclass",
    "annotations",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES)
