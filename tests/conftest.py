"""Shared fixtures: schemas used across tests and a builder that imports
generated Python packages from a temporary directory."""

import importlib
import uuid
from pathlib import Path

import pytest

from transgen.codegen.core.generator import generate_code
from transgen.codegen.core.schema import (
    Enumeration,
    Field,
    OneOf,
    Primitive,
    Struct,
)
from transgen.codegen.languages.python import PythonGenerator

# ###############
# Schemas
# ###############

POINT = Struct("Point", [Field("x", Primitive.INT32), Field("y", Primitive.INT32)])

COLOR = Enumeration("Color", ["Red", "Green", "Blue"])

SHAPE = OneOf(
    "Shape",
    [
        Struct("Circle", [Field("center", POINT), Field("radius", Primitive.FLOAT64)]),
        Struct("Rectangle", [Field("top_left", POINT), Field("bottom_right", POINT)]),
        Struct("Empty"),
    ],
)


@pytest.fixture
def build_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Generate a Python package for the given schemas and import it."""

    def build(*schemas, config=None):
        name = "gen" + "".join(chr(ord("a") + int(c, 16)) for c in uuid.uuid4().hex[:10])
        generator = PythonGenerator(name, "1.0.0", config)
        result = generate_code(generator, list(schemas))
        assert result.success, result.error_message

        for relative_path, content in result.files.items():
            path = tmp_path / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        monkeypatch.syspath_prepend(str(tmp_path))
        return importlib.import_module(generator.package_name)

    return build
