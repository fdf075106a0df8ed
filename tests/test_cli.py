"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from rich.console import Console

from transgen.cli import CLIHandler, build_parser, main

DOCUMENT = {
    "name": "game",
    "version": "1.2.0",
    "types": [
        {
            "struct": {
                "name": "Point",
                "fields": [{"name": "x", "type": "int32"}, {"name": "y", "type": "int32"}],
            }
        },
        {"enum": {"name": "Color", "variants": ["Red", "Green"]}},
        {
            "struct": {
                "name": "Sprite",
                "fields": [
                    {"name": "position", "type": {"ref": "Point"}},
                    {"name": "tint", "type": {"option": {"ref": "Color"}}},
                ],
            }
        },
    ],
}


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(DOCUMENT))
    return path


def run(*argv: str):
    console = Console(record=True, width=200)
    args = build_parser().parse_args(list(argv))
    code = CLIHandler(console).run(args)
    return code, console.export_text()


class TestCLI:
    def test_writes_files(self, schema_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out"
        code, text = run(str(schema_file), "-l", "fs", "-o", str(output))
        assert code == 0
        assert "Wrote 3 file(s) for 3 declaration(s)" in text
        assert (output / "Model" / "Sprite.fs").read_text().startswith('#nowarn "0058"\n')
        assert "namespace Game.Model" in (output / "Model" / "Point.fs").read_text()

    def test_dry_run(self, schema_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out"
        code, text = run(str(schema_file), "-o", str(output), "--dry-run")
        assert code == 0
        assert "Would write 5 file(s)" in text
        assert "game/model/sprite.py" in text
        assert not output.exists()

    def test_name_and_version_overrides(self, schema_file: Path, tmp_path: Path) -> None:
        code, _ = run(str(schema_file), "-o", str(tmp_path), "--name", "arena", "--version", "9.9.9")
        assert code == 0
        assert '__version__ = "9.9.9"' in (tmp_path / "arena" / "__init__.py").read_text()

    def test_config_file(self, schema_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"model_dir": "Types"}))
        code, _ = run(str(schema_file), "-l", "fsharp", "-o", str(tmp_path), "--config", str(config))
        assert code == 0
        assert (tmp_path / "Types" / "Point.fs").exists()

    def test_list_languages(self) -> None:
        code, text = run("--list-languages")
        assert code == 0
        assert "fsharp" in text
        assert "python" in text

    def test_unknown_language(self, schema_file: Path) -> None:
        code, text = run(str(schema_file), "-l", "cobol", "--dry-run")
        assert code == 1
        assert "No generator registered for language: cobol" in text

    def test_missing_schema(self, tmp_path: Path) -> None:
        code, text = run(str(tmp_path / "missing.json"))
        assert code == 1
        assert "not found" in text.lower()

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "game", "types": ["int32"]}))
        code, text = run(str(path), "--dry-run")
        assert code == 1
        assert "Top-level types" in text

    def test_no_schema(self) -> None:
        code, text = run()
        assert code == 1
        assert "No schema document given" in text

    def test_main(self, schema_file: Path, tmp_path: Path) -> None:
        assert main([str(schema_file), "-o", str(tmp_path)]) == 0
        assert (tmp_path / "game" / "model" / "point.py").exists()
