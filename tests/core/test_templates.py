"""Tests for the Jinja2 template wrapper."""

from pathlib import Path

import pytest

from transgen.codegen.core.templates import TemplateError, create_template_engine


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    (tmp_path / "header.j2").write_text(
        "namespace {{ name }}\n{% for item in items %}\nopen {{ item }}\n{% endfor %}\n"
    )
    return tmp_path


class TestTemplateEngine:
    def test_renders_file_template(self, template_dir: Path) -> None:
        engine = create_template_engine(template_dir)
        rendered = engine.render_template("header.j2", {"name": "Game", "items": ["System", "IO"]})
        assert rendered == "namespace Game\nopen System\nopen IO\n"

    def test_missing_variable(self, template_dir: Path) -> None:
        with pytest.raises(TemplateError, match="header.j2"):
            create_template_engine(template_dir).render_template("header.j2", {"items": []})

    def test_missing_template(self) -> None:
        with pytest.raises(TemplateError, match="nothing.j2"):
            create_template_engine().render_template("nothing.j2", {})

    def test_missing_directory_has_no_templates(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateError):
            create_template_engine(tmp_path / "absent").render_template("header.j2", {})
