"""
Base generator interface for all code generation targets.

A generator is created once per run with the namespace name and version,
visited once per top-level declaration and finished to obtain the mapping
from relative file path to generated source.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ...logging_config import get_logger
from .config import GeneratorConfig, get_config_manager, load_config
from .naming import Name, Substitutions
from .schema import (
    Enumeration,
    Map,
    OneOf,
    Option,
    Primitive,
    Schema,
    Struct,
    Vec,
    collect_declarations,
    declaration_name,
)
from .templates import TemplateEngine, create_template_engine
from .writer import Writer

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    # Backend substitution table applied to every rendered name
    substitutions: Mapping[str, str] = {}

    def __init__(
        self,
        name: str,
        version: str,
        config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None,
    ):
        """
        Initialize generator state for one run.

        Args:
            name: Namespace/package name of the generated code
            version: Version of the schema being generated
            config: GeneratorConfig or dict of overrides
        """
        if isinstance(config, GeneratorConfig):
            self.config = config
        else:
            self.config = load_config(self.language_name, config)

        self.name = name
        self.version = version
        self.conv = Substitutions(self.substitutions).merged(self.config.substitutions)
        self.files: Dict[str, str] = {}
        self._finished = False
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'fsharp', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.fs', '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Returns:
            Path to template directory or None for in-memory templates only
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)

    def write_template(self, writer: Writer, template_name: str, context: Dict[str, Any]):
        """Render a template into ``writer`` line by line."""
        for line in self.render_template(template_name, context).splitlines():
            writer.write_line(line)

    # Naming

    def type_name(self, name: Name) -> str:
        """Render a declaration identifier with the backend substitutions."""
        return name.camel_case(self.conv)

    def new_writer(self) -> Writer:
        return Writer(indent=self.config.indent, line_ending=self.config.line_ending)

    # Driver

    def visit(self, schema: Schema):
        """
        Generate the file for one top-level declaration.

        Primitives and containers are never declarations; visiting them
        does nothing.
        """
        if self._finished:
            raise GeneratorError("Generator already finished")

        if isinstance(schema, Struct):
            logger.debug("Visiting struct %s", self.type_name(schema.name))
            self.visit_struct(schema)
        elif isinstance(schema, OneOf):
            logger.debug("Visiting one_of %s", self.type_name(schema.base_name))
            self.visit_one_of(schema)
        elif isinstance(schema, Enumeration):
            logger.debug("Visiting enum %s", self.type_name(schema.base_name))
            self.visit_enum(schema)
        elif isinstance(schema, (Primitive, Option, Vec, Map)):
            return
        else:
            raise GeneratorError(f"Unsupported schema: {schema!r}")

    @abstractmethod
    def visit_struct(self, struct: Struct):
        pass

    @abstractmethod
    def visit_one_of(self, one_of: OneOf):
        pass

    @abstractmethod
    def visit_enum(self, enum: Enumeration):
        pass

    def add_file(self, path: str, content: str):
        """Store a completed file; two declarations may not share a path."""
        if path in self.files:
            raise GeneratorError(f"Duplicate output file: {path}")
        self.files[path] = self.format_code(content)
        logger.info("Generated %s", path)

    def finish_files(self):
        """Hook for namespace-level files that depend on every declaration."""
        pass

    def finish(self) -> Dict[str, str]:
        """Close the run and return the mapping of file path to source."""
        if not self._finished:
            self.finish_files()
            self._finished = True
        return dict(self.files)

    def validate_schemas(self, schemas: List[Schema]) -> List[str]:
        """
        Report suspicious but generatable declarations.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for schema in schemas:
            if isinstance(schema, Struct) and not schema.fields:
                warnings.append(
                    f"Struct {self.type_name(schema.name)} has no fields - will generate empty type"
                )
            elif isinstance(schema, OneOf) and not schema.variants:
                warnings.append(f"OneOf {self.type_name(schema.base_name)} has no variants")
            elif isinstance(schema, Enumeration) and not schema.variants:
                warnings.append(f"Enum {self.type_name(schema.base_name)} has no variants")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Strip trailing whitespace and collapse runs of blank lines.
        """
        line_ending = self.config.line_ending
        formatted_lines = []
        blank_count = 0

        for line in code.split(line_ending):
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return line_ending.join(formatted_lines)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Mapping of relative file path to generated source
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files={})
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, schemas: List[Schema]) -> GenerationResult:
    """
    Generate code for ``schemas`` and everything they depend on.

    Args:
        generator: Fresh code generator instance
        schemas: Top-level schemas to generate

    Returns:
        GenerationResult with files, warnings and metadata
    """
    try:
        declarations = collect_declarations(schemas)
        warnings = get_config_manager().validate_config(generator.config)
        warnings.extend(generator.validate_schemas(declarations))

        for declaration in declarations:
            generator.visit(declaration)

        files = generator.finish()

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "name": generator.name,
            "version": generator.version,
            "declaration_count": len(declarations),
            "declarations": [
                generator.type_name(declaration_name(declaration))
                for declaration in declarations
            ],
            "file_count": len(files),
        }

        return GenerationResult(files, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
