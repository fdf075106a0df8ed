"""
Core code generation components.

Provides the schema model, naming, text emission and the base generator
used by all language generators.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .schema import (
    Enumeration,
    Field,
    Map,
    OneOf,
    Option,
    Primitive,
    Schema,
    SchemaDocument,
    SchemaError,
    Struct,
    Vec,
    collect_declarations,
    load_schema_document,
    schema_from_dict,
)
from .naming import Name, NameSanitizer, Substitutions
from .writer import EmitterError, Writer
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Schema model
    "Primitive",
    "Struct",
    "Field",
    "OneOf",
    "Enumeration",
    "Option",
    "Vec",
    "Map",
    "Schema",
    "SchemaDocument",
    "SchemaError",
    "collect_declarations",
    "load_schema_document",
    "schema_from_dict",
    # Naming utilities
    "Name",
    "NameSanitizer",
    "Substitutions",
    # Text emission
    "Writer",
    "EmitterError",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
