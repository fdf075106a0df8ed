"""
transgen code generation package.

Generates type declarations plus binary encoders/decoders in various
languages from a schema model.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.schema import (
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
    load_schema_document,
    schema_from_dict,
)
from .core.naming import Name
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config


def generate_from_document(document: SchemaDocument, language: str = "python", config=None):
    """
    Generate code for every declaration of a loaded schema document.

    Args:
        document: SchemaDocument from load_schema_document()
        language: Target language name or alias
        config: Generator configuration dict, path or GeneratorConfig

    Returns:
        GenerationResult with the generated files
    """
    generator = get_generator(language, document.name, document.version, config)
    return generate_code(generator, document.declarations)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "generate_from_document",
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
    "Name",
    "load_schema_document",
    "schema_from_dict",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
]
