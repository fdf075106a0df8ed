"""transgen: schema-driven generator of types and binary codecs."""

__version__ = "0.1.0"
