"""
Core Package
============

Reusable building blocks of the validation engine.

Modules:
- settings.py: Configuration constants
- errors.py: Error kinds and exceptions
- violation.py: Violation and outcome records
- xml_loader.py: File loading and lxml parsing
- schema_cache.py: TTL cache for compiled schemas
- schema_model.py: Schema Model builder
"""

from .errors import ErrorKind, ValidatorError
from .schema_cache import SchemaCache, cache_key
from .schema_model import SchemaModel, build_schema_model
from .violation import ClassResult, Location, ValidationOutcome, Violation

__all__ = [
    'ErrorKind',
    'ValidatorError',
    'SchemaCache',
    'cache_key',
    'SchemaModel',
    'build_schema_model',
    'ClassResult',
    'Location',
    'ValidationOutcome',
    'Violation',
]
