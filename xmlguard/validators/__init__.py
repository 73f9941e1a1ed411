"""
Validators Package
==================

This package contains all XML validation logic:
- Facet validation of simple-type values
- XSD schema validation
- Custom business rule validation
- Element order validation

Modules:
- validation_pipeline.py: Main validation orchestrator
- structural.py: XSD validation via python-xmlschema
- custom_rules.py: Business rules
- element_order.py: Declared child order check
- facets.py: Per-base-type facet validators
"""

from .custom_rules import CustomRuleValidator, default_rules
from .element_order import ElementOrderValidator
from .structural import StructuralValidator
from .validation_pipeline import CompiledSchema, ValidationPipeline

__all__ = [
    'CompiledSchema',
    'CustomRuleValidator',
    'ElementOrderValidator',
    'StructuralValidator',
    'ValidationPipeline',
    'default_rules',
]
