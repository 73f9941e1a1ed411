"""
Services Package
================

Business logic layer for xmlguard.

Services:
- ValidationService: Validation workflow
- ErrorAggregator: Grouping and report rendering
"""

from .report_service import ErrorAggregator
from .validation_service import ValidationService

__all__ = [
    'ErrorAggregator',
    'ValidationService',
]
