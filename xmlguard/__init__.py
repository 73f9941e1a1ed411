"""
xmlguard
========

Schema-driven XML validation: XSD conformance, declared element order and
custom business rules, aggregated into a single report.
"""

__version__ = "0.3.0"
