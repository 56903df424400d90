"""
Test suite for curve-sale-engine

Contains:
- tests/unit/          : Unit tests for math primitives, domain models,
                         contracts and the sale instance (purchase, governance)
"""
