"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks of the curve sale
that are independent of external collaborators (asset ledger, access control).
"""
