"""Core business logic layer.

Subpackages:
- packing: duplicate merging and status transitions for packing items
- shopping: deriving the shopping list from packing items and meals
- sync: write coalescing, optimistic patches and the per-trip facade
"""
__all__ = ["packing", "shopping", "sync"]
