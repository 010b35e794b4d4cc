"""
pocketledger - Core Package

A personal finance tracker core: quick-entry parsing, a single
authoritative transaction list, and statistics recomputed from it.

DESIGN PRINCIPLES:
1. Forgiving input, strict storage (parse anything, store only amount > 0)
2. Derived views are never stored
3. Network collaborators are told, never asked
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "pocketledger Team"
