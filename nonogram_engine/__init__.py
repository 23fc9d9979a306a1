"""
Nonogram engine: line pattern enumeration, backtracking solver and forced-move hints.
"""

__version__ = "1.0.0"
