"""Catan rules engine: board, rules, turn flow and scoring."""

__version__ = "0.1.0"
