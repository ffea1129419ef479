"""Sector-based API-contract code generator."""

__version__ = "0.1.0"
