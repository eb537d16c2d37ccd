"""Americano doubles tournament scheduler."""
__version__ = "0.1.0"
