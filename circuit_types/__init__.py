"""Structural, symbol and type analyses and tree decorators for arithmetic circuit programs."""

__version__ = "2.1.5"