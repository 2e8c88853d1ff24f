"""Textbook page to lesson media studio."""

__version__ = "0.1.0"
