"""Automatic CRUD admin panels for registered data types."""

__version__ = "0.1.0"
