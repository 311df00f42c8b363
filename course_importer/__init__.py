"""Bulk course import from Excel workbooks into the college admin backend."""

__version__ = "0.1.0"
