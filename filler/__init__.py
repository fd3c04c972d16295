"""Spreadsheet -> fillable PDF batch generator.

Reads one spreadsheet and one AcroForm template, maps template fields to
columns, groups and sorts the rows and writes one filled PDF per row.
"""

__version__ = "0.1.0"
