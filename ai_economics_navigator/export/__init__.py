"""
Export helpers for AI Economics Navigator.
"""

from .csv_export import render_translation_csv, translation_rows, write_translation_csv

__all__ = ["render_translation_csv", "translation_rows", "write_translation_csv"]
