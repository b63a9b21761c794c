"""Cell references, shared strings, rich text, workbook parts and in-memory rows for XLSX spreadsheets."""

__version__ = "0.1.0"

__all__ = ["parts", "reftable", "refs", "richtext", "rows"]