"""Internal helpers for excel_records."""
