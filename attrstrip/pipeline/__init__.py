"""Parse, filter and transform stages."""
