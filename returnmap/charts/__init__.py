"""Static chart rendering."""
