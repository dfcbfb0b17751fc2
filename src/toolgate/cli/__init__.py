"""Command-line interface for toolgate."""
