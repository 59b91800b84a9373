"""Command-line interface and terminal UI."""
