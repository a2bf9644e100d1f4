"""Command-line entry points for massprops."""
