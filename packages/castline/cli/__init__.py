"""Command-line interface for Castline."""
