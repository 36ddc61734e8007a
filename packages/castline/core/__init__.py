"""Core library for Castline."""
