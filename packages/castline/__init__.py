"""Castline: skill-cast timeline planner and effect resolution engine."""

__version__ = "0.1.0"
