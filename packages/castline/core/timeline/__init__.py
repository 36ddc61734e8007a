"""Skill-cast timeline: domain models, effect resolution engine, snapshots."""
