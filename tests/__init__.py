"""Test suite for castline."""
