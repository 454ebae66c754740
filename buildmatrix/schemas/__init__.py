"""Packaged JSON schemas for buildmatrix documents."""
