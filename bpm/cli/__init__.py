"""Command line interface for bpm."""
