"""Tests for bpm.cli."""
