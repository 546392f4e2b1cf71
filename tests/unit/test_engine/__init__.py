"""Tests for bpm.engine."""
