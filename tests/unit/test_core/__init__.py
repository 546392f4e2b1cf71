"""Tests for bpm.core."""
