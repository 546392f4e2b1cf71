"""Tests for bpm.lockfile and bpm.models."""
