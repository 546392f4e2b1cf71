"""Tests for bpm.discovery."""
