"""Tests for pyecoflow."""
