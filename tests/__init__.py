"""Tests for the Budget Game rewards engine."""
