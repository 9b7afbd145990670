"""Shared building blocks for despace."""
