"""Utility helpers for typst-count."""
