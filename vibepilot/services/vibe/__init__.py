"""Vibe interpretation, search fallback and chart metrics."""
