"""Harmonic frequency explorer and tone player."""
