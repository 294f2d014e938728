"""Playback and export of the selected tones."""
