"""Unit tests for the harmonic explorer model and player.

The tests mirror the package layout and need neither a display nor an audio
device: the player is driven with a fake output stream.
"""
