"""
Frequency to Colour
===================
Converts an audio frequency to a visible colour by doubling it (raising it by
octaves) until it reaches the visible light range, then mapping the resulting
wavelength onto the spectrum.

The wavelength mapping follows the classic piecewise-linear approximation of
the visible spectrum (380-780 nm) with an intensity roll-off at the edges and
gamma correction.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

from harmonicexplorer.model.exceptions import ValidationError

SPEED_OF_LIGHT = 299792458.0  # m/s
INFRARED_THRESHOLD_HZ = 3.85e14
GAMMA = 0.8

VISIBLE_MIN_NM = 380.0
VISIBLE_MAX_NM = 780.0

# Channel knots (wavelength nm -> channel level) between band edges
_RED_KNOTS = ([380.0, 440.0, 510.0, 580.0, 780.0], [1.0, 0.0, 0.0, 1.0, 1.0])
_GREEN_KNOTS = ([380.0, 440.0, 490.0, 580.0, 645.0, 780.0], [0.0, 0.0, 1.0, 1.0, 0.0, 0.0])
_BLUE_KNOTS = ([380.0, 490.0, 510.0, 780.0], [1.0, 1.0, 0.0, 0.0])
_INTENSITY_KNOTS = ([380.0, 420.0, 700.0, 780.0], [0.3, 1.0, 1.0, 0.3])

RGB = Tuple[int, int, int]


def shift_to_visible(frequency: float) -> float:
    """Double the frequency until it is above the infrared threshold."""
    if not frequency > 0:
        raise ValidationError(f"Frequency must be positive, got {frequency}.")
    shifted = float(frequency)
    while shifted < INFRARED_THRESHOLD_HZ:
        shifted *= 2.0
    return shifted


def wavelength_to_rgb(wavelength_nm: float) -> RGB:
    """Map a wavelength (nm) to 0-255 RGB. Outside 380-780 nm gives black."""
    if wavelength_nm < VISIBLE_MIN_NM or wavelength_nm > VISIBLE_MAX_NM:
        return 0, 0, 0

    intensity = np.interp(wavelength_nm, *_INTENSITY_KNOTS)
    levels = np.array([
        np.interp(wavelength_nm, *_RED_KNOTS),
        np.interp(wavelength_nm, *_GREEN_KNOTS),
        np.interp(wavelength_nm, *_BLUE_KNOTS),
    ])
    corrected = 255.0 * np.power(levels * intensity, GAMMA)
    # round half up
    r, g, b = np.floor(corrected + 0.5).astype(int)
    return int(r), int(g), int(b)


def frequency_to_rgb(frequency: float) -> RGB:
    """RGB colour of an audio frequency."""
    wavelength_nm = SPEED_OF_LIGHT / shift_to_visible(frequency) * 1e9
    return wavelength_to_rgb(wavelength_nm)


def rgb_to_hex(rgb: RGB) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def frequency_to_hex(frequency: float) -> str:
    """Hex colour code (e.g. "#RRGGBB") of an audio frequency."""
    return rgb_to_hex(frequency_to_rgb(frequency))
