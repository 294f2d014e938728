import numpy as np
import numpy.typing as npt

CENTS_PER_OCTAVE = 1200.0


def cents_between(target_hz: npt.ArrayLike, actual_hz: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Signed distance in cents from actual_hz up to target_hz, elementwise."""
    return CENTS_PER_OCTAVE * np.log2(np.divide(target_hz, actual_hz))


def initial_gain(frequency: float) -> float:
    """
    Starting gain for a tone, a gentle low-pass curve: 0.7 / 2^x where x grows
    by one for every 100 Hz above 40 Hz.
    """
    exponent = max(0.0, (frequency - 40.0) / 100.0)
    return 0.7 * 2.0 ** (-exponent)
