"""
Frequency & Octave Model
========================
A frequency value, its octave transpositions, and its octave-agnostic
comparison against the reference ("important") frequencies.

Classes:
    Frequency: A single Hz value.
    ImportantFrequency: A reference frequency with descriptive metadata.
    EvaluationResult: Outcome of comparing a frequency to a reference frequency.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from harmonicexplorer.model.colors import frequency_to_hex, frequency_to_rgb, RGB
from harmonicexplorer.model.exceptions import ValidationError

if TYPE_CHECKING:
    import numpy.typing as npt
    from harmonicexplorer.model.tuning import NoteMatch, Tuner

DEFAULT_OCTAVE_DEPTH = 8
PERFECT_EPSILON = 1e-9


@dataclass(frozen=True)
class Frequency:
    hertz_value: float

    def __post_init__(self) -> None:
        if not self.hertz_value > 0:
            raise ValidationError(f"Frequency must be positive, got {self.hertz_value}.")

    @property
    def hex_color(self) -> str:
        return frequency_to_hex(self.hertz_value)

    @property
    def rgb(self) -> RGB:
        return frequency_to_rgb(self.hertz_value)

    def note(self, tuner: Tuner) -> NoteMatch:
        """Closest note of this frequency in the tuner's active tuning."""
        return tuner.determine_note(self.hertz_value)

    def octaves_above(self, octave_count: int = DEFAULT_OCTAVE_DEPTH, inclusive: bool = True) -> npt.NDArray[np.float64]:
        start = 0 if inclusive else 1
        return self.hertz_value * np.power(2.0, np.arange(start, octave_count, dtype=np.float64))

    def octaves_below(self, octave_count: int = DEFAULT_OCTAVE_DEPTH, inclusive: bool = True) -> npt.NDArray[np.float64]:
        start = 0 if inclusive else 1
        return self.hertz_value * np.power(2.0, -np.arange(start, octave_count, dtype=np.float64))

    def evaluate_against(self, other: Frequency | ImportantFrequency, within_percent: float) -> Optional[EvaluationResult]:
        """
        Check whether `other`, moved by a whole number of octaves towards this
        frequency, lands within `within_percent` of it.

        The first qualifying octave in generation order wins, even when a later
        octave would be closer.
        """
        other_hz = other.hertz_value
        min_ratio = 1.0 - within_percent / 100.0
        max_ratio = 1.0 + within_percent / 100.0

        other_frequency = other.frequency if isinstance(other, ImportantFrequency) else other
        if other_hz <= self.hertz_value:
            candidates = other_frequency.octaves_above()
        else:
            candidates = other_frequency.octaves_below()

        ratios = candidates / self.hertz_value
        hits = np.flatnonzero((ratios >= min_ratio) & (ratios <= max_ratio))
        if hits.size == 0:
            return None

        ratio = float(ratios[hits[0]])
        perfect = abs(ratio - 1.0) <= PERFECT_EPSILON
        return EvaluationResult(frequency=other, ratio=ratio, perfect=perfect)


@dataclass(frozen=True)
class ImportantFrequency:
    """A frequency from the reference table together with its description."""
    id: str
    source: str
    category: str
    type: str
    emojis: str
    frequency: Frequency
    solfeggio: Optional[str] = None

    @property
    def hertz_value(self) -> float:
        return self.frequency.hertz_value

    @property
    def title(self) -> str:
        return f"{self.category} - {self.type}"


@dataclass(frozen=True)
class EvaluationResult:
    frequency: ImportantFrequency | Frequency
    ratio: float = 0.0
    perfect: bool = False

    @property
    def match_percentage(self) -> float:
        return (self.ratio - 1.0) * 100.0

    @property
    def sort_key(self) -> Tuple[bool, float]:
        # perfect matches first, then by closeness to an exact ratio of 1
        return not self.perfect, abs(self.ratio - 1.0)

    def compare_to(self, other: EvaluationResult) -> float:
        """Negative when self ranks before other, positive when after."""
        if self.perfect and not other.perfect:
            return -1
        if not self.perfect and other.perfect:
            return 1
        return abs(self.ratio - 1.0) - abs(other.ratio - 1.0)


def rank_results(results: Iterable[EvaluationResult]) -> List[EvaluationResult]:
    """Order results best match first (stable for equal ranks)."""
    return sorted(results, key=lambda result: result.sort_key)
