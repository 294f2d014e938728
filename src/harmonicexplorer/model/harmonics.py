"""
Harmonic / Root Aggregate
=========================
A Root owns its Harmonics, each Harmonic owns its PlayableOctaves.

Changes to the root frequency, the additional offset or the meaning
sensitivity are applied in place and fanned out to every descendant, so that
references held elsewhere (e.g. the player's selected tones) stay valid and
pick up the new values.

The fan-out runs under the Root's lock. Threads reading Hz values while the
GUI thread may be mutating them (the audio callback) take the same lock.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING
import logging
import threading

from harmonicexplorer.config import DEFAULT_HARMONIC_COUNT, DEFAULT_OCTAVE_COUNT, DEFAULT_MEANING_SENSITIVITY
from harmonicexplorer.model.exceptions import ValidationError
from harmonicexplorer.model.frequencies import EvaluationResult, Frequency, rank_results

if TYPE_CHECKING:
    from harmonicexplorer.model.frequencies import ImportantFrequency

logger = logging.getLogger(__name__)


def _lookup(items: list, number: int):
    """1-based lookup returning None when out of range (including number < 1)."""
    if 1 <= number <= len(items):
        return items[number - 1]
    return None


class PlayableOctave:
    """One octave transposition of a harmonic."""

    def __init__(
        self,
        harmonic_hertz_value: float,
        harmonic_number: int,
        octave_number: int,
        additional_hertz: float = 0.0
    ) -> None:
        self._harmonic_hertz_value = harmonic_hertz_value
        self._harmonic_number = harmonic_number
        self._octave_number = octave_number
        self._additional_hertz = additional_hertz

    @property
    def octave_hertz_value(self) -> float:
        return self._harmonic_hertz_value * 2.0 ** (self._octave_number - 1) + self._additional_hertz

    @property
    def harmonic_hertz_value(self) -> float:
        return self._harmonic_hertz_value

    @harmonic_hertz_value.setter
    def harmonic_hertz_value(self, value: float) -> None:
        self._harmonic_hertz_value = value

    @property
    def additional_hertz_value(self) -> float:
        return self._additional_hertz

    @additional_hertz_value.setter
    def additional_hertz_value(self, value: float) -> None:
        self._additional_hertz = value

    @property
    def harmonic_number(self) -> int:
        return self._harmonic_number

    @property
    def octave_number(self) -> int:
        return self._octave_number

    def as_frequency(self) -> Frequency:
        return Frequency(self.octave_hertz_value)

    def __repr__(self) -> str:
        return f"PlayableOctave({self._harmonic_number}:{self._octave_number}, {self.octave_hertz_value:.6f} Hz)"


class Harmonic:
    """A whole-number multiple of the root frequency, with its playable octaves."""

    def __init__(
        self,
        root_hertz_value: float,
        harmonic_number: int,
        octave_count: int = DEFAULT_OCTAVE_COUNT,
        additional_hertz: float = 0.0
    ) -> None:
        self._root_hertz_value = root_hertz_value
        self._harmonic_number = harmonic_number
        self._additional_hertz = additional_hertz
        self._meaning_sensitivity = DEFAULT_MEANING_SENSITIVITY
        self._playable_octaves: List[PlayableOctave] = [
            PlayableOctave(harmonic_number * root_hertz_value, harmonic_number, octave, additional_hertz)
            for octave in range(1, octave_count + 1)
        ]

    @property
    def root_hertz_value(self) -> float:
        return self._root_hertz_value

    @root_hertz_value.setter
    def root_hertz_value(self, value: float) -> None:
        self._root_hertz_value = value
        for octave in self._playable_octaves:
            octave.harmonic_hertz_value = self._harmonic_number * value

    @property
    def additional_hertz_value(self) -> float:
        return self._additional_hertz

    @additional_hertz_value.setter
    def additional_hertz_value(self, value: float) -> None:
        self._additional_hertz = value
        for octave in self._playable_octaves:
            octave.additional_hertz_value = value

    @property
    def meaning_sensitivity(self) -> float:
        return self._meaning_sensitivity

    @meaning_sensitivity.setter
    def meaning_sensitivity(self, value: float) -> None:
        self._meaning_sensitivity = value

    @property
    def harmonic_number(self) -> int:
        return self._harmonic_number

    @property
    def harmonic_hertz_value(self) -> float:
        return self._harmonic_number * self._root_hertz_value + self._additional_hertz

    @property
    def playable_octaves(self) -> Tuple[PlayableOctave, ...]:
        return tuple(self._playable_octaves)

    def find_playable_octave(self, octave_number: int) -> Optional[PlayableOctave]:
        return _lookup(self._playable_octaves, octave_number)

    def as_frequency(self) -> Frequency:
        return Frequency(self.harmonic_hertz_value)

    def find_matching_important_frequencies(
        self,
        references: Iterable[ImportantFrequency]
    ) -> List[EvaluationResult]:
        """
        Evaluate this harmonic against every reference frequency using the
        current sensitivity (percent) and return the matches, best first.
        """
        frequency = self.as_frequency()
        matches = []
        for reference in references:
            result = frequency.evaluate_against(reference, self._meaning_sensitivity)
            if result is not None:
                matches.append(result)
        return rank_results(matches)

    def __repr__(self) -> str:
        return f"Harmonic({self._harmonic_number}, {self.harmonic_hertz_value:.6f} Hz)"


class Root:
    """
    The root frequency from which all harmonics are built. Setting the root
    frequency re-tunes every harmonic in place and keeps their identity.
    """

    def __init__(
        self,
        root_hertz_value: float,
        harmonic_count: int = DEFAULT_HARMONIC_COUNT,
        additional_hertz: float = 0.0,
        octave_count: int = DEFAULT_OCTAVE_COUNT
    ) -> None:
        _validate_root(root_hertz_value)
        self.lock = threading.RLock()
        self._root_hertz_value = root_hertz_value
        self._additional_hertz = additional_hertz
        self._meaning_sensitivity = DEFAULT_MEANING_SENSITIVITY
        self._octave_count = octave_count
        self._harmonics: List[Harmonic] = [
            Harmonic(root_hertz_value, number, octave_count, additional_hertz)
            for number in range(1, harmonic_count + 1)
        ]
        logger.debug(
            f"Root built: {root_hertz_value} Hz (+{additional_hertz} Hz), "
            f"{harmonic_count} harmonics x {octave_count} octaves"
        )

    @property
    def root_hertz_value(self) -> float:
        """Effective root frequency (base value plus the additional offset)."""
        return self._root_hertz_value + self._additional_hertz

    @root_hertz_value.setter
    def root_hertz_value(self, value: float) -> None:
        self.update(root_hertz_value=value)

    @property
    def base_hertz_value(self) -> float:
        return self._root_hertz_value

    @property
    def additional_hertz_value(self) -> float:
        return self._additional_hertz

    @additional_hertz_value.setter
    def additional_hertz_value(self, value: float) -> None:
        self.update(additional_hertz=value)

    @property
    def meaning_sensitivity(self) -> float:
        return self._meaning_sensitivity

    @meaning_sensitivity.setter
    def meaning_sensitivity(self, value: float) -> None:
        self.update(meaning_sensitivity=value)

    @property
    def harmonics(self) -> Tuple[Harmonic, ...]:
        return tuple(self._harmonics)

    @property
    def harmonic_count(self) -> int:
        return len(self._harmonics)

    @property
    def octave_count(self) -> int:
        return self._octave_count

    def update(
        self,
        root_hertz_value: Optional[float] = None,
        additional_hertz: Optional[float] = None,
        meaning_sensitivity: Optional[float] = None
    ) -> None:
        """
        Apply one or more changes and propagate them to every harmonic and
        playable octave as a single step.
        """
        if root_hertz_value is not None:
            _validate_root(root_hertz_value)
        if meaning_sensitivity is not None and meaning_sensitivity < 0:
            raise ValidationError(f"Meaning sensitivity must not be negative, got {meaning_sensitivity}.")

        with self.lock:
            if root_hertz_value is not None:
                self._root_hertz_value = root_hertz_value
                for harmonic in self._harmonics:
                    harmonic.root_hertz_value = root_hertz_value
            if additional_hertz is not None:
                self._additional_hertz = additional_hertz
                for harmonic in self._harmonics:
                    harmonic.additional_hertz_value = additional_hertz
            if meaning_sensitivity is not None:
                self._meaning_sensitivity = meaning_sensitivity
                for harmonic in self._harmonics:
                    harmonic.meaning_sensitivity = meaning_sensitivity

    def find_harmonic(self, harmonic_number: int) -> Optional[Harmonic]:
        return _lookup(self._harmonics, harmonic_number)

    def find_playable_octave(self, harmonic_number: int, octave_number: int) -> Optional[PlayableOctave]:
        harmonic = self.find_harmonic(harmonic_number)
        if harmonic is None:
            return None
        return harmonic.find_playable_octave(octave_number)

    def as_frequency(self) -> Frequency:
        return Frequency(self._root_hertz_value)


def _validate_root(value: float) -> None:
    if not value > 0:
        raise ValidationError(f"Root frequency must be positive, got {value}.")


def equivalent_octave_cells(
    harmonic_number: int,
    octave_number: int,
    harmonic_count: int = DEFAULT_HARMONIC_COUNT,
    octave_count: int = DEFAULT_OCTAVE_COUNT
) -> List[Tuple[int, int]]:
    """
    All (harmonic, octave) cells of the table sounding the same pitch as the
    given cell, the cell itself included. E.g. 1:3 also sounds as 2:2 and 4:1.
    """
    cells = []
    # higher harmonics in lower octaves
    for octave in range(octave_number, 0, -1):
        harmonic = harmonic_number * 2 ** (octave_number - octave)
        if 1 <= harmonic <= harmonic_count:
            cells.append((harmonic, octave))
    # lower harmonics in higher octaves
    for octave in range(octave_number + 1, octave_count + 1):
        divisor = 2 ** (octave - octave_number)
        if harmonic_number % divisor == 0:
            cells.append((harmonic_number // divisor, octave))
    return cells
