"""
Tuning System
=============
Maps frequencies to musical notes for a selectable basis pitch and a
12-tone ratio table (equal temperament or one of several just intonations).

Classes:
    BasisNote: Reference pitch of C4 and its derived A4 values.
    NoteMatch: Result of a note lookup.
    Tuner: Active {basis, ratio table} selection and the note search.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, List, Optional, Tuple
import logging
import math

import numpy as np

from harmonicexplorer.model.exceptions import InvalidKeyError, MissingConfigurationError, ValidationError
from harmonicexplorer.utils import cents_between

logger = logging.getLogger(__name__)

# Ratio of A4 to C4
JUST_A4_RATIO = 5.0 / 3.0
EQUAL_A4_RATIO = 2.0 ** (9.0 / 12.0)

# Searched registers are 0..8, expressed relative to register 4
OCTAVE_REGISTERS = np.arange(0, 9)
REFERENCE_REGISTER = 4

MAX_CENTS_DEVIATION = 100.0


# ------------------------------------------------------------------------------
# Keys
# ------------------------------------------------------------------------------
class TuningKey(StrEnum):
    EQUAL = "equal"
    JUST5_ASYM = "just5-asym"
    JUST5_ASYMX = "just5-asymx"
    JUST5_SYM1 = "just5-sym1"
    JUST5_SYM2 = "just5-sym2"
    JUST7 = "just7"
    JUST17 = "just17"


class BasisKey(StrEnum):
    C256 = "c256"
    A432_JUST = "a432j"
    A432_EQUAL = "a432e"
    A440_JUST = "a440j"
    A440_EQUAL = "a440e"


# ------------------------------------------------------------------------------
# Ratio tables (relative to C, key of C)
# reference: https://en.wikipedia.org/wiki/Five-limit_tuning#Twelve-tone_scale
# ------------------------------------------------------------------------------
TUNING_RATIOS: Dict[str, Dict[str, float]] = {
    TuningKey.EQUAL: {
        "C": 1.0,
        "C♯": 2.0 ** (1 / 12),
        "D": 2.0 ** (2 / 12),
        "D♯": 2.0 ** (3 / 12),
        "E": 2.0 ** (4 / 12),
        "F": 2.0 ** (5 / 12),
        "F♯": 2.0 ** (6 / 12),  # augmented 4th and diminished 5th
        "G": 2.0 ** (7 / 12),
        "G♯": 2.0 ** (8 / 12),
        "A": 2.0 ** (9 / 12),
        "A♯": 2.0 ** (10 / 12),
        "B": 2.0 ** (11 / 12),
    },
    TuningKey.JUST5_ASYM: {
        "C": 1 / 1,
        "D♭♭": 16 / 15,
        "D": 9 / 8,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 45 / 32,
        "G♭♭": 64 / 45,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 9 / 5,
        "B": 15 / 8,
    },
    TuningKey.JUST5_ASYMX: {
        "C": 1 / 1,
        "D♭♭": 16 / 15,
        "D": 9 / 8,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 25 / 18,
        "G♭♭": 36 / 25,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 9 / 5,
        "B": 15 / 8,
    },
    TuningKey.JUST5_SYM1: {
        "C": 1 / 1,
        "D♭♭": 16 / 15,
        "D": 9 / 8,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 45 / 32,
        "G♭♭": 64 / 45,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 16 / 9,
        "B": 15 / 8,
    },
    TuningKey.JUST5_SYM2: {
        "C": 1 / 1,
        "D♭♭": 16 / 15,
        "D": 10 / 9,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 45 / 32,
        "G♭♭": 64 / 45,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 9 / 5,
        "B": 15 / 8,
    },
    TuningKey.JUST7: {
        "C": 1 / 1,
        "D♭♭": 15 / 14,
        "D": 8 / 7,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 7 / 5,
        "G♭♭": 10 / 7,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 7 / 4,
        "B": 15 / 8,
    },
    TuningKey.JUST17: {
        "C": 1 / 1,
        "D♭♭": 14 / 13,
        "D": 8 / 7,
        "E♭": 6 / 5,
        "E": 5 / 4,
        "F": 4 / 3,
        "F♯♯": 17 / 12,
        "G♭♭": 24 / 17,
        "G": 3 / 2,
        "A♭": 8 / 5,
        "A": 5 / 3,
        "B♭": 7 / 4,
        "B": 13 / 7,
    },
}

TUNING_NAMES: Dict[str, str] = {
    TuningKey.EQUAL: "equal temperament (standard)",
    TuningKey.JUST5_ASYM: "5-limit just, standard asymmetric",
    TuningKey.JUST5_ASYMX: "5-limit just, extended asymmetric",
    TuningKey.JUST5_SYM1: "5-limit just, symmetric #1",
    TuningKey.JUST5_SYM2: "5-limit just, symmetric #2",
    TuningKey.JUST7: "7-limit just intonation",
    TuningKey.JUST17: "17-limit just intonation",
}

INTERVAL_NAMES_IN_C: Dict[str, str] = {
    "C": "octave of C",
    "C♯": "minor 2nd of C",
    "D♭♭": "minor 2nd of C",
    "D": "major 2nd of C",
    "D♯": "minor 3rd of C",
    "E♭": "minor 3rd of C",
    "E": "major 3rd of C",
    "F": "perfect 4th of C",
    "F♯♯": "augmented 4th of C",
    "F♯": "tritone of C",
    "G♭♭": "diminished 5th of C",
    "G": "perfect 5th of C",
    "G♯": "minor 6th of C",
    "A♭": "minor 6th of C",
    "A": "major 6th of C",
    "A♯": "minor 7th of C",
    "B♭": "minor 7th of C",
    "B": "major 7th of C",
}


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
class BasisNote:
    """
    Reference pitch for C4. Exactly one of base_c4, just_a4 or equal_a4 defines
    it; the other two are derived.
    """
    __slots__ = ("_name", "_base_c4", "_just_a4", "_equal_a4", "_best_tuning")

    def __init__(
        self,
        name: str,
        *,
        base_c4: Optional[float] = None,
        just_a4: Optional[float] = None,
        equal_a4: Optional[float] = None,
    ) -> None:
        given = [value for value in (base_c4, just_a4, equal_a4) if value is not None]
        if not given:
            raise MissingConfigurationError(
                f"Basis '{name}': frequency not provided in base_c4, just_a4, or equal_a4."
            )
        if len(given) > 1:
            raise ValidationError(
                f"Basis '{name}': provide only one of base_c4, just_a4, or equal_a4."
            )
        if given[0] <= 0:
            raise ValidationError(f"Basis '{name}': frequency must be positive, got {given[0]}.")

        if base_c4 is not None:
            c4 = float(base_c4)
            best = TuningKey.JUST7
        elif just_a4 is not None:
            c4 = float(just_a4) / JUST_A4_RATIO
            best = TuningKey.JUST7
        else:
            c4 = float(equal_a4) / EQUAL_A4_RATIO
            best = TuningKey.EQUAL

        self._name = name
        self._base_c4 = c4
        self._just_a4 = float(just_a4) if just_a4 is not None else c4 * JUST_A4_RATIO
        self._equal_a4 = float(equal_a4) if equal_a4 is not None else c4 * EQUAL_A4_RATIO
        self._best_tuning = best

    @property
    def name(self) -> str:
        return self._name

    @property
    def base_c4(self) -> float:
        return self._base_c4

    @property
    def just_a4(self) -> float:
        return self._just_a4

    @property
    def equal_a4(self) -> float:
        return self._equal_a4

    @property
    def best_tuning(self) -> TuningKey:
        return self._best_tuning

    def __repr__(self) -> str:
        return f"BasisNote(name={self._name!r}, base_c4={self._base_c4!r})"


BASIS_OPTIONS: Dict[str, BasisNote] = {
    BasisKey.C256: BasisNote("C4 256 (scientific)", base_c4=256.0),
    BasisKey.A432_JUST: BasisNote("A4 432 (natural just)", just_a4=432.0),
    BasisKey.A432_EQUAL: BasisNote("A4 432 (natural equal)", equal_a4=432.0),
    BasisKey.A440_JUST: BasisNote("A4 440 (standard just)", just_a4=440.0),
    BasisKey.A440_EQUAL: BasisNote("A4 440 (standard equal)", equal_a4=440.0),
}


@dataclass(frozen=True)
class NoteMatch:
    """Closest note for a frequency in the active tuning."""
    note: str
    octave: int
    target_hertz: float
    cents: float
    interval: str

    UNKNOWN_NOTE = "unknown"

    @classmethod
    def unknown(cls) -> NoteMatch:
        return cls(note=cls.UNKNOWN_NOTE, octave=0, target_hertz=0.0, cents=math.inf, interval="")

    @property
    def is_known(self) -> bool:
        return self.note != self.UNKNOWN_NOTE and math.isfinite(self.cents)


def basis_options() -> List[Tuple[str, str]]:
    """(key, display name) pairs for every basis note."""
    return [(str(key), basis.name) for key, basis in BASIS_OPTIONS.items()]


def tuning_options() -> List[Tuple[str, str]]:
    """(key, display name) pairs for every ratio table."""
    return [(str(key), TUNING_NAMES[key]) for key in TUNING_RATIOS]


# ------------------------------------------------------------------------------
# Tuner
# ------------------------------------------------------------------------------
class Tuner:
    """
    Holds the selected basis note and ratio table. Changing the basis also
    resets the ratio table to the one the basis recommends.
    """

    def __init__(self, basis_key: str = BasisKey.C256) -> None:
        self.basis_key: str = ""
        self.basis_note: Optional[BasisNote] = None
        self.tuning_key: str = ""
        self.ratios: Dict[str, float] = {}
        self.change_basis(basis_key)

    def change_basis(self, basis_key: str) -> None:
        basis = BASIS_OPTIONS.get(basis_key)
        if basis is None:
            raise InvalidKeyError(f"Basis key '{basis_key}' is invalid.")
        self.basis_key = str(basis_key)
        self.basis_note = basis
        logger.debug(f"Basis changed to '{basis.name}' (C4 = {basis.base_c4:.6f} Hz)")
        self.change_tuning(basis.best_tuning)

    def change_tuning(self, tuning_key: str) -> None:
        ratios = TUNING_RATIOS.get(tuning_key)
        if ratios is None:
            raise InvalidKeyError(f"Tuning key '{tuning_key}' is invalid.")
        self.ratios = ratios
        self.tuning_key = str(tuning_key)
        logger.debug(f"Tuning changed to '{TUNING_NAMES[tuning_key]}'")

    def determine_note(self, frequency: float) -> NoteMatch:
        """
        Find the (register, note) pair closest in cents to the frequency.
        Registers 0..8 are searched for every note of the active table;
        only candidates within 100 cents qualify.
        """
        if not frequency > 0:
            return NoteMatch.unknown()

        names = list(self.ratios.keys())
        ratios = np.fromiter(self.ratios.values(), dtype=np.float64, count=len(names))
        multipliers = np.power(2.0, (OCTAVE_REGISTERS - REFERENCE_REGISTER).astype(np.float64))

        # rows: registers, columns: notes in table order
        targets = self.basis_note.base_c4 * np.outer(multipliers, ratios)
        cents = cents_between(targets, frequency)
        distance = np.where(np.abs(cents) < MAX_CENTS_DEVIATION, np.abs(cents), np.inf)

        # argmin returns the first minimum in register-then-note order
        best = int(np.argmin(distance))
        if not np.isfinite(distance.flat[best]):
            return NoteMatch.unknown()

        register, note_index = divmod(best, len(names))
        note = names[note_index]
        return NoteMatch(
            note=note,
            octave=int(OCTAVE_REGISTERS[register]),
            target_hertz=float(targets[register, note_index]),
            cents=round(float(cents[register, note_index]), 2),
            interval=INTERVAL_NAMES_IN_C.get(note, ""),
        )
