"""
Session State (Data Model)
==========================
The central data structure of the running application.

Why is this file needed?
------------------------
1. State Management: It holds the tuner, the reference table, the current
   Root and the player in one place. It is created once at startup and
   passed to every panel; nothing looks it up globally.
2. Root selection: It turns the user's root choice (a preset or a custom
   value) into a Root, replacing the old one only when the effective root
   frequency actually changes.

Classes:
    RootOption: One selectable root frequency preset.
    SessionState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from harmonicexplorer.config import DEFAULT_BASIS_KEY, DEFAULT_HARMONIC_COUNT, DEFAULT_MEANING_SENSITIVITY
from harmonicexplorer.controller.player import FrequencyPlayer
from harmonicexplorer.model.exceptions import InvalidKeyError, ValidationError
from harmonicexplorer.model.harmonics import Root
from harmonicexplorer.model.io import ReferenceFrequencyTable, load_reference_frequencies
from harmonicexplorer.model.tuning import Tuner

logger = logging.getLogger(__name__)

CUSTOM_ROOT_KEY = "custom"
SCHUMANN_ROOT_KEY = "schumann"


@dataclass(frozen=True)
class RootOption:
    key: str
    label: str
    hertz_value: float
    additional_hertz: float = 0.0


# Natural-tuning 0th octave notes and the Schumann resonance base
BASE_ROOT_OPTIONS: List[RootOption] = [
    RootOption(SCHUMANN_ROOT_KEY, "Schumann (6.5 + 1.333 Hz)", 6.5, 1.333333333),
    RootOption("c0", "C0", 16.0543),
    RootOption("d0", "D0", 18.0203),
    RootOption("e0", "E0", 20.2271),
    RootOption("f0", "F0", 21.4299),
    RootOption("g0", "G0", 24.0542),
    RootOption("a0", "A0", 27.0),
    RootOption("b0", "B0", 30.3065),
]


def build_root_options(references: ReferenceFrequencyTable) -> List[RootOption]:
    """Every reference frequency followed by the base presets."""
    options = [
        RootOption(ref.id, f"{ref.emojis} {ref.title} ({ref.hertz_value:g} Hz)", ref.hertz_value)
        for ref in references
    ]
    return options + BASE_ROOT_OPTIONS


@dataclass
class SessionState:
    """
    Holds the entire state of the running session.
    Pass this instance to your Controllers and Views.
    """
    references: ReferenceFrequencyTable = field(default_factory=load_reference_frequencies)
    tuner: Tuner = field(default_factory=lambda: Tuner(DEFAULT_BASIS_KEY))
    harmonic_count: int = DEFAULT_HARMONIC_COUNT
    meaning_sensitivity: float = DEFAULT_MEANING_SENSITIVITY

    root_options: List[RootOption] = field(init=False)
    selected_root_key: str = field(init=False)
    player: FrequencyPlayer = field(init=False)

    def __post_init__(self) -> None:
        self.root_options = build_root_options(self.references)
        first = self.root_options[0]
        self.selected_root_key = first.key
        self.player = FrequencyPlayer(self._build_root(first.hertz_value, first.additional_hertz))

    @property
    def root(self) -> Root:
        return self.player.root

    def find_root_option(self, key: str) -> Optional[RootOption]:
        for option in self.root_options:
            if option.key == key:
                return option
        return None

    def _build_root(self, hertz_value: float, additional_hertz: float) -> Root:
        root = Root(hertz_value, self.harmonic_count, additional_hertz)
        root.meaning_sensitivity = self.meaning_sensitivity
        return root

    def select_root(self, key: str, custom_value: Optional[float] = None) -> bool:
        """
        Select a root preset by key, or a custom value with key "custom".
        Returns True when the effective root changed and the Root (and with it
        the player's tone selection) was replaced.
        """
        if key == CUSTOM_ROOT_KEY:
            if custom_value is None or not custom_value > 0:
                raise ValidationError(f"Custom root frequency must be positive, got {custom_value}.")
            hertz_value, additional_hertz = float(custom_value), 0.0
        else:
            option = self.find_root_option(key)
            if option is None:
                raise InvalidKeyError(f"Root option '{key}' is invalid.")
            hertz_value, additional_hertz = option.hertz_value, option.additional_hertz

        if hertz_value + additional_hertz == self.root.root_hertz_value:
            self.selected_root_key = key
            return False

        # raises PlayerBusyError while an export is running
        self.player.root = self._build_root(hertz_value, additional_hertz)
        self.selected_root_key = key
        logger.info(f"Root changed to {hertz_value} Hz (+{additional_hertz} Hz)")
        return True

    def set_meaning_sensitivity(self, percent: float) -> None:
        self.root.meaning_sensitivity = percent
        self.meaning_sensitivity = percent

    def change_basis(self, basis_key: str) -> None:
        self.tuner.change_basis(basis_key)
        logger.info(f"Basis note set to '{self.tuner.basis_note.name}', tuning '{self.tuner.tuning_key}'")

    def change_tuning(self, tuning_key: str) -> None:
        self.tuner.change_tuning(tuning_key)
        logger.info(f"Tuning set to '{self.tuner.tuning_key}'")
