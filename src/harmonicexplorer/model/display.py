"""
Display values for matches and notes.

The views only format and paint; grading a match or a cents deviation into
text, colour and weight happens here, as plain data.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harmonicexplorer.model.frequencies import EvaluationResult
    from harmonicexplorer.model.tuning import NoteMatch

GOOD = "green"
NEAR = "#83af2b"
FAIR = "#bfbf02"
LOOSE = "#d67b04"
POOR = "#a60f0f"
AUTO = "auto"

# (upper bound, colour) pairs, first bound that exceeds the value wins
MATCH_GRADES = ((0.1, GOOD), (0.2, NEAR), (0.5, FAIR), (1.0, LOOSE))
CENTS_GRADES = ((1.5, GOOD), (5.0, NEAR), (10.0, FAIR), (20.0, LOOSE))


@dataclass(frozen=True)
class MatchLabel:
    emojis: str
    text: str
    color: str
    bold: bool
    tooltip: str


@dataclass(frozen=True)
class NoteLabel:
    text: str
    cents_text: str
    interval: str
    color: str
    bold: bool
    in_range: bool


def _grade(value: float, grades: tuple) -> str:
    for bound, color in grades:
        if value < bound:
            return color
    return POOR


def describe_match(result: EvaluationResult) -> MatchLabel:
    reference = result.frequency
    emojis = getattr(reference, "emojis", "")
    tooltip = getattr(reference, "title", "")

    if result.perfect:
        return MatchLabel(emojis=emojis, text="perfect", color=GOOD, bold=True, tooltip=tooltip)

    percentage = round(result.match_percentage, 3)
    color = _grade(abs(percentage), MATCH_GRADES)
    if percentage == 0.0:
        return MatchLabel(emojis=emojis, text="~perfect", color=color, bold=True, tooltip=tooltip)

    sign = "+" if percentage > 0.0 else ""
    return MatchLabel(emojis=emojis, text=f"{sign}{percentage:.3f}%", color=color, bold=False, tooltip=tooltip)


def describe_note(match: NoteMatch) -> NoteLabel:
    if not match.is_known:
        return NoteLabel(text="(out of range)", cents_text="", interval="", color=AUTO, bold=False, in_range=False)

    # pad natural notes so the octave digits line up with sharps and flats
    name = match.note if ("♯" in match.note or "♭" in match.note) else f"{match.note} "
    text = f"{name}{match.octave}"

    if match.cents == 0:
        return NoteLabel(text=text, cents_text="(perfect)", interval=match.interval, color=GOOD, bold=True, in_range=True)

    sign = "+" if match.cents > 0 else "-"
    deviation = abs(match.cents)
    return NoteLabel(
        text=text,
        cents_text=f"({sign}{deviation:g}¢)",
        interval=match.interval,
        color=_grade(deviation, CENTS_GRADES),
        bold=False,
        in_range=True,
    )
