"""
Table item factories shared by the harmonic table and the player table.
They paint the plain display values produced by model.display.
"""
from typing import List

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QFont
from PySide6.QtWidgets import QTableWidgetItem

from harmonicexplorer.model.display import AUTO, describe_match, describe_note
from harmonicexplorer.model.frequencies import EvaluationResult
from harmonicexplorer.model.tuning import NoteMatch

HIGHLIGHT_COLOR = "#a3e8a2"


def read_only_item(text: str) -> QTableWidgetItem:
    item = QTableWidgetItem(text)
    item.setFlags(item.flags() & ~Qt.ItemIsEditable)
    return item


def _style(item: QTableWidgetItem, color: str, bold: bool) -> None:
    if color != AUTO:
        item.setForeground(QBrush(QColor(color)))
    if bold:
        font = QFont(item.font())
        font.setBold(True)
        item.setFont(font)


def meaning_item(matches: List[EvaluationResult]) -> QTableWidgetItem:
    """One line per matched reference frequency, coloured by the best match."""
    labels = [describe_match(match) for match in matches]
    item = read_only_item("\n".join(f"{label.emojis} ({label.text})" for label in labels))
    if labels:
        _style(item, labels[0].color, labels[0].bold)
        item.setToolTip("\n".join(label.tooltip for label in labels))
    return item


def note_item(match: NoteMatch) -> QTableWidgetItem:
    label = describe_note(match)
    text = label.text
    if label.cents_text:
        text += f" {label.cents_text}"
    if label.interval:
        text += f"\n({label.interval})"
    item = read_only_item(text)
    _style(item, label.color, label.bold)
    if label.in_range:
        item.setToolTip(f"{match.target_hertz:.4f} Hz")
    return item


def color_item(hex_color: str) -> QTableWidgetItem:
    item = read_only_item("")
    item.setBackground(QBrush(QColor(hex_color)))
    item.setToolTip(hex_color)
    return item
