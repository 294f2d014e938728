"""
Configuration & Path Management
===============================
Central registry for resource paths and application-wide defaults.

Resources (the reference frequency table) ship inside the package. When the
app is frozen with PyInstaller they are unpacked below sys._MEIPASS instead.

Exports:
    RESOURCES_PATH (str): Absolute path to the resources directory.
    REFERENCE_FREQUENCIES_PATH (str): Absolute path to the reference frequency table.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "harmonicexplorer", relative_path)

    # config.py is in src/harmonicexplorer/
    package_root: Path = Path(__file__).parent
    return os.path.join(str(package_root), relative_path)


RESOURCES_PATH: str = get_resource_path("resources")
REFERENCE_FREQUENCIES_PATH: str = os.path.join(RESOURCES_PATH, "reference_frequencies.json")

# Harmonic table
DEFAULT_HARMONIC_COUNT: int = 128
DEFAULT_OCTAVE_COUNT: int = 8
DEFAULT_MEANING_SENSITIVITY: float = 0.5  # percent

# Tuning
DEFAULT_BASIS_KEY: str = "c256"

# Audio
SAMPLE_RATE: int = 44100
BLOCK_SIZE: int = 1024
RAMP_SECONDS: float = 1.0
START_DELAY_SECONDS: float = 0.1
DEFAULT_EXPORT_SECONDS: float = 30.0
DEFAULT_EXPORT_FILENAME: str = "tone-export.wav"
