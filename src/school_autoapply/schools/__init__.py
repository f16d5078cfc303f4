"""Bundled per-institution automation scripts."""

from .dsc_hkis_2025 import dsc_hkis_2025_script
from .dsc_international_school import dsc_international_school_script
from .example_school import example_school_script

BUNDLED_SCRIPTS = [
    example_school_script,
    dsc_hkis_2025_script,
    dsc_international_school_script,
]

__all__ = [
    "BUNDLED_SCRIPTS",
    "dsc_hkis_2025_script",
    "dsc_international_school_script",
    "example_school_script",
]
