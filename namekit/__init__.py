#!/usr/bin/env python3
"""
NameKit - Phonetic Name Generator
=================================

Procedural personal names for real-world and fantasy cultures, built
syllable by syllable from weighted phoneme tables with phonotactic
constraints, vowel harmony and regional dialect overlays.

Quick Start
-----------
    from namekit import PhoneticNameGenerator

    gen = PhoneticNameGenerator()

    gen.generate('western', 'female')
    gen.generate('dwarven', 'male', 'deep_dwarf')

    # Reproducible output
    gen = PhoneticNameGenerator(seed=42)
    names = gen.generate_batch('elven', 'any', count=5)

Modules
-------
    namekit.generators - Profiles, phonotactics, syllables and assembly
    namekit.settings   - app.yaml settings
    namekit.cli        - Command-line interface

CLI Usage
---------
    python -m namekit generate --culture nordic --dialect icelandic -n 5
    python -m namekit dialects --culture elven
    python -m namekit validate
"""

__version__ = "0.1.0"
__author__ = "NameKit"

from . import generators
from . import settings

from .generators import (
    RandomSource,
    CultureProfile,
    DialectProfile,
    CultureProfileStore,
    DialectOverlayStore,
    DialectOverlayApplier,
    GeneratedName,
    NameAssembler,
    PhoneticNameGenerator,
    ProfileConfigError,
    generate_name,
    list_dialects,
    list_dialects_for_culture,
    resolve_gender,
)

__all__ = [
    '__version__',
    'generators',
    'settings',
    'RandomSource',
    'CultureProfile',
    'DialectProfile',
    'CultureProfileStore',
    'DialectOverlayStore',
    'DialectOverlayApplier',
    'GeneratedName',
    'NameAssembler',
    'PhoneticNameGenerator',
    'ProfileConfigError',
    'generate_name',
    'list_dialects',
    'list_dialects_for_culture',
    'resolve_gender',
]
