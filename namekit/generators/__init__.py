#!/usr/bin/env python3
"""
Name Generators
===============
Phoneme-profile name generation:
- Culture profiles and dialect overlays (phonemes)
- Phonotactic checks (phonotactics)
- Syllable construction (syllables)
- Name assembly and batch generation (phonetic_generator)
"""

from .entropy import (
    RandomSource,
    get_rng,
    weighted_choice,
)
from .phonemes import (
    Position,
    Stress,
    StressPattern,
    SyllableStructure,
    WeightedTable,
    GenderProfile,
    CultureProfile,
    DialectProfile,
    PhonotacticRules,
    ProfileConfigError,
    CultureProfileStore,
    DialectOverlayStore,
    ValidationReport,
    validate_profiles,
    load_stores,
)
from .phonotactics import (
    is_invalid_cluster,
    is_vowel_in_harmony,
)
from .syllables import SyllableBuilder
from .dialects import DialectOverlayApplier
from .phonetic_generator import (
    GeneratedName,
    NameAssembler,
    PhoneticNameGenerator,
    generate_name,
    list_dialects,
    list_dialects_for_culture,
    resolve_gender,
)

__all__ = [
    # Randomness
    'RandomSource',
    'get_rng',
    'weighted_choice',
    # Profiles
    'Position',
    'Stress',
    'StressPattern',
    'SyllableStructure',
    'WeightedTable',
    'GenderProfile',
    'CultureProfile',
    'DialectProfile',
    'PhonotacticRules',
    'ProfileConfigError',
    'CultureProfileStore',
    'DialectOverlayStore',
    'ValidationReport',
    'validate_profiles',
    'load_stores',
    # Phonotactics
    'is_invalid_cluster',
    'is_vowel_in_harmony',
    # Construction
    'SyllableBuilder',
    'DialectOverlayApplier',
    'GeneratedName',
    'NameAssembler',
    'PhoneticNameGenerator',
    'generate_name',
    'list_dialects',
    'list_dialects_for_culture',
    'resolve_gender',
]
