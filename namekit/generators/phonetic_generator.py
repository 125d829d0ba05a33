#!/usr/bin/env python3
"""
Phonetic Name Generator
=======================
Generates personal names from culture phoneme profiles.

Features:
- Position-aware syllable construction (initial/medial/final)
- Stress patterns selecting stressed or unstressed vowel tables
- Front/back vowel harmony held across a whole name
- Gender-specific codas, endings and length
- Regional dialect overlays with their own endings and prefixes

Each call is independent and never raises for unknown cultures, dialects
or genders: they fall back to the default culture, no overlay, and no
gender shaping respectively.

Usage:
    gen = PhoneticNameGenerator(seed=42)
    gen.generate('dwarven', 'male', 'deep_dwarf')
    names = gen.generate_batch('elven', 'any', count=10)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from namekit.settings import get_setting, require_setting
from .dialects import DialectOverlayApplier
from .entropy import RandomSource, get_rng
from .phonemes import (
    GENDERS,
    CultureProfile,
    CultureProfileStore,
    DialectOverlayStore,
    PhonotacticRules,
    Position,
    default_stores,
    load_phonotactics,
)
from .syllables import SyllableBuilder

logger = logging.getLogger(__name__)

VOWELS = 'aeiou'
ANY = 'any'
METHOD = 'phonetic_pattern'


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class GeneratedName:
    """A generated name with the choices that produced it."""
    name: str
    culture: str
    gender: str
    dialect: Optional[str] = None
    syllables: List[str] = field(default_factory=list)
    stress_index: int = 0
    harmony_class: Optional[str] = None
    ending: Optional[str] = None
    prefix: Optional[str] = None
    method: str = METHOD

    @property
    def syllable_count(self) -> int:
        return len(self.syllables)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'culture': self.culture,
            'gender': self.gender,
            'dialect': self.dialect,
            'syllables': list(self.syllables),
            'stress_index': self.stress_index,
            'harmony_class': self.harmony_class,
            'ending': self.ending,
            'prefix': self.prefix,
            'method': self.method,
        }


# =============================================================================
# Helpers
# =============================================================================

def capitalize_first(text: str) -> str:
    """Uppercase the first character only (``str.capitalize`` lowercases the rest)."""
    return text[:1].upper() + text[1:]


def attach_ending(stem: str, ending: str) -> str:
    """Append ``ending``, dropping the stem's final vowel before a vowel-initial ending."""
    if stem and ending and stem[-1] in VOWELS and ending[0] in VOWELS:
        stem = stem[:-1]
    return stem + ending


def resolve_gender(gender: Optional[str], rng: RandomSource = None) -> Optional[str]:
    """Pick male or female for 'any'; other values pass through."""
    if gender == ANY:
        return (rng or get_rng()).choice(GENDERS)
    return gender


# =============================================================================
# Name Assembler
# =============================================================================

class NameAssembler:
    """
    Builds a single name in fixed stages:

    1. Resolve the culture profile and overlay the dialect
    2. Draw the syllable count
    3. Locate the stressed syllable
    4. Pick a harmony class for the whole name
    5. Build the syllables, carrying the trailing phoneme forward
    6. Attach a dialect or gender ending
    7. Prepend a dialect prefix, or
    8. Capitalize
    """

    def __init__(self,
                 cultures: CultureProfileStore,
                 dialects: DialectOverlayStore,
                 rng: RandomSource = None,
                 rules: PhonotacticRules = None):
        self.cultures = cultures
        self.dialects = dialects
        self._rng = rng or get_rng()
        self._rules = rules or load_phonotactics()
        self.applier = DialectOverlayApplier(dialects)
        self.builder = SyllableBuilder(rng=self._rng, rules=self._rules)

        self.default_culture = get_setting('generation.default_culture', 'western')
        self.min_syllables = int(require_setting('generation.min_syllables'))
        self.max_syllables = int(require_setting('generation.max_syllables'))
        self.dialect_ending_chance = int(require_setting('generation.dialect_ending_chance'))
        self.gender_ending_chance = int(require_setting('generation.gender_ending_chance'))
        self.prefix_chance = int(require_setting('generation.prefix_chance'))

    def resolve_profile(self, culture: Optional[str], dialect: Optional[str],
                        gender: Optional[str]) -> CultureProfile:
        profile = self.cultures.get(culture)
        if profile is None:
            logger.debug("Unknown culture %r, using %s", culture, self.default_culture)
            profile = self.cultures.resolve(self.default_culture)
        if dialect and dialect != ANY:
            profile = self.applier.apply(profile, dialect, gender)
        return profile

    def syllable_count(self, profile: CultureProfile, length_mod: int) -> int:
        low, high = profile.length_range
        length = self._rng.randint(low, high) + length_mod
        return max(self.min_syllables, min(self.max_syllables, length))

    def harmony_class(self, profile: CultureProfile) -> Optional[str]:
        if not profile.vowel_harmony:
            return None
        classes = self._rules.harmony_classes()
        return self._rng.choice(classes) if classes else None

    def choose_ending(self, profile: CultureProfile, gender: Optional[str],
                      gender_profile) -> Optional[str]:
        """
        Dialect endings take strict precedence while a dialect is active:
        the culture's gender endings are then never used.
        """
        if profile.dialect is not None:
            endings = profile.endings_for(gender)
            if endings and self._rng.chance(self.dialect_ending_chance):
                return self._rng.choice(endings)
            return None

        if gender_profile and self._rng.chance(self.gender_ending_chance):
            if gender_profile.preferred_endings:
                return self._rng.choice(gender_profile.preferred_endings)
        return None

    def assemble(self, culture: Optional[str], gender: Optional[str] = ANY,
                 dialect: Optional[str] = None) -> GeneratedName:
        """Generate one name and return it with its construction details."""
        profile = self.resolve_profile(culture, dialect, gender)
        # Looked up by the requested culture: unknown cultures get no gender shaping
        gender_profile = self.cultures.gender_profile(culture, gender)
        if gender_profile is None:
            logger.debug("No gender profile for %r/%r", culture, gender)

        length = self.syllable_count(profile, gender_profile.length_mod if gender_profile else 0)
        stress_index = profile.stress_pattern.stressed_index(length)
        harmony_class = self.harmony_class(profile)

        syllables = []
        trailing = ''
        for i in range(length):
            syllable = self.builder.build(
                profile,
                gender_profile,
                Position.for_index(i, length),
                i == stress_index,
                harmony_class,
                i == length - 1,
                trailing,
            )
            if syllable:
                trailing = syllable[-1]
            syllables.append(syllable)

        stem = ''.join(syllables)

        ending = self.choose_ending(profile, gender, gender_profile)
        if ending:
            stem = attach_ending(stem, ending)

        prefix = None
        if profile.dialect_prefixes and self._rng.chance(self.prefix_chance):
            prefix = self._rng.choice(profile.dialect_prefixes)
            name = prefix + capitalize_first(stem)
        else:
            name = capitalize_first(stem)

        return GeneratedName(
            name=name,
            culture=profile.name,
            gender=gender,
            dialect=profile.dialect,
            syllables=syllables,
            stress_index=stress_index,
            harmony_class=harmony_class,
            ending=ending,
            prefix=prefix,
        )

    def generate(self, culture: Optional[str], gender: Optional[str] = ANY,
                 dialect: Optional[str] = None) -> str:
        return self.assemble(culture, gender, dialect).name


# =============================================================================
# Generator
# =============================================================================

class PhoneticNameGenerator:
    """
    Generates culture-flavoured personal names.

    Usage:
        gen = PhoneticNameGenerator()
        gen.generate('western', 'female')
        gen.list_dialects_for_culture('elven')

    Pass ``seed`` (or an ``rng``) for reproducible output. A seeded
    generator should not be shared between threads.
    """

    def __init__(self,
                 seed: int = None,
                 rng: RandomSource = None,
                 cultures: CultureProfileStore = None,
                 dialects: DialectOverlayStore = None):
        if rng is None:
            rng = RandomSource(seed) if seed is not None else get_rng()
        self._rng = rng

        if cultures is None or dialects is None:
            default_cultures, default_dialects = default_stores()
            if cultures is None:
                cultures = default_cultures
            if dialects is None:
                dialects = default_dialects
        self.cultures = cultures
        self.dialects = dialects
        self.assembler = NameAssembler(cultures, dialects, rng)

        self.default_count = int(require_setting('generation.default_count'))
        self.max_batch_count = int(require_setting('generation.max_batch_count'))

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def generate(self, culture: str, gender: str = ANY, dialect: Optional[str] = None) -> str:
        """
        Generate one name.

        ``gender`` is used as given: 'any' gets no gender shaping. Use
        :meth:`generate_batch` or :func:`resolve_gender` to pick one.
        """
        return self.assembler.generate(culture, gender, dialect)

    def generate_name(self, culture: str, gender: str = ANY,
                      dialect: Optional[str] = None) -> GeneratedName:
        return self.assembler.assemble(culture, gender, dialect)

    def generate_batch(self,
                       culture: str,
                       gender: str = ANY,
                       dialect: Optional[str] = None,
                       count: int = None) -> List[GeneratedName]:
        """
        Generate several names.

        Parameters
        ----------
        culture : str
            Base culture (unknown values use the default culture)
        gender : str
            'male', 'female' or 'any' (resolved per name)
        dialect : str, optional
            Dialect overlay ('any' or None for none)
        count : int
            Number of names, clamped to [1, max_batch_count]

        Returns
        -------
        list[GeneratedName]
        """
        if count is None:
            count = self.default_count
        count = max(1, min(self.max_batch_count, count))

        return [
            self.assembler.assemble(culture, resolve_gender(gender, self._rng), dialect)
            for _ in range(count)
        ]

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def list_cultures(self) -> List[str]:
        return self.cultures.names()

    def list_dialects(self) -> List[str]:
        return self.dialects.list_dialects()

    def list_dialects_for_culture(self, culture: str) -> List[str]:
        return self.dialects.list_dialects_for_culture(culture)

    def culture_options(self) -> List[Dict[str, str]]:
        """Value/label records for culture menus."""
        return [{'value': p.name, 'label': p.label} for p in self.cultures.profiles()]

    def dialect_options(self, culture: Optional[str] = None) -> List[Dict[str, Any]]:
        """Value/label/cultures records for dialect menus, optionally for one culture."""
        return [
            {'value': d.name, 'label': d.label, 'cultures': [d.base_culture]}
            for d in self.dialects.profiles()
            if culture is None or d.base_culture == culture
        ]


# Lazily created shared generator for the module-level helpers
_default_generator: Optional[PhoneticNameGenerator] = None


def get_generator() -> PhoneticNameGenerator:
    global _default_generator
    if _default_generator is None:
        _default_generator = PhoneticNameGenerator()
    return _default_generator


def generate_name(culture: str, gender: str = ANY, dialect: Optional[str] = None) -> str:
    """Quick generation function."""
    return get_generator().generate(culture, gender, dialect)


def list_dialects() -> List[str]:
    return get_generator().list_dialects()


def list_dialects_for_culture(culture: str) -> List[str]:
    return get_generator().list_dialects_for_culture(culture)


def name_parts(name: GeneratedName) -> Tuple[str, ...]:
    """Prefix, syllables and ending of a generated name, in order."""
    parts = [name.prefix] if name.prefix else []
    parts.extend(name.syllables)
    if name.ending:
        parts.append(name.ending)
    return tuple(parts)
