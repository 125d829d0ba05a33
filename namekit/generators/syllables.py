#!/usr/bin/env python3
"""
Syllable Builder
================
Assembles one syllable from a culture profile.

A syllable is built from its structure pattern unit by unit:

- Onset:   initial or medial onset table, redrawn while it forms a
           forbidden cluster with the previous phoneme
- Nucleus: stressed or unstressed vowel table, redrawn while it is
           outside the active harmony class
- Coda:    final or medial coda table; the last syllable may take one of
           the gender profile's final codas instead

Both redraw loops are bounded and keep their last draw once exhausted, so
a built syllable may still break a constraint.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from namekit.settings import require_setting
from .entropy import RandomSource, get_rng, weighted_choice
from .phonemes import (
    CultureProfile,
    GenderProfile,
    PhonotacticRules,
    Position,
    SyllableStructure,
    WeightedTable,
    load_phonotactics,
)
from .phonotactics import is_invalid_cluster, is_vowel_in_harmony

logger = logging.getLogger(__name__)


class Unit(Enum):
    ONSET = 'onset'
    NUCLEUS = 'nucleus'
    # First coda of a CVCC syllable, always from the medial table
    INNER_CODA = 'inner_coda'
    CODA = 'coda'


# CCVC draws a single onset like CVC: onset tables already hold clusters (br, kr)
STRUCTURE_UNITS: Dict[SyllableStructure, Tuple[Unit, ...]] = {
    SyllableStructure.V: (Unit.NUCLEUS,),
    SyllableStructure.CV: (Unit.ONSET, Unit.NUCLEUS),
    SyllableStructure.VC: (Unit.NUCLEUS, Unit.CODA),
    SyllableStructure.CVC: (Unit.ONSET, Unit.NUCLEUS, Unit.CODA),
    SyllableStructure.CVCC: (Unit.ONSET, Unit.NUCLEUS, Unit.INNER_CODA, Unit.CODA),
    SyllableStructure.CCVC: (Unit.ONSET, Unit.NUCLEUS, Unit.CODA),
}


class SyllableBuilder:
    """
    Builds single syllables for the name assembler.

    Usage:
        builder = SyllableBuilder(rng=RandomSource(seed=7))
        builder.build(profile, gender_profile, Position.INITIAL,
                      is_stressed=True, harmony_class=None,
                      is_final=False, trailing_phoneme='')
    """

    def __init__(self, rng: RandomSource = None, rules: PhonotacticRules = None):
        self._rng = rng or get_rng()
        self._rules = rules or load_phonotactics()
        self.onset_attempts = int(require_setting('generation.onset_attempts'))
        self.harmony_retries = int(require_setting('generation.harmony_retries'))
        self.final_coda_chance = int(require_setting('generation.final_coda_chance'))

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def choose_structure(self, profile: CultureProfile, position: Position) -> SyllableStructure:
        structure = weighted_choice(profile.templates(position), self._rng)
        if structure is None:
            logger.debug("%s has no syllable templates for %s", profile.name, position.value)
            return SyllableStructure.CV
        return structure

    def build(self,
              profile: CultureProfile,
              gender_profile: Optional[GenderProfile],
              position: Position,
              is_stressed: bool,
              harmony_class: Optional[str],
              is_final: bool,
              trailing_phoneme: str) -> str:
        """Build one syllable and return it as a string."""
        structure = self.choose_structure(profile, position)

        parts = []
        for unit in STRUCTURE_UNITS[structure]:
            if unit is Unit.ONSET:
                parts.append(self.select_onset(profile, position, trailing_phoneme))
            elif unit is Unit.NUCLEUS:
                parts.append(self.select_nucleus(profile, is_stressed, harmony_class))
            elif unit is Unit.INNER_CODA:
                parts.append(self.select_coda(profile, Position.MEDIAL, gender_profile, False))
            else:
                parts.append(self.select_coda(profile, position, gender_profile, is_final))

        return ''.join(parts)

    # -------------------------------------------------------------------------
    # Unit Selection
    # -------------------------------------------------------------------------

    def _draw(self, table: WeightedTable) -> str:
        return weighted_choice(table, self._rng) or ''

    def select_onset(self, profile: CultureProfile, position: Position, trailing_phoneme: str) -> str:
        """Draw an onset, avoiding forbidden clusters with the previous phoneme."""
        table = profile.onset_table(position)
        onset = ''
        for _ in range(self.onset_attempts):
            onset = self._draw(table)
            if not is_invalid_cluster(trailing_phoneme + onset, self._rules, profile.name):
                break
        return onset

    def select_nucleus(self, profile: CultureProfile, is_stressed: bool,
                       harmony_class: Optional[str]) -> str:
        """Draw a vowel, preferring one inside the harmony class."""
        table = profile.nucleus_table(is_stressed)
        vowel = self._draw(table)
        if harmony_class:
            attempts = 0
            while attempts < self.harmony_retries and not is_vowel_in_harmony(
                    vowel, harmony_class, self._rules):
                vowel = self._draw(table)
                attempts += 1
        return vowel

    def select_coda(self, profile: CultureProfile, position: Position,
                    gender_profile: Optional[GenderProfile], is_final: bool) -> str:
        """Draw a coda; the last syllable may use a gender-specific final coda."""
        if is_final and gender_profile and gender_profile.final_codas \
                and self._rng.chance(self.final_coda_chance):
            return self._rng.choice(gender_profile.final_codas)

        table = profile.coda_table(position is Position.FINAL or is_final)
        return self._draw(table)
