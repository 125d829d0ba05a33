#!/usr/bin/env python3
"""
Dialect Overlays
================
Merges a regional dialect into a base culture profile for one generation
call. The base profile is never modified; a new profile is returned.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional

from .phonemes import CultureProfile, DialectOverlayStore

logger = logging.getLogger(__name__)

MIN_LENGTH_FLOOR = 1
MAX_LENGTH_FLOOR = 2


def _merge(tables: Dict, deltas: Dict[str, int]) -> Dict:
    if not deltas:
        return tables
    return {key: table.with_deltas(deltas) for key, table in tables.items()}


class DialectOverlayApplier:
    """
    Applies dialect overlays to culture profiles.

    Usage:
        applier = DialectOverlayApplier()
        effective = applier.apply(cultures.resolve('dwarven'), 'deep_dwarf', 'male')
    """

    def __init__(self, dialects: DialectOverlayStore = None):
        self.dialects = DialectOverlayStore() if dialects is None else dialects

    def apply(self, base: CultureProfile, dialect_id: Optional[str],
              gender: Optional[str] = None) -> CultureProfile:
        """
        Return the effective profile for ``dialect_id`` on top of ``base``.

        Unknown dialects return ``base`` itself. Otherwise every onset,
        nucleus and coda sub-table of the base gets the dialect's weight
        deltas, the length range is shifted (min floored at 1, max at 2),
        harmony is forced on if the dialect asks for it, and the dialect's
        endings and prefixes are attached.

        ``gender`` is accepted for symmetry with the generator; endings for
        both genders are attached and picked later.
        """
        dialect = self.dialects.get(dialect_id)
        if dialect is None:
            logger.debug("Unknown dialect %r, profile %s left unchanged", dialect_id, base.name)
            return base

        low, high = base.length_range
        if dialect.length_mod:
            low = max(MIN_LENGTH_FLOOR, low + dialect.length_mod)
            high = max(MAX_LENGTH_FLOOR, high + dialect.length_mod)

        return replace(
            base,
            onsets=_merge(base.onsets, dialect.onset_mods),
            nuclei=_merge(base.nuclei, dialect.nuclei_mods),
            codas=_merge(base.codas, dialect.coda_mods),
            length_range=(low, high),
            vowel_harmony=base.vowel_harmony or dialect.vowel_harmony,
            dialect=dialect.name,
            dialect_endings={
                'male': dialect.male_endings,
                'female': dialect.female_endings,
            },
            dialect_prefixes=dialect.prefixes,
        )

