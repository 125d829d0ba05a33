#!/usr/bin/env python3
"""
Phonotactic Checks
==================
Stateless tests used while assembling syllables:

- Forbidden consonant clusters across a syllable boundary
- Membership of a vowel in a front/back harmony class

Only the universal cluster list is consulted unless
``phonotactics.enforce_culture_clusters`` is enabled in app.yaml, in which
case the culture's own list (western lr/rl/mn/nm, ...) is checked too.
"""

from typing import Optional

from namekit.settings import get_setting
from .phonemes import PhonotacticRules, load_phonotactics


def culture_clusters_enforced() -> bool:
    return bool(get_setting('phonotactics.enforce_culture_clusters', False))


def is_invalid_cluster(cluster: str,
                       rules: PhonotacticRules = None,
                       culture: Optional[str] = None) -> bool:
    """
    Check whether a boundary cluster contains a forbidden combination.

    Args:
        cluster: Trailing phoneme of the previous unit joined with the
                 leading phoneme of the candidate unit
        rules: Phonotactic rules (defaults to the bundled rules)
        culture: Culture whose own list applies when culture clusters
                 are enforced

    Returns:
        True if any forbidden cluster occurs in ``cluster``
    """
    if len(cluster) < 2:
        return False
    if rules is None:
        rules = load_phonotactics()

    forbidden = rules.universal
    if culture and culture_clusters_enforced():
        forbidden = rules.clusters_for(culture)

    return any(invalid in cluster for invalid in forbidden)


def is_vowel_in_harmony(vowel: str, harmony_class: str, rules: PhonotacticRules = None) -> bool:
    """True if ``vowel`` contains any member of the harmony class."""
    if rules is None:
        rules = load_phonotactics()
    members = rules.harmony.get(harmony_class, ())
    return any(member in vowel for member in members)
