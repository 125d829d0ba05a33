#!/usr/bin/env python3
"""
Phoneme Configuration Loader
============================
Loads culture profiles, dialect overlays and phonotactic rules from the YAML
files in this directory into immutable, typed records.

Usage:
    from namekit.generators.phonemes import (
        load_cultures, load_dialects, load_phonotactics,
        CultureProfileStore, DialectOverlayStore,
    )

    cultures = CultureProfileStore()
    western = cultures.resolve('western')
    dialects = DialectOverlayStore()
    dialects.list_dialects_for_culture('dwarven')

All loaders are cached: the tables are read once per process and shared
read-only by every generator afterwards.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Path
# =============================================================================

PHONEMES_DIR = Path(__file__).parent

CULTURES_FILE = 'cultures.yaml'
DIALECTS_FILE = 'dialects.yaml'
PHONOTACTICS_FILE = 'phonotactics.yaml'

DEFAULT_CULTURE = 'western'
GENDERS = ('male', 'female')


class ProfileConfigError(ValueError):
    """Raised when a phoneme data file is malformed or fails validation."""


# =============================================================================
# Enumerations
# =============================================================================

class Position(str, Enum):
    """Syllable position within a name."""
    INITIAL = 'initial'
    MEDIAL = 'medial'
    FINAL = 'final'

    @classmethod
    def for_index(cls, index: int, length: int) -> 'Position':
        if index == 0:
            return cls.INITIAL
        if index == length - 1:
            return cls.FINAL
        return cls.MEDIAL


class Stress(str, Enum):
    """Nucleus table selector."""
    STRESSED = 'stressed'
    UNSTRESSED = 'unstressed'


class StressPattern(str, Enum):
    """Which syllable of a name takes the stressed nucleus table."""
    INITIAL = 'initial'
    PENULTIMATE = 'penultimate'
    FINAL = 'final'

    def stressed_index(self, length: int) -> int:
        if self is StressPattern.PENULTIMATE:
            return max(0, length - 2)
        if self is StressPattern.FINAL:
            return length - 1
        return 0


class SyllableStructure(str, Enum):
    """Syllable shapes: C = consonant unit, V = vowel unit."""
    V = 'V'
    CV = 'CV'
    VC = 'VC'
    CVC = 'CVC'
    CVCC = 'CVCC'
    CCVC = 'CCVC'


# =============================================================================
# Data Classes for Typed Access
# =============================================================================

@dataclass(frozen=True)
class WeightedTable:
    """Ordered, immutable (item, weight) pairs."""
    entries: Tuple[Tuple[Any, int], ...] = ()

    def items(self) -> Tuple[Tuple[Any, int], ...]:
        return self.entries

    def keys(self) -> Tuple[Any, ...]:
        return tuple(item for item, _ in self.entries)

    @property
    def total(self) -> int:
        return sum(weight for _, weight in self.entries)

    def weight(self, key: Any) -> int:
        """Weight of ``key`` (0 when absent)."""
        for item, weight in self.entries:
            if item == key:
                return weight
        return 0

    def with_deltas(self, deltas: Mapping[Any, int]) -> 'WeightedTable':
        """
        Return a copy with ``deltas`` added to the matching weights.

        Unknown keys are appended in the order given, with the delta as
        their weight.
        """
        if not deltas:
            return self
        merged = dict(self.entries)
        for key, delta in deltas.items():
            merged[key] = merged.get(key, 0) + delta
        return WeightedTable(tuple(merged.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.keys())

    def __contains__(self, key: Any) -> bool:
        return any(item == key for item, _ in self.entries)


EMPTY_TABLE = WeightedTable()


def frozen_mapping(mapping: Mapping = None) -> Mapping:
    """Read-only view over a copy of ``mapping``."""
    return MappingProxyType(dict(mapping or {}))


def _freeze(record, *names: str):
    # frozen dataclasses only block attribute assignment, not item assignment
    for name in names:
        object.__setattr__(record, name, frozen_mapping(getattr(record, name)))


@dataclass(frozen=True)
class GenderProfile:
    """Gender-specific shaping of a culture's names."""
    final_codas: Tuple[str, ...] = ()
    # Documentary: typical word-final vowels, not used by generation
    final_vowels: Tuple[str, ...] = ()
    preferred_endings: Tuple[str, ...] = ()
    length_mod: int = 0


@dataclass(frozen=True)
class CultureProfile:
    """
    Phonetic profile of a base culture.

    Profiles produced by a dialect overlay carry the dialect id, its
    gender endings and its prefixes; base profiles leave those empty.
    """
    name: str
    label: str
    syllable_templates: Mapping[Position, WeightedTable]
    length_range: Tuple[int, int]
    onsets: Mapping[Position, WeightedTable]
    nuclei: Mapping[Stress, WeightedTable]
    codas: Mapping[Position, WeightedTable]
    stress_pattern: StressPattern = StressPattern.INITIAL
    vowel_harmony: bool = False
    harmony_type: Optional[str] = None
    genders: Mapping[str, GenderProfile] = field(default_factory=frozen_mapping)
    dialect: Optional[str] = None
    dialect_endings: Mapping[str, Tuple[str, ...]] = field(default_factory=frozen_mapping)
    dialect_prefixes: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, 'syllable_templates', 'onsets', 'nuclei', 'codas',
                'genders', 'dialect_endings')

    def gender_profile(self, gender: Optional[str]) -> Optional[GenderProfile]:
        return self.genders.get(gender) if gender else None

    def templates(self, position: Position) -> WeightedTable:
        """Structure weights for a position (medial when missing)."""
        table = self.syllable_templates.get(position)
        if table is None:
            table = self.syllable_templates.get(Position.MEDIAL, EMPTY_TABLE)
        return table

    def onset_table(self, position: Position) -> WeightedTable:
        """Initial onsets for the first syllable, medial onsets otherwise."""
        key = Position.INITIAL if position is Position.INITIAL else Position.MEDIAL
        table = self.onsets.get(key)
        if table is None:
            table = self.onsets.get(Position.INITIAL, EMPTY_TABLE)
        return table

    def nucleus_table(self, is_stressed: bool) -> WeightedTable:
        key = Stress.STRESSED if is_stressed else Stress.UNSTRESSED
        table = self.nuclei.get(key)
        if table is None:
            table = self.nuclei.get(Stress.STRESSED, EMPTY_TABLE)
        return table

    def coda_table(self, final: bool) -> WeightedTable:
        key = Position.FINAL if final else Position.MEDIAL
        table = self.codas.get(key)
        if table is None:
            table = self.codas.get(Position.MEDIAL, EMPTY_TABLE)
        return table

    def endings_for(self, gender: Optional[str]) -> Tuple[str, ...]:
        """Dialect endings attached by an overlay for ``gender``."""
        return self.dialect_endings.get(gender, ()) if gender else ()


@dataclass(frozen=True)
class DialectProfile:
    """Regional overlay on a base culture."""
    name: str
    label: str
    base_culture: str
    onset_mods: Mapping[str, int] = field(default_factory=frozen_mapping)
    nuclei_mods: Mapping[str, int] = field(default_factory=frozen_mapping)
    coda_mods: Mapping[str, int] = field(default_factory=frozen_mapping)
    male_endings: Tuple[str, ...] = ()
    female_endings: Tuple[str, ...] = ()
    prefixes: Tuple[str, ...] = ()
    length_mod: int = 0
    vowel_harmony: bool = False
    # Documentary for cultures with patronymic surnames
    patronymic: bool = False
    forename_endings_male: Tuple[str, ...] = ()
    forename_endings_female: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, 'onset_mods', 'nuclei_mods', 'coda_mods')

    def endings_for(self, gender: Optional[str]) -> Tuple[str, ...]:
        if gender == 'male':
            return self.male_endings
        if gender == 'female':
            return self.female_endings
        return ()


@dataclass(frozen=True)
class PhonotacticRules:
    """Forbidden clusters and vowel harmony classes."""
    universal: Tuple[str, ...]
    by_culture: Mapping[str, Tuple[str, ...]] = field(default_factory=frozen_mapping)
    harmony: Mapping[str, Tuple[str, ...]] = field(default_factory=frozen_mapping)

    def __post_init__(self):
        _freeze(self, 'by_culture', 'harmony')

    def clusters_for(self, culture: Optional[str]) -> Tuple[str, ...]:
        """Universal clusters plus the culture's own list."""
        return self.universal + self.by_culture.get(culture, ())

    def harmony_classes(self) -> Tuple[str, ...]:
        return tuple(self.harmony.keys())


# =============================================================================
# Parsing
# =============================================================================

def _load_yaml(filename: str) -> Dict[str, Any]:
    """Load a YAML file from the phonemes directory."""
    filepath = PHONEMES_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Phoneme config not found: {filepath}")

    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _check_weight(value: Any, context: str) -> int:
    # bool is an int subclass; YAML turns bare yes/no into booleans
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProfileConfigError(f"{context}: weight must be an integer, got {value!r}")
    if value < 0:
        raise ProfileConfigError(f"{context}: weight must be non-negative, got {value}")
    return value


def _check_phoneme(value: Any, context: str) -> str:
    if not isinstance(value, str):
        raise ProfileConfigError(f"{context}: phoneme must be a quoted string, got {value!r}")
    return value


def _parse_table(raw: Any, context: str) -> WeightedTable:
    if raw is None:
        return EMPTY_TABLE
    if not isinstance(raw, dict):
        raise ProfileConfigError(f"{context}: expected a mapping of phoneme -> weight")
    return WeightedTable(tuple(
        (_check_phoneme(k, context), _check_weight(v, f"{context}.{k}"))
        for k, v in raw.items()
    ))


def _parse_deltas(raw: Any, context: str) -> Dict[str, int]:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ProfileConfigError(f"{context}: expected a mapping of phoneme -> weight")
    deltas = {}
    for k, v in raw.items():
        if isinstance(v, bool) or not isinstance(v, int):
            raise ProfileConfigError(f"{context}.{k}: delta must be an integer, got {v!r}")
        deltas[_check_phoneme(k, context)] = v
    return deltas


def _parse_strings(raw: Any, context: str) -> Tuple[str, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ProfileConfigError(f"{context}: expected a list")
    return tuple(_check_phoneme(v, context) for v in raw)


def _parse_keyed(raw: Any, enum_cls, allowed, context: str, parse) -> Dict[Any, Any]:
    if not isinstance(raw, dict):
        raise ProfileConfigError(f"{context}: expected a mapping")
    result = {}
    for key, value in raw.items():
        try:
            member = enum_cls(key)
        except ValueError:
            raise ProfileConfigError(f"{context}: unknown key '{key}'") from None
        if member not in allowed:
            raise ProfileConfigError(f"{context}: key '{key}' not allowed here")
        result[member] = parse(value, f"{context}.{key}")
    return result


def _parse_templates(raw: Any, context: str) -> WeightedTable:
    if not isinstance(raw, list):
        raise ProfileConfigError(f"{context}: expected a list of [structure, weight]")
    entries = []
    for pair in raw:
        if not isinstance(pair, list) or len(pair) != 2:
            raise ProfileConfigError(f"{context}: expected [structure, weight], got {pair!r}")
        try:
            structure = SyllableStructure(pair[0])
        except ValueError:
            raise ProfileConfigError(f"{context}: unknown structure '{pair[0]}'") from None
        entries.append((structure, _check_weight(pair[1], f"{context}.{pair[0]}")))
    return WeightedTable(tuple(entries))


def _parse_gender(raw: Any, context: str) -> GenderProfile:
    raw = raw or {}
    return GenderProfile(
        final_codas=_parse_strings(raw.get('final_codas'), f"{context}.final_codas"),
        final_vowels=_parse_strings(raw.get('final_vowels'), f"{context}.final_vowels"),
        preferred_endings=_parse_strings(raw.get('preferred_endings'), f"{context}.preferred_endings"),
        length_mod=int(raw.get('length_mod', 0)),
    )


def _require(raw: Dict[str, Any], key: str, context: str) -> Any:
    value = raw.get(key)
    if value is None:
        raise ProfileConfigError(f"{context}.{key} must be set in {CULTURES_FILE}")
    return value


def parse_culture(name: str, raw: Dict[str, Any]) -> CultureProfile:
    """Build a CultureProfile from its YAML mapping."""
    length = _require(raw, 'length', name)
    if not isinstance(length, list) or len(length) != 2:
        raise ProfileConfigError(f"{name}.length: expected [min, max]")

    try:
        stress_pattern = StressPattern(raw.get('stress_pattern', 'initial'))
    except ValueError:
        raise ProfileConfigError(
            f"{name}.stress_pattern: unknown pattern '{raw.get('stress_pattern')}'"
        ) from None

    genders = {
        gender: _parse_gender(data, f"{name}.genders.{gender}")
        for gender, data in (raw.get('genders') or {}).items()
    }

    return CultureProfile(
        name=name,
        label=raw.get('label', name.title()),
        syllable_templates=_parse_keyed(
            _require(raw, 'syllables', name), Position, set(Position),
            f"{name}.syllables", _parse_templates),
        length_range=(int(length[0]), int(length[1])),
        onsets=_parse_keyed(
            _require(raw, 'onsets', name), Position, {Position.INITIAL, Position.MEDIAL},
            f"{name}.onsets", _parse_table),
        nuclei=_parse_keyed(
            _require(raw, 'nuclei', name), Stress, set(Stress),
            f"{name}.nuclei", _parse_table),
        codas=_parse_keyed(
            _require(raw, 'codas', name), Position, {Position.MEDIAL, Position.FINAL},
            f"{name}.codas", _parse_table),
        stress_pattern=stress_pattern,
        vowel_harmony=bool(raw.get('vowel_harmony', False)),
        harmony_type=raw.get('harmony_type'),
        genders=genders,
    )


def parse_dialect(name: str, raw: Dict[str, Any]) -> DialectProfile:
    """Build a DialectProfile from its YAML mapping."""
    base = raw.get('base_culture')
    if not base:
        raise ProfileConfigError(f"{name}.base_culture must be set in {DIALECTS_FILE}")

    return DialectProfile(
        name=name,
        label=raw.get('label', name.replace('_', ' ').title()),
        base_culture=base,
        onset_mods=_parse_deltas(raw.get('onset_mods'), f"{name}.onset_mods"),
        nuclei_mods=_parse_deltas(raw.get('nuclei_mods'), f"{name}.nuclei_mods"),
        coda_mods=_parse_deltas(raw.get('coda_mods'), f"{name}.coda_mods"),
        male_endings=_parse_strings(raw.get('male_endings'), f"{name}.male_endings"),
        female_endings=_parse_strings(raw.get('female_endings'), f"{name}.female_endings"),
        prefixes=_parse_strings(raw.get('prefixes'), f"{name}.prefixes"),
        length_mod=int(raw.get('length_mod', 0)),
        vowel_harmony=bool(raw.get('vowel_harmony', False)),
        patronymic=bool(raw.get('patronymic', False)),
        forename_endings_male=_parse_strings(
            raw.get('forename_endings_male'), f"{name}.forename_endings_male"),
        forename_endings_female=_parse_strings(
            raw.get('forename_endings_female'), f"{name}.forename_endings_female"),
    )


# =============================================================================
# Loader Functions
# =============================================================================

@lru_cache(maxsize=1)
def load_cultures() -> Mapping[str, CultureProfile]:
    """Load all base culture profiles (declaration order)."""
    raw = _load_yaml(CULTURES_FILE)
    cultures = {name: parse_culture(name, data) for name, data in raw.items()}
    logger.debug("Loaded %d culture profiles", len(cultures))
    return MappingProxyType(cultures)


@lru_cache(maxsize=1)
def load_dialects() -> Mapping[str, DialectProfile]:
    """Load all dialect overlays (declaration order)."""
    raw = _load_yaml(DIALECTS_FILE)
    dialects = {name: parse_dialect(name, data) for name, data in raw.items()}
    logger.debug("Loaded %d dialect overlays", len(dialects))
    return MappingProxyType(dialects)


@lru_cache(maxsize=1)
def load_phonotactics() -> PhonotacticRules:
    """Load forbidden clusters and harmony classes."""
    raw = _load_yaml(PHONOTACTICS_FILE)
    clusters = raw.get('invalid_clusters') or {}
    if 'universal' not in clusters:
        raise ProfileConfigError(f"invalid_clusters.universal must be set in {PHONOTACTICS_FILE}")

    by_culture = {
        culture: _parse_strings(values, f"invalid_clusters.{culture}")
        for culture, values in clusters.items()
        if culture != 'universal'
    }
    harmony = {
        cls: _parse_strings(values, f"vowel_harmony.{cls}")
        for cls, values in (raw.get('vowel_harmony') or {}).items()
    }
    return PhonotacticRules(
        universal=_parse_strings(clusters['universal'], 'invalid_clusters.universal'),
        by_culture=by_culture,
        harmony=harmony,
    )


def reload_configs():
    """Clear all cached configs to force reload."""
    load_cultures.cache_clear()
    load_dialects.cache_clear()
    load_phonotactics.cache_clear()
    default_stores.cache_clear()


# =============================================================================
# Stores
# =============================================================================

class CultureProfileStore:
    """
    Read-only lookup of base culture profiles.

    ``get`` returns None for unknown cultures; ``resolve`` substitutes the
    default culture instead.
    """

    def __init__(self, profiles: Mapping[str, CultureProfile] = None,
                 default_culture: str = DEFAULT_CULTURE):
        self._profiles = dict(load_cultures() if profiles is None else profiles)
        self.default_culture = default_culture

    def get(self, culture: Optional[str]) -> Optional[CultureProfile]:
        return self._profiles.get(culture) if culture else None

    def resolve(self, culture: Optional[str]) -> CultureProfile:
        profile = self.get(culture)
        if profile is None:
            logger.debug("Unknown culture %r, using %s", culture, self.default_culture)
            profile = self._profiles[self.default_culture]
        return profile

    def gender_profile(self, culture: Optional[str], gender: Optional[str]) -> Optional[GenderProfile]:
        profile = self.get(culture)
        return profile.gender_profile(gender) if profile else None

    def names(self) -> List[str]:
        return list(self._profiles.keys())

    def profiles(self) -> List[CultureProfile]:
        return list(self._profiles.values())

    def __contains__(self, culture: str) -> bool:
        return culture in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


class DialectOverlayStore:
    """Read-only lookup of dialect overlays."""

    def __init__(self, dialects: Mapping[str, DialectProfile] = None):
        self._dialects = dict(load_dialects() if dialects is None else dialects)

    def get(self, dialect: Optional[str]) -> Optional[DialectProfile]:
        return self._dialects.get(dialect) if dialect else None

    def list_dialects(self) -> List[str]:
        return list(self._dialects.keys())

    def list_dialects_for_culture(self, culture: str) -> List[str]:
        """Dialect ids whose base culture is ``culture``, in declaration order."""
        return [
            name for name, dialect in self._dialects.items()
            if dialect.base_culture == culture
        ]

    def profiles(self) -> List[DialectProfile]:
        return list(self._dialects.values())

    def __contains__(self, dialect: str) -> bool:
        return dialect in self._dialects

    def __len__(self) -> int:
        return len(self._dialects)


# =============================================================================
# Startup Validation
# =============================================================================

@dataclass
class ValidationReport:
    """Findings of :func:`validate_profiles`."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _check_table(report: ValidationReport, table: WeightedTable, context: str):
    if not len(table):
        report.errors.append(f"{context}: table is empty")
    elif table.total <= 0:
        report.warnings.append(f"{context}: total weight is 0, first entry always used")


def validate_profiles(cultures: Mapping[str, CultureProfile],
                      dialects: Mapping[str, DialectProfile]) -> ValidationReport:
    """
    Check that every table generation can reach yields something.

    Errors are data defects that would make generation return empty or
    malformed names. Warnings are tolerated oddities.
    """
    report = ValidationReport()

    if DEFAULT_CULTURE not in cultures:
        report.errors.append(f"default culture '{DEFAULT_CULTURE}' is not defined")

    for name, profile in cultures.items():
        low, high = profile.length_range
        if low < 1 or high < low:
            report.errors.append(f"{name}.length: invalid range {profile.length_range}")
        for position in Position:
            _check_table(report, profile.templates(position), f"{name}.syllables.{position.value}")
            _check_table(report, profile.onset_table(position), f"{name}.onsets.{position.value}")
        for stressed in (True, False):
            stress = Stress.STRESSED if stressed else Stress.UNSTRESSED
            _check_table(report, profile.nucleus_table(stressed), f"{name}.nuclei.{stress.value}")
        for final in (True, False):
            key = 'final' if final else 'medial'
            _check_table(report, profile.coda_table(final), f"{name}.codas.{key}")
        for gender in GENDERS:
            if gender not in profile.genders:
                report.warnings.append(f"{name}.genders: no '{gender}' profile")

    for name, dialect in dialects.items():
        if dialect.base_culture not in cultures:
            report.warnings.append(
                f"{name}.base_culture: '{dialect.base_culture}' is not a known culture"
            )

    return report


def load_stores(strict: bool = True) -> Tuple[CultureProfileStore, DialectOverlayStore]:
    """
    Load and validate the culture and dialect stores.

    Raises ProfileConfigError when ``strict`` and validation finds errors.
    """
    cultures = load_cultures()
    dialects = load_dialects()
    report = validate_profiles(cultures, dialects)
    for warning in report.warnings:
        logger.warning("Profile check: %s", warning)
    if report.errors:
        if strict:
            raise ProfileConfigError("; ".join(report.errors))
        for error in report.errors:
            logger.error("Profile check: %s", error)
    return CultureProfileStore(cultures), DialectOverlayStore(dialects)


@lru_cache(maxsize=1)
def default_stores() -> Tuple[CultureProfileStore, DialectOverlayStore]:
    """Validated stores shared by every generator in the process."""
    return load_stores(strict=True)


__all__ = [
    'PHONEMES_DIR',
    'DEFAULT_CULTURE',
    'GENDERS',
    'ProfileConfigError',
    'Position',
    'Stress',
    'StressPattern',
    'SyllableStructure',
    'WeightedTable',
    'EMPTY_TABLE',
    'GenderProfile',
    'CultureProfile',
    'DialectProfile',
    'PhonotacticRules',
    'parse_culture',
    'parse_dialect',
    'load_cultures',
    'load_dialects',
    'load_phonotactics',
    'reload_configs',
    'CultureProfileStore',
    'DialectOverlayStore',
    'ValidationReport',
    'validate_profiles',
    'load_stores',
    'default_stores',
]
