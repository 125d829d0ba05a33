"""
Tests for Phoneme Profiles
==========================
Tests for culture/dialect loading, the profile stores and startup
validation in namekit/generators/phonemes.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namekit.generators.phonemes import (
    CultureProfileStore,
    DialectOverlayStore,
    DialectProfile,
    Position,
    ProfileConfigError,
    Stress,
    StressPattern,
    SyllableStructure,
    WeightedTable,
    load_cultures,
    load_dialects,
    load_phonotactics,
    parse_culture,
    parse_dialect,
    validate_profiles,
)


CULTURES = ['western', 'nordic', 'eastern', 'elven', 'orcish', 'dwarven', 'draconic']


def minimal_culture(**overrides):
    raw = {
        'syllables': {'initial': [['CV', 1]], 'medial': [['CV', 1]], 'final': [['CVC', 1]]},
        'length': [2, 3],
        'onsets': {'initial': {'t': 1}, 'medial': {'n': 1}},
        'nuclei': {'stressed': {'a': 1}, 'unstressed': {'e': 1}},
        'codas': {'medial': {'n': 1}, 'final': {'s': 1}},
        'genders': {'male': {'preferred_endings': ['o']}, 'female': {'preferred_endings': ['a']}},
    }
    raw.update(overrides)
    return raw


class TestEnums:
    """Tests for position and stress helpers."""

    def test_position_for_index(self):
        assert Position.for_index(0, 3) is Position.INITIAL
        assert Position.for_index(1, 3) is Position.MEDIAL
        assert Position.for_index(2, 3) is Position.FINAL
        # A single syllable is the initial one
        assert Position.for_index(0, 1) is Position.INITIAL

    @pytest.mark.parametrize("pattern,length,expected", [
        (StressPattern.INITIAL, 4, 0),
        (StressPattern.PENULTIMATE, 4, 2),
        (StressPattern.PENULTIMATE, 1, 0),
        (StressPattern.FINAL, 4, 3),
        (StressPattern.FINAL, 1, 0),
    ])
    def test_stressed_index(self, pattern, length, expected):
        assert pattern.stressed_index(length) == expected


class TestWeightedTable:
    """Tests for the immutable weight table."""

    def test_with_deltas_adds_and_appends(self):
        table = WeightedTable((('a', 1), ('b', 2)))
        merged = table.with_deltas({'b': 3, 'c': 4})
        assert merged.items() == (('a', 1), ('b', 5), ('c', 4))
        # Original untouched
        assert table.items() == (('a', 1), ('b', 2))

    def test_weight_lookup(self):
        table = WeightedTable((('a', 1), ('b', 2)))
        assert table.weight('b') == 2
        assert table.weight('z') == 0
        assert 'a' in table
        assert table.total == 3


class TestBundledData:
    """Tests for the shipped YAML profiles."""

    def test_cultures_loaded_in_order(self):
        assert list(load_cultures().keys()) == CULTURES

    def test_dialect_count(self):
        assert len(load_dialects()) == 31

    def test_phonemes_are_strings(self):
        """YAML 1.1 booleans (no, on, yes) must not sneak into tables."""
        for profile in load_cultures().values():
            for tables in (profile.onsets, profile.nuclei, profile.codas):
                for table in tables.values():
                    assert all(isinstance(k, str) for k in table.keys())

    def test_culture_details(self):
        cultures = load_cultures()
        assert cultures['western'].length_range == (2, 3)
        assert cultures['elven'].vowel_harmony is True
        assert cultures['elven'].stress_pattern is StressPattern.PENULTIMATE
        assert cultures['draconic'].stress_pattern is StressPattern.FINAL
        assert SyllableStructure.CV in cultures['western'].templates(Position.INITIAL)

    def test_dialect_details(self):
        dialects = load_dialects()
        assert dialects['irish'].prefixes == ("O'", "Mc", "Mac")
        assert dialects['deep_dwarf'].male_endings == ('durg', 'krag', 'zorn', 'thur', 'gund')
        assert dialects['icelandic'].patronymic is True
        assert dialects['chinese'].length_mod == -1
        assert dialects['korean'].length_mod == 0
        assert dialects['deep_dwarf'].endings_for('female') == ('dra', 'kra', 'za', 'thura')
        assert dialects['deep_dwarf'].endings_for('any') == ()

    def test_phonotactics(self):
        rules = load_phonotactics()
        assert 'kg' in rules.universal
        assert rules.by_culture['orcish'] == ()
        assert set(rules.harmony_classes()) == {'front', 'back'}
        assert rules.clusters_for('western')[-4:] == ('lr', 'rl', 'mn', 'nm')
        assert rules.clusters_for('klingon') == rules.universal

    def test_loaded_tables_read_only(self):
        """Cached profiles can't be edited in place by callers."""
        western = load_cultures()['western']
        with pytest.raises(TypeError):
            western.onsets[Position.INITIAL] = WeightedTable()
        with pytest.raises(TypeError):
            western.genders['male'] = None
        with pytest.raises(TypeError):
            load_cultures()['klingon'] = western
        with pytest.raises(TypeError):
            load_dialects()['irish'].onset_mods['sh'] = 99
        with pytest.raises(TypeError):
            load_phonotactics().harmony['front'] = ()

    def test_passed_dicts_copied(self):
        source = {'sh': 1}
        dialect = DialectProfile(name='x', label='X', base_culture='western',
                                 onset_mods=source)
        source['sh'] = 50
        assert dialect.onset_mods['sh'] == 1


class TestStores:
    """Tests for CultureProfileStore and DialectOverlayStore."""

    @pytest.fixture
    def cultures(self):
        return CultureProfileStore()

    @pytest.fixture
    def dialects(self):
        return DialectOverlayStore()

    def test_get_unknown(self, cultures):
        assert cultures.get('klingon') is None
        assert cultures.get(None) is None

    def test_resolve_falls_back(self, cultures):
        assert cultures.resolve('klingon').name == 'western'

    def test_gender_profile_by_requested_culture(self, cultures):
        assert cultures.gender_profile('western', 'female').length_mod == 1
        assert cultures.gender_profile('klingon', 'female') is None
        assert cultures.gender_profile('western', 'any') is None

    def test_list_dialects_for_culture(self, dialects):
        assert dialects.list_dialects_for_culture('dwarven') == \
            ['mountain_dwarf', 'hill_dwarf', 'deep_dwarf']
        assert dialects.list_dialects_for_culture('klingon') == []

    def test_finnish_not_listed_under_nordic(self, dialects):
        nordic = dialects.list_dialects_for_culture('nordic')
        assert 'finnish' not in nordic
        assert dialects.list_dialects_for_culture('finnish') == ['finnish']

    def test_empty_store_is_used(self):
        """An explicitly empty store is not replaced by the bundled data."""
        assert len(DialectOverlayStore({})) == 0


class TestParsing:
    """Tests for malformed data detection."""

    def test_parse_minimal(self):
        profile = parse_culture('test', minimal_culture())
        assert profile.label == 'Test'
        assert profile.nucleus_table(False).keys() == ('e',)
        assert profile.gender_profile('female').preferred_endings == ('a',)

    def test_unknown_structure(self):
        raw = minimal_culture(syllables={'initial': [['CVVC', 1]]})
        with pytest.raises(ProfileConfigError):
            parse_culture('test', raw)

    def test_negative_weight(self):
        raw = minimal_culture(onsets={'initial': {'t': -1}, 'medial': {'n': 1}})
        with pytest.raises(ProfileConfigError):
            parse_culture('test', raw)

    def test_unquoted_boolean_phoneme(self):
        raw = minimal_culture(codas={'medial': {False: 1}, 'final': {'s': 1}})
        with pytest.raises(ProfileConfigError):
            parse_culture('test', raw)

    def test_missing_length(self):
        raw = minimal_culture()
        del raw['length']
        with pytest.raises(ProfileConfigError):
            parse_culture('test', raw)

    def test_config_error_is_value_error(self):
        assert issubclass(ProfileConfigError, ValueError)

    def test_dialect_requires_base(self):
        with pytest.raises(ProfileConfigError):
            parse_dialect('nowhere', {'label': 'Nowhere'})

    def test_missing_sub_tables_fall_back(self):
        raw = minimal_culture(nuclei={'stressed': {'o': 1}})
        profile = parse_culture('test', raw)
        assert profile.nucleus_table(False).keys() == ('o',)
        assert profile.nuclei.get(Stress.UNSTRESSED) is None


class TestValidation:
    """Tests for startup validation."""

    def test_bundled_data_is_ok(self):
        report = validate_profiles(load_cultures(), load_dialects())
        assert report.ok
        assert any('finnish' in w for w in report.warnings)

    def test_empty_table_is_error(self):
        raw = minimal_culture(onsets={'initial': {}, 'medial': {'n': 1}})
        cultures = {'western': parse_culture('western', raw)}
        report = validate_profiles(cultures, {})
        assert not report.ok
        assert any('onsets.initial' in e for e in report.errors)

    def test_inverted_length_is_error(self):
        cultures = {'western': parse_culture('western', minimal_culture(length=[4, 2]))}
        report = validate_profiles(cultures, {})
        assert any('length' in e for e in report.errors)

    def test_missing_default_culture(self):
        cultures = {'test': parse_culture('test', minimal_culture())}
        report = validate_profiles(cultures, {})
        assert not report.ok
