"""Tests for the rule table: built-in data, validation and file overrides."""

from __future__ import annotations

import json

import pytest
import yaml

from lycanstats.core.errors import RuleTableError
from lycanstats.rules.table import (
    RuleTable,
    default_rule_data,
    default_rule_table,
    load_rule_table,
)


class TestBuiltinTable:
    """The shipped rules are valid and internally consistent."""

    def test_loads(self):
        table = default_rule_table()
        assert table.combinations
        assert table.achievements
        assert "winRate" in table.stat_keys

    def test_resolve_stat(self):
        table = default_rule_table()
        assert table.resolve_stat("winRate") == "winRate"
        assert table.resolve_stat("talking") == "talkingPer60Min"
        assert table.resolve_stat("campSolo") == "campSoloPercent"
        assert table.resolve_stat("nothing") is None

    def test_achievement_levels_sorted(self):
        for definition in default_rule_table().achievements:
            thresholds = [level.threshold for level in definition.levels]
            assert thresholds == sorted(thresholds)

    def test_round_trip(self):
        table = default_rule_table()
        assert RuleTable.from_dict(table.to_dict()) == table

    def test_default_data_is_a_copy(self):
        data = default_rule_data()
        data["combinations"].clear()
        assert default_rule_table().combinations


class TestValidation:
    """Malformed tables are rejected with RuleTableError."""

    def _with(self, **sections):
        data = default_rule_data()
        data.update(sections)
        return data

    def test_duplicate_combination(self):
        rule = {"id": "dup", "title": "Dup", "priority": 5, "conditions": [{"stat": "winRate", "category": "HIGH"}]}
        with pytest.raises(RuleTableError, match="Duplicate"):
            RuleTable.from_dict(self._with(combinations=[rule, rule]))

    def test_unknown_category(self):
        rule = {"id": "x", "title": "X", "priority": 5, "conditions": [{"stat": "winRate", "category": "HUGE"}]}
        with pytest.raises(RuleTableError, match="unknown category"):
            RuleTable.from_dict(self._with(combinations=[rule]))

    def test_condition_needs_category_or_min_value(self):
        rule = {"id": "x", "title": "X", "priority": 5, "conditions": [{"stat": "winRate"}]}
        with pytest.raises(RuleTableError):
            RuleTable.from_dict(self._with(combinations=[rule]))

    def test_camp_balance_category(self):
        rule = {"id": "x", "title": "X", "priority": 5, "conditions": [{"stat": "campBalance", "category": "HIGH"}]}
        with pytest.raises(RuleTableError, match="campBalance"):
            RuleTable.from_dict(self._with(combinations=[rule]))

    def test_missing_field(self):
        with pytest.raises(RuleTableError, match="Malformed"):
            RuleTable.from_dict(self._with(combinations=[{"title": "no id"}]))

    def test_non_positive_threshold(self):
        achievement = {"id": "a", "name": "A", "evaluator": "campWins", "levels": [{"stars": 1, "threshold": 0}]}
        with pytest.raises(RuleTableError, match="non-positive"):
            RuleTable.from_dict(self._with(achievements=[achievement]))

    def test_unknown_stat_is_only_a_warning(self):
        rule = {"id": "x", "title": "X", "priority": 5, "conditions": [{"stat": "flying", "category": "HIGH"}]}
        table = RuleTable.from_dict(self._with(combinations=[rule]))
        assert table.combinations[0].id == "x"


class TestLoadRuleTable:
    """File overrides replace whole sections."""

    def test_no_path_returns_builtin(self):
        assert load_rule_table() is default_rule_table()

    def test_yaml_section_override(self, tmp_path):
        path = tmp_path / "rules.yaml"
        rule = {"id": "only", "title": "Only", "priority": 9, "conditions": [{"stat": "winRate", "category": "HIGH"}]}
        path.write_text(yaml.safe_dump({"combinations": [rule]}), encoding="utf-8")

        table = load_rule_table(path)
        assert [r.id for r in table.combinations] == ["only"]
        assert table.achievements == default_rule_table().achievements

    def test_json_override(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"achievements": []}), encoding="utf-8")
        table = load_rule_table(path)
        assert table.achievements == ()
        assert table.combinations == default_rule_table().combinations

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("combinations: [unclosed", encoding="utf-8")
        with pytest.raises(RuleTableError):
            load_rule_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError):
            load_rule_table(tmp_path / "absent.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(RuleTableError, match="mapping"):
            load_rule_table(path)

    def test_unknown_format(self, tmp_path):
        path = tmp_path / "rules.txt"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(RuleTableError, match="format"):
            load_rule_table(path)
