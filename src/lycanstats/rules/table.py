"""
Rule table types and loading.

A RuleTable bundles every piece of static configuration the title and
achievement engines consume: stat registry, title texts, combination rules,
role title keys and achievement definitions. The built-in table is assembled
from rules/titles.py and rules/achievements.py; a YAML or JSON file can
replace any of its sections.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lycanstats.core.constants import PercentileCategory
from lycanstats.core.errors import RuleTableError
from lycanstats.rules.achievements import ACHIEVEMENT_CATEGORIES, ACHIEVEMENT_DEFINITIONS
from lycanstats.rules.titles import (
    COMBINATION_TITLES,
    ROLE_TITLE_KEYS,
    STAT_REGISTRY,
    TITLE_DEFINITIONS,
)

logger = logging.getLogger(__name__)

CAMP_BALANCE_STAT = "campBalance"
CAMP_BALANCE_CATEGORIES = ("BALANCED", "SPECIALIST")
ROLE_STAT_PREFIX = "role"

RULE_SECTIONS = (
    "statRegistry",
    "titleDefinitions",
    "roleTitleKeys",
    "combinations",
    "achievementCategories",
    "achievements",
)


# ============================================================================
# Rule types
# ============================================================================


@dataclass(frozen=True)
class TitleText:
    title: str
    emoji: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TitleText:
        return cls(
            title=data["title"],
            emoji=data.get("emoji", ""),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "emoji": self.emoji, "description": self.description}


@dataclass(frozen=True)
class StatDefinition:
    """A percentile stat: its metric key, title family and condition aliases."""

    key: str
    title_key: str | None = None
    aliases: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatDefinition:
        return cls(
            key=data["stat"],
            title_key=data.get("titleKey"),
            aliases=tuple(data.get("aliases") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"stat": self.key, "titleKey": self.title_key}
        if self.aliases:
            data["aliases"] = list(self.aliases)
        return data


@dataclass(frozen=True)
class ConditionSpec:
    """
    One declarative condition of a combination rule.

    Either ``category`` (percentile bucket to match) or ``min_value`` (raw
    threshold) is set. ``min_category`` makes HIGH/LOW also accept the
    ABOVE/BELOW_AVERAGE buckets.
    """

    stat: str
    category: str | None = None
    min_category: str | None = None
    min_value: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConditionSpec:
        return cls(
            stat=data["stat"],
            category=data.get("category"),
            min_category=data.get("minCategory"),
            min_value=data.get("minValue"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"stat": self.stat}
        if self.category is not None:
            data["category"] = self.category
        if self.min_category is not None:
            data["minCategory"] = self.min_category
        if self.min_value is not None:
            data["minValue"] = self.min_value
        return data


@dataclass(frozen=True)
class CombinationRule:
    id: str
    title: str
    conditions: tuple[ConditionSpec, ...]
    priority: int
    emoji: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CombinationRule:
        return cls(
            id=data["id"],
            title=data["title"],
            conditions=tuple(ConditionSpec.from_dict(c) for c in data["conditions"]),
            priority=int(data.get("priority", 10)),
            emoji=data.get("emoji", ""),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "emoji": self.emoji,
            "description": self.description,
            "conditions": [c.to_dict() for c in self.conditions],
            "priority": self.priority,
        }


@dataclass(frozen=True)
class AchievementLevel:
    stars: int
    threshold: int


@dataclass(frozen=True)
class AchievementCategory:
    key: str
    label: str
    emoji: str = ""
    order: int = 0


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    category: str
    evaluator: str
    levels: tuple[AchievementLevel, ...]
    params: dict[str, Any] = field(default_factory=dict, hash=False)
    description: str = ""
    explanation: str = ""
    emoji: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AchievementDefinition:
        levels = sorted(
            (AchievementLevel(int(level["stars"]), int(level["threshold"])) for level in data["levels"]),
            key=lambda level: level.threshold,
        )
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", "special"),
            evaluator=data["evaluator"],
            levels=tuple(levels),
            params=dict(data.get("params") or {}),
            description=data.get("description", ""),
            explanation=data.get("explanation", ""),
            emoji=data.get("emoji", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "explanation": self.explanation,
            "emoji": self.emoji,
            "category": self.category,
            "evaluator": self.evaluator,
            "params": dict(self.params),
            "levels": [{"stars": lv.stars, "threshold": lv.threshold} for lv in self.levels],
        }


# ============================================================================
# Rule table
# ============================================================================


@dataclass(frozen=True)
class RuleTable:
    """Immutable bundle of title and achievement rules."""

    stats: tuple[StatDefinition, ...]
    title_definitions: dict[str, dict[str, TitleText]] = field(hash=False)
    role_title_keys: dict[str, str] = field(hash=False)
    combinations: tuple[CombinationRule, ...] = ()
    achievement_categories: dict[str, AchievementCategory] = field(default_factory=dict, hash=False)
    achievements: tuple[AchievementDefinition, ...] = ()

    @property
    def stat_keys(self) -> list[str]:
        return [stat.key for stat in self.stats]

    def resolve_stat(self, name: str) -> str | None:
        """
        Map a condition stat name to a metric key.

        Accepts the metric key itself, its title family (``talking``) or an
        explicit alias (``campSolo``).
        """
        for stat in self.stats:
            if name == stat.key:
                return stat.key
        for stat in self.stats:
            if name == stat.title_key or name in stat.aliases:
                return stat.key
        return None

    def title_key_for(self, stat_key: str) -> str | None:
        for stat in self.stats:
            if stat.key == stat_key:
                return stat.title_key
        return None

    def titles_for(self, title_key: str) -> dict[str, TitleText]:
        return self.title_definitions.get(title_key, {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "statRegistry": [stat.to_dict() for stat in self.stats],
            "titleDefinitions": {
                key: {variant: text.to_dict() for variant, text in variants.items()}
                for key, variants in self.title_definitions.items()
            },
            "roleTitleKeys": dict(self.role_title_keys),
            "combinations": [rule.to_dict() for rule in self.combinations],
            "achievementCategories": {
                key: {"label": cat.label, "emoji": cat.emoji, "order": cat.order}
                for key, cat in self.achievement_categories.items()
            },
            "achievements": [definition.to_dict() for definition in self.achievements],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuleTable:
        """
        Build and validate a table.

        Raises:
            RuleTableError: on missing fields, duplicate ids or unknown categories
        """
        try:
            table = cls(
                stats=tuple(StatDefinition.from_dict(s) for s in data.get("statRegistry", [])),
                title_definitions={
                    key: {variant: TitleText.from_dict(text) for variant, text in variants.items()}
                    for key, variants in (data.get("titleDefinitions") or {}).items()
                },
                role_title_keys=dict(data.get("roleTitleKeys") or {}),
                combinations=tuple(CombinationRule.from_dict(r) for r in data.get("combinations", [])),
                achievement_categories={
                    key: AchievementCategory(
                        key=key,
                        label=cat.get("label", key),
                        emoji=cat.get("emoji", ""),
                        order=int(cat.get("order", 0)),
                    )
                    for key, cat in (data.get("achievementCategories") or {}).items()
                },
                achievements=tuple(
                    AchievementDefinition.from_dict(a) for a in data.get("achievements", [])
                ),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RuleTableError(f"Malformed rule table: {e!r}") from e

        table.validate()
        return table

    def validate(self) -> None:
        """Raise RuleTableError when rules reference things that cannot exist."""
        _check_unique("stat", [s.key for s in self.stats])
        _check_unique("combination", [r.id for r in self.combinations])
        _check_unique("achievement", [a.id for a in self.achievements])

        valid_categories = {c.value for c in PercentileCategory}
        for rule in self.combinations:
            if not rule.conditions:
                raise RuleTableError(f"Combination {rule.id} has no conditions")
            for condition in rule.conditions:
                if condition.category is None and condition.min_value is None:
                    raise RuleTableError(
                        f"Combination {rule.id}: condition on {condition.stat} needs category or minValue"
                    )
                if condition.stat == CAMP_BALANCE_STAT:
                    if condition.category not in CAMP_BALANCE_CATEGORIES:
                        raise RuleTableError(
                            f"Combination {rule.id}: campBalance category must be BALANCED or SPECIALIST"
                        )
                    continue
                if condition.category is not None and condition.category not in valid_categories:
                    raise RuleTableError(
                        f"Combination {rule.id}: unknown category {condition.category}"
                    )
                if condition.min_category is not None and condition.min_category not in valid_categories:
                    raise RuleTableError(
                        f"Combination {rule.id}: unknown minCategory {condition.min_category}"
                    )
                if (
                    not condition.stat.startswith(ROLE_STAT_PREFIX)
                    and self.resolve_stat(condition.stat) is None
                ):
                    # Not fatal: the condition simply never holds
                    logger.warning(f"Combination {rule.id} references unknown stat {condition.stat}")

        for definition in self.achievements:
            if not definition.levels:
                raise RuleTableError(f"Achievement {definition.id} has no levels")
            if any(level.threshold <= 0 for level in definition.levels):
                raise RuleTableError(f"Achievement {definition.id} has a non-positive threshold")


def _check_unique(kind: str, ids: list[str]) -> None:
    seen: set[str] = set()
    for item in ids:
        if item in seen:
            raise RuleTableError(f"Duplicate {kind} id: {item}")
        seen.add(item)


# ============================================================================
# Loading
# ============================================================================


def default_rule_data() -> dict[str, Any]:
    """The built-in rules as plain data (deep copy, safe to mutate)."""
    return copy.deepcopy(
        {
            "statRegistry": STAT_REGISTRY,
            "titleDefinitions": TITLE_DEFINITIONS,
            "roleTitleKeys": ROLE_TITLE_KEYS,
            "combinations": COMBINATION_TITLES,
            "achievementCategories": ACHIEVEMENT_CATEGORIES,
            "achievements": ACHIEVEMENT_DEFINITIONS,
        }
    )


_default_table: RuleTable | None = None


def default_rule_table() -> RuleTable:
    global _default_table
    if _default_table is None:
        _default_table = RuleTable.from_dict(default_rule_data())
    return _default_table


def load_rule_table(path: Path | None = None) -> RuleTable:
    """
    Load the rule table.

    Without a path the built-in table is returned. A YAML/JSON file replaces
    each section it defines; sections it omits keep their built-in content.

    Raises:
        RuleTableError: if the file cannot be read or the result is invalid
    """
    if path is None:
        return default_rule_table()

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                overrides = yaml.safe_load(f) or {}
            elif path.suffix.lower() == ".json":
                overrides = json.load(f)
            else:
                raise RuleTableError(f"Unknown rule file format: {path.suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise RuleTableError(f"Failed to read rule file {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise RuleTableError(f"Rule file {path} must contain a mapping")

    unknown = set(overrides) - set(RULE_SECTIONS)
    if unknown:
        logger.warning(f"Ignoring unknown rule sections in {path}: {sorted(unknown)}")

    data = default_rule_data()
    for section in RULE_SECTIONS:
        if section in overrides:
            data[section] = overrides[section]

    table = RuleTable.from_dict(data)
    logger.info(
        f"Loaded rule table from {path}: {len(table.combinations)} combinations, "
        f"{len(table.achievements)} achievements"
    )
    return table
