"""
Static rule tables for titles and achievements.
"""

from lycanstats.rules.table import (
    AchievementCategory,
    AchievementDefinition,
    AchievementLevel,
    CombinationRule,
    ConditionSpec,
    RuleTable,
    StatDefinition,
    TitleText,
    default_rule_table,
    load_rule_table,
)

__all__ = [
    "AchievementCategory",
    "AchievementDefinition",
    "AchievementLevel",
    "CombinationRule",
    "ConditionSpec",
    "RuleTable",
    "StatDefinition",
    "TitleText",
    "default_rule_table",
    "load_rule_table",
]
