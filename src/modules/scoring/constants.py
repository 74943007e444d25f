"""Scoring constants.

``DEFAULT_PICKING_RULES`` applies while no rules row has been saved.  The
separator/scanner split is fixed and not part of the editable rules.
"""

RULES_SINGLETON_KEY = "default"

DEFAULT_PICKING_RULES = {
    "xp_base_per_lot": 50,
    "xp_per_order": 10,
    "xp_per_item": 2,
    "speed_target_items_per_min": 5.0,
    "bonus10_threshold": 1.0,
    "bonus20_threshold": 1.2,
}

SEPARATOR_XP_SHARE = 0.6
SCANNER_XP_SHARE = 0.4

BONUS_TIER_HIGH_PERCENT = 20
BONUS_TIER_LOW_PERCENT = 10

MS_PER_MINUTE = 60_000
