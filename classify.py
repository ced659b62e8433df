# classify.py

"""
Map raw source labels to a canonical source name and a broad energy category.

Rules are ordered (pattern, result) tables evaluated top to bottom, first
match wins. Two rule sets exist because DESNZ reports the UK aggregate at a
finer granularity than the individual nations. The category pass is keyed
off the canonical name, so it always runs after the source pass.
"""

import logging
import re
from enum import Enum
from typing import NamedTuple

import polars as pl

from config import UK_REGION

logger = logging.getLogger(__name__)


class Category(str, Enum):
    WIND = "Wind"
    SOLAR = "Solar"
    HYDRO = "Hydro"
    MARINE = "Marine"
    BIOENERGY = "Bioenergy"
    WASTE = "Waste"
    TOTAL = "Total"
    OTHER = "Other"


class Rule(NamedTuple):
    pattern: str
    result: str
    # Label must not match this for the rule to apply
    exclude: str | None = None

    def matches(self, label: str) -> bool:
        if not re.search(self.pattern, label):
            return False
        return self.exclude is None or not re.search(self.exclude, label)


TOTAL_SOURCE = "Total"

# Seabed and floating must come before the generic offshore rule, and the
# total rule after every energy-specific one.
UK_SOURCE_RULES = (
    Rule(r"(?i)onshore wind", "Onshore Wind"),
    Rule(r"(?i)offshore wind.*seabed", "Offshore Wind (Seabed)"),
    Rule(r"(?i)offshore wind.*floating", "Offshore Wind (Floating)"),
    Rule(r"(?i)offshore wind", "Offshore Wind"),
    Rule(r"(?i)wave|tidal", "Wave & Tidal"),
    Rule(r"(?i)solar", "Solar PV"),
    Rule(r"(?i)small.*hydro", "Small Hydro"),
    Rule(r"(?i)large.*hydro", "Large Hydro"),
    Rule(r"(?i)^hydro", "Hydro (Total)"),
    Rule(r"(?i)landfill", "Landfill Gas"),
    Rule(r"(?i)sewage", "Sewage Gas"),
    Rule(r"(?i)energy from waste", "Energy from Waste"),
    Rule(r"(?i)animal", "Animal Biomass"),
    Rule(r"(?i)anaerobic", "Anaerobic Digestion"),
    Rule(r"(?i)plant biomass", "Plant Biomass"),
    Rule(r"(?i)co.firing", "Co-firing"),
    Rule(r"(?i)liquid bio", "Liquid Biofuels"),
    Rule(r"(?i)non.bio", "Non-biodegradable Waste"),
    Rule(r"(?i)total", TOTAL_SOURCE),
)

UK_CATEGORY_RULES = (
    Rule(r"(?i)wind", Category.WIND),
    Rule(r"(?i)solar", Category.SOLAR),
    Rule(r"(?i)hydro", Category.HYDRO),
    Rule(r"(?i)wave|tidal", Category.MARINE),
    Rule(
        r"(?i)biomass|anaerobic|plant|landfill|sewage|co-firing|biofuel",
        Category.BIOENERGY,
    ),
    Rule(r"(?i)waste", Category.WASTE),
    Rule(r"^Total$", Category.TOTAL),
)

NATION_SOURCE_RULES = (
    Rule(r"(?i)wind", "Onshore Wind", exclude=r"(?i)offshore"),
    Rule(r"(?i)offshore", "Offshore Wind"),
    Rule(r"(?i)solar", "Solar PV"),
    Rule(r"(?i)hydro", "Hydro"),
    Rule(r"(?i)bio", "Bioenergy"),
    Rule(r"(?i)wave|tidal|marine", "Marine"),
    Rule(r"(?i)total", TOTAL_SOURCE),
)

NATION_CATEGORY_RULES = (
    Rule(r"(?i)wind", Category.WIND),
    Rule(r"(?i)solar", Category.SOLAR),
    Rule(r"(?i)hydro", Category.HYDRO),
    Rule(r"(?i)bio", Category.BIOENERGY),
    Rule(r"(?i)marine", Category.MARINE),
    Rule(r"^Total$", Category.TOTAL),
)


class Granularity(str, Enum):
    UK = "uk"
    NATION = "nation"


class RuleSet(NamedTuple):
    source_rules: tuple[Rule, ...]
    category_rules: tuple[Rule, ...]


RULE_SETS = {
    Granularity.UK: RuleSet(UK_SOURCE_RULES, UK_CATEGORY_RULES),
    Granularity.NATION: RuleSet(NATION_SOURCE_RULES, NATION_CATEGORY_RULES),
}


def granularity_for(region: str) -> Granularity:
    return Granularity.UK if region == UK_REGION else Granularity.NATION


def first_match(rules, label: str, default):
    for rule in rules:
        if rule.matches(label):
            return rule.result
    return default


def classify(raw_label: str, region: str) -> tuple[str, Category]:
    """
    Classify a cleaned source label within a region.

    Args:
        raw_label: Source label with footnote markers already stripped
        region: "United Kingdom" or a nation name; selects the rule set

    Returns:
        (canonical source name, category). Labels no rule recognises keep
        their own text and fall into Category.OTHER.
    """
    rule_set = RULE_SETS[granularity_for(region)]
    canonical = first_match(rule_set.source_rules, raw_label, raw_label)
    category = first_match(rule_set.category_rules, canonical, Category.OTHER)
    return canonical, Category(category)


def classify_records(records: pl.DataFrame, region: str) -> pl.DataFrame:
    """
    Add source_clean, category and region columns to extracted records.

    Args:
        records: Output of extract.extract_sheet
        region: Region the records belong to

    Returns:
        Records with classification columns, row order unchanged
    """
    if records.is_empty():
        return records.with_columns(
            pl.lit(None, dtype=pl.String).alias("source_clean"),
            pl.lit(None, dtype=pl.String).alias("category"),
            pl.lit(region).alias("region"),
        )

    labels = records["source"].unique(maintain_order=True).to_list()
    classified = {label: classify(label, region) for label in labels}

    unmatched = [
        label for label, (_, category) in classified.items()
        if category is Category.OTHER
    ]
    if unmatched:
        logger.warning(f"{region}: no category for source labels {unmatched}")

    source_map = {label: canonical for label, (canonical, _) in classified.items()}
    category_map = {label: category.value for label, (_, category) in classified.items()}

    return records.with_columns(
        pl.col("source")
        .replace_strict(source_map, return_dtype=pl.String)
        .alias("source_clean"),
        pl.col("source")
        .replace_strict(category_map, return_dtype=pl.String)
        .alias("category"),
        pl.lit(region).alias("region"),
    )
