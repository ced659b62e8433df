# assemble.py

"""
Build the five dashboard tables from the classified records of all sheets.

Each builder is a pure filter/select over the same input frame; only the
annual totals table changes shape (long to wide).
"""

import logging

import polars as pl

from classify import TOTAL_SOURCE
from config import TOTALS_COLUMNS, UK_REGION, Metric
from errors import InconsistentTotals

logger = logging.getLogger(__name__)


def _uk_metric(records: pl.DataFrame, metric: Metric) -> pl.DataFrame:
    return records.filter(
        (pl.col("region") == UK_REGION) & (pl.col("metric") == metric.value)
    )


def generation_by_source(records: pl.DataFrame) -> pl.DataFrame:
    """UK generation per source, total row excluded."""
    return (
        _uk_metric(records, Metric.GENERATION)
        .filter(pl.col("source_clean") != TOTAL_SOURCE)
        .select(
            "year",
            pl.col("source_clean").alias("source"),
            "category",
            pl.col("value").alias("generation_gwh"),
        )
    )


def capacity_by_source(records: pl.DataFrame) -> pl.DataFrame:
    """UK installed capacity per source, total row excluded."""
    return (
        _uk_metric(records, Metric.CAPACITY)
        .filter(pl.col("source_clean") != TOTAL_SOURCE)
        .select(
            "year",
            pl.col("source_clean").alias("source"),
            "category",
            pl.col("value").alias("capacity_mw"),
        )
    )


def load_factors(records: pl.DataFrame) -> pl.DataFrame:
    # Only the UK sheet carries load factors
    return _uk_metric(records, Metric.LOAD_FACTOR).select(
        "year",
        pl.col("source_clean").alias("source"),
        pl.col("value").alias("load_factor_pct"),
    )


def region_comparison(records: pl.DataFrame) -> pl.DataFrame:
    """
    Generation per nation and source.

    The Total rows are kept so consumers can compute each source's share of
    a nation's generation.
    """
    return records.filter(
        (pl.col("region") != UK_REGION)
        & (pl.col("metric") == Metric.GENERATION.value)
    ).select(
        "year",
        pl.col("region").alias("country"),
        pl.col("source_clean").alias("source"),
        "category",
        pl.col("value").alias("generation_gwh"),
    )


def annual_totals(records: pl.DataFrame) -> pl.DataFrame:
    """
    Pivot the UK Total rows to one row per year with one column per metric.

    Args:
        records: Classified records of all sheets

    Returns:
        DataFrame with year and one column per metric (see TOTALS_COLUMNS)

    Raises:
        InconsistentTotals: there are no UK Total rows, a year lacks one of
            the three metrics, or a year has more than one Total row for a
            metric
    """
    columns = [TOTALS_COLUMNS[metric] for metric in Metric]
    totals = records.filter(
        (pl.col("region") == UK_REGION) & (pl.col("source_clean") == TOTAL_SOURCE)
    ).select("year", "metric", "value")

    if totals.is_empty():
        raise InconsistentTotals(None, ["no UK Total rows"])

    counts = totals.group_by("year", "metric").len()
    for year in sorted(totals["year"].unique().to_list()):
        year_counts = dict(
            counts.filter(pl.col("year") == year).select("metric", "len").iter_rows()
        )
        problems = []
        for metric in Metric:
            n = year_counts.get(metric.value, 0)
            if n == 0:
                problems.append(f"missing {metric.value}")
            elif n > 1:
                problems.append(f"{n} Total rows for {metric.value}")
        if problems:
            raise InconsistentTotals(year, problems)

    wide = totals.pivot(on="metric", index="year", values="value")
    return (
        wide.rename({metric.value: TOTALS_COLUMNS[metric] for metric in Metric})
        .select("year", *columns)
        .sort("year")
    )


TABLE_BUILDERS = {
    "generation_by_source": generation_by_source,
    "capacity_by_source": capacity_by_source,
    "load_factors": load_factors,
    "region_comparison": region_comparison,
    "annual_totals": annual_totals,
}


def build_tables(records: pl.DataFrame) -> dict[str, pl.DataFrame]:
    """Build every output table, keyed like config.OUTPUT_FILES."""
    tables = {}
    for name, builder in TABLE_BUILDERS.items():
        tables[name] = builder(records)
        logger.info(f"{name}: {tables[name].height} rows")
    return tables
