"""Tests for the ordered source/category classification rules."""

# pylint: disable=missing-function-docstring

import polars as pl
import pytest

from classify import (
    NATION_SOURCE_RULES,
    UK_SOURCE_RULES,
    Category,
    Granularity,
    classify,
    classify_records,
    first_match,
    granularity_for,
)

UK = "United Kingdom"

# ===========================================================================
# UK rule set
# ===========================================================================


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Onshore Wind", ("Onshore Wind", Category.WIND)),
        ("Offshore Wind (Seabed)", ("Offshore Wind (Seabed)", Category.WIND)),
        ("Offshore wind - floating", ("Offshore Wind (Floating)", Category.WIND)),
        ("Offshore Wind", ("Offshore Wind", Category.WIND)),
        ("Wave and tidal stream", ("Wave & Tidal", Category.MARINE)),
        ("Solar photovoltaics", ("Solar PV", Category.SOLAR)),
        ("Small scale Hydro", ("Small Hydro", Category.HYDRO)),
        ("Large scale Hydro", ("Large Hydro", Category.HYDRO)),
        ("Hydro", ("Hydro (Total)", Category.HYDRO)),
        ("Landfill gas", ("Landfill Gas", Category.BIOENERGY)),
        ("Sewage sludge digestion", ("Sewage Gas", Category.BIOENERGY)),
        ("Energy from waste", ("Energy from Waste", Category.WASTE)),
        ("Animal Biomass", ("Animal Biomass", Category.BIOENERGY)),
        ("Anaerobic Digestion", ("Anaerobic Digestion", Category.BIOENERGY)),
        ("Plant Biomass", ("Plant Biomass", Category.BIOENERGY)),
        ("Co-firing with fossil fuels", ("Co-firing", Category.BIOENERGY)),
        ("Liquid bio-fuels", ("Liquid Biofuels", Category.BIOENERGY)),
        ("Non-biodegradable wastes", ("Non-biodegradable Waste", Category.WASTE)),
        ("Total", ("Total", Category.TOTAL)),
        ("Total renewables", ("Total", Category.TOTAL)),
    ],
)
def test_classify_uk_labels(label, expected):
    assert classify(label, UK) == expected


def test_seabed_rule_precedes_generic_offshore_rule():
    labels = [rule.result for rule in UK_SOURCE_RULES]
    generic = UK_SOURCE_RULES[labels.index("Offshore Wind")]

    # The generic rule alone would swallow the seabed label
    assert generic.matches("Offshore Wind (Seabed)")
    assert labels.index("Offshore Wind (Seabed)") < labels.index("Offshore Wind")
    assert first_match(reversed(UK_SOURCE_RULES), "Offshore Wind (Seabed)", None) == "Offshore Wind"


def test_total_rule_is_last():
    assert UK_SOURCE_RULES[-1].result == "Total"
    assert NATION_SOURCE_RULES[-1].result == "Total"


def test_energy_rule_wins_over_total_in_label():
    # "total" appears in the label but the hydro rule comes first
    assert classify("Hydro (total)", UK) == ("Hydro (Total)", Category.HYDRO)


def test_unknown_label_falls_back_to_raw_text():
    assert classify("Geothermal", UK) == ("Geothermal", Category.OTHER)
    assert classify("Geothermal", "Scotland") == ("Geothermal", Category.OTHER)


# ===========================================================================
# Nation rule set
# ===========================================================================


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Wind", ("Onshore Wind", Category.WIND)),
        ("Onshore wind", ("Onshore Wind", Category.WIND)),
        ("Offshore wind", ("Offshore Wind", Category.WIND)),
        ("Solar photovoltaics", ("Solar PV", Category.SOLAR)),
        ("Hydro", ("Hydro", Category.HYDRO)),
        ("Bioenergy", ("Bioenergy", Category.BIOENERGY)),
        ("Wave and tidal", ("Marine", Category.MARINE)),
        ("Total", ("Total", Category.TOTAL)),
    ],
)
def test_classify_nation_labels(label, expected):
    assert classify(label, "Wales") == expected


def test_region_selects_rule_set():
    assert granularity_for(UK) is Granularity.UK
    assert granularity_for("Northern Ireland") is Granularity.NATION
    assert classify("Plant Biomass", UK) == ("Plant Biomass", Category.BIOENERGY)
    assert classify("Plant Biomass", "England") == ("Bioenergy", Category.BIOENERGY)
    assert classify("Small scale Hydro", "Scotland") == ("Hydro", Category.HYDRO)


def test_classify_is_deterministic():
    assert classify("Offshore Wind (Seabed)", UK) == classify("Offshore Wind (Seabed)", UK)


# ===========================================================================
# classify_records
# ===========================================================================


def test_classify_records_adds_columns_in_order():
    records = pl.DataFrame(
        {
            "source": ["Wind", "Offshore wind", "Wind", "Total"],
            "year": [2020, 2020, 2021, 2020],
            "metric": ["Capacity"] * 4,
            "value": [1.0, 2.0, None, 3.0],
        }
    )

    classified = classify_records(records, "Scotland")

    assert classified.columns == [
        "source", "year", "metric", "value", "source_clean", "category", "region",
    ]
    assert classified["source_clean"].to_list() == [
        "Onshore Wind", "Offshore Wind", "Onshore Wind", "Total",
    ]
    assert classified["category"].to_list() == ["Wind", "Wind", "Wind", "Total"]
    assert classified["region"].unique().to_list() == ["Scotland"]
    assert classified["value"].to_list() == [1.0, 2.0, None, 3.0]


def test_classify_records_logs_unmatched_labels(caplog):
    records = pl.DataFrame(
        {"source": ["Geothermal"], "year": [2020], "metric": ["Capacity"], "value": [1.0]}
    )

    with caplog.at_level("WARNING"):
        classified = classify_records(records, UK)

    assert classified["category"].to_list() == ["Other"]
    assert "Geothermal" in caplog.text
