# queries.py

"""
This module stores the SQL that loads the cleaned renewables tables into
the dashboard DuckDB database.

Each table query reads from a polars DataFrame registered on the
connection under the table's "source" key (see config.OUTPUT_FILES).
"""

TABLE_CREATION_QUERIES = [
    {
        "name": "uk_generation_by_source_tbl",
        "source": "generation_by_source",
        "sql": """
            CREATE OR REPLACE TABLE uk_generation_by_source_tbl AS
            SELECT year, source, category, generation_gwh
            FROM generation_by_source;
        """,
    },
    {
        "name": "uk_capacity_by_source_tbl",
        "source": "capacity_by_source",
        "sql": """
            CREATE OR REPLACE TABLE uk_capacity_by_source_tbl AS
            SELECT year, source, category, capacity_mw
            FROM capacity_by_source;
        """,
    },
    {
        "name": "uk_load_factors_tbl",
        "source": "load_factors",
        "sql": """
            CREATE OR REPLACE TABLE uk_load_factors_tbl AS
            SELECT year, source, load_factor_pct
            FROM load_factors;
        """,
    },
    {
        "name": "country_generation_comparison_tbl",
        "source": "region_comparison",
        "sql": """
            CREATE OR REPLACE TABLE country_generation_comparison_tbl AS
            SELECT year, country, source, category, generation_gwh
            FROM region_comparison;
        """,
    },
    {
        "name": "uk_annual_totals_tbl",
        "source": "annual_totals",
        "sql": """
            CREATE OR REPLACE TABLE uk_annual_totals_tbl AS
            SELECT year, installed_capacity_mw, electricity_generated_gwh, load_factor_percent
            FROM annual_totals;
        """,
    },
]

VIEW_CREATION_QUERIES = [
    {
        "name": "country_generation_share_vw",
        "sql": """
            CREATE OR REPLACE VIEW country_generation_share_vw AS
            SELECT c.year, c.country, c.source, c.category, c.generation_gwh,
                c.generation_gwh / NULLIF(t.generation_gwh, 0) AS share_of_total
            FROM country_generation_comparison_tbl c
            JOIN country_generation_comparison_tbl t
                ON t.year = c.year AND t.country = c.country AND t.source = 'Total'
            WHERE c.source != 'Total';
        """,
    },
]
