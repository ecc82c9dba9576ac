"""Lookup commands -- query the cached country dataset.

Provides the top-level ``name``, ``capital``, ``region``, ``regions``
and ``random`` commands. Each one syncs first (which only touches the
network when the cache is stale) and then answers from a
:class:`~countryfetch.index.CountryIndex`.
"""

from __future__ import annotations

import typer

from countryfetch.commands.common import load_index
from countryfetch.index import CountryIndex, NOT_AVAILABLE
from countryfetch.output import get_output, info


def _print_country(index: CountryIndex, name: str) -> None:
    country = index.find_by_name(name)
    record = index.describe(country)
    output = get_output()
    if record.flag_art is None:
        output.info(f"Flag not found for {record.country}")
    output.print_country(record)


def name_command(
    ctx: typer.Context,
    name: list[str] = typer.Argument(help="Country name, or part of one."),
) -> None:
    """Show details for a country.

    An exact (case-insensitive) match wins; otherwise the first country
    whose name contains the query is shown.

    Example::

        countryfetch name france
        countryfetch name united kingdom
    """
    index = load_index(ctx)
    _print_country(index, " ".join(name))


def capital_command(
    ctx: typer.Context,
    capital: list[str] = typer.Argument(help="Capital city name."),
) -> None:
    """Find the country a capital city belongs to.

    Example::

        countryfetch capital paris
        countryfetch capital buenos aires
    """
    query = " ".join(capital)
    index = load_index(ctx)
    country = index.find_by_capital(query)
    get_output().capital_of(query, country.name.common)


def region_command(
    ctx: typer.Context,
    region: str = typer.Argument(help="Region name, e.g. 'Europe' (case-sensitive)."),
) -> None:
    """List the countries of a region.

    Example::

        countryfetch region Europe
        countryfetch region Americas --json
    """
    index = load_index(ctx)
    countries = index.filter_by_region(region)
    if not countries:
        info(f"No countries found in region '{region}'.")
        known = index.regions()
        if known:
            get_output().suggest(f"Known regions: {', '.join(known)}")
        return

    rows = []
    for country in countries:
        record = index.describe(country)
        rows.append([record.country, record.capital, record.subregion, record.population])
    get_output().print_table(
        ["Country", "Capital", "Subregion", "Population"],
        rows,
        title=f"{region} ({len(rows)})",
    )


def regions_command(ctx: typer.Context) -> None:
    """List every region present in the dataset."""
    index = load_index(ctx)
    rows = [
        [region, str(len(index.filter_by_region(region)))] for region in index.regions()
    ]
    if not rows:
        rows = [[NOT_AVAILABLE, "0"]]
    get_output().print_table(["Region", "Countries"], rows, title="Regions")


def random_command(ctx: typer.Context) -> None:
    """Show details for a randomly chosen country."""
    index = load_index(ctx)
    _print_country(index, index.random_name())
