"""Options and parameter types shared by several commands."""

from datetime import date

import click

from bluebook.domain.fiscal_year import fiscal_year_of
from bluebook.utils.amount_parser import parse_ratio
from bluebook.utils.date_parser import parse_date


class DateParamType(click.ParamType):
    """Date given as YYYY-MM-DD or a relative word like 'today'."""

    name = "date"

    def convert(self, value, param, ctx):
        if isinstance(value, date):
            return value
        try:
            return parse_date(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


DATE = DateParamType()


def year_option(f):
    """Add a --year option that resolves to a fiscal year (default: current year)."""

    def _resolve(ctx, param, value):
        return fiscal_year_of(value) if value is not None else date.today().year

    return click.option(
        "--year",
        type=int,
        callback=_resolve,
        help="Fiscal year (defaults to the current year)",
    )(f)


class RatioParamType(click.ParamType):
    """Whole percentage between 0 and 100, with or without a trailing '%'."""

    name = "ratio"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_ratio(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


RATIO = RatioParamType()
