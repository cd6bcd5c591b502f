"""Time utilities for database models and queries."""

from datetime import UTC, datetime

from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement
from sqlalchemy.types import Date


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class utc_day(FunctionElement):
    """SQL expression for the UTC calendar day of a timestamp column."""

    type = Date()
    inherit_cache = True


@compiles(utc_day)
def _compile_utc_day(element: utc_day, compiler, **kw) -> str:
    # SQLite stores UTC text; date() truncates it as is.
    return "date(%s)" % compiler.process(element.clauses, **kw)


@compiles(utc_day, "postgresql")
def _compile_utc_day_postgresql(element: utc_day, compiler, **kw) -> str:
    return "date(timezone('UTC', %s))" % compiler.process(element.clauses, **kw)
