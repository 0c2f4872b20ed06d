"""
Expressions SQL de regroupement par date, selon le dialecte de la session.

Les buckets sont des chaînes ``YYYY-MM-DD`` (jour) et ``YYYY-MM`` (mois).
"""
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

_DATE_FORMATS = {
    "sqlite": {"day": "%Y-%m-%d", "month": "%Y-%m"},
    "mysql": {"day": "%Y-%m-%d", "month": "%Y-%m"},
    "postgresql": {"day": "YYYY-MM-DD", "month": "YYYY-MM"},
}


def dialect_name(session: AsyncSession) -> str:
    return session.bind.dialect.name


def _date_bucket(column, dialect: str, granularity: str):
    formats = _DATE_FORMATS.get(dialect, _DATE_FORMATS["postgresql"])
    fmt = formats[granularity]
    if dialect == "sqlite":
        return func.strftime(fmt, column)
    if dialect == "mysql":
        return func.date_format(column, fmt)
    return func.to_char(column, fmt)


def day_bucket(column, dialect: str):
    return _date_bucket(column, dialect, "day")


def month_bucket(column, dialect: str):
    return _date_bucket(column, dialect, "month")
