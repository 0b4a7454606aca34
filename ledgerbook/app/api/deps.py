from __future__ import annotations

from datetime import date

from fastapi import HTTPException, status
from pydantic import ValidationError

from ledgerbook.app.schemas.ledger import DateRange


def default_dates(
    from_date: date | None, to_date: date | None,
) -> tuple[date, date]:
    """Fill a missing bound: first of the current month, or today."""
    today = date.today()
    if from_date is None:
        from_date = today.replace(day=1)
    if to_date is None:
        to_date = today
    return from_date, to_date


def resolve_date_range(from_date: date | None, to_date: date | None) -> DateRange:
    fd, td = default_dates(from_date, to_date)
    try:
        return DateRange(start=fd, end=td)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must not be after to_date",
        )


def http_error(e: ValueError) -> HTTPException:
    """Map a service-layer ValueError to an HTTP error."""
    message = str(e)
    if "not found" in message.lower():
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
