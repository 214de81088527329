from datetime import date, datetime, timezone


def parse_timestamp(raw) -> datetime:
    """
    Normalize a caller-supplied date into a naive UTC datetime.

    Accepts ``date``/``datetime`` objects, ISO dates (``2024-06-01``), ISO
    datetimes with or without an offset, and US style ``06/01/2024``.
    """
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime(raw.year, raw.month, raw.day)
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            try:
                value = datetime.strptime(text, "%m/%d/%Y")
            except ValueError as exc:
                raise ValueError(f"invalid date value: {raw!r}") from exc
    else:
        raise ValueError(f"invalid date value: {raw!r}")

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_timestamp(value: datetime) -> str:
    if value.time() == datetime.min.time():
        return value.date().isoformat()
    return value.isoformat()
