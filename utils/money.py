from decimal import Decimal, InvalidOperation, ROUND_DOWN


def parse_whole_amount(value) -> int:
    """
    Coerce an amount to an integer, truncating toward zero.

    ``"10.9"`` -> 10, ``-3.5`` -> -3. Booleans and empty values are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValueError("missing amount value")

    if isinstance(value, int):
        return value

    normalized = str(value).strip().replace(",", "")
    if not normalized:
        raise ValueError("empty amount value")

    try:
        amount = Decimal(normalized).quantize(Decimal("1"), rounding=ROUND_DOWN)
    except InvalidOperation as exc:
        raise ValueError("invalid amount value") from exc

    if not amount.is_finite():
        raise ValueError("invalid amount value")

    return int(amount)
