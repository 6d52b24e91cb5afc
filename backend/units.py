"""Display-unit conversions. Stored weights are always kg."""

LB_PER_KG = 2.20462


def _value(unit) -> str:
    return getattr(unit, "value", unit)


def to_display_weight(weight_kg: float, unit) -> float:
    """kg -> the user's weight unit ('kg' or 'lb'), 2 decimals."""
    if _value(unit) in ("lb", "lbs"):
        return round(weight_kg * LB_PER_KG, 2)
    return round(weight_kg, 2)
