from __future__ import annotations


def round_cents(value: float) -> float:
    return round(value, 2)


def format_currency(value: float) -> str:
    """Whole-dollar USD string, e.g. ``$1,234`` or ``-$1,234``."""
    sign = "-" if value < 0 and round(value) != 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
