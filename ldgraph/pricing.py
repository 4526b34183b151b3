"""Offer price parsing and formatting."""

import math

from ldschema.insights import PriceStats

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
}


def parse_price(raw: str | None) -> float | None:
    """Parse a price literal, accepting a decimal comma ("35,50")."""
    if raw is None:
        return None
    try:
        value = float(raw.strip().replace(",", "."))
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def currency_symbol(code: str | None) -> str | None:
    if code is None:
        return None
    return CURRENCY_SYMBOLS.get(code.strip().upper())


def format_price(value: float, currency: str | None = None, decimals: int | None = None) -> str:
    """Format a price with its currency symbol, or the code after the number.

    Whole amounts drop the decimals unless `decimals` is given.
    """
    if decimals is None:
        decimals = 0 if abs(value - round(value)) < 1e-4 else 2
    number = f"{value:.{decimals}f}"
    symbol = currency_symbol(currency)
    if symbol:
        return f"{symbol}{number}"
    if currency:
        return f"{number} {currency}"
    return number


class PriceAccumulator:
    """Running min/max over the prices of a group's offers.

    The currency is taken from the first priced offer that declares one.
    """

    def __init__(self) -> None:
        self._min: float | None = None
        self._max: float | None = None
        self._currency: str | None = None

    def add(self, price: float | None, currency: str | None = None) -> None:
        if price is None:
            return
        self._min = price if self._min is None else min(self._min, price)
        self._max = price if self._max is None else max(self._max, price)
        if self._currency is None:
            self._currency = currency

    def stats(self) -> PriceStats | None:
        if self._min is None or self._max is None:
            return None
        return PriceStats(min=self._min, max=self._max, currency=self._currency)
