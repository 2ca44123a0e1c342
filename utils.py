# utils.py
from decimal import Decimal
from typing import Optional, Union

from babel.numbers import format_currency as _babel_format_currency

from config import CURRENCY, CURRENCY_LOCALE

Number = Union[int, float, Decimal, str]


def format_currency(
  amount: Optional[Number],
  currency: str = CURRENCY,
  locale: str = CURRENCY_LOCALE,
) -> str:
  """Render an amount stored in minor units (cents) as display text, e.g. 123456 -> "$1,234.56"."""
  if amount is None:
    amount = 0
  major = Decimal(str(amount)) / 100
  return _babel_format_currency(major, currency, locale=locale)
