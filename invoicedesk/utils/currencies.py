"""
Supported currencies and symbol lookup.
"""

from typing import TypedDict


class CurrencyDefinition(TypedDict):
    code: str
    symbol: str
    name: str
    precision: int


CURRENCIES: list[CurrencyDefinition] = [
    {"code": "USD", "symbol": "$", "name": "US Dollar", "precision": 2},
    {"code": "EUR", "symbol": "€", "name": "Euro", "precision": 2},
    {"code": "GBP", "symbol": "£", "name": "British Pound", "precision": 2},
    {"code": "JPY", "symbol": "¥", "name": "Japanese Yen", "precision": 0},
    {"code": "CAD", "symbol": "C$", "name": "Canadian Dollar", "precision": 2},
    {"code": "AUD", "symbol": "A$", "name": "Australian Dollar", "precision": 2},
    {"code": "INR", "symbol": "₹", "name": "Indian Rupee", "precision": 2},
    {"code": "CNY", "symbol": "¥", "name": "Chinese Yuan", "precision": 2},
    {"code": "BRL", "symbol": "R$", "name": "Brazilian Real", "precision": 2},
]

_BY_CODE = {c["code"]: c for c in CURRENCIES}


def get_currency(code: str) -> CurrencyDefinition | None:
    return _BY_CODE.get(code.upper())


def currency_symbol(code: str) -> str:
    """Symbol for a currency code; unknown codes are their own symbol."""
    currency = get_currency(code)
    return currency["symbol"] if currency else code
