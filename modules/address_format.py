"""
Display formatting for dispenser addresses and BTC amounts.
"""

from decimal import Decimal

# Characters kept on each side of a shortened address
ADDRESS_HEAD = 6
ADDRESS_TAIL = 6


def format_btc_address(address: str) -> str:
    """
    Shorten a BTC address for menus and headings.

    Example:
        >>> format_btc_address("bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh")
        'bc1qxy...hx0wlh'
    """
    if not address:
        return ""
    if len(address) <= ADDRESS_HEAD + ADDRESS_TAIL + 3:
        return address
    return f"{address[:ADDRESS_HEAD]}...{address[-ADDRESS_TAIL:]}"


def format_btc_rate(rate: Decimal) -> str:
    """
    Render a BTC amount in plain positional notation.

    Decimal("0.00150") -> "0.0015", Decimal("1E-5") -> "0.00001".
    """
    text = format(rate, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def format_dispenser_label(address: str, rate: Decimal) -> str:
    """Menu entry for one dispenser (e.g., 'bc1qxy...hx0wlh - 0.0015 BTC')."""
    return f"{format_btc_address(address)} - {format_btc_rate(rate)} BTC"
