"""
QR codes for dispenser addresses.

The back of the card shows the selected dispenser's address as a QR code so
it can be scanned into a wallet. Rendered as an SVG data URI; the page sizes
it to 200x200 CSS pixels.
"""

import segno

QR_DARK = "black"
QR_LIGHT = "orange"


def address_qr_data_uri(address: str) -> str:
    """
    SVG data URI encoding address.

    Example:
        >>> address_qr_data_uri("bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh")[:26]
        'data:image/svg+xml;charset'

    Returns:
        Empty string for an empty address
    """
    if not address:
        return ""
    qr = segno.make_qr(address, error="m")
    return qr.svg_data_uri(scale=4, border=2, dark=QR_DARK, light=QR_LIGHT)
