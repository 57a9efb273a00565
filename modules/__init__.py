"""Helper modules for the StampCard application."""

__all__ = [
    "address_format",
    "placeholder",
    "qr_code",
    "sanitize",
]
