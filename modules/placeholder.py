"""
Built-in placeholder artwork for stamp previews.

Used when a record has no decodable inline payload and no remote URL, and
(as the loading skeleton) while the record is being fetched.

Edit these SVG definitions to customize the default appearance.
"""

# Shown in place of artwork that cannot be displayed
STAMP_PLACEHOLDER_SVG = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' "
    "width='240' height='240' viewBox='0 0 240 240'%3E"
    "%3Crect fill='%23111' width='240' height='240'/%3E"
    "%3Crect x='40' y='40' width='160' height='160' rx='8' fill='none' "
    "stroke='%23f6ad55' stroke-width='4' stroke-dasharray='10 6'/%3E"
    "%3Ctext x='120' y='128' font-family='Arial,sans-serif' font-size='18' "
    "fill='%23f6ad55' text-anchor='middle'%3ESTAMP%3C/text%3E"
    "%3C/svg%3E"
)

# Inert box drawn while loading (same dimensions as the preview)
LOADING_SKELETON_SVG = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' "
    "width='240' height='240' viewBox='0 0 240 240'%3E"
    "%3Crect fill='%232d3748' width='240' height='240' rx='10'/%3E"
    "%3C/svg%3E"
)


def get_placeholder_image(override_url: str = "") -> str:
    """
    Get the placeholder image for a stamp without displayable artwork.

    Args:
        override_url: Configured replacement (PLACEHOLDER_IMAGE_URL); empty
            means use the built-in SVG

    Returns:
        URL or data URI string
    """
    return override_url or STAMP_PLACEHOLDER_SVG


def get_loading_image() -> str:
    """Data URI for the loading skeleton."""
    return LOADING_SKELETON_SVG
