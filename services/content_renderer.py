"""
Content renderer: decides how a card preview is drawn.

plan_for() is a total function over (load status, declared content type,
decode outcome). Nothing is inferred by catching exceptions at render time;
decode failures are explicit DecodeErrors turned into the fallback plan.

Decision table (LOADED records):

    category  | decodes?  | plan
    ----------+-----------+----------------------------------------------
    markup    | yes       | MARKUP   sandboxed frame, 240x300, chrome reset
    image     | yes       | IMAGE    data URI, pixelated, contain, 240x240
    markup    | no        | FALLBACK record URL or placeholder, 240x240
    image     | no        | FALLBACK
    other     | -         | FALLBACK

LOADING/IDLE always draws an inert placeholder of the image box size;
FAILED draws only an error message.

Security boundary:
    Markup is untrusted. It is never inlined into the host page; it is
    passed as srcdoc to a frame governed by STAMP_SANDBOX (scripts allowed,
    opaque origin, host navigation only on user activation).
"""

from __future__ import annotations

import base64
import binascii
import io
from enum import Enum
from typing import Optional

from PIL import Image, UnidentifiedImageError

from core.exceptions import DecodeError
from logging_config import get_logger
from models.card_state import LoadState, LoadStatus
from models.render_plan import (
    IMAGE_BOX,
    MARKUP_BOX,
    STAMP_SANDBOX,
    PreviewKind,
    RenderPlan,
    SandboxPolicy,
)
from models.stamp import StampRecord
from modules.placeholder import get_loading_image, get_placeholder_image


# Module logger
logger = get_logger(__name__)

MARKUP_TYPES = frozenset({"text/html", "application/xhtml+xml"})
SVG_TYPE = "image/svg+xml"

# Prepended to every markup payload so the artwork fills the frame edge to edge
CHROME_RESET = "<style>body { margin: 0; overflow: hidden; }</style>"

FAILED_MESSAGE = "Failed to fetch stamp information."


class ContentCategory(Enum):
    """Declared content type, reduced to the three rendering families."""

    MARKUP = "markup"
    IMAGE = "image"
    OTHER = "other"


def _base_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def classify(content_type: Optional[str]) -> ContentCategory:
    """
    Reduce a declared content type to a rendering family.

    Parameters after ';' are ignored. Missing or unknown types are OTHER.
    """
    base = _base_type(content_type)
    if base in MARKUP_TYPES:
        return ContentCategory.MARKUP
    if base.startswith("image/") and len(base) > len("image/"):
        return ContentCategory.IMAGE
    return ContentCategory.OTHER


def _b64decode(record: StampRecord) -> bytes:
    if not record.payload_base64:
        raise DecodeError(record.content_type, "no inline payload")
    try:
        data = base64.b64decode(record.payload_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(record.content_type, f"invalid base64: {e}")
    if not data:
        raise DecodeError(record.content_type, "empty payload")
    return data


def _verify_image(content_type: str, data: bytes) -> None:
    """
    Check that the bytes really are a displayable image.

    SVG is text, so it only has to be UTF-8 with an <svg> element. Everything
    else must be identified and verified by Pillow.
    """
    if content_type == SVG_TYPE:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(content_type, f"SVG is not UTF-8: {e}")
        if "<svg" not in text.lower():
            raise DecodeError(content_type, "no <svg> element")
        return

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(content_type, f"not a readable image: {e}")
    except (OSError, SyntaxError, ValueError) as e:
        # verify() reports truncated or corrupt data this way
        raise DecodeError(content_type, f"corrupt image: {e}")


def decode(record: StampRecord, category: ContentCategory) -> str:
    """
    Decode a record's inline payload for its category.

    Returns:
        MARKUP: the markup text
        IMAGE: a data URI for the image

    Raises:
        DecodeError: If the payload is missing, not base64, empty, not UTF-8
            markup, not an image of any format Pillow can read, or the
            category has no inline rendering (OTHER)
    """
    if category is ContentCategory.OTHER:
        raise DecodeError(record.content_type, "no inline rendering for this type")

    data = _b64decode(record)

    if category is ContentCategory.MARKUP:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(record.content_type, f"markup is not UTF-8: {e}")

    content_type = _base_type(record.content_type)
    _verify_image(content_type, data)

    # Re-encode so the URI always carries canonical base64
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ContentRenderer:
    """
    Produces RenderPlans for card previews.

    Attributes:
        placeholder_url: Artwork used when nothing else can be shown
        sandbox: Capability set for markup frames
    """

    def __init__(
        self,
        placeholder_url: str = "",
        sandbox: SandboxPolicy = STAMP_SANDBOX
    ):
        self._placeholder_url = get_placeholder_image(placeholder_url)
        self._sandbox = sandbox

    @property
    def placeholder_url(self) -> str:
        return self._placeholder_url

    @property
    def sandbox(self) -> SandboxPolicy:
        return self._sandbox

    def plan_for(self, state: LoadState) -> RenderPlan:
        """Render plan for whatever the loader currently holds."""
        if state.status is LoadStatus.FAILED:
            return RenderPlan(
                kind=PreviewKind.ERROR,
                message=state.reason or FAILED_MESSAGE,
            )
        if state.status is LoadStatus.LOADED and state.record is not None:
            return self.plan_for_record(state.record)
        return self.loading_plan()

    def loading_plan(self) -> RenderPlan:
        """Inert placeholder, same box as the image preview."""
        return RenderPlan(kind=PreviewKind.PLACEHOLDER, box=IMAGE_BOX, src=get_loading_image())

    def plan_for_record(self, record: StampRecord) -> RenderPlan:
        """Render plan for a loaded record."""
        category = classify(record.content_type)
        try:
            decoded = decode(record, category)
        except DecodeError as e:
            if category is not ContentCategory.OTHER:
                logger.warning(f"{record.stamp_id}: {e}; using fallback preview")
            return self.fallback_plan(record)

        if category is ContentCategory.MARKUP:
            return RenderPlan(
                kind=PreviewKind.MARKUP,
                box=MARKUP_BOX,
                srcdoc=CHROME_RESET + decoded,
                sandbox=self._sandbox,
            )
        return RenderPlan(
            kind=PreviewKind.IMAGE,
            box=IMAGE_BOX,
            src=decoded,
            pixelated=True,
        )

    def fallback_plan(self, record: StampRecord) -> RenderPlan:
        """Remote URL if the record has one, otherwise the placeholder artwork."""
        return RenderPlan(
            kind=PreviewKind.FALLBACK,
            box=IMAGE_BOX,
            src=record.url or self._placeholder_url,
            pixelated=True,
        )

    def thumbnail_for(self, record: Optional[StampRecord]) -> str:
        """Small artwork for the back side header."""
        if record is not None and record.url:
            return record.url
        return self._placeholder_url
