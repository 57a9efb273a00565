"""
Preview render plan models.

A RenderPlan is the renderer's complete decision for one card preview:
which strategy to use and every attribute the page needs to draw it.
Templates never look at content types themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class PreviewKind(Enum):
    """Rendering strategy for a card preview."""

    PLACEHOLDER = "placeholder"
    """Inert box while the record is loading."""

    ERROR = "error"
    """Record failed to load; message only."""

    MARKUP = "markup"
    """Untrusted HTML inside a sandboxed frame."""

    IMAGE = "image"
    """Inline raster payload as a data URI."""

    FALLBACK = "fallback"
    """Remote URL or built-in placeholder artwork."""


@dataclass(frozen=True)
class PreviewBox:
    """Fixed preview dimensions in CSS pixels."""

    width: int
    height: int


# Markup gets a taller frame; images and fallbacks are square
MARKUP_BOX = PreviewBox(width=240, height=300)
IMAGE_BOX = PreviewBox(width=240, height=240)


@dataclass(frozen=True)
class SandboxPolicy:
    """
    Capability set for the frame that executes untrusted markup.

    Each flag maps to one token of the iframe sandbox attribute. Anything
    not granted here is denied by the browser.
    """

    allow_scripts: bool = True
    """Scripts run, but only inside the frame."""

    allow_same_origin: bool = False
    """False gives the frame an opaque origin: no cookies, no storage, no host DOM."""

    allow_top_navigation: bool = False
    """Unconditional navigation of the host page."""

    allow_top_navigation_by_user_activation: bool = True
    """Host navigation only as the direct result of a user gesture."""

    allow_forms: bool = False
    allow_popups: bool = False
    allow_modals: bool = False

    def to_attribute(self) -> str:
        """Value for the iframe sandbox attribute."""
        tokens = []
        if self.allow_scripts:
            tokens.append("allow-scripts")
        if self.allow_same_origin:
            tokens.append("allow-same-origin")
        if self.allow_top_navigation:
            tokens.append("allow-top-navigation")
        if self.allow_top_navigation_by_user_activation:
            tokens.append("allow-top-navigation-by-user-activation")
        if self.allow_forms:
            tokens.append("allow-forms")
        if self.allow_popups:
            tokens.append("allow-popups")
        if self.allow_modals:
            tokens.append("allow-modals")
        return " ".join(tokens)


STAMP_SANDBOX = SandboxPolicy()


@dataclass(frozen=True)
class RenderPlan:
    """
    How to draw one card preview.

    Only the fields relevant to the kind are set: srcdoc and sandbox for
    MARKUP, src for IMAGE/FALLBACK/PLACEHOLDER, message for ERROR.
    """

    kind: PreviewKind
    box: PreviewBox = IMAGE_BOX
    src: Optional[str] = None
    srcdoc: Optional[str] = None
    sandbox: Optional[SandboxPolicy] = None
    pixelated: bool = False
    object_fit: str = "contain"
    message: str = ""

    @property
    def shows_artwork(self) -> bool:
        return self.kind in (PreviewKind.MARKUP, PreviewKind.IMAGE, PreviewKind.FALLBACK)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "kind": self.kind.value,
            "width": self.box.width,
            "height": self.box.height,
            "src": self.src,
            "srcdoc": self.srcdoc,
            "sandbox": self.sandbox.to_attribute() if self.sandbox else None,
            "pixelated": self.pixelated,
            "object_fit": self.object_fit,
            "message": self.message,
        }
