from __future__ import annotations


class GlyphError(Exception):
    """Base class for glyphplot errors."""


class GlyphConfigError(GlyphError, ValueError):
    """Raised once, at configuration time, when chart inputs violate a precondition."""
