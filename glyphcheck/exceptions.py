"""
Exception classes for glyphcheck.

All glyphcheck exceptions inherit from GlyphCheckError,
making it easy to catch all library errors.

Non-fatal outcomes of a pattern pass (no compound found, an emptied
ledger bucket, a manual shape left untouched) are plain result values,
never exceptions.

Example:
    >>> try:
    ...     pattern.run()
    ... except glyphcheck.MalformedRegionError as e:
    ...     print(f"Upstream segmentation is broken: {e}")
    ... except glyphcheck.GlyphCheckError as e:
    ...     print(f"glyphcheck error: {e}")
"""


class GlyphCheckError(Exception):
    """
    Base exception for all glyphcheck errors.

    Catch this to handle any glyphcheck-specific error.
    """

    pass


class ConfigurationError(GlyphCheckError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> LedgerConfig(manual_policy="ignore")
        ConfigurationError: manual_policy must be one of ('exempt', 'flag')
    """

    pass


class MalformedRegionError(GlyphCheckError):
    """
    Raised when a region index breaks its contract.

    A ledger whose stick glyph is missing, or a stick that was never
    registered in the glyph nest, means the segmentation step upstream
    produced corrupt data. Processing it would corrupt bucket bookkeeping,
    so the pass stops instead.
    """

    pass
