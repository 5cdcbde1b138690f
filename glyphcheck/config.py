"""
Configuration for glyphcheck pattern passes.

Distances are expressed as fractions of the staff interline and converted
to pixels once, through the system Scale, when a pattern is built.

Example:
    >>> config = LedgerConfig(inter_chunk_dx=2.0, max_doubt=8.0)
    >>> pattern = LedgerPattern(system, evaluator, config=config)

    >>> # Or from a YAML file
    >>> config = load_config("ledger.yaml")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal

import yaml

from glyphcheck.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

VALID_MANUAL_POLICIES = ("exempt", "flag")


@dataclass(frozen=True)
class LedgerConfig:
    """
    Tunable parameters of the ledger pattern.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Attributes:
        inter_chunk_dx: Max horizontal distance between ledger chunks
            (interline fraction). Width of the compound search window, and
            compound parts closer than this horizontally touch.
        inter_chunk_dy: Max vertical distance between ledger chunks
            (interline fraction). The window is grown by this much above
            and below the stick stop point, and parts closer than this
            vertically touch.
        max_doubt: Maximum doubt for a forged note glyph to be accepted.
        min_full_ledger_length: Minimum stick length (interline fraction)
            for a ledger to justify itself without any neighbor.
        max_compound_parts: Maximum number of candidate glyphs merged
            with the seed in a single trial compound.
        manual_policy: "exempt" skips manually assigned ledgers entirely;
            "flag" checks and reports them but never invalidates them.
    """

    inter_chunk_dx: float = 1.5
    inter_chunk_dy: float = 0.2
    max_doubt: float = 10.0
    min_full_ledger_length: float = 2.0
    max_compound_parts: int = 3
    manual_policy: Literal["exempt", "flag"] = "exempt"

    def __post_init__(self):
        """Validate configuration."""
        if self.inter_chunk_dx < 0.0 or self.inter_chunk_dy < 0.0:
            raise ConfigurationError(
                f"inter_chunk_dx and inter_chunk_dy must be >= 0.0, "
                f"got {self.inter_chunk_dx} and {self.inter_chunk_dy}"
            )
        if self.max_doubt < 0.0:
            raise ConfigurationError(f"max_doubt must be >= 0.0, got {self.max_doubt}")
        if self.min_full_ledger_length <= 0.0:
            raise ConfigurationError(
                f"min_full_ledger_length must be > 0.0, got {self.min_full_ledger_length}"
            )
        if self.max_compound_parts < 1:
            raise ConfigurationError(
                f"max_compound_parts must be >= 1, got {self.max_compound_parts}"
            )
        if self.manual_policy not in VALID_MANUAL_POLICIES:
            raise ConfigurationError(
                f"manual_policy must be one of {VALID_MANUAL_POLICIES}, "
                f"got {self.manual_policy!r}"
            )


# Standard presets

DEFAULT_CONFIG = LedgerConfig()

STRICT_CONFIG = LedgerConfig(
    inter_chunk_dx=1.0,
    inter_chunk_dy=0.1,
    max_doubt=5.0,  # Forged notes must be convincing
    max_compound_parts=2,
)

LENIENT_CONFIG = LedgerConfig(
    inter_chunk_dx=2.0,
    inter_chunk_dy=0.3,
    max_doubt=15.0,
    min_full_ledger_length=1.5,
    max_compound_parts=4,
)

PROFILES: dict[str, LedgerConfig] = {
    "default": DEFAULT_CONFIG,
    "strict": STRICT_CONFIG,
    "lenient": LENIENT_CONFIG,
}


def get_config(name: str) -> LedgerConfig:
    """Get a preset configuration by name.

    Raises:
        ConfigurationError: If no preset has that name.
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown profile {name!r}. Available: {sorted(PROFILES)}"
        ) from None


def config_from_dict(data: dict[str, Any]) -> LedgerConfig:
    """
    Build a LedgerConfig from a mapping.

    An optional "profile" key selects the preset to start from; the other
    keys override its values.

    Args:
        data: Mapping of option names to values.

    Returns:
        Validated LedgerConfig.

    Raises:
        ConfigurationError: On unknown keys or invalid values.
    """
    data = dict(data)
    base = get_config(data.pop("profile", "default"))

    known = {f.name for f in fields(LedgerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {unknown}")

    return replace(base, **data)


def load_config(path: str | Path) -> LedgerConfig:
    """
    Load a LedgerConfig from a YAML file.

    The file may be empty (defaults are used) or hold a mapping, either at
    the top level or under a "ledger" key.

    Args:
        path: YAML file path.

    Returns:
        Validated LedgerConfig.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except FileNotFoundError:
        raise ConfigurationError(f"File not found: {path}") from None

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping, got {type(data).__name__}")

    if "ledger" in data:
        data = data["ledger"] or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: 'ledger' must be a mapping")

    logger.debug("Loaded ledger configuration from %s: %s", path, data)
    return config_from_dict(data)
