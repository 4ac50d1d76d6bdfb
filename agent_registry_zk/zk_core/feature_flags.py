"""
Environment-driven settings for the agent registry.

Precedence: explicit argument, in-memory override (testing only), environment
variable, built-in default.
"""

from __future__ import annotations

import os
from typing import Final

from .config import DEFAULT_TREE_DEPTH, MAX_TREE_DEPTH

_TREE_DEPTH_ENV: Final[str] = "AGENT_REGISTRY_TREE_DEPTH"
_SUBGROUP_CHECK_ENV: Final[str] = "AGENT_REGISTRY_G2_SUBGROUP_CHECK"

_TRUE_VALUES: Final[tuple[str, ...]] = ("1", "true", "yes", "on")
_FALSE_VALUES: Final[tuple[str, ...]] = ("0", "false", "no", "off")

_tree_depth_override: int | None = None
_subgroup_check_override: bool | None = None


def _normalize_depth(value: int | str | None) -> int | None:
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid tree depth: {value!r}")

    try:
        depth = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid tree depth: {value!r}") from None

    if depth < 1 or depth > MAX_TREE_DEPTH:
        raise ValueError(
            f"Invalid tree depth: {value!r}. Valid range: 1..{MAX_TREE_DEPTH}"
        )

    return depth


def _normalize_bool(value: bool | str | None) -> bool | None:
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        return value

    if not isinstance(value, str):
        raise ValueError(f"Invalid boolean flag: {value!r}")

    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    raise ValueError(
        f"Invalid boolean flag: {value!r}. "
        f"Valid options: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}"
    )


def get_tree_depth(prefer: int | None = None) -> int:
    """
    Resolve the Merkle accumulator depth.

    Args:
        prefer: Optional explicit depth.

    Returns:
        Depth in 1..MAX_TREE_DEPTH.

    Raises:
        ValueError: If a provided depth is invalid.
    """
    preferred = _normalize_depth(prefer)
    if preferred is not None:
        return preferred

    if _tree_depth_override is not None:
        return _tree_depth_override

    env_depth = _normalize_depth(os.getenv(_TREE_DEPTH_ENV))
    if env_depth is not None:
        return env_depth

    return DEFAULT_TREE_DEPTH


def set_tree_depth(value: int | None) -> None:
    """Set in-memory depth override (testing only). None clears it."""
    global _tree_depth_override
    _tree_depth_override = _normalize_depth(value)


def g2_subgroup_check_enabled() -> bool:
    """Whether decoded G2 points must lie in the order-r subgroup."""
    if _subgroup_check_override is not None:
        return _subgroup_check_override

    env_value = _normalize_bool(os.getenv(_SUBGROUP_CHECK_ENV))
    if env_value is not None:
        return env_value

    return True


def set_g2_subgroup_check(value: bool | None) -> None:
    """Set in-memory subgroup check override (testing only). None clears it."""
    global _subgroup_check_override
    _subgroup_check_override = _normalize_bool(value)
