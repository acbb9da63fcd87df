"""Axis and legend break calculation.

Both variants return exactly ``n`` integer breaks at evenly spaced
probabilities from 0 to 1, using the linear-interpolation (type 7)
quantile estimator.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from apde_graphs.exceptions import InvalidArgument
from apde_graphs.settings import DEFAULT_N_BREAKS, BreakConfig, GraphSettings, validated

# Interpolation noise below this is snapped to the nearest integer
_SNAP_DECIMALS = 8


def _as_numeric(data: Sequence[float] | np.ndarray) -> np.ndarray:
    if isinstance(data, (str, bytes)):
        raise InvalidArgument("`data` must be a numeric sequence, got a string")
    try:
        values = np.asarray(data)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"`data` must be a numeric sequence: {e}") from e
    if values.dtype.kind not in "iuf":
        raise InvalidArgument(f"`data` must be numeric, got dtype {values.dtype}")
    if values.ndim != 1:
        raise InvalidArgument(f"`data` must be one-dimensional, got {values.ndim} dimensions")
    if values.size == 0:
        raise InvalidArgument("`data` must not be empty")
    values = values.astype(float)
    if not np.all(np.isfinite(values)):
        raise InvalidArgument("`data` must not contain NaN or infinite values")
    return values


def _floor(values: np.ndarray) -> list[int]:
    # Endpoints are floored exactly; snapping only applies between them
    low, high = np.floor(values[0]), np.floor(values[-1])
    snapped = np.clip(np.floor(np.round(values, _SNAP_DECIMALS)), low, high)
    snapped[0], snapped[-1] = low, high
    return [int(v) for v in snapped]


def linear_breaks(data: Sequence[float] | np.ndarray, n: int = DEFAULT_N_BREAKS) -> list[int]:
    """Breaks spread evenly over the whole-number span of ``data``.

    The span runs from ``ceil(min)`` to ``floor(max)``; data that fits
    inside a single open unit interval has no such span and is rejected.
    """
    values = _as_numeric(data)
    cfg = validated(BreakConfig, n=n)

    bottom = int(np.ceil(values.min()))
    top = int(np.floor(values.max()))
    if bottom > top:
        raise InvalidArgument(
            f"`data` spans no whole number (ceil(min)={bottom} > floor(max)={top})",
            detail={"min": float(values.min()), "max": float(values.max())},
        )

    span = np.arange(bottom, top + 1, dtype=float)
    return _floor(np.quantile(span, np.linspace(0, 1, cfg.n), method="linear"))


def quantile_breaks(data: Sequence[float] | np.ndarray, n: int = DEFAULT_N_BREAKS) -> list[int]:
    """Breaks at the data's own quantiles; endpoints are floor(min) and floor(max)."""
    values = _as_numeric(data)
    cfg = validated(BreakConfig, n=n)
    return _floor(np.quantile(values, np.linspace(0, 1, cfg.n), method="linear"))


def house_breaks(
    data: Sequence[float] | np.ndarray,
    settings: GraphSettings | None = None,
    *,
    method: str = "linear",
) -> list[int]:
    """Breaks using the house ``n_breaks`` from settings.

    ``method`` picks ``"linear"`` or ``"quantile"`` placement.
    """
    settings = settings or GraphSettings()
    if method not in _METHODS:
        raise InvalidArgument(
            f"`method` must be one of {sorted(_METHODS)}, got {method!r}",
            detail={"method": method},
        )
    return _METHODS[method](data, n=settings.n_breaks)


_METHODS = {"linear": linear_breaks, "quantile": quantile_breaks}
