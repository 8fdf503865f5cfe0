"""
Summary statistics over one epoch of samples.

Conventions follow the reference feature set:
    - NaN samples are skipped in sums but still count in the divisor.
    - Empty input yields NaN rather than an exception.
    - Correlation uses raw sums (biased Pearson), covariance divides by n + 1 - lag.
"""

import numpy as np
from typing import Sequence, Tuple

from accstats.config import get as get_config
from accstats.errors import DomainError


def _as_array(values) -> np.ndarray:
    return np.asarray(values, dtype=np.float64).ravel()


# ---------------------------------------------------------------------------
# Location / spread
# ---------------------------------------------------------------------------

def nansum(values) -> float:
    """Sum skipping NaN. NaN for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return np.nan
    return float(np.sum(arr[~np.isnan(arr)]))


def mean(values) -> float:
    """
    Arithmetic mean with NaNs dropped from the numerator only.

    The divisor is always the full length, so NaN samples pull the
    mean toward zero instead of being ignored.
    """
    arr = _as_array(values)
    if arr.size == 0:
        return np.nan
    return nansum(arr) / arr.size


def _sum_squared_deviation(arr: np.ndarray, centre: float) -> float:
    keep = ~np.isnan(arr)
    return float(np.sum((arr[keep] - centre) ** 2))


def std(values, centre: float) -> float:
    """Population standard deviation about a given mean (divide by n)."""
    arr = _as_array(values)
    if arr.size == 0:
        return np.nan
    with np.errstate(invalid='ignore'):
        return float(np.sqrt(np.float64(_sum_squared_deviation(arr, centre)) / arr.size))


def std_sample(values, centre: float) -> float:
    """Sample standard deviation about a given mean (divide by n - 1)."""
    arr = _as_array(values)
    if arr.size == 0:
        return np.nan
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.sqrt(np.float64(_sum_squared_deviation(arr, centre)) / (arr.size - 1)))


def value_range(values) -> float:
    """max - min, NaN for empty input."""
    arr = _as_array(values)
    finite = arr[~np.isnan(arr)]
    if finite.size == 0:
        return np.nan
    return float(np.max(finite) - np.min(finite))


# ---------------------------------------------------------------------------
# Magnitude
# ---------------------------------------------------------------------------

def vector_magnitude(x, y, z):
    """Euclidean norm of (x, y, z). Works on scalars or arrays."""
    return np.sqrt(x * x + y * y + z * z)


def enmo(x, y, z) -> np.ndarray:
    """Euclidean norm minus one (1 g)."""
    return vector_magnitude(_as_array(x), _as_array(y), _as_array(z)) - 1.0


def truncate(values) -> np.ndarray:
    """Negative values set to zero. NaN passes through."""
    arr = _as_array(values)
    return np.where(arr < 0, 0.0, arr)


def absolute(values) -> np.ndarray:
    return np.abs(_as_array(values))


def combine(*arrays) -> np.ndarray:
    """Concatenate feature arrays in the order given."""
    if not arrays:
        return np.empty(0, dtype=np.float64)
    return np.concatenate([_as_array(a) for a in arrays])


# ---------------------------------------------------------------------------
# Pairwise
# ---------------------------------------------------------------------------

def _check_pair(a: np.ndarray, b: np.ndarray, lag: int) -> None:
    if a.size != b.size:
        raise DomainError(f"length mismatch: {a.size} != {b.size}")
    if a.size <= lag:
        raise DomainError(f"lag {lag} requires more than {lag} samples, got {a.size}")


def covariance(a, b, mean_a: float, mean_b: float, lag: int = 0) -> float:
    """
    Lagged covariance, pairing a[i - lag] with b[i].

    Pairs with a NaN on either side are skipped. The divisor is
    len(a) + 1 - lag regardless of how many pairs survive.
    """
    a = _as_array(a)
    b = _as_array(b)
    lag = abs(int(lag))
    _check_pair(a, b, lag)

    n = a.size
    a_l = a[:n - lag]
    b_l = b[lag:]
    keep = ~np.isnan(a_l) & ~np.isnan(b_l)
    total = float(np.sum((a_l[keep] - mean_a) * (b_l[keep] - mean_b)))
    return total / (n + 1 - lag)


def correlation(a, b, lag: int = 0) -> float:
    """
    Pearson correlation from raw sums, pairing a[i - lag] with b[i].

    Uses the biased (1/n) moments. A constant input gives NaN or inf
    from the zero standard deviation; no NaN skipping is done.
    """
    a = _as_array(a)
    b = _as_array(b)
    lag = abs(int(lag))
    _check_pair(a, b, lag)

    n = a.size - lag
    xs = a[:a.size - lag]
    ys = b[lag:]

    sx = np.sum(xs)
    sy = np.sum(ys)
    sxx = np.sum(xs * xs)
    syy = np.sum(ys * ys)
    sxy = np.sum(xs * ys)

    with np.errstate(divide='ignore', invalid='ignore'):
        cov = sxy / n - sx * sy / n / n
        sigma_x = np.sqrt(sxx / n - sx * sx / n / n)
        sigma_y = np.sqrt(syy / n - sy * sy / n / n)
        return float(cov / sigma_x / sigma_y)


# ---------------------------------------------------------------------------
# Order statistics
# ---------------------------------------------------------------------------

def percentiles(values, quantiles: Sequence[float]) -> np.ndarray:
    """
    Quantiles using R's default (type 7) linear interpolation.

    With h = p * (n - 1) + 1 on the sorted sample, h <= 1 clamps to the
    minimum, h >= n to the maximum, otherwise interpolate between the
    floor(h)-th and the next order statistic (1-based).
    """
    arr = _as_array(values)
    qs = np.asarray(quantiles, dtype=np.float64).ravel()
    n = arr.size

    if n == 0:
        return np.full(qs.size, np.nan)
    if n == 1:
        return np.full(qs.size, arr[0])

    ordered = np.sort(arr)
    out = np.empty(qs.size, dtype=np.float64)
    for i, p in enumerate(qs):
        h = p * (n - 1) + 1
        if h <= 1.0:
            out[i] = ordered[0]
        elif h >= n:
            out[i] = ordered[n - 1]
        else:
            h_floor = int(np.floor(h))
            lo = ordered[h_floor - 1]
            hi = ordered[h_floor]
            out[i] = lo + (h - h_floor) * (hi - lo)
    return out


# ---------------------------------------------------------------------------
# Orientation
# ---------------------------------------------------------------------------

def angle_mean_std(a, b) -> Tuple[float, float]:
    """
    Mean and sample std of atan2(a[i], b[i]).

    Plain arithmetic statistics, not circular ones. Returns (NaN, NaN)
    for fewer than two samples or mismatched lengths.
    """
    a = _as_array(a)
    b = _as_array(b)
    if a.size < 2 or a.size != b.size:
        return np.nan, np.nan

    angles = np.arctan2(a, b)
    centre = np.sum(angles) / angles.size
    spread = np.sqrt(np.sum((angles - centre) ** 2) / (angles.size - 1))
    return float(centre), float(spread)


def count_stuck(x, y, z) -> int:
    """
    Number of axes that look saturated: zero std with |mean| above threshold.
    """
    threshold = get_config('stuck.threshold')
    stuck = 0
    for axis in (x, y, z):
        centre = mean(axis)
        if std(axis, centre) == 0 and (centre < -threshold or centre > threshold):
            stuck += 1
    return stuck
