"""
Spectral helpers: windowing, real FFT, power/magnitude, entropy, peaks.

Spectra are kept as numpy's complex rfft output. Only the first
ceil(n/2) bins are used, so for even n the Nyquist bin is dropped.
Helpers to translate to and from the packed real layout
(Re[0], Re[n/2] | Im[(n-1)/2], Re[1], Im[1], ...) are provided for
interop with producers of that format.
"""

import numpy as np
from typing import Optional, Tuple

from accstats.config import get as get_config
from accstats.errors import EpochTooShortError
from accstats.stats import mean


def _as_array(values) -> np.ndarray:
    return np.asarray(values, dtype=np.float64).ravel()


def n_bins(n: int) -> int:
    """Number of spectral bins kept for a length-n transform."""
    return (n + 1) // 2


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def hann_window(values) -> np.ndarray:
    """
    Return a copy multiplied by 0.5 * (1 - cos(2*pi*i / (N - 1))).

    A single sample is returned unchanged.
    """
    arr = _as_array(values)
    return arr * np.hanning(arr.size)


def forward_real_fft(values) -> np.ndarray:
    """Complex rfft coefficients, n // 2 + 1 of them."""
    return np.fft.rfft(_as_array(values))


def to_packed(coeffs: np.ndarray, n: int) -> np.ndarray:
    """
    Pack complex rfft coefficients into n reals.

    Even n:  [Re0, Re(n/2), Re1, Im1, ..., Re(n/2-1), Im(n/2-1)]
    Odd n:   [Re0, Im(m), Re1, Im1, ..., Re(m-1), Im(m-1), Re(m)], m = (n-1)/2
    """
    coeffs = np.asarray(coeffs)
    packed = np.zeros(n, dtype=np.float64)
    if n == 0:
        return packed
    packed[0] = coeffs[0].real
    half = n // 2
    if n % 2 == 0:
        k = np.arange(1, half)
        packed[2 * k] = coeffs[k].real
        packed[2 * k + 1] = coeffs[k].imag
        if n > 1:
            packed[1] = coeffs[half].real
    else:
        last = (n - 1) // 2
        k = np.arange(1, last + 1)
        packed[2 * k] = coeffs[k].real
        k_im = np.arange(1, last)
        packed[2 * k_im + 1] = coeffs[k_im].imag
        if n > 1:
            packed[1] = coeffs[last].imag
    return packed


def from_packed(packed) -> np.ndarray:
    """Inverse of to_packed: complex coefficients of length n // 2 + 1."""
    packed = _as_array(packed)
    n = packed.size
    if n == 0:
        return np.empty(0, dtype=np.complex128)
    coeffs = np.zeros(n // 2 + 1, dtype=np.complex128)
    coeffs[0] = packed[0]
    if n % 2 == 0:
        half = n // 2
        k = np.arange(1, half)
        coeffs[k] = packed[2 * k] + 1j * packed[2 * k + 1]
        if n > 1:
            coeffs[half] = packed[1]
    else:
        last = (n - 1) // 2
        k = np.arange(1, last)
        coeffs[k] = packed[2 * k] + 1j * packed[2 * k + 1]
        if n > 1:
            coeffs[last] = packed[n - 1] + 1j * packed[1]
    return coeffs


# ---------------------------------------------------------------------------
# Power / magnitude
# ---------------------------------------------------------------------------

def power_spectrum(coeffs: np.ndarray, n: int, normalize: bool = True) -> np.ndarray:
    """
    Re^2 + Im^2 for the first ceil(n/2) bins, divided by n if normalize.

    Operates along the last axis, so a stack of spectra works too.
    """
    coeffs = np.asarray(coeffs)[..., :n_bins(n)]
    power = coeffs.real * coeffs.real + coeffs.imag * coeffs.imag
    if normalize:
        power = power / n
    return power


def magnitude_spectrum(coeffs: np.ndarray, n: int, normalize: bool = True) -> np.ndarray:
    """Element-wise sqrt of power_spectrum."""
    return np.sqrt(power_spectrum(coeffs, n, normalize))


def packed_power_spectrum(packed, normalize: bool = True) -> np.ndarray:
    """power_spectrum for a packed real layout."""
    packed = _as_array(packed)
    return power_spectrum(from_packed(packed), packed.size, normalize)


def packed_magnitude_spectrum(packed, normalize: bool = True) -> np.ndarray:
    return np.sqrt(packed_power_spectrum(packed, normalize))


# ---------------------------------------------------------------------------
# Derived measures
# ---------------------------------------------------------------------------

def spectral_entropy(power) -> float:
    """
    Shannon entropy of the normalised power, divided by ln(bins).

    p_i = power_i / (sum + eps); bins with p <= 0 are skipped, NaN bins
    propagate. NaN for fewer than two bins, where the normaliser ln(bins)
    is zero.
    """
    eps = get_config('numeric.epsilon')
    power = _as_array(power)
    if power.size < 2:
        return np.nan

    total = np.sum(power[~np.isnan(power)])
    p = power / (total + eps)
    p = p[~(p <= 0)]
    entropy = float(np.sum(-p * np.log(p + eps)))
    return entropy / np.log(power.size)


def dominant_frequency(
    power,
    sample_rate: float,
    n: int,
    band: Optional[Tuple[float, float]] = None,
) -> Tuple[float, float]:
    """
    Frequency of the strongest bin and its log power.

    Bin i sits at i * sample_rate / n. With a band (lo, hi) only bins
    with lo < f < hi qualify. Ties go to the lowest frequency. When no
    bin has positive power, returns (-1, log(eps)).
    """
    eps = get_config('numeric.epsilon')
    power = _as_array(power)
    freqs = np.arange(power.size) * (sample_rate / (1.0 * n))

    if band is None:
        idx = np.arange(power.size)
    else:
        lo, hi = band
        idx = np.flatnonzero((freqs > lo) & (freqs < hi))

    if idx.size == 0:
        return -1.0, float(np.log(eps))

    candidates = np.nan_to_num(power[idx], nan=0.0)
    best = int(np.argmax(candidates))
    if candidates[best] <= 0:
        return -1.0, float(np.log(eps))
    return float(freqs[idx[best]]), float(np.log(candidates[best] + eps))


def banded_welch_magnitude(signal, sample_rate: int, num_bins: int) -> np.ndarray:
    """
    Log of the average magnitude spectrum over 50% overlapping windows.

    Windows are sample_rate samples long and start every sample_rate // 2
    samples. Each is Hann windowed before the transform. Returns
    ln(mean magnitude + eps) for the first num_bins bins.

    Raises:
        EpochTooShortError: sample_rate < 2 or the signal is shorter than
            one window.
        ValueError: num_bins exceeds ceil(sample_rate / 2).
    """
    eps = get_config('numeric.epsilon')
    arr = _as_array(signal)
    window = int(sample_rate)
    overlap = window // 2

    if overlap < 1:
        raise EpochTooShortError(
            f"sample_rate {sample_rate} too low for 50% overlapping windows")
    if arr.size < window:
        raise EpochTooShortError(
            f"need at least {window} samples for spectral banding, got {arr.size}")
    if num_bins > n_bins(window):
        raise ValueError(
            f"num_bins {num_bins} exceeds {n_bins(window)} bins of a {window}-sample window")

    n_windows = (arr.size - window) // overlap + 1
    segments = np.lib.stride_tricks.sliding_window_view(arr, window)[::overlap][:n_windows]
    spectra = np.fft.rfft(segments * np.hanning(window), axis=-1)
    mags = magnitude_spectrum(spectra, window)[:, :num_bins]

    avg = np.sum(mags, axis=0) / n_windows
    return np.log(avg + eps)


def centred_power(values) -> np.ndarray:
    """Normalised power of the mean-removed, Hann-windowed signal."""
    arr = _as_array(values)
    if arr.size < 2:
        raise EpochTooShortError(f"need at least 2 samples for a spectrum, got {arr.size}")
    centred = arr - mean(arr)
    return power_spectrum(forward_real_fft(hann_window(centred)), arr.size)
