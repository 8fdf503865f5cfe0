"""
Group: san_diego — gravity-removed magnitude, orientation and spectrum.

Follows Ellis et al., "Hip and Wrist Accelerometer Algorithms for
Free-Living Behavior Classification". Gravity is a 0.9-weight
exponential moving average per axis, averaged after a one-second
warm-up. Everything else is computed on the gravity-removed axes.
"""
import numpy as np
from typing import Dict, Tuple

from accstats import spectral, stats
from accstats.config import get as get_config
from accstats.epoch import Epoch
from accstats.errors import EpochTooShortError


def moving_average(values: np.ndarray, weight: float) -> np.ndarray:
    """g[0] = (1 - w) * v[0]; g[i] = w * g[i-1] + (1 - w) * v[i]."""
    out = np.empty(values.size, dtype=np.float64)
    if values.size == 0:
        return out
    acc = (1 - weight) * values[0]
    out[0] = acc
    for i in range(1, values.size):
        acc = acc * weight + (1 - weight) * values[i]
        out[i] = acc
    return out


def gravity(x: np.ndarray, y: np.ndarray, z: np.ndarray,
            sample_rate: int) -> Tuple[float, float, float]:
    """
    Mean of each axis' moving average from index sample_rate - 1 onward.

    Raises:
        EpochTooShortError: fewer than sample_rate samples.
    """
    if x.size < sample_rate:
        raise EpochTooShortError(
            f"need at least {sample_rate} samples to estimate gravity, got {x.size}")
    weight = get_config('san_diego.gravity_weight')
    start = sample_rate - 1
    return tuple(stats.mean(moving_average(axis, weight)[start:]) for axis in (x, y, z))


def _spectral_features(v: np.ndarray, sample_rate: int, num_bins: int) -> Dict[str, float]:
    n = v.size
    power = spectral.centred_power(v)
    fmax, pmax = spectral.dominant_frequency(power, sample_rate, n)
    fband, pband = spectral.dominant_frequency(
        power, sample_rate, n, band=get_config('san_diego.dominant_band'))

    row = {
        'fmax': fmax,
        'pmax': pmax,
        'fmaxband': fband,
        'pmaxband': pband,
        'entropy': spectral.spectral_entropy(power),
    }
    # Welch averages use the magnitude before mean removal
    binned = spectral.banded_welch_magnitude(v, sample_rate, num_bins)
    for i, value in enumerate(binned):
        row[f'fft{i}'] = float(value)
    return row


def compute(epoch: Epoch) -> Dict[str, float]:
    x, y, z = epoch.x, epoch.y, epoch.z
    sample_rate = epoch.sample_rate
    if epoch.n <= sample_rate:
        raise EpochTooShortError(
            f"need more than {sample_rate} samples for lag-{sample_rate} "
            f"autocorrelation, got {epoch.n}")

    gx, gy, gz = gravity(x, y, z, sample_rate)
    wx = x - gx
    wy = y - gy
    wz = z - gz
    v = stats.vector_magnitude(wx, wy, wz)

    v_mean = stats.mean(v)
    v_sd = stats.std_sample(v, v_mean)
    coef_variation = v_sd / v_mean if v_mean != 0 else 0.0
    q = stats.percentiles(v, get_config('san_diego.percentiles'))

    roll = stats.angle_mean_std(wy, wz)
    pitch = stats.angle_mean_std(wz, wx)
    yaw = stats.angle_mean_std(wy, wx)

    row = {
        'mean': v_mean,
        'sd': v_sd,
        'coefvariation': coef_variation,
        'median': float(q[2]),
        'min': float(q[0]),
        'max': float(q[4]),
        '25thp': float(q[1]),
        '75thp': float(q[3]),
        'autocorr': stats.correlation(v, v, sample_rate),
        'corrxy': stats.correlation(wx, wy),
        'corrxz': stats.correlation(wx, wz),
        'corryz': stats.correlation(wy, wz),
        'avgroll': roll[0],
        'avgpitch': pitch[0],
        'avgyaw': yaw[0],
        'sdroll': roll[1],
        'sdpitch': pitch[1],
        'sdyaw': yaw[1],
        'rollg': float(np.arctan2(gy, gz)),
        'pitchg': float(np.arctan2(gz, gx)),
        'yawg': float(np.arctan2(gy, gx)),
    }
    row.update(_spectral_features(v, sample_rate, epoch.num_fft_bins))
    return row
