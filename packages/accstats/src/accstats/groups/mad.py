"""
Group: mad — moment features of the unfiltered ENMO signal.

Vaha-Ypya et al., "A universal, accurate intensity-based classification
of different physical activities using raw data of accelerometer".

Samples with a NaN x reading are left at 0.0. A NaN in y or z alone is
not masked and propagates into the sums.
"""
import logging

import numpy as np
from typing import Dict

from accstats import stats
from accstats.config import get as get_config
from accstats.epoch import Epoch

logger = logging.getLogger(__name__)


def unfiltered_enmo(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    out = np.zeros(x.size, dtype=np.float64)
    valid = ~np.isnan(x)
    out[valid] = stats.vector_magnitude(x[valid], y[valid], z[valid]) - 1.0
    return out


def moments(values: np.ndarray) -> Dict[str, float]:
    """
    MAD, MPD, skewness and kurtosis about the population mean/std.

    z-scores use std + eps. Skewness is n/((n-1)(n-2)) * sum(z^3) and
    kurtosis the bias-corrected excess form. Undefined denominators give
    NaN: everything for n = 0, skew for n < 3, kurt for n < 5.
    """
    eps = get_config('numeric.epsilon')
    n = values.size
    if n == 0:
        return {'MAD': np.nan, 'MPD': np.nan, 'skew': np.nan, 'kurt': np.nan}

    centre = stats.mean(values)
    sd = stats.std(values, centre)
    N = float(n)

    diff = values - centre
    z = diff / (sd + eps)
    mad = np.sum(np.abs(diff)) / N
    mpd = np.sum(np.abs(diff) ** get_config('mad.mpd_exponent')) / N ** 1.5

    if n >= get_config('mad.min_samples_skew'):
        skew = np.sum(z ** 3) * N / ((N - 1) * (N - 2))
    else:
        logger.debug(f"Skewness undefined for {n} samples")
        skew = np.nan

    if n >= get_config('mad.min_samples_kurt'):
        kurt = (np.sum(z ** 4) * N * (N + 1) / ((N - 1) * (N - 2) * (N - 3) * (N - 4))
                - 3 * (N - 1) * (N - 1) / ((N - 2) * (N - 3)))
    else:
        logger.debug(f"Kurtosis undefined for {n} samples")
        kurt = np.nan

    return {
        'MAD': float(mad),
        'MPD': float(mpd),
        'skew': float(skew),
        'kurt': float(kurt),
    }


def compute(epoch: Epoch) -> Dict[str, float]:
    return moments(unfiltered_enmo(epoch.x, epoch.y, epoch.z))
