"""
Group: unilever — dominant frequencies and band power.

Zhang, Rowlands et al., "Physical Activity Classification using the
GENEA Wrist Worn Accelerometer". Computed on the filtered vector
magnitude (truncated ENMO). Powers are reported as ln(p + eps).
"""
import numpy as np
from typing import Dict

from accstats import spectral
from accstats.config import get as get_config
from accstats.epoch import Epoch


def top_two(power: np.ndarray, freqs: np.ndarray):
    """
    Two strongest positive bins as ((f1, p1), (f2, p2)), f1's power >= f2's.

    Ties keep the lower frequency first. Missing entries are (-1, 0).
    """
    positive = np.flatnonzero(power > 0)
    ranked = positive[np.argsort(-power[positive], kind='stable')]
    peaks = [(float(freqs[i]), float(power[i])) for i in ranked[:2]]
    while len(peaks) < 2:
        peaks.append((-1.0, 0.0))
    return peaks[0], peaks[1]


def compute(epoch: Epoch) -> Dict[str, float]:
    eps = get_config('numeric.epsilon')
    v = epoch.enmo_trunc
    n = v.size
    sample_rate = epoch.sample_rate

    power = spectral.centred_power(v)
    freqs = np.arange(power.size) * (sample_rate / (1.0 * n))

    lo, hi = get_config('unilever.band')
    in_band = (freqs >= lo) & (freqs <= hi)
    band_power = power[in_band]
    total = np.sum(band_power)

    (f1, p1), (f2, p2) = top_two(band_power, freqs[in_band])
    f625, p625 = spectral.dominant_frequency(
        power, sample_rate, n, band=get_config('unilever.walking_band'))

    return {
        'f1': f1,
        'p1': float(np.log(p1 + eps)),
        'f2': f2,
        'p2': float(np.log(p2 + eps)),
        'f625': f625,
        'p625': p625,
        'total': float(np.log(total + eps)),
    }
