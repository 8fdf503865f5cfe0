"""Group: channel_fft — leading magnitude bins per channel, not log scaled."""
import numpy as np
from typing import Dict

from accstats import spectral
from accstats.config import get as get_config
from accstats.epoch import Epoch


def channel_magnitudes(values: np.ndarray, num_bins: int) -> np.ndarray:
    """
    First num_bins magnitudes of the Hann-windowed signal.

    Scaled by sqrt(buffer_factor * n): the transform is normalised as if
    the epoch were zero padded to buffer_factor times its length.

    Raises:
        ValueError: num_bins exceeds ceil(n / 2).
    """
    n = values.size
    if num_bins > spectral.n_bins(n):
        raise ValueError(
            f"num_bins {num_bins} exceeds {spectral.n_bins(n)} bins of a {n}-sample epoch")
    buffer_length = get_config('channel_fft.buffer_factor') * n
    coeffs = spectral.forward_real_fft(spectral.hann_window(values))
    return spectral.magnitude_spectrum(coeffs, buffer_length)[:num_bins]


def compute(epoch: Epoch) -> Dict[str, float]:
    sources = {'x': epoch.x, 'y': epoch.y, 'z': epoch.z, 'm': epoch.enmo_trunc}
    row = {}
    for channel in get_config('channel_fft.channels'):
        mags = channel_magnitudes(sources[channel], epoch.num_fft_bins)
        for i, value in enumerate(mags):
            row[f'{channel}fft{i}'] = float(value)
    return row
