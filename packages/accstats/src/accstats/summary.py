"""
Epoch Summary
=============
Top-level entry point: one epoch of x/y/z in, one feature vector out.

The basic group is always computed. With extended=True the san_diego,
mad, unilever and channel_fft groups follow, in that order. Column
order comes from the registry, so the header and the vector can not
drift apart.

Usage:
    from accstats.summary import summarize

    vector, header = summarize(x, y, z, sample_rate=100, num_fft_bins=12,
                               extended=True)
    assert len(vector) == len(header.split(','))
"""

import logging

import numpy as np
from typing import Any, Dict, Optional, Tuple

from accstats import stats
from accstats.epoch import Epoch, EpochConfig
from accstats.registry import get_registry

logger = logging.getLogger(__name__)


def compute_epoch(x, y, z, config: EpochConfig, filt: Optional[Any] = None) -> np.ndarray:
    """
    Feature vector for one epoch.

    Args:
        x, y, z: Equal-length acceleration channels.
        config: Sample rate, bins per channel and the extended flag.
        filt: Optional filter applied to ENMO; see Epoch.from_channels.

    Returns:
        1-D float64 array aligned with epoch_header(config).
    """
    epoch = Epoch.from_channels(x, y, z, config.sample_rate, config.num_fft_bins, filt)
    registry = get_registry()

    parts = []
    for name in registry.groups_for(config.extended):
        result = registry.get_compute(name)(epoch)
        parts.append(registry.assemble(name, result, config.num_fft_bins))

    vector = stats.combine(*parts)
    logger.debug(f"Epoch of {epoch.n} samples → {vector.size} features")
    return vector


def compute_epoch_named(x, y, z, config: EpochConfig,
                        filt: Optional[Any] = None) -> Dict[str, float]:
    """compute_epoch keyed by column name, in header order."""
    vector = compute_epoch(x, y, z, config, filt)
    columns = get_registry().header_columns(config.extended, config.num_fft_bins)
    return dict(zip(columns, vector.tolist()))


def epoch_header(config: EpochConfig) -> str:
    """Comma-separated column names for compute_epoch's output."""
    return get_registry().header(config.extended, config.num_fft_bins)


def summarize(
    x,
    y,
    z,
    sample_rate: int,
    num_fft_bins: int,
    extended: bool = False,
    filt: Optional[Any] = None,
) -> Tuple[np.ndarray, str]:
    """
    Vector and header in one call.

    Raises:
        ValueError: invalid configuration or channel triple.
        DomainError: empty epoch (covariance needs at least one sample).
        EpochTooShortError: extended features on an epoch no longer than
            sample_rate samples.
    """
    config = EpochConfig(sample_rate=sample_rate, num_fft_bins=num_fft_bins,
                         extended=extended)
    return compute_epoch(x, y, z, config, filt), epoch_header(config)
