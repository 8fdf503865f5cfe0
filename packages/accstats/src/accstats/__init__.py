"""
accstats — Epoch Feature Extraction for Triaxial Accelerometry
==============================================================

One epoch in, one fixed-length feature vector out:

    accstats.summarize(x, y, z, sample_rate, num_fft_bins, extended=False)
        → (vector, header). len(vector) == len(header.split(',')).

    accstats.compute_epoch(x, y, z, EpochConfig(...), filt=None)
        → vector only.

    accstats.epoch_header(EpochConfig(...))
        → header only.

Building blocks:
    accstats.stats       — NaN-aware means, std, covariance, R-7 percentiles.
    accstats.spectral    — Hann window, rfft power/magnitude, entropy, Welch bands.
    accstats.registry    — YAML-declared feature groups and their column order.

Pure functions of their inputs. Safe to fan out across epochs.
"""

__version__ = '0.1.0'

from accstats.epoch import Epoch, EpochConfig
from accstats.errors import DomainError, EpochTooShortError
from accstats.registry import get_registry, Registry
from accstats.summary import compute_epoch, compute_epoch_named, epoch_header, summarize
from accstats import stats
from accstats import spectral
