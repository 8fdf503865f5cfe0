"""
Epoch containers.

EpochConfig carries the per-call options. Epoch holds one validated
channel triple plus the ENMO signal derived from it, and is what every
feature group's compute() receives.
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Optional

from accstats import stats


@dataclass(frozen=True)
class EpochConfig:
    """Per-call extraction options."""
    sample_rate: int
    num_fft_bins: int
    extended: bool = False

    def __post_init__(self):
        for name in ('sample_rate', 'num_fft_bins'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")


@dataclass(frozen=True)
class Epoch:
    """
    One epoch of triaxial samples.

    Attributes:
        x, y, z: Equal-length acceleration channels (g).
        enmo: Euclidean norm minus one, after the optional filter.
        sample_rate: Samples per second.
        num_fft_bins: Spectral bins requested per channel.
    """
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    enmo: np.ndarray
    sample_rate: int
    num_fft_bins: int

    @property
    def n(self) -> int:
        return self.x.size

    @property
    def enmo_trunc(self) -> np.ndarray:
        """ENMO with negatives set to zero. Used as the filtered vector magnitude."""
        return stats.truncate(self.enmo)

    @property
    def enmo_abs(self) -> np.ndarray:
        return stats.absolute(self.enmo)

    @classmethod
    def from_channels(
        cls,
        x,
        y,
        z,
        sample_rate: int,
        num_fft_bins: int,
        filt: Optional[Any] = None,
    ) -> 'Epoch':
        """
        Validate a channel triple and derive ENMO.

        Args:
            x, y, z: Array-likes of equal length.
            sample_rate: Samples per second.
            num_fft_bins: Spectral bins per channel.
            filt: Optional object with a filter(values) method. It is handed
                a private copy of ENMO and may modify it in place or return
                the filtered array.

        Raises:
            ValueError: channels are not 1-D or differ in length.
        """
        channels = []
        for name, values in (('x', x), ('y', y), ('z', z)):
            arr = np.array(values, dtype=np.float64)
            if arr.ndim != 1:
                raise ValueError(f"{name} must be 1-D, got shape {arr.shape}")
            channels.append(arr)
        x_arr, y_arr, z_arr = channels
        if not (x_arr.size == y_arr.size == z_arr.size):
            raise ValueError(
                f"channel lengths differ: x={x_arr.size}, y={y_arr.size}, z={z_arr.size}")

        signal = stats.enmo(x_arr, y_arr, z_arr)
        if filt is not None:
            filtered = filt.filter(signal)
            if filtered is not None:
                signal = np.asarray(filtered, dtype=np.float64)

        return cls(
            x=x_arr,
            y=y_arr,
            z=z_arr,
            enmo=signal,
            sample_rate=int(sample_rate),
            num_fft_bins=int(num_fft_bins),
        )
