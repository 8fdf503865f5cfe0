"""
Feature Configuration
=====================
Numeric constants for epoch feature extraction.
Single source of truth. Every group module reads from here.

Usage:
    from accstats.config import CONFIG
    eps = CONFIG['numeric']['epsilon']
"""

CONFIG = {

    # =================================================================
    # Numerical stabilisation
    # =================================================================
    'numeric': {
        'epsilon': 1e-8,          # added inside logs and z-score denominators
    },

    # =================================================================
    # Raw channel checks
    # =================================================================
    'stuck': {
        'threshold': 1.5,         # |mean| above this with zero std → stuck axis
    },

    # =================================================================
    # San Diego (Ellis) gravity / orientation features
    # =================================================================
    'san_diego': {
        'gravity_weight': 0.9,    # exponential moving average weight
        'percentiles': [0.0, 0.25, 0.5, 0.75, 1.0],
        'dominant_band': (0.3, 3.0),    # exclusive on both ends
    },

    # =================================================================
    # Moment features (Vaha-Ypya MAD/MPD)
    # =================================================================
    'mad': {
        'mpd_exponent': 1.5,
        'min_samples_skew': 3,
        'min_samples_kurt': 5,
    },

    # =================================================================
    # Unilever (Zhang/Rowlands) banded power features
    # =================================================================
    'unilever': {
        'band': (0.3, 15.0),            # inclusive on both ends
        'walking_band': (0.6, 2.5),     # exclusive on both ends
    },

    # =================================================================
    # Per-channel spectra
    # =================================================================
    'channel_fft': {
        'channels': ['x', 'y', 'z', 'm'],
        'buffer_factor': 2,       # magnitudes scaled as if zero padded to 2n
    },
}


def get(path: str, default=None):
    """
    Get a config value by dot-separated path.

    Usage:
        get('numeric.epsilon')             → 1e-8
        get('san_diego.gravity_weight')    → 0.9
    """
    keys = path.split('.')
    val = CONFIG
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val
