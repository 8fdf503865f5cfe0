"""Group: basic — ENMO means plus raw per-axis mean, range, std, covariance."""
from typing import Dict

from accstats import stats
from accstats.epoch import Epoch


def compute(epoch: Epoch) -> Dict[str, float]:
    x, y, z = epoch.x, epoch.y, epoch.z
    x_mean = stats.mean(x)
    y_mean = stats.mean(y)
    z_mean = stats.mean(z)

    return {
        'enmoTrunc': stats.mean(epoch.enmo_trunc),
        'enmoAbs': stats.mean(epoch.enmo_abs),
        'xMean': x_mean,
        'yMean': y_mean,
        'zMean': z_mean,
        'xRange': stats.value_range(x),
        'yRange': stats.value_range(y),
        'zRange': stats.value_range(z),
        'xStd': stats.std(x, x_mean),
        'yStd': stats.std(y, y_mean),
        'zStd': stats.std(z, z_mean),
        'xyCov': stats.covariance(x, y, x_mean, y_mean, 0),
        'xzCov': stats.covariance(x, z, x_mean, z_mean, 0),
        'yzCov': stats.covariance(y, z, y_mean, z_mean, 0),
    }
