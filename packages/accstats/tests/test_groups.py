"""Tests for the feature groups."""

import numpy as np
import pytest

from accstats.epoch import Epoch
from accstats.errors import EpochTooShortError
from accstats.groups import basic, channel_fft, mad, san_diego, unilever
from accstats.registry import get_registry

EPS = 1e-8


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def random_epoch():
    """Ten seconds at 100 Hz of noisy wrist-like motion."""
    np.random.seed(42)
    n = 1000
    t = np.arange(n) / 100.0
    x = 0.2 * np.sin(2 * np.pi * 1.5 * t) + np.random.randn(n) * 0.05
    y = 0.1 * np.cos(2 * np.pi * 0.8 * t) + np.random.randn(n) * 0.05
    z = 1.0 + np.random.randn(n) * 0.05
    return Epoch.from_channels(x, y, z, sample_rate=100, num_fft_bins=12)


@pytest.fixture
def gravity_epoch():
    n = 1000
    return Epoch.from_channels(np.zeros(n), np.zeros(n), np.ones(n),
                               sample_rate=100, num_fft_bins=10)


# ---------------------------------------------------------------------------
# Declared outputs
# ---------------------------------------------------------------------------

class TestDeclaredOutputs:

    def test_all_groups_return_declared_columns(self, random_epoch):
        reg = get_registry()
        for name in reg.group_names:
            result = reg.get_compute(name)(random_epoch)
            assert reg.validate_outputs(name, result, random_epoch.num_fft_bins), \
                f"Group {name}: missing {set(reg.get_outputs(name, 12)) - set(result)}"
            assert len(result) == len(reg.get_outputs(name, random_epoch.num_fft_bins))


# ---------------------------------------------------------------------------
# basic
# ---------------------------------------------------------------------------

class TestBasic:

    def test_gravity_only(self, gravity_epoch):
        row = basic.compute(gravity_epoch)
        assert row['xStd'] == 0.0
        assert row['yStd'] == 0.0
        assert row['zStd'] == 0.0
        assert row['zMean'] == 1.0
        assert row['enmoTrunc'] == 0.0
        assert row['enmoAbs'] == 0.0
        assert row['xyCov'] == 0.0

    def test_covariance_uses_n_plus_one(self):
        epoch = Epoch.from_channels([1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [0.0, 0.0, 0.0],
                                    sample_rate=1, num_fft_bins=1)
        row = basic.compute(epoch)
        assert row['xyCov'] == 1.0
        assert row['xRange'] == 2.0

    def test_enmo_trunc_and_abs(self):
        epoch = Epoch.from_channels([0.5, 2.0], [0.0, 0.0], [0.0, 0.0],
                                    sample_rate=1, num_fft_bins=1)
        row = basic.compute(epoch)
        # ENMO = [-0.5, 1.0]
        assert row['enmoTrunc'] == pytest.approx(0.5)
        assert row['enmoAbs'] == pytest.approx(0.75)


# ---------------------------------------------------------------------------
# san_diego
# ---------------------------------------------------------------------------

class TestGravity:

    def test_moving_average_seed(self):
        out = san_diego.moving_average(np.array([10.0, 10.0]), 0.9)
        assert out[0] == pytest.approx(1.0)
        assert out[1] == pytest.approx(1.9)

    def test_constant_signal_converges(self):
        n = 1000
        g = san_diego.gravity(np.full(n, 0.2), np.full(n, -0.3), np.full(n, 0.9), 100)
        assert g[0] == pytest.approx(0.2, rel=1e-6)
        assert g[1] == pytest.approx(-0.3, rel=1e-6)
        assert g[2] == pytest.approx(0.9, rel=1e-6)

    def test_warm_up_discarded(self):
        n = 200
        x = np.ones(n)
        ema = san_diego.moving_average(x, 0.9)
        g = san_diego.gravity(x, x, x, 100)
        assert g[0] == pytest.approx(np.mean(ema[99:]))

    def test_too_short(self):
        with pytest.raises(EpochTooShortError):
            san_diego.gravity(np.ones(50), np.ones(50), np.ones(50), 100)


class TestSanDiego:

    def test_percentile_output_order(self, random_epoch):
        row = san_diego.compute(random_epoch)
        assert row['min'] <= row['25thp'] <= row['median'] <= row['75thp'] <= row['max']

    def test_summary_consistency(self, random_epoch):
        row = san_diego.compute(random_epoch)
        assert row['sd'] > 0
        assert row['coefvariation'] == pytest.approx(row['sd'] / row['mean'])
        assert -1.0 <= row['autocorr'] <= 1.0
        assert 0.0 <= row['entropy'] <= 1.0

    def test_band_peak_inside_band(self, random_epoch):
        row = san_diego.compute(random_epoch)
        assert 0.3 < row['fmaxband'] < 3.0
        assert row['pmax'] >= row['pmaxband']

    def test_binned_welch_columns(self, random_epoch):
        row = san_diego.compute(random_epoch)
        fft = [row[f'fft{i}'] for i in range(12)]
        assert all(np.isfinite(fft))

    def test_gravity_angles(self, gravity_epoch):
        row = san_diego.compute(gravity_epoch)
        assert row['rollg'] == pytest.approx(0.0)
        assert row['pitchg'] == pytest.approx(np.pi / 2)
        assert row['yawg'] == 0.0

    def test_gravity_only_spectrum(self, gravity_epoch):
        row = san_diego.compute(gravity_epoch)
        # Mean-removed constant: no power anywhere except numerical residue at DC
        assert row['fmax'] in (0.0, -1.0)
        assert row['pmax'] == pytest.approx(np.log(EPS), abs=1e-6)
        assert row['sd'] == pytest.approx(0.0, abs=1e-12)

    def test_epoch_must_exceed_sample_rate(self):
        n = 100
        epoch = Epoch.from_channels(np.zeros(n), np.zeros(n), np.ones(n),
                                    sample_rate=100, num_fft_bins=4)
        with pytest.raises(EpochTooShortError):
            san_diego.compute(epoch)

    def test_too_many_bins(self):
        np.random.seed(1)
        n = 500
        epoch = Epoch.from_channels(np.random.randn(n), np.random.randn(n),
                                    np.random.randn(n), sample_rate=100, num_fft_bins=51)
        with pytest.raises(ValueError):
            san_diego.compute(epoch)


# ---------------------------------------------------------------------------
# mad
# ---------------------------------------------------------------------------

class TestMoments:

    def test_known_values(self):
        row = mad.moments(np.array([1.0, 2.0, 3.0, 4.0, 5.0]))
        assert row['MAD'] == pytest.approx(1.2)
        assert row['MPD'] == pytest.approx((2 * 2 ** 1.5 + 2 * 1.0) / 5 ** 1.5)
        assert row['skew'] == pytest.approx(0.0, abs=1e-12)

    def test_kurtosis_formula(self):
        np.random.seed(5)
        v = np.random.randn(40)
        n = 40.0
        m = v.mean()
        s = np.sqrt(np.sum((v - m) ** 2) / n)
        z = (v - m) / (s + EPS)
        expected = (np.sum(z ** 4) * n * (n + 1) / ((n - 1) * (n - 2) * (n - 3) * (n - 4))
                    - 3 * (n - 1) ** 2 / ((n - 2) * (n - 3)))
        assert mad.moments(v)['kurt'] == pytest.approx(expected)

    def test_skew_sign(self):
        row = mad.moments(np.array([0.0, 0.0, 0.0, 0.0, 10.0]))
        assert row['skew'] > 0

    def test_constant_signal(self):
        row = mad.moments(np.full(10, -1.0))
        assert row['MAD'] == 0.0
        assert row['MPD'] == 0.0
        assert row['skew'] == 0.0
        assert row['kurt'] == pytest.approx(-3 * 81 / 56)

    def test_empty(self):
        row = mad.moments(np.array([]))
        assert all(np.isnan(v) for v in row.values())

    @pytest.mark.parametrize('n', [1, 2])
    def test_skew_and_kurt_undefined(self, n):
        row = mad.moments(np.zeros(n))
        assert row['MAD'] == 0.0
        assert row['MPD'] == 0.0
        assert np.isnan(row['skew'])
        assert np.isnan(row['kurt'])

    @pytest.mark.parametrize('n', [3, 4])
    def test_kurt_undefined(self, n):
        row = mad.moments(np.zeros(n))
        assert row['skew'] == 0.0
        assert np.isnan(row['kurt'])

    def test_kurt_defined_from_five(self):
        row = mad.moments(np.zeros(5))
        assert np.isfinite(row['kurt'])


class TestMadGroup:

    def test_nan_x_masks_sample(self):
        out = mad.unfiltered_enmo(np.array([np.nan, 1.0]), np.array([0.0, 0.0]),
                                  np.array([0.0, 0.0]))
        np.testing.assert_array_equal(out, [0.0, 0.0])

    def test_nan_y_not_masked(self):
        out = mad.unfiltered_enmo(np.array([0.0, 1.0]), np.array([np.nan, 0.0]),
                                  np.array([0.0, 0.0]))
        assert np.isnan(out[0])
        assert out[1] == 0.0

    def test_nan_y_propagates(self):
        x = np.zeros(10)
        y = np.zeros(10)
        y[3] = np.nan
        epoch = Epoch.from_channels(x, y, np.ones(10), sample_rate=1, num_fft_bins=1)
        assert np.isnan(mad.compute(epoch)['MAD'])

    def test_all_zero_channels(self):
        n = 10
        epoch = Epoch.from_channels(np.zeros(n), np.zeros(n), np.zeros(n),
                                    sample_rate=1, num_fft_bins=1)
        row = mad.compute(epoch)
        assert row['MAD'] == 0.0
        assert row['MPD'] == 0.0
        assert row['skew'] == 0.0


# ---------------------------------------------------------------------------
# unilever
# ---------------------------------------------------------------------------

class TestUnilever:

    def test_top_two(self):
        power = np.array([0.0, 3.0, 5.0, 5.0, 1.0])
        first, second = unilever.top_two(power, np.arange(5.0))
        assert first == (2.0, 5.0)
        assert second == (3.0, 5.0)

    def test_top_two_missing(self):
        first, second = unilever.top_two(np.array([0.0, 2.0]), np.array([0.0, 1.0]))
        assert first == (1.0, 2.0)
        assert second == (-1.0, 0.0)

    def test_walking_signal(self):
        n = 1000
        t = np.arange(n) / 100.0
        x = 1.0 + 0.5 * np.sin(2 * np.pi * 2.0 * t)
        epoch = Epoch.from_channels(x, np.zeros(n), np.zeros(n), sample_rate=100, num_fft_bins=4)
        row = unilever.compute(epoch)
        assert row['f1'] == pytest.approx(2.0)
        assert row['f625'] == pytest.approx(2.0)
        assert row['p1'] >= row['p2']
        assert row['total'] >= row['p1']

    def test_still_signal(self, gravity_epoch):
        row = unilever.compute(gravity_epoch)
        assert row['f1'] == -1.0
        assert row['f2'] == -1.0
        assert row['f625'] == -1.0
        assert row['p1'] == pytest.approx(np.log(EPS))
        assert row['total'] == pytest.approx(np.log(EPS))


# ---------------------------------------------------------------------------
# channel_fft
# ---------------------------------------------------------------------------

class TestChannelFFT:

    def test_scaling(self):
        mags = channel_fft.channel_magnitudes(np.ones(8), 4)
        expected = np.abs(np.fft.rfft(np.hanning(8)))[:4] / 4.0
        np.testing.assert_allclose(mags, expected, atol=1e-12)

    def test_not_log_scaled(self, gravity_epoch):
        row = channel_fft.compute(gravity_epoch)
        assert row['zfft0'] > row['zfft1'] > 0
        assert row['zfft2'] < 0.01 * row['zfft0']
        assert row['mfft0'] == 0.0
        assert row['xfft0'] == 0.0

    def test_column_names(self, random_epoch):
        row = channel_fft.compute(random_epoch)
        assert len(row) == 4 * 12
        assert 'mfft11' in row
        assert 'xfft12' not in row

    def test_too_many_bins(self):
        with pytest.raises(ValueError):
            channel_fft.channel_magnitudes(np.ones(8), 5)
