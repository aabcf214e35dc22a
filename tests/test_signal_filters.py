import numpy as np

from imu_gait_log.signal_filters import (
    ButterworthFilter,
    FilterConfig,
    MovingAverageFilter,
    SavitzkyGolayFilter,
    SeriesFilter,
    filter_noise,
    normalize_series,
)


def test_moving_average_is_trailing():
    filtered = MovingAverageFilter(2).filter_batch(np.array([1.0, 2.0, 3.0, 4.0]))
    np.testing.assert_allclose(filtered, [1.0, 1.5, 2.5, 3.5])


def test_savgol_returns_short_series_unchanged():
    samples = np.array([1.0, 5.0, 2.0])
    np.testing.assert_array_equal(SavitzkyGolayFilter(11, 2).filter_batch(samples), samples)


def test_savgol_window_forced_odd():
    assert SavitzkyGolayFilter(10, 2).window_length == 11


def test_butterworth_keeps_length_and_constant_level():
    butter = ButterworthFilter(cutoff=6.0, fs=100, order=4)

    long_series = butter.filter_batch(np.ones(200))
    assert long_series.shape == (200,)
    assert np.allclose(long_series, 1.0)

    # Too short for zero-phase filtering, starts from steady state instead
    short_series = butter.filter_batch(np.ones(5))
    assert short_series.shape == (5,)
    assert np.allclose(short_series, 1.0)


def test_butterworth_attenuates_high_frequency():
    t = np.arange(0, 2, 0.01)
    noise = np.sin(2 * np.pi * 40 * t)
    filtered = ButterworthFilter(cutoff=6.0, fs=100).filter_batch(noise)
    assert np.max(np.abs(filtered[20:-20])) < 0.01


def test_series_filter_dispatch():
    samples = [1.0, 2.0, 3.0]
    np.testing.assert_array_equal(SeriesFilter(FilterConfig(filter_type='none')).filter_batch(samples), samples)

    info = SeriesFilter(FilterConfig(filter_type='moving_average', window_size=3)).get_info()
    assert info['type'] == 'Moving Average'
    assert info['window'] == 3
    assert SeriesFilter(FilterConfig()).get_info()['type'] == 'Butterworth'


def test_normalize_series():
    np.testing.assert_allclose(normalize_series([2.0, 4.0, 6.0]), [0.0, 0.5, 1.0])
    np.testing.assert_allclose(normalize_series([3.0, 3.0]), [0.0, 0.0])
    assert normalize_series([]).size == 0


def test_filter_noise():
    np.testing.assert_allclose(filter_noise([0.05, -0.2, 0.1, -0.01]), [0.0, -0.2, 0.1, 0.0])
