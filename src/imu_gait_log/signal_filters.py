"""
Signal smoothing and scaling helpers for recorded IMU series.

Recordings are fully materialised before analysis, so every filter here works
on a whole series at once:
1. Butterworth low-pass filter (zero-phase when the series is long enough)
2. Moving average filter (trailing window)
3. Savitzky-Golay filter (local polynomial regression)
"""

from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np
from scipy.signal import butter, savgol_filter, sosfilt, sosfilt_zi, sosfiltfilt


FilterType = Literal['butterworth', 'moving_average', 'savgol', 'none']


@dataclass
class FilterConfig:
    """Configuration for signal filtering."""
    filter_type: FilterType = 'butterworth'
    cutoff_freq: float = 6.0  # Hz, well above step frequency
    filter_order: int = 4
    sampling_rate: int = 100  # Hz, nominal logger rate

    # Moving average parameters
    window_size: int = 5

    # Savitzky-Golay parameters
    savgol_window: int = 11  # Must be odd
    savgol_polyorder: int = 2


class ButterworthFilter:
    """
    Butterworth low-pass filter using second-order sections.

    Long series are filtered forwards and backwards (``sosfiltfilt``) so peak
    positions are not shifted. Series too short for the padding that needs
    fall back to a single causal pass started from steady state.
    """

    def __init__(self, cutoff: float, fs: int, order: int = 4):
        """
        Initialize Butterworth filter.

        Args:
            cutoff: Cutoff frequency in Hz
            fs: Sampling rate in Hz
            order: Filter order
        """
        self.cutoff = cutoff
        self.fs = fs
        self.order = order
        self.sos = butter(order, cutoff, btype='low', fs=fs, output='sos')

    @property
    def min_length(self) -> int:
        """Shortest series sosfiltfilt accepts with its default padding."""
        return 3 * (2 * len(self.sos) + 1) + 1

    def filter_batch(self, samples: np.ndarray) -> np.ndarray:
        samples = np.asarray(samples, dtype=float)
        if samples.size == 0:
            return samples
        if samples.size >= self.min_length:
            return sosfiltfilt(self.sos, samples)
        zi = sosfilt_zi(self.sos) * samples[0]
        filtered, _ = sosfilt(self.sos, samples, zi=zi)
        return filtered


class MovingAverageFilter:
    """Trailing moving average; the first samples average what is available."""

    def __init__(self, window_size: int):
        self.window_size = max(1, window_size)

    def filter_batch(self, samples: np.ndarray) -> np.ndarray:
        samples = np.asarray(samples, dtype=float)
        if samples.size == 0:
            return samples
        cumsum = np.concatenate(([0.0], np.cumsum(samples)))
        idx = np.arange(samples.size)
        start = np.maximum(0, idx - self.window_size + 1)
        return (cumsum[idx + 1] - cumsum[start]) / (idx + 1 - start)


class SavitzkyGolayFilter:
    """
    Savitzky-Golay filter for smoothing with polynomial fitting.

    Good compromise between smoothing and preserving peaks. Series shorter
    than the window are returned unchanged.
    """

    def __init__(self, window_length: int, polyorder: int):
        if window_length % 2 == 0:
            window_length += 1  # Must be odd
        self.window_length = window_length
        self.polyorder = polyorder

    def filter_batch(self, samples: np.ndarray) -> np.ndarray:
        samples = np.asarray(samples, dtype=float)
        if samples.size < self.window_length or self.polyorder >= self.window_length:
            return samples.copy()
        return savgol_filter(samples, self.window_length, self.polyorder)


class SeriesFilter:
    """Filter front-end selecting an implementation from a FilterConfig."""

    def __init__(self, config: FilterConfig):
        self.config = config
        if config.filter_type == 'butterworth':
            self.filter = ButterworthFilter(config.cutoff_freq, config.sampling_rate, config.filter_order)
        elif config.filter_type == 'moving_average':
            self.filter = MovingAverageFilter(config.window_size)
        elif config.filter_type == 'savgol':
            self.filter = SavitzkyGolayFilter(config.savgol_window, config.savgol_polyorder)
        else:  # 'none'
            self.filter = None

    def filter_batch(self, samples: Sequence[float]) -> np.ndarray:
        """
        Filter a whole series.

        Args:
            samples: Input series

        Returns:
            Filtered series as a float array of the same length
        """
        samples = np.asarray(samples, dtype=float)
        if self.filter is None:
            return samples
        return self.filter.filter_batch(samples)

    def get_info(self) -> dict:
        """
        Get filter information for display.

        Returns:
            Dictionary with filter details
        """
        if self.config.filter_type == 'butterworth':
            return {
                'type': 'Butterworth',
                'order': self.config.filter_order,
                'cutoff': f'{self.config.cutoff_freq:.1f} Hz',
                'description': f'{self.config.filter_order}th order low-pass @ {self.config.cutoff_freq:.1f} Hz'
            }
        elif self.config.filter_type == 'moving_average':
            return {
                'type': 'Moving Average',
                'window': self.config.window_size,
                'description': f'Moving average (window={self.config.window_size})'
            }
        elif self.config.filter_type == 'savgol':
            return {
                'type': 'Savitzky-Golay',
                'window': self.config.savgol_window,
                'order': self.config.savgol_polyorder,
                'description': f'Savitzky-Golay (window={self.config.savgol_window}, poly={self.config.savgol_polyorder})'
            }
        return {'type': 'None', 'description': 'No filtering'}


def normalize_series(values: Sequence[float]) -> np.ndarray:
    """Min-max scale a series to [0, 1]; a flat series maps to zeros."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return values
    span = float(values.max() - values.min()) or 1.0
    return (values - values.min()) / span


def filter_noise(values: Sequence[float], threshold: float = 0.1) -> np.ndarray:
    """Zero out samples whose magnitude is below ``threshold``."""
    values = np.asarray(values, dtype=float)
    return np.where(np.abs(values) < threshold, 0.0, values)
