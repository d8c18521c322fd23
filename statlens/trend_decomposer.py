import math
import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .models.config import TrendAnalysisConfig
from .models.results import DataPoint, RegressionModel, TrendDecomposition, TrendSummary, to_millis

logger = logging.getLogger(__name__)


class TrendDecomposer:
    def __init__(self, config: Optional[TrendAnalysisConfig] = None):
        self.config = config or TrendAnalysisConfig()

    def sort_data(self, data: Sequence[DataPoint]) -> List[DataPoint]:
        """
        Returns a new list of the data points ordered by timestamp.
        """
        return sorted(data, key=lambda point: to_millis(point.timestamp))

    def moving_average(self, data: Sequence[DataPoint], window_size: Optional[int] = None) -> List[DataPoint]:
        """
        Calculates the moving average of a time series.

        Args:
            data: List of DataPoint objects, in any order
            window_size: Number of points per window, defaults to the configured
                         moving_average_window

        Returns:
            One DataPoint per full window (len(data) - window_size + 1 points),
            stamped with the timestamp of the window's middle point. Empty if
            the window size is invalid for the data.
        """
        sorted_data = self.sort_data(data)
        k = window_size if window_size is not None else self.config.moving_average_window

        if k <= 0 or k > len(sorted_data):
            logger.warning(f"Invalid window size {k} for data of length {len(sorted_data)}. Returning empty series.")
            return []

        values = np.array([point.value for point in sorted_data], dtype=float)
        means = sliding_window_view(values, k).mean(axis=1)

        return [
            DataPoint(timestamp=sorted_data[i + k // 2].timestamp, value=float(mean))
            for i, mean in enumerate(means)
        ]

    def linear_regression(self, data: Sequence[DataPoint]) -> RegressionModel:
        """
        Fits a least-squares line through the series.

        Timestamps are converted to millisecond offsets from the earliest point
        to keep the sums small; the returned model applies the same offset in
        predict(). Fewer than two points, or a single distinct timestamp, give
        a model whose slope and intercept are NaN.
        """
        sorted_data = self.sort_data(data)
        n = len(sorted_data)
        if n < 2:
            return RegressionModel.unfitted()

        origin = to_millis(sorted_data[0].timestamp)
        x = np.array([to_millis(point.timestamp) - origin for point in sorted_data], dtype=float)
        y = np.array([point.value for point in sorted_data], dtype=float)

        sum_x = float(np.sum(x))
        sum_y = float(np.sum(y))
        sum_xy = float(np.sum(x * y))
        sum_xx = float(np.sum(x * x))

        denominator = n * sum_xx - sum_x * sum_x
        if denominator == 0:
            logger.warning("All data points share one timestamp, cannot fit a trend line.")
            return RegressionModel.unfitted()

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

        return RegressionModel(slope=slope, intercept=intercept, origin=origin)

    def decompose(self, data: Sequence[DataPoint], period: Optional[int] = None) -> TrendDecomposition:
        """
        Decomposes a time series into trend, seasonal and residual components
        using a simplified classical additive model.

        The trend is a moving average over the period (rounded up to an odd
        window). Components are aligned to the original series by a fixed
        index offset of half the points the moving average drops, not by
        timestamp, so edge values are approximate.

        Args:
            data: List of DataPoint objects, in any order
            period: Seasonal period in points, defaults to the configured
                    seasonality_period; must be greater than 1

        Returns:
            TrendDecomposition whose three series cover the span of the trend.
            If the period is missing or invalid every series holds a single
            DataPoint(0, nan).
        """
        p = period if period is not None else self.config.seasonality_period
        if not p or p <= 1:
            logger.warning("Seasonality period not provided or invalid. Cannot perform decomposition.")
            return TrendDecomposition(
                trend=[DataPoint(timestamp=0, value=math.nan)],
                seasonal=[DataPoint(timestamp=0, value=math.nan)],
                residual=[DataPoint(timestamp=0, value=math.nan)]
            )

        sorted_data = self.sort_data(data)
        n = len(sorted_data)

        trend_window = p + 1 if p % 2 == 0 else p
        trend = self.moving_average(sorted_data, trend_window)

        offset = (n - len(trend)) // 2

        detrended = [
            sorted_data[i + offset].value - trend_point.value
            for i, trend_point in enumerate(trend)
        ]

        # Season index is the position within the detrended series
        seasonal_sums = np.zeros(p)
        seasonal_counts = np.zeros(p)
        for index, value in enumerate(detrended):
            seasonal_sums[index % p] += value
            seasonal_counts[index % p] += 1

        seasonal_averages = np.divide(
            seasonal_sums, seasonal_counts,
            out=np.zeros(p), where=seasonal_counts > 0
        )
        seasonal_factors = seasonal_averages - seasonal_averages.mean()

        seasonal = [
            DataPoint(timestamp=point.timestamp, value=float(seasonal_factors[index % p]))
            for index, point in enumerate(sorted_data)
        ]

        residual = [
            DataPoint(
                timestamp=trend_point.timestamp,
                value=sorted_data[i + offset].value - trend_point.value - seasonal[i + offset].value
            )
            for i, trend_point in enumerate(trend)
        ]

        return TrendDecomposition(
            trend=trend,
            seasonal=seasonal[offset:offset + len(trend)],
            residual=residual
        )

    def classify_trend(self, data: Sequence[DataPoint]) -> TrendSummary:
        """
        Classifies the direction of a series' linear trend.

        The fitted slope, in value per second, is compared against
        trend_significance_ratio times the absolute mean value. A series too flat to be
        increasing or decreasing is 'fluctuating' when it has more than 10
        points, a slope above 1% of the mean, and a mean absolute step between
        consecutive points above half the significance threshold.
        """
        sorted_data = self.sort_data(data)
        n = len(sorted_data)
        if n < max(self.config.min_points_for_trend, 2):
            return TrendSummary(direction='insufficient_data', slope=math.nan, data_points_used=n)

        model = self.linear_regression(sorted_data)
        if math.isnan(model.slope):
            return TrendSummary(direction='insufficient_data', slope=math.nan, data_points_used=n)

        slope = model.slope * 1000
        values = np.array([point.value for point in sorted_data], dtype=float)
        scale = abs(float(values.mean()))
        threshold = self.config.trend_significance_ratio * scale

        direction = 'stable'
        if slope > threshold:
            direction = 'increasing'
        elif slope < -threshold:
            direction = 'decreasing'
        elif abs(slope) > 0.01 * scale and n > 10:
            mean_step = float(np.mean(np.abs(np.diff(values))))
            if mean_step > threshold * 0.5:
                direction = 'fluctuating'

        return TrendSummary(direction=direction, slope=slope, data_points_used=n)
