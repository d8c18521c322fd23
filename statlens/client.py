import logging
from dataclasses import fields, replace
from typing import List, Tuple, Dict, Any, Optional, Sequence, Callable
from .models.config import OutlierDetectionConfig, TrendAnalysisConfig, OUTLIER_METHOD_IQR, OUTLIER_METHOD_Z_SCORE
from .models.results import DataPoint, TrendDecomposition, to_millis
from .outlier_detector import OutlierDetector
from .statistics import DescriptiveStatistics
from .trend_decomposer import TrendDecomposer

logger = logging.getLogger(__name__)


class StatLensClient:
    def __init__(
            self,
            default_outlier_config: Optional[OutlierDetectionConfig] = None,
            default_trend_config: Optional[TrendAnalysisConfig] = None
    ):
        self.default_outlier_config = default_outlier_config or OutlierDetectionConfig()
        self.default_trend_config = default_trend_config or TrendAnalysisConfig()
        self.statistics = DescriptiveStatistics()

    def analyze_values(
            self,
            values: Sequence[float],
            outlier_config: Optional[OutlierDetectionConfig] = None,
            callback: Optional[Callable[[List[float], Dict[str, Any]], None]] = None,
            **kwargs
    ) -> Tuple[List[float], Dict[str, Any]]:
        """
        Describes a dataset and detects its outliers.

        Args:
            values: The dataset to analyze
            outlier_config: Configuration for outlier detection
            callback: Optional callback function that receives the outliers and metadata
            **kwargs: Optional arguments that override config values

        Returns:
            Tuple containing:
                - List of outlier values
                - Dictionary with descriptive statistics and metadata about the detection
        """
        outlier_config = outlier_config or self.default_outlier_config
        # Keys that are not config fields are ignored
        overrides = {f.name: kwargs[f.name] for f in fields(outlier_config) if f.name in kwargs}
        if overrides:
            outlier_config = replace(outlier_config, **overrides)

        if values is None or len(values) == 0:
            return [], {'error': 'No data points provided'}

        detector = OutlierDetector(outlier_config)
        outliers = detector.detect_outliers(values)
        stats = self.statistics.describe(values)
        lower_bound, upper_bound = detector.iqr_bounds(values)

        logger.debug(f"Found {len(outliers)} outliers in {len(values)} values using {outlier_config.method}")

        metadata = {
            'method': outlier_config.method,
            'iqr_multiplier': outlier_config.iqr_multiplier,
            'z_score_threshold': outlier_config.z_score_threshold,
            'data_points_analyzed': len(values),
            'outliers_found': len(outliers),
            'iqr_bounds': {'lower': lower_bound, 'upper': upper_bound},
            'statistics': stats.to_dict()
        }

        if outlier_config.compare_methods:
            metadata['method_comparison'] = self.detect_outliers_multiple_methods(
                values,
                methods=list(outlier_config.compare_methods),
                config=outlier_config
            )

        if callback:
            callback(outliers, metadata)

        return outliers, metadata

    def detect_outliers_multiple_methods(
            self,
            values: Sequence[float],
            methods: Optional[List[str]] = None,
            config: Optional[OutlierDetectionConfig] = None
    ) -> Dict[str, List[float]]:
        """
        Run outlier detection with several methods and compare results.

        Args:
            values: The dataset to analyze
            methods: Method names to run, defaults to IQR and z-score
            config: Base configuration whose method is replaced for each run

        Returns:
            Dictionary mapping method names to their outliers
        """
        config = config or self.default_outlier_config

        if methods is None:
            methods = [OUTLIER_METHOD_IQR, OUTLIER_METHOD_Z_SCORE]

        results = {}
        for method in methods:
            detector = OutlierDetector(replace(config, method=method))
            try:
                results[method] = detector.detect_outliers(values)
            except Exception as e:
                logger.error(f"Error with outlier method {method}: {e}")

        return results

    def analyze_series(
            self,
            data_points: Sequence[DataPoint],
            trend_config: Optional[TrendAnalysisConfig] = None,
            period: Optional[int] = None,
            callback: Optional[Callable[[TrendDecomposition, Dict[str, Any]], None]] = None
    ) -> Tuple[TrendDecomposition, Dict[str, Any]]:
        """
        Fits a trend line to a time series and decomposes it.

        Args:
            data_points: List of DataPoint objects, in any order
            trend_config: Configuration for trend analysis
            period: Seasonal period, overriding the configured seasonality_period
            callback: Optional callback function that receives the decomposition and metadata

        Returns:
            Tuple containing:
                - TrendDecomposition of the series
                - Dictionary with the regression, trend direction, moving average and time range
        """
        trend_config = trend_config or self.default_trend_config

        if not data_points:
            return TrendDecomposition(), {'error': 'No data points provided'}

        decomposer = TrendDecomposer(trend_config)
        model = decomposer.linear_regression(data_points)
        summary = decomposer.classify_trend(data_points)
        moving_average = []
        if len(data_points) >= trend_config.moving_average_window:
            moving_average = decomposer.moving_average(data_points)
        decomposition = decomposer.decompose(data_points, period)

        timestamps = [to_millis(point.timestamp) for point in data_points]

        metadata = {
            'data_points_analyzed': len(data_points),
            'regression': {
                'slope': model.slope,
                'intercept': model.intercept
            },
            'trend_direction': summary.direction,
            'trend_slope_per_second': summary.slope,
            'moving_average_window': trend_config.moving_average_window,
            'moving_average': moving_average,
            'seasonality_period': period if period is not None else trend_config.seasonality_period,
            'time_range': {
                'start': min(timestamps),
                'end': max(timestamps),
                'duration_ms': max(timestamps) - min(timestamps)
            }
        }

        if callback:
            callback(decomposition, metadata)

        return decomposition, metadata
