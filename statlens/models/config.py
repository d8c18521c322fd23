from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

OUTLIER_METHOD_IQR = 'iqr'
OUTLIER_METHOD_Z_SCORE = 'z-score'
OUTLIER_METHOD_CUSTOM = 'custom'


@dataclass(frozen=True)
class OutlierDetectionConfig:
    """Configuration for outlier detection and pattern mining."""
    # Method selection
    method: str = OUTLIER_METHOD_IQR  # 'iqr', 'z-score' or 'custom'

    # Threshold settings
    iqr_multiplier: float = 1.5  # 1.5 for mild, 3.0 for extreme outliers
    z_score_threshold: float = 3.0  # Absolute z-score above which a value is an outlier

    # Custom predicate, called as predicate(dataset, value)
    custom_outlier_detector: Optional[Callable[[Sequence[float], float], bool]] = None

    # Pattern mining
    min_frequency_for_pattern: int = 2  # Minimum occurrences to be considered a pattern

    # Methods to compare side by side in StatLensClient.analyze_values
    compare_methods: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class TrendAnalysisConfig:
    """Configuration for time series trend analysis."""
    # Smoothing
    moving_average_window: int = 7  # Window size for moving average calculation

    # Seasonality, e.g. 7 for daily data with weekly seasonality
    seasonality_period: Optional[int] = None

    # Trend classification
    min_points_for_trend: int = 5  # Fewer points than this are not classified
    trend_significance_ratio: float = 0.1  # Slope per second relative to the mean value
