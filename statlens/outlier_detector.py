import math
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .models.config import (
    OutlierDetectionConfig,
    OUTLIER_METHOD_CUSTOM,
    OUTLIER_METHOD_IQR,
    OUTLIER_METHOD_Z_SCORE,
)
from .statistics import percentile

logger = logging.getLogger(__name__)


class OutlierDetector:
    def __init__(self, config: Optional[OutlierDetectionConfig] = None):
        self.config = config or OutlierDetectionConfig()

    def detect_outliers(self, data: Sequence[float]) -> List[float]:
        """
        Detects outliers in a numeric dataset using the configured method.

        Args:
            data: Sequence of numbers, left unmodified

        Returns:
            The values judged anomalous, in input order with duplicates kept
        """
        if data is None or len(data) == 0:
            return []

        method = self.config.method

        if method == OUTLIER_METHOD_IQR:
            return self._detect_iqr(data)

        if method == OUTLIER_METHOD_Z_SCORE:
            return self._detect_z_score(data)

        if method == OUTLIER_METHOD_CUSTOM:
            predicate = self.config.custom_outlier_detector
            if predicate is not None:
                snapshot = list(data)
                return [value for value in data if predicate(snapshot, value)]
            logger.warning("Custom outlier detector not provided, falling back to IQR.")
            return self._detect_iqr(data)

        logger.warning(f"Unknown outlier detection method {method!r}, falling back to IQR.")
        return self._detect_iqr(data)

    def iqr_bounds(self, data: Sequence[float]) -> Tuple[float, float]:
        """
        Returns the (lower, upper) bounds outside which the IQR method flags values.
        """
        if data is None or len(data) == 0:
            return math.nan, math.nan

        sorted_values = np.sort(np.asarray(data, dtype=float))
        q1 = percentile(sorted_values, 25)
        q3 = percentile(sorted_values, 75)
        iqr = q3 - q1
        multiplier = self.config.iqr_multiplier

        return q1 - multiplier * iqr, q3 + multiplier * iqr

    def _detect_iqr(self, data: Sequence[float]) -> List[float]:
        lower_bound, upper_bound = self.iqr_bounds(data)
        return [value for value in data if value < lower_bound or value > upper_bound]

    def _detect_z_score(self, data: Sequence[float]) -> List[float]:
        values = np.asarray(data, dtype=float)
        mean = values.mean()
        std_dev = float(np.std(values))  # Population std dev

        # Constant dataset, no value deviates
        if std_dev == 0:
            return []

        threshold = self.config.z_score_threshold
        return [value for value in data if abs((value - mean) / std_dev) > threshold]
