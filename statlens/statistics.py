import math
from collections import Counter
from typing import List, Sequence

import numpy as np

from .models.results import DescriptiveStats


def percentile(sorted_data: Sequence[float], p: float) -> float:
    """
    Calculates a percentile of a pre-sorted dataset by linear interpolation.

    Args:
        sorted_data: Values sorted in ascending order
        p: The percentile to calculate (0-100)

    Returns:
        The interpolated value, or NaN if p is out of range or the data is empty
    """
    n = len(sorted_data)
    if p < 0 or p > 100 or n == 0:
        return math.nan

    # numpy's default linear method interpolates at index p/100 * (n - 1)
    return float(np.percentile(sorted_data, p))


class DescriptiveStatistics:
    def describe(self, data: Sequence[float]) -> DescriptiveStats:
        """
        Calculates descriptive statistics for a numeric dataset.

        Args:
            data: Sequence of numbers, left unmodified

        Returns:
            DescriptiveStats with count, mean, median, mode, sample variance,
            standard deviation, min, max, range and quartiles. An empty dataset
            yields count 0 and NaN for every numeric field.
        """
        if data is None or len(data) == 0:
            return DescriptiveStats.empty()

        values = np.asarray(data, dtype=float)
        sorted_values = np.sort(values)
        n = len(values)

        total = float(np.sum(values))
        mean = total / n

        median = float(np.median(sorted_values))

        variance = float(np.sum((values - mean) ** 2) / (n - 1 if n > 1 else 1))
        minimum = float(sorted_values[0])
        maximum = float(sorted_values[-1])

        q1 = percentile(sorted_values, 25)
        q3 = percentile(sorted_values, 75)

        return DescriptiveStats(
            count=n,
            sum=total,
            mean=mean,
            median=median,
            mode=self._mode(values),
            variance=variance,
            standard_deviation=math.sqrt(variance),
            min=minimum,
            max=maximum,
            range=maximum - minimum,
            quartiles=[q1, median, q3],
            interquartile_range=q3 - q1
        )

    @staticmethod
    def _mode(values: np.ndarray) -> List[float]:
        # No mode when every value is unique
        frequencies = Counter(values.tolist())
        max_frequency = max(frequencies.values())
        if max_frequency == 1:
            return []
        return sorted(value for value, count in frequencies.items() if count == max_frequency)

    def percentile(self, sorted_data: Sequence[float], p: float) -> float:
        return percentile(sorted_data, p)

    def pearson_correlation(self, data_x: Sequence[float], data_y: Sequence[float]) -> float:
        """
        Calculates the Pearson correlation coefficient between two datasets.

        Returns NaN when the lengths differ, either dataset is empty, or either
        dataset is constant.
        """
        if len(data_x) != len(data_y) or len(data_x) == 0:
            return math.nan

        x = np.asarray(data_x, dtype=float)
        y = np.asarray(data_y, dtype=float)
        dx = x - x.mean()
        dy = y - y.mean()

        denom_x = float(np.sum(dx ** 2))
        denom_y = float(np.sum(dy ** 2))
        if denom_x == 0 or denom_y == 0:
            return math.nan

        return float(np.sum(dx * dy)) / (math.sqrt(denom_x) * math.sqrt(denom_y))
