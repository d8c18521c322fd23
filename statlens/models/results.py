import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Union

Timestamp = Union[int, float, datetime]


def to_millis(timestamp: Timestamp) -> float:
    """Convert an epoch-millisecond number or a datetime to epoch milliseconds."""
    if isinstance(timestamp, datetime):
        return timestamp.timestamp() * 1000
    return timestamp


@dataclass
class DataPoint:
    """Class representing a time series data point."""
    timestamp: Timestamp  # Unix timestamp in milliseconds, or a datetime
    value: float


@dataclass
class DescriptiveStats:
    """Descriptive statistics of a dataset. Numeric fields are NaN when undefined."""
    count: int
    sum: float
    mean: float
    median: float
    mode: List[float]
    variance: float  # Sample variance
    standard_deviation: float
    min: float
    max: float
    range: float
    quartiles: List[float]  # [Q1, Q2, Q3]
    interquartile_range: float

    @classmethod
    def empty(cls) -> 'DescriptiveStats':
        nan = math.nan
        return cls(
            count=0, sum=nan, mean=nan, median=nan, mode=[], variance=nan,
            standard_deviation=nan, min=nan, max=nan, range=nan,
            quartiles=[nan, nan, nan], interquartile_range=nan
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RegressionModel:
    """
    A fitted line y = slope * x + intercept, where x is the offset in
    milliseconds from ``origin`` (the first timestamp seen at fit time).
    """
    slope: float
    intercept: float
    origin: float = 0.0

    @classmethod
    def unfitted(cls) -> 'RegressionModel':
        return cls(slope=math.nan, intercept=math.nan, origin=math.nan)

    def predict(self, timestamp: Timestamp) -> float:
        if math.isnan(self.slope):
            return math.nan
        return self.slope * (to_millis(timestamp) - self.origin) + self.intercept


@dataclass
class TrendDecomposition:
    """Additive decomposition of a time series."""
    trend: List[DataPoint] = field(default_factory=list)
    seasonal: List[DataPoint] = field(default_factory=list)
    residual: List[DataPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrendSummary:
    """Direction of a series' linear trend."""
    direction: str  # 'increasing', 'decreasing', 'stable', 'fluctuating' or 'insufficient_data'
    slope: float  # Value change per second
    data_points_used: int
