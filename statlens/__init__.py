from .client import StatLensClient
from .models.config import OutlierDetectionConfig, TrendAnalysisConfig
from .models.results import DataPoint, DescriptiveStats, RegressionModel, TrendDecomposition, TrendSummary
from .outlier_detector import OutlierDetector
from .pattern_miner import PatternMiner
from .statistics import DescriptiveStatistics, percentile
from .trend_decomposer import TrendDecomposer
