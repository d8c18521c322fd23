import logging
from collections import Counter
from collections.abc import Mapping, Set
from typing import Any, Dict, Hashable, List, Optional, Sequence, TypeVar

import numpy as np

from .models.config import OutlierDetectionConfig

logger = logging.getLogger(__name__)

K = TypeVar('K', bound=Hashable)


def _sequence_key(item: Any) -> Any:
    """Hashable key that compares equal exactly when the items are structurally equal."""
    if isinstance(item, np.ndarray):
        return _sequence_key(item.tolist())
    if isinstance(item, Mapping):
        return frozenset((key, _sequence_key(value)) for key, value in item.items())
    if isinstance(item, Set):
        return frozenset(_sequence_key(element) for element in item)
    if isinstance(item, (list, tuple)):
        return tuple(_sequence_key(element) for element in item)
    return item


class PatternMiner:
    def __init__(self, config: Optional[OutlierDetectionConfig] = None):
        self.config = config or OutlierDetectionConfig()

    def frequency_analysis(self, data: Sequence[K]) -> Dict[K, int]:
        """
        Counts occurrences of each discrete value (number or string).

        Args:
            data: Sequence of hashable items

        Returns:
            Dictionary mapping each unique item to its number of occurrences
        """
        return dict(Counter(data))

    def find_frequent_sequences(
            self,
            sequences: Sequence[Sequence[Any]],
            min_support: Optional[int] = None
    ) -> List[Sequence[Any]]:
        """
        Finds sequences that recur, identically, at least min_support times.

        Whole sequences are compared element by element, nested lists, dicts,
        sets and numpy arrays included; shared sub-sequences of otherwise
        different sequences are not counted.

        Args:
            sequences: Sequence of sequences of items
            min_support: Minimum occurrence count, defaults to the configured
                         min_frequency_for_pattern

        Returns:
            The first occurrence of each frequent sequence, in order of first appearance
        """
        support_threshold = min_support if min_support is not None else self.config.min_frequency_for_pattern

        # Entries are [sequence, count] in order of first appearance
        entries: List[List[Any]] = []
        hashed: Dict[Any, List[Any]] = {}
        # Keys still unhashable after canonicalisation are matched by equality
        unhashed: List[Any] = []

        for sequence in sequences:
            key = _sequence_key(sequence)
            try:
                entry = hashed.get(key)
            except TypeError:
                entry = next((e for k, e in unhashed if k == key), None)
                if entry is None:
                    entry = [sequence, 0]
                    unhashed.append((key, entry))
                    entries.append(entry)
            else:
                if entry is None:
                    entry = [sequence, 0]
                    hashed[key] = entry
                    entries.append(entry)
            entry[1] += 1

        frequent = [sequence for sequence, count in entries if count >= support_threshold]
        logger.debug(f"{len(frequent)} of {len(entries)} distinct sequences reached support {support_threshold}")
        return frequent
