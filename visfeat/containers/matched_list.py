"""Correspondences between features found by a matcher."""

from collections.abc import MutableSequence
from typing import Iterable, Optional, Tuple

from visfeat.features.feature import Feature
from visfeat.features.types import FeatureType
from visfeat.containers.feature_list import FeatureList
from visfeat.utils import io_handler

FeaturePair = Tuple[Feature, Feature]


class MatchedFeatureList(MutableSequence):
    """Ordered list of (feature, feature) pairs referencing features held elsewhere."""
    
    def __init__(self, pairs: Optional[Iterable[FeaturePair]] = None):
        self._pairs = []
        if pairs is not None:
            self.extend(pairs)
    
    def __len__(self) -> int:
        return len(self._pairs)
    
    def __getitem__(self, index):
        if isinstance(index, slice):
            return MatchedFeatureList(self._pairs[index])
        return self._pairs[index]
    
    def __setitem__(self, index, value):
        if isinstance(index, slice):
            self._pairs[index] = [self._check(pair) for pair in value]
        else:
            self._pairs[index] = self._check(value)
    
    def __delitem__(self, index):
        del self._pairs[index]
    
    def insert(self, index: int, pair: FeaturePair):
        self._pairs.insert(index, self._check(pair))
    
    def clear(self):
        self._pairs.clear()
    
    def empty(self) -> bool:
        return not self._pairs
    
    @staticmethod
    def _check(pair) -> FeaturePair:
        first, second = pair
        if not isinstance(first, Feature) or not isinstance(second, Feature):
            raise TypeError("Matched pairs must contain two Feature objects")
        return first, second
    
    def __repr__(self):
        return f"MatchedFeatureList({len(self._pairs)} pairs, type={self.get_type().name})"
    
    def get_type(self) -> FeatureType:
        """Type of the first feature of the first pair, NOT_DEFINED when empty."""
        return self._pairs[0][0].get_type() if self._pairs else FeatureType.NOT_DEFINED
    
    def first_list(self) -> FeatureList:
        """Left-hand features, sharing the same objects."""
        return FeatureList(first for first, _ in self._pairs)
    
    def second_list(self) -> FeatureList:
        """Right-hand features, sharing the same objects."""
        return FeatureList(second for _, second in self._pairs)
    
    def save_to_text_file(self, output_path: str):
        """Save the pair coordinates, one "ID1 X1 Y1 ID2 X2 Y2" record per pair."""
        io_handler.save_matches(self._pairs, output_path)
