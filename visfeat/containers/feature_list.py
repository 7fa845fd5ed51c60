"""Ordered feature container with nearest-neighbour queries."""

import logging
import math
from collections.abc import MutableSequence
from typing import Iterable, Optional, Tuple

import numpy as np

from visfeat.features.feature import Feature
from visfeat.features.types import FeatureType
from visfeat.containers.spatial_index import KDTreeIndex
from visfeat.utils import io_handler

logger = logging.getLogger(__name__)


class FeatureList(MutableSequence):
    """
    List of features used as output by detectors and input/output by trackers.
    
    Features are held by reference, so the same object may live in several
    lists and matched lists at once. Nearest-neighbour queries go through a
    spatial index that is rebuilt lazily after any structural change or
    after a contained feature has moved. Not
    thread safe: callers serialize writers against readers.
    """
    
    def __init__(self, features: Optional[Iterable[Feature]] = None,
                 index: Optional[KDTreeIndex] = None):
        """
        Initialize feature list.
        
        Args:
            features: Initial features (optional)
            index: Spatial index strategy, any object with build(points) and
                query(x, y) -> (index, distance). Defaults to a KD-tree.
        """
        self._features = []
        self._index = index if index is not None else KDTreeIndex()
        self._index_outdated = True
        self._indexed_revision = 0
        if features is not None:
            self.extend(features)
    
    # -- sequence protocol -------------------------------------------------
    
    def __len__(self) -> int:
        return len(self._features)
    
    def __getitem__(self, index):
        if isinstance(index, slice):
            return FeatureList(self._features[index])
        return self._features[index]
    
    def __setitem__(self, index, value):
        if isinstance(index, slice):
            value = [self._check(f) for f in value]
        else:
            value = self._check(value)
        self._features[index] = value
        self.mark_index_outdated()
    
    def __delitem__(self, index):
        del self._features[index]
        self.mark_index_outdated()
    
    def insert(self, index: int, feature: Feature):
        self._features.insert(index, self._check(feature))
        self.mark_index_outdated()
    
    def appendleft(self, feature: Feature):
        """Insert a feature at the front."""
        self.insert(0, feature)
    
    def clear(self):
        self._features.clear()
        self.mark_index_outdated()
    
    def empty(self) -> bool:
        return not self._features
    
    def resize(self, size: int):
        """Truncate to size, or pad with default features."""
        if size < 0:
            raise ValueError(f"Cannot resize to negative size {size}")
        if size < len(self._features):
            del self._features[size:]
        else:
            self._features.extend(Feature() for _ in range(size - len(self._features)))
        self.mark_index_outdated()
    
    @staticmethod
    def _check(feature) -> Feature:
        if not isinstance(feature, Feature):
            raise TypeError(f"FeatureList holds Feature objects, got {type(feature).__name__}")
        return feature
    
    def __repr__(self):
        return f"FeatureList({len(self._features)} features, type={self.get_type().name})"
    
    # -- queries -------------------------------------------------------------
    
    def get_type(self) -> FeatureType:
        """Type of the first feature, NOT_DEFINED when empty."""
        return self._features[0].get_type() if self._features else FeatureType.NOT_DEFINED
    
    def get_by_id(self, feature_id: int) -> Optional[Feature]:
        for feature in self._features:
            if feature.id == feature_id:
                return feature
        return None
    
    def get_max_id(self) -> Optional[int]:
        """Largest id in the list, or None when empty."""
        if not self._features:
            return None
        return max(feature.id for feature in self._features)
    
    def mark_index_outdated(self):
        """Force a rebuild before the next query."""
        self._index_outdated = True
    
    def _positions_revision(self) -> int:
        # Revisions only grow, so any in-place move changes the sum
        return sum(f.revision for f in self._features)
    
    def _rebuild_index(self):
        points = np.array([(f.x, f.y) for f in self._features], dtype=np.float64).reshape(-1, 2)
        self._index.build(points)
        self._index_outdated = False
        self._indexed_revision = self._positions_revision()
        logger.debug("Spatial index rebuilt for %d features", len(points))
    
    def nearest(self, x: float, y: float, max_dist: float = math.inf) -> Tuple[Optional[Feature], float]:
        """
        Find the feature closest to a 2D point.
        
        Args:
            x: Query x coordinate
            y: Query y coordinate
            max_dist: Largest accepted distance (inclusive)
            
        Returns:
            (feature, distance) for the closest feature, or (None, max_dist)
            when the list is empty or nothing lies within max_dist. The
            distance can be passed as max_dist to tighten later queries.
        """
        if not self._features:
            return None, max_dist
        
        if self._index_outdated or self._indexed_revision != self._positions_revision():
            self._rebuild_index()
        
        idx, dist = self._index.query(x, y)
        if idx is None or dist > max_dist:
            return None, max_dist
        return self._features[idx], dist
    
    # -- persistence ---------------------------------------------------------
    
    def save_to_text_file(self, output_path: str, append: bool = False):
        """Save id, type, position, pose and tracking fields as text."""
        io_handler.save_features(self._features, output_path, append=append)
    
    def load_from_text_file(self, input_path: str):
        """Replace the contents with the features stored in a text file."""
        features = io_handler.load_features(input_path)
        self.clear()
        self.extend(features)
    
    @classmethod
    def from_text_file(cls, input_path: str) -> 'FeatureList':
        feature_list = cls()
        feature_list.load_from_text_file(input_path)
        return feature_list
