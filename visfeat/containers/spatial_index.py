"""Nearest-neighbour index over 2D feature coordinates."""

import logging
import math
from typing import Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree

from visfeat.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class KDTreeIndex:
    """KD-tree over (x, y) points, rebuilt from scratch on every build()."""
    
    def __init__(self, leafsize: int = DEFAULT_CONFIG['spatial_index']['leafsize']):
        self.leafsize = leafsize
        self._tree = None
    
    @property
    def size(self) -> int:
        return 0 if self._tree is None else self._tree.n
    
    def build(self, points: np.ndarray):
        """
        Build the tree.
        
        Args:
            points: Array of shape (N, 2) with the (x, y) of every feature
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(points) == 0:
            self._tree = None
            return
        self._tree = cKDTree(points, leafsize=self.leafsize)
        logger.debug("Built KD-tree over %d points", len(points))
    
    def query(self, x: float, y: float) -> Tuple[Optional[int], float]:
        """Return (index, distance) of the closest point, or (None, inf)."""
        if self._tree is None:
            return None, math.inf
        dist, idx = self._tree.query([x, y], k=1)
        return int(idx), float(dist)
