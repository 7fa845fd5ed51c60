"""Feature containers."""

from .spatial_index import KDTreeIndex
from .feature_list import FeatureList
from .matched_list import MatchedFeatureList

__all__ = ['FeatureList', 'KDTreeIndex', 'MatchedFeatureList']
