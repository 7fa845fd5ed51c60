"""
visfeat - visual feature model, descriptor distances and feature containers.
"""

from .exceptions import (
    FeatureError,
    FeatureFileError,
    InvalidPatchSizeError,
    MissingDescriptorError,
    SizeMismatchError,
)
from .features import DescriptorSet, DescriptorType, Feature, FeatureType, TrackStatus
from .containers import FeatureList, KDTreeIndex, MatchedFeatureList

__all__ = [
    'DescriptorSet',
    'DescriptorType',
    'Feature',
    'FeatureError',
    'FeatureFileError',
    'FeatureList',
    'FeatureType',
    'InvalidPatchSizeError',
    'KDTreeIndex',
    'MatchedFeatureList',
    'MissingDescriptorError',
    'SizeMismatchError',
    'TrackStatus',
]
__version__ = '1.0.0'
