"""Feature and descriptor data model."""

from .types import DESCRIPTOR_PRIORITY, DescriptorType, FeatureType, TrackStatus
from .descriptors import DescriptorSet
from .feature import MAX_FEATURE_ID, Feature

__all__ = [
    'DESCRIPTOR_PRIORITY',
    'DescriptorSet',
    'DescriptorType',
    'Feature',
    'FeatureType',
    'MAX_FEATURE_ID',
    'TrackStatus',
]
