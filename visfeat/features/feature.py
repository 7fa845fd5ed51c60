"""Feature entity: a detected image point with its patch and descriptors."""

import logging
from typing import Optional, Tuple

import numpy as np

from visfeat.config import DEFAULT_CONFIG
from visfeat.exceptions import InvalidPatchSizeError, MissingDescriptorError, SizeMismatchError
from visfeat.features.descriptors import DescriptorSet
from visfeat.features.types import DescriptorType, FeatureType, TrackStatus
from visfeat.matching import correlation, distance

logger = logging.getLogger(__name__)

MAX_FEATURE_ID = 2 ** 64 - 1


class Feature:
    """
    A 2D image feature as produced by an extractor.
    
    The id is fixed at construction. Position, track status and response are
    updated in place by trackers. Features are shared by reference between
    feature lists and matched lists, never copied.
    """
    
    def __init__(self, feature_id: int = 0, x: float = 0.0, y: float = 0.0,
                 feature_type: FeatureType = FeatureType.NOT_DEFINED,
                 track_status: TrackStatus = TrackStatus.IDLE,
                 response: float = 0.0, orientation: float = 0.0,
                 scale: float = 0.0, source_image_id: int = 0,
                 patch: Optional[np.ndarray] = None,
                 descriptors: Optional[DescriptorSet] = None):
        """
        Initialize feature.
        
        Args:
            feature_id: Unique 64-bit identifier
            x: Image x coordinate
            y: Image y coordinate
            feature_type: Detector that produced the feature
            track_status: Outcome of the last tracking attempt
            response: Detector "goodness" score
            orientation: Main orientation in radians
            scale: Scale in scale space
            source_image_id: Image the feature was extracted from
            patch: Optional square image patch of odd side centred on (x, y)
            descriptors: Descriptor bundle (empty when omitted)
        """
        feature_id = int(feature_id)
        if not 0 <= feature_id <= MAX_FEATURE_ID:
            raise ValueError(f"Feature id {feature_id} outside the 64-bit unsigned range")
        self._id = feature_id
        self._revision = 0
        self.x = x
        self.y = y
        self.type = FeatureType(feature_type)
        self.track_status = TrackStatus(track_status)
        self.response = float(response)
        self.orientation = float(orientation)
        self.scale = float(scale)
        self.source_image_id = int(source_image_id)
        self._patch = None
        self.patch = patch
        self.descriptors = descriptors if descriptors is not None else DescriptorSet()
    
    @property
    def id(self) -> int:
        return self._id
    
    @property
    def x(self) -> float:
        return self._x
    
    @x.setter
    def x(self, value: float):
        self._x = float(value)
        self._revision += 1
    
    @property
    def y(self) -> float:
        return self._y
    
    @y.setter
    def y(self, value: float):
        self._y = float(value)
        self._revision += 1
    
    @property
    def revision(self) -> int:
        """Counter bumped on every position change."""
        return self._revision
    
    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y
    
    @property
    def patch(self) -> Optional[np.ndarray]:
        return self._patch
    
    @patch.setter
    def patch(self, value: Optional[np.ndarray]):
        if value is None:
            self._patch = None
            return
        value = np.asarray(value)
        if value.ndim not in (2, 3) or value.shape[0] != value.shape[1] or value.shape[0] == 0:
            raise SizeMismatchError(f"Patch must be a non-empty square image, got shape {value.shape}")
        if value.shape[0] % 2 == 0:
            raise InvalidPatchSizeError(f"Patch side must be odd, got {value.shape[0]}")
        self._patch = value
    
    @property
    def patch_size(self) -> int:
        """Side length of the patch, 0 when there is none."""
        return 0 if self._patch is None else self._patch.shape[0]
    
    def get_type(self) -> FeatureType:
        return self.type
    
    def is_point_feature(self) -> bool:
        """False only for blob detectors (SIFT, SURF)."""
        return self.type not in (FeatureType.SIFT, FeatureType.SURF)
    
    def update_track_status(self, status: TrackStatus):
        """Apply a tracker's status update, warning on unexpected transitions."""
        status = TrackStatus(status)
        if not self.track_status.can_transition_to(status):
            logger.warning("Feature %d: unexpected track status change %s -> %s",
                           self._id, self.track_status.name, status.name)
        self.track_status = status
    
    def get_first_descriptor_as_matrix(self) -> np.ndarray:
        """Return the first present descriptor as a 2D float matrix."""
        kind = self.descriptors.first_present()
        if kind is None:
            raise MissingDescriptorError(f"Feature {self._id} has no descriptors")
        if kind == DescriptorType.SPIN_IMAGE:
            return self.descriptors.spin_image_as_matrix().astype(np.float32)
        values = self.descriptors.get(kind).astype(np.float32)
        return values.reshape(1, -1) if values.ndim == 1 else values
    
    def patch_correlation_to(self, other: 'Feature') -> float:
        """Patch similarity in [0, 1], where 0 is the best match."""
        return correlation.patch_correlation(self.patch, other.patch)
    
    def descriptor_distance_to(self, other: 'Feature',
                               descriptor_to_use: DescriptorType = DescriptorType.ANY,
                               normalize: bool = DEFAULT_CONFIG['distance']['normalize']) -> float:
        """Euclidean distance between the given (or first shared) descriptors."""
        return distance.descriptor_distance(self, other, descriptor_to_use, normalize)
    
    def descriptor_sift_distance_to(self, other: 'Feature', normalize: bool = True) -> float:
        return distance.sift_distance(self, other, normalize)
    
    def descriptor_surf_distance_to(self, other: 'Feature', normalize: bool = True) -> float:
        return distance.surf_distance(self, other, normalize)
    
    def descriptor_spin_image_distance_to(self, other: 'Feature', normalize: bool = True) -> float:
        return distance.spin_image_distance(self, other, normalize)
    
    def descriptor_polar_image_distance_to(self, other: 'Feature',
                                           normalize: bool = True) -> Tuple[float, float]:
        """Returns (minimum distance, angle in radians of the best alignment)."""
        return distance.polar_image_distance(self, other, normalize)
    
    def descriptor_log_polar_image_distance_to(self, other: 'Feature',
                                               normalize: bool = True) -> Tuple[float, float]:
        """Returns (minimum distance, angle in radians of the best alignment)."""
        return distance.log_polar_image_distance(self, other, normalize)
    
    def __repr__(self):
        return (f"Feature(id={self._id}, x={self.x:.2f}, y={self.y:.2f}, "
                f"type={self.type.name}, track_status={self.track_status.name})")
