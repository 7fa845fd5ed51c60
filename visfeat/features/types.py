"""Feature, descriptor and track-status enumerations."""

from enum import IntEnum, IntFlag


class FeatureType(IntEnum):
    """Detector that produced a feature, independent of its descriptors."""
    NOT_DEFINED = -1
    KLT = 0        # Kanade-Lucas-Tomasi
    HARRIS = 1
    BCD = 2        # Binary corner detector
    SIFT = 3
    SURF = 4
    BEACON = 5     # 2D/3D beacon, not an image feature
    FAST = 6


class DescriptorType(IntFlag):
    """Descriptor kinds. Values may be OR-ed to request several at once."""
    ANY = 0
    SIFT = 1
    SURF = 2
    SPIN_IMAGE = 4
    POLAR_IMAGE = 8
    LOG_POLAR_IMAGE = 16


# Selection order used when DescriptorType.ANY is requested
DESCRIPTOR_PRIORITY = (
    DescriptorType.SIFT,
    DescriptorType.SURF,
    DescriptorType.SPIN_IMAGE,
    DescriptorType.POLAR_IMAGE,
    DescriptorType.LOG_POLAR_IMAGE,
)


class TrackStatus(IntEnum):
    """
    Outcome of the most recent tracking attempt.
    
    Numeric values keep the legacy codes, so the KLT-specific "idle",
    "out of bounds" and "tracked" codes resolve to the same members as the
    generic ones: TrackStatus(1) is OUT_OF_BOUNDS whichever tracker wrote it.
    """
    IDLE = 0
    OUT_OF_BOUNDS = 1
    SMALL_DETERMINANT = 2
    LARGE_RESIDUE = 3
    MAX_RESIDUE = 4
    TRACKED = 5
    MAX_ITERATIONS = 6
    LOST = 10

    @property
    def is_failure(self) -> bool:
        return self not in (TrackStatus.IDLE, TrackStatus.TRACKED)

    def can_transition_to(self, new_status: 'TrackStatus') -> bool:
        """
        Check a tracker update against the track-status state machine.
        
        IDLE -> TRACKED, IDLE/TRACKED -> any failure. Failures are terminal
        for the attempt; returning to IDLE starts a new attempt.
        """
        new_status = TrackStatus(new_status)
        if new_status == self or new_status == TrackStatus.IDLE:
            return True
        if self.is_failure:
            return False
        return True
