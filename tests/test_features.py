"""Tests for the feature data model."""

import pytest
import numpy as np
from visfeat.exceptions import InvalidPatchSizeError, MissingDescriptorError, SizeMismatchError
from visfeat.features import (
    DESCRIPTOR_PRIORITY,
    DescriptorSet,
    DescriptorType,
    Feature,
    FeatureType,
    TrackStatus,
)


class TestTrackStatus:
    """Test track status codes and transitions."""

    def test_legacy_codes_share_members(self):
        """Test that aliased KLT codes resolve to the generic states."""
        assert TrackStatus(0) is TrackStatus.IDLE
        assert TrackStatus(1) is TrackStatus.OUT_OF_BOUNDS
        assert TrackStatus(5) is TrackStatus.TRACKED
        assert TrackStatus(10) is TrackStatus.LOST

    def test_is_failure(self):
        """Test failure classification."""
        assert not TrackStatus.IDLE.is_failure
        assert not TrackStatus.TRACKED.is_failure
        for status in (TrackStatus.OUT_OF_BOUNDS, TrackStatus.LOST,
                       TrackStatus.SMALL_DETERMINANT, TrackStatus.LARGE_RESIDUE,
                       TrackStatus.MAX_RESIDUE, TrackStatus.MAX_ITERATIONS):
            assert status.is_failure

    def test_transitions(self):
        """Test the tracking state machine."""
        assert TrackStatus.IDLE.can_transition_to(TrackStatus.TRACKED)
        assert TrackStatus.IDLE.can_transition_to(TrackStatus.LOST)
        assert TrackStatus.TRACKED.can_transition_to(TrackStatus.MAX_ITERATIONS)
        assert not TrackStatus.LOST.can_transition_to(TrackStatus.TRACKED)
        assert TrackStatus.LOST.can_transition_to(TrackStatus.IDLE)


class TestDescriptorSet:
    """Test descriptor bundle."""

    def test_empty_by_default(self):
        """Test that no descriptor is present on a new set."""
        descriptors = DescriptorSet()
        assert descriptors.present_kinds() == []
        assert descriptors.first_present() is None
        assert not descriptors.has_sift()
        assert not descriptors.has_polar_image()
        assert descriptors.no_rotation_search is False

    def test_values_are_coerced(self):
        """Test that assigned values become typed arrays."""
        descriptors = DescriptorSet(sift=[1, 2, 3])
        descriptors.surf = [0.5, 0.25]
        assert descriptors.sift.dtype == np.uint8
        assert descriptors.surf.dtype == np.float32
        assert descriptors.has_sift() and descriptors.has_surf()

    def test_first_present_follows_priority(self):
        """Test selection order SIFT, SURF, spin image, polar, log-polar."""
        descriptors = DescriptorSet(log_polar_image=np.ones((2, 4)), surf=[1.0])
        assert descriptors.first_present() == DescriptorType.SURF
        assert descriptors.present_kinds() == [DescriptorType.SURF, DescriptorType.LOG_POLAR_IMAGE]
        assert DESCRIPTOR_PRIORITY[0] == DescriptorType.SIFT

    def test_sift_rejects_fractional_values(self):
        """Test that SIFT values must be whole bytes."""
        with pytest.raises(ValueError):
            DescriptorSet(sift=[0.2, 0.9])
        assert list(DescriptorSet(sift=np.array([3.0, 255.0])).sift) == [3, 255]

    def test_sift_rejects_out_of_range(self):
        """Test that SIFT values must fit in a byte."""
        descriptors = DescriptorSet()
        with pytest.raises(ValueError):
            descriptors.sift = [0, 256]
        with pytest.raises(ValueError):
            descriptors.sift = [-1, 3]

    def test_polar_image_must_be_matrix(self):
        """Test that a 3D polar descriptor is rejected."""
        with pytest.raises(SizeMismatchError):
            DescriptorSet(polar_image=np.ones((2, 2, 2)))

    def test_get_rejects_combined_kinds(self):
        """Test that get() needs a single kind."""
        with pytest.raises(ValueError):
            DescriptorSet().get(DescriptorType.SIFT | DescriptorType.SURF)

    def test_spin_image_as_matrix(self):
        """Test reshaping a spin image with its range rows."""
        descriptors = DescriptorSet(spin_image=np.arange(12), spin_image_range_rows=3)
        matrix = descriptors.spin_image_as_matrix()
        assert matrix.shape == (3, 4)

        descriptors.spin_image_range_rows = 5
        with pytest.raises(SizeMismatchError):
            descriptors.spin_image_as_matrix()


class TestFeature:
    """Test feature entity."""

    def test_defaults(self):
        """Test default feature state."""
        feature = Feature()
        assert feature.id == 0
        assert feature.type == FeatureType.NOT_DEFINED
        assert feature.track_status == TrackStatus.IDLE
        assert feature.patch is None
        assert feature.patch_size == 0

    def test_id_is_read_only(self):
        """Test that the id cannot be reassigned."""
        feature = Feature(feature_id=7)
        with pytest.raises(AttributeError):
            feature.id = 8

    def test_id_range(self):
        """Test that ids must fit in 64 unsigned bits."""
        assert Feature(feature_id=2 ** 64 - 1).id == 2 ** 64 - 1
        with pytest.raises(ValueError):
            Feature(feature_id=-1)

    def test_position_is_mutable(self):
        """Test in-place tracker updates."""
        feature = Feature(feature_id=1, x=1.0, y=2.0)
        feature.x, feature.y = 3.5, 4.5
        assert feature.position == (3.5, 4.5)

    def test_position_changes_bump_revision(self):
        """Test that every position update advances the revision."""
        feature = Feature(feature_id=1, x=1.0, y=2.0)
        start = feature.revision
        feature.x += 1.0
        feature.y = 5.0
        assert feature.revision == start + 2
        feature.response = 0.5
        assert feature.revision == start + 2

    def test_patch_size(self):
        """Test that patch size follows the patch."""
        feature = Feature(patch=np.zeros((5, 5), dtype=np.uint8))
        assert feature.patch_size == 5
        feature.patch = None
        assert feature.patch_size == 0

    def test_even_patch_rejected(self):
        """Test that even-sided patches raise InvalidPatchSizeError."""
        with pytest.raises(InvalidPatchSizeError):
            Feature(patch=np.zeros((4, 4)))

    def test_non_square_patch_rejected(self):
        """Test that non-square patches raise SizeMismatchError."""
        feature = Feature()
        with pytest.raises(SizeMismatchError):
            feature.patch = np.zeros((5, 7))

    def test_is_point_feature(self):
        """Test that only blob detectors are not point features."""
        assert Feature(feature_type=FeatureType.HARRIS).is_point_feature()
        assert Feature(feature_type=FeatureType.KLT).is_point_feature()
        assert not Feature(feature_type=FeatureType.SIFT).is_point_feature()
        assert not Feature(feature_type=FeatureType.SURF).is_point_feature()

    def test_update_track_status(self, caplog):
        """Test that unexpected transitions are applied but logged."""
        feature = Feature(feature_id=3)
        feature.update_track_status(TrackStatus.TRACKED)
        assert feature.track_status == TrackStatus.TRACKED

        feature.update_track_status(TrackStatus.LOST)
        with caplog.at_level('WARNING'):
            feature.update_track_status(TrackStatus.TRACKED)
        assert feature.track_status == TrackStatus.TRACKED
        assert 'unexpected track status' in caplog.text

    def test_first_descriptor_as_matrix(self):
        """Test matrix view of the first present descriptor."""
        feature = Feature(descriptors=DescriptorSet(surf=[1.0, 2.0, 3.0]))
        matrix = feature.get_first_descriptor_as_matrix()
        assert matrix.shape == (1, 3)

        spin = Feature(descriptors=DescriptorSet(spin_image=np.arange(6), spin_image_range_rows=2))
        assert spin.get_first_descriptor_as_matrix().shape == (2, 3)

    def test_first_descriptor_missing(self):
        """Test that a feature without descriptors raises."""
        with pytest.raises(MissingDescriptorError):
            Feature().get_first_descriptor_as_matrix()
