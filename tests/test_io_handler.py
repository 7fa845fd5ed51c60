"""Tests for text persistence of feature lists."""

import pytest
import numpy as np
from visfeat.containers import FeatureList, MatchedFeatureList
from visfeat.exceptions import FeatureFileError
from visfeat.features import DescriptorSet, Feature, FeatureType, TrackStatus
from visfeat.utils.io_handler import load_features, save_features


def make_features():
    return FeatureList([
        Feature(feature_id=10, x=12.25, y=40.5, feature_type=FeatureType.HARRIS, response=0.75),
        Feature(feature_id=3, x=0.0, y=479.0, feature_type=FeatureType.FAST,
                track_status=TrackStatus.TRACKED, orientation=1.5, scale=2.0),
        Feature(feature_id=2 ** 63 + 5, x=-3.125, y=7.0, feature_type=FeatureType.SIFT,
                source_image_id=4, descriptors=DescriptorSet(sift=np.arange(128))),
    ])


class TestFeatureListTextFile:
    """Test feature list save and load."""

    def test_round_trip(self, tmp_path):
        """Test that ids, positions, types and order survive a round trip."""
        features = make_features()
        path = tmp_path / 'features.txt'
        features.save_to_text_file(str(path))

        loaded = FeatureList.from_text_file(str(path))
        assert len(loaded) == len(features)
        for original, restored in zip(features, loaded):
            assert restored.id == original.id
            assert restored.type == original.type
            assert restored.x == pytest.approx(original.x)
            assert restored.y == pytest.approx(original.y)
            assert restored.response == pytest.approx(original.response)
            assert restored.track_status == original.track_status

    def test_round_trip_is_exact(self, tmp_path):
        """Test that positions survive saving without rounding."""
        features = FeatureList([
            Feature(feature_id=1, x=0.1234567, y=1e-7, response=1.0 / 3.0),
            Feature(feature_id=2, x=321.987654321, y=-0.0001234567891),
        ])
        path = tmp_path / 'exact.txt'
        features.save_to_text_file(str(path))

        loaded = FeatureList.from_text_file(str(path))
        for original, restored in zip(features, loaded):
            assert restored.x == original.x
            assert restored.y == original.y
            assert restored.response == original.response

    def test_loaded_features_have_defaults(self, tmp_path):
        """Test that patches and descriptors are not restored."""
        path = tmp_path / 'features.txt'
        make_features().save_to_text_file(str(path))

        loaded = FeatureList.from_text_file(str(path))
        assert loaded[2].patch is None
        assert loaded[2].descriptors.present_kinds() == []

    def test_append(self, tmp_path):
        """Test appending records to an existing file."""
        features = make_features()
        path = tmp_path / 'features.txt'
        features[:1].save_to_text_file(str(path))
        features[1:].save_to_text_file(str(path), append=True)

        loaded = load_features(str(path))
        assert [f.id for f in loaded] == [f.id for f in features]
        assert path.read_text().count('%') == 1

    def test_load_replaces_contents(self, tmp_path):
        """Test that loading clears the previous contents."""
        path = tmp_path / 'features.txt'
        make_features().save_to_text_file(str(path))

        features = FeatureList([Feature(feature_id=99)])
        features.load_from_text_file(str(path))
        assert features.get_by_id(99) is None
        assert features.get_max_id() == 2 ** 63 + 5

    def test_empty_list(self, tmp_path):
        """Test saving and loading an empty list."""
        path = tmp_path / 'empty.txt'
        FeatureList().save_to_text_file(str(path))
        assert load_features(str(path)) == []

    def test_minimal_records(self, tmp_path):
        """Test loading records with only id, type and position."""
        path = tmp_path / 'minimal.txt'
        path.write_text('% ID TYPE X Y\n1 0 10.0 20.0\n2 -1 30.5 40.5\n')

        loaded = load_features(str(path))
        assert loaded[0].type == FeatureType.KLT
        assert loaded[1].type == FeatureType.NOT_DEFINED
        assert loaded[1].position == (30.5, 40.5)
        assert loaded[1].response == 0.0

    def test_malformed_record(self, tmp_path):
        """Test that bad records raise FeatureFileError."""
        path = tmp_path / 'bad.txt'
        path.write_text('1 0 10.0\n')
        with pytest.raises(FeatureFileError):
            load_features(str(path))

        path.write_text('1 0 ten 20.0\n')
        with pytest.raises(FeatureFileError):
            load_features(str(path))

    def test_creates_parent_directory(self, tmp_path):
        """Test that missing output directories are created."""
        path = tmp_path / 'out' / 'nested' / 'features.txt'
        save_features(make_features(), str(path))
        assert path.exists()


class TestMatchedListTextFile:
    """Test matched list save."""

    def test_save_matches(self, tmp_path):
        """Test one coordinate-pair record per match, in order."""
        left = make_features()
        right = make_features()
        for feature in right:
            feature.x += 1.0
        matches = MatchedFeatureList(zip(left, right))

        path = tmp_path / 'matches.txt'
        matches.save_to_text_file(str(path))

        rows = np.loadtxt(str(path), comments='%', ndmin=2)
        assert rows.shape == (3, 6)
        assert np.allclose(rows[:, 1], [f.x for f in left])
        assert np.allclose(rows[:, 4], [f.x for f in right])
        assert np.allclose(rows[:, 5], [f.y for f in right])
