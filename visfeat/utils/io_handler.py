"""Text persistence for feature lists and matched feature lists."""

import logging
from pathlib import Path
from typing import Iterable, List, Tuple

import numpy as np

from visfeat.config import DEFAULT_CONFIG
from visfeat.exceptions import FeatureFileError
from visfeat.features.feature import Feature
from visfeat.features.types import FeatureType, TrackStatus

logger = logging.getLogger(__name__)

FEATURE_COLUMNS = ['ID', 'TYPE', 'X', 'Y', 'ORIENTATION', 'SCALE',
                   'RESPONSE', 'TRACK_STATUS', 'SOURCE_IMAGE']
MATCH_COLUMNS = ['ID1', 'X1', 'Y1', 'ID2', 'X2', 'Y2']

_TEXT_IO = DEFAULT_CONFIG['text_io']


def _feature_row(feature: Feature) -> list:
    return [feature.id, int(feature.type), feature.x, feature.y, feature.orientation,
            feature.scale, feature.response, int(feature.track_status),
            feature.source_image_id]


def save_features(features: Iterable[Feature], output_path: str, append: bool = False,
                  float_format: str = _TEXT_IO['float_format']):
    """
    Save features as one whitespace-separated record per line.
    
    Args:
        features: Features in the order they should be written
        output_path: Destination file
        append: Add records to an existing file instead of overwriting it
        float_format: printf-style format for the float columns
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    
    rows = [_feature_row(f) for f in features]
    data = np.array(rows, dtype=object) if rows else np.empty((0, len(FEATURE_COLUMNS)), dtype=object)
    fmt = ['%d', '%d'] + [float_format] * 5 + ['%d', '%d']
    
    write_header = not (append and path.exists() and path.stat().st_size > 0)
    header = ' '.join(FEATURE_COLUMNS) if write_header else ''
    
    with open(path, 'a' if append else 'w') as f:
        np.savetxt(f, data, fmt=fmt, header=header, comments=_TEXT_IO['comment_char'] + ' ')
    logger.info("Saved %d features to %s", len(rows), path)


def load_features(input_path: str) -> List[Feature]:
    """
    Load features written by save_features.
    
    Only the saved columns are restored; patches and descriptors stay empty.
    Records need at least ID, TYPE, X and Y; missing trailing columns keep
    their defaults.
    """
    features = []
    comment = _TEXT_IO['comment_char']
    with open(input_path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.split(comment, 1)[0].strip()
            if not line:
                continue
            fields = line.split()
            if len(fields) < 4 or len(fields) > len(FEATURE_COLUMNS):
                raise FeatureFileError(
                    f"{input_path}:{line_number}: expected 4 to {len(FEATURE_COLUMNS)} "
                    f"columns, got {len(fields)}"
                )
            try:
                features.append(_parse_feature(fields))
            except ValueError as e:
                raise FeatureFileError(f"{input_path}:{line_number}: {e}") from e
    
    logger.info("Loaded %d features from %s", len(features), input_path)
    return features


def _parse_feature(fields: List[str]) -> Feature:
    values = dict(zip(FEATURE_COLUMNS, fields))
    return Feature(
        feature_id=int(values['ID']),
        x=float(values['X']),
        y=float(values['Y']),
        feature_type=FeatureType(int(values['TYPE'])),
        orientation=float(values.get('ORIENTATION', 0.0)),
        scale=float(values.get('SCALE', 0.0)),
        response=float(values.get('RESPONSE', 0.0)),
        track_status=TrackStatus(int(values.get('TRACK_STATUS', 0))),
        source_image_id=int(values.get('SOURCE_IMAGE', 0)),
    )


def save_matches(pairs: Iterable[Tuple[Feature, Feature]], output_path: str,
                 float_format: str = _TEXT_IO['float_format']):
    """Save matched pairs as "ID1 X1 Y1 ID2 X2 Y2" records."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    
    rows = [[f1.id, f1.x, f1.y, f2.id, f2.x, f2.y] for f1, f2 in pairs]
    data = np.array(rows, dtype=object) if rows else np.empty((0, len(MATCH_COLUMNS)), dtype=object)
    fmt = ['%d', float_format, float_format, '%d', float_format, float_format]
    
    with open(path, 'w') as f:
        np.savetxt(f, data, fmt=fmt, header=' '.join(MATCH_COLUMNS),
                   comments=_TEXT_IO['comment_char'] + ' ')
    logger.info("Saved %d matches to %s", len(rows), path)
