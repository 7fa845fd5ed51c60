"""Basic usage example for visfeat."""

import cv2
import numpy as np

from visfeat import DescriptorSet, Feature, FeatureList, FeatureType, MatchedFeatureList
from visfeat.utils.logger import setup_logger

PATCH_SIZE = 11


def extract_features(image: np.ndarray, first_id: int) -> FeatureList:
    """Detect FAST corners and wrap them as features with patches."""
    detector = cv2.FastFeatureDetector_create(threshold=40)
    half = PATCH_SIZE // 2
    features = FeatureList()
    for keypoint in detector.detect(image):
        x, y = int(round(keypoint.pt[0])), int(round(keypoint.pt[1]))
        if not (half <= x < image.shape[1] - half and half <= y < image.shape[0] - half):
            continue
        patch = image[y - half:y + half + 1, x - half:x + half + 1]
        features.append(Feature(
            feature_id=first_id + len(features),
            x=keypoint.pt[0], y=keypoint.pt[1],
            feature_type=FeatureType.FAST,
            response=keypoint.response,
            patch=patch,
            descriptors=DescriptorSet(surf=patch.astype(np.float32).ravel() / 255.0),
        ))
    return features


def main():
    """Match corners between an image and a shifted copy."""
    logger = setup_logger()
    
    image = np.zeros((240, 320), dtype=np.uint8)
    cv2.rectangle(image, (60, 60), (200, 180), 255, -1)
    cv2.circle(image, (250, 80), 25, 128, -1)
    shifted = np.roll(image, (3, 5), axis=(0, 1))
    
    first = extract_features(image, first_id=1)
    second = extract_features(shifted, first_id=first.get_max_id() + 1 if len(first) else 1)
    logger.info("Detected %d and %d features", len(first), len(second))
    
    matches = MatchedFeatureList()
    for feature in first:
        candidate, dist = second.nearest(feature.x + 5, feature.y + 3, 4.0)
        if candidate is None:
            continue
        if feature.patch_correlation_to(candidate) < 0.2:
            matches.append((feature, candidate))
    logger.info("Kept %d matches", len(matches))
    
    first.save_to_text_file("output/features.txt")
    matches.save_to_text_file("output/matches.txt")


if __name__ == "__main__":
    main()
