"""
Descriptor distances between pairs of features.

Every function is pure. Linear descriptors (SIFT, SURF, spin images) use the
plain Euclidean distance. Polar and log-polar images treat the angular
(column) axis as circular and search all cyclic shifts for the best
alignment, unless either feature disables the rotation search.

With ``normalize=True`` the squared sum is divided by the number of compared
elements before taking the square root (root-mean-square difference).
"""

import math
from typing import Tuple

import numpy as np

from visfeat.exceptions import MissingDescriptorError, SizeMismatchError
from visfeat.features.types import DescriptorType


def _linear_distance(desc1: np.ndarray, desc2: np.ndarray, normalize: bool, name: str) -> float:
    if desc1.size == 0 or desc2.size == 0:
        raise SizeMismatchError(f"{name} descriptor missing on one of the features")
    if desc1.size != desc2.size:
        raise SizeMismatchError(f"{name} descriptor lengths differ: {desc1.size} vs {desc2.size}")
    
    # float64 so byte descriptors do not wrap around
    diff = desc1.astype(np.float64).ravel() - desc2.astype(np.float64).ravel()
    dist = float(np.dot(diff, diff))
    if normalize:
        dist /= desc1.size
    return math.sqrt(dist)


def euclidean_distance(desc1, desc2, normalize: bool = True) -> float:
    """Euclidean distance between two equal-length descriptor vectors."""
    return _linear_distance(np.asarray(desc1), np.asarray(desc2), normalize, "Vector")


def polar_descriptor_distance(desc1, desc2, normalize: bool = True,
                              search_rotation: bool = True) -> Tuple[float, float]:
    """
    Minimum distance between two polar descriptors over cyclic column shifts.
    
    Args:
        desc1: 2D matrix, rows = range bins, columns = angle bins
        desc2: Matrix of the same shape as desc1
        normalize: Divide the squared distance by the element count
        search_rotation: Evaluate every shift; otherwise only shift 0
        
    Returns:
        (distance, angle) where angle = 2*pi*shift/columns of the best shift.
        Ties go to the smallest shift.
    """
    desc1 = np.asarray(desc1, dtype=np.float64)
    desc2 = np.asarray(desc2, dtype=np.float64)
    if desc1.size == 0 or desc2.size == 0:
        raise SizeMismatchError("Polar descriptor missing on one of the features")
    if desc1.ndim != 2 or desc1.shape != desc2.shape:
        raise SizeMismatchError(f"Polar descriptor shapes differ: {desc1.shape} vs {desc2.shape}")
    
    n_cols = desc1.shape[1]
    shifts = np.arange(n_cols) if search_rotation else np.zeros(1, dtype=int)
    
    # columns[s, k] = (k + s) mod n_cols, so desc2[:, columns][:, s, :] is desc2 rotated by s
    columns = (np.arange(n_cols)[np.newaxis, :] + shifts[:, np.newaxis]) % n_cols
    diff = desc1[:, np.newaxis, :] - desc2[:, columns]
    squared = np.einsum('rsc,rsc->s', diff, diff)
    if normalize:
        squared /= desc1.size
    
    best = int(np.argmin(squared))
    angle = 2.0 * math.pi * int(shifts[best]) / n_cols
    return math.sqrt(float(squared[best])), angle


def sift_distance(feature1, feature2, normalize: bool = True) -> float:
    return _linear_distance(feature1.descriptors.sift, feature2.descriptors.sift, normalize, "SIFT")


def surf_distance(feature1, feature2, normalize: bool = True) -> float:
    return _linear_distance(feature1.descriptors.surf, feature2.descriptors.surf, normalize, "SURF")


def spin_image_distance(feature1, feature2, normalize: bool = True) -> float:
    return _linear_distance(feature1.descriptors.spin_image, feature2.descriptors.spin_image,
                            normalize, "Spin image")


def _search_rotation(feature1, feature2) -> bool:
    return not (feature1.descriptors.no_rotation_search or feature2.descriptors.no_rotation_search)


def polar_image_distance(feature1, feature2, normalize: bool = True) -> Tuple[float, float]:
    """Best-rotation distance between polar images, as (distance, angle)."""
    return polar_descriptor_distance(feature1.descriptors.polar_image,
                                     feature2.descriptors.polar_image,
                                     normalize, _search_rotation(feature1, feature2))


def log_polar_image_distance(feature1, feature2, normalize: bool = True) -> Tuple[float, float]:
    """Best-rotation distance between log-polar images, as (distance, angle)."""
    return polar_descriptor_distance(feature1.descriptors.log_polar_image,
                                     feature2.descriptors.log_polar_image,
                                     normalize, _search_rotation(feature1, feature2))


_DISTANCES = {
    DescriptorType.SIFT: sift_distance,
    DescriptorType.SURF: surf_distance,
    DescriptorType.SPIN_IMAGE: spin_image_distance,
    DescriptorType.POLAR_IMAGE: lambda f1, f2, norm: polar_image_distance(f1, f2, norm)[0],
    DescriptorType.LOG_POLAR_IMAGE: lambda f1, f2, norm: log_polar_image_distance(f1, f2, norm)[0],
}


def descriptor_distance(feature1, feature2,
                        descriptor_to_use: DescriptorType = DescriptorType.ANY,
                        normalize: bool = True) -> float:
    """
    Euclidean distance between the descriptors of two features.
    
    Args:
        feature1: First feature
        feature2: Second feature
        descriptor_to_use: Descriptor kind, or ANY for the first kind present
            in feature1 (SIFT, SURF, spin image, polar, log-polar)
        normalize: Root-mean-square instead of raw Euclidean distance
        
    Returns:
        Distance; for polar kinds, the distance at the best rotation
    """
    descriptor_to_use = DescriptorType(descriptor_to_use)
    if descriptor_to_use == DescriptorType.ANY:
        kind = feature1.descriptors.first_present()
        if kind is None:
            raise MissingDescriptorError(f"Feature {feature1.id} has no descriptors")
    elif descriptor_to_use in _DISTANCES:
        kind = descriptor_to_use
    else:
        raise ValueError(f"Expected a single descriptor kind, got {descriptor_to_use!r}")
    
    desc1 = feature1.descriptors.get(kind)
    desc2 = feature2.descriptors.get(kind)
    if desc1.size == 0 or desc2.size == 0:
        raise MissingDescriptorError(
            f"{kind.name} descriptor not present in features {feature1.id} and {feature2.id}"
        )
    if desc1.shape != desc2.shape:
        raise MissingDescriptorError(
            f"{kind.name} descriptors have different sizes: {desc1.shape} vs {desc2.shape}"
        )
    
    return _DISTANCES[kind](feature1, feature2, normalize)
