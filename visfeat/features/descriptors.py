"""Descriptor bundle attached to a single feature."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from visfeat.exceptions import SizeMismatchError
from visfeat.features.types import DESCRIPTOR_PRIORITY, DescriptorType

# attribute name, dtype, ndim
_FIELDS = {
    DescriptorType.SIFT: ('sift', np.uint8, 1),
    DescriptorType.SURF: ('surf', np.float32, 1),
    DescriptorType.SPIN_IMAGE: ('spin_image', np.float32, 1),
    DescriptorType.POLAR_IMAGE: ('polar_image', np.float64, 2),
    DescriptorType.LOG_POLAR_IMAGE: ('log_polar_image', np.float64, 2),
}
_BY_NAME = {name: (dtype, ndim) for name, dtype, ndim in _FIELDS.values()}


def _empty(name: str) -> np.ndarray:
    dtype, ndim = _BY_NAME[name]
    return np.empty((0,) * ndim, dtype=dtype)


def _as_bytes(name: str, value) -> np.ndarray:
    array = np.asarray(value).ravel()
    if array.size == 0:
        return _empty(name)
    if not np.issubdtype(array.dtype, np.number) or np.any(array != np.round(array)):
        raise ValueError(f"{name} values must be integers in 0-255")
    if array.min() < 0 or array.max() > 255:
        raise ValueError(f"{name} values must be integers in 0-255")
    return array.astype(np.uint8)


def _as_descriptor(name: str, value) -> np.ndarray:
    if value is None:
        return _empty(name)
    dtype, ndim = _BY_NAME[name]
    if dtype == np.uint8:
        return _as_bytes(name, value)
    array = np.asarray(value, dtype=dtype)
    if ndim == 1:
        return array.ravel()
    if array.size == 0:
        return _empty(name)
    if array.ndim != 2:
        raise SizeMismatchError(f"{name} must be a 2D matrix, got shape {array.shape}")
    return array


@dataclass(eq=False)
class DescriptorSet:
    """
    All the descriptors a feature may carry. Each one is optional and counts
    as present when non-empty.
    
    Attributes:
        sift: SIFT byte vector, integer values in 0-255
        surf: SURF float vector
        spin_image: Flattened 2D spin-image histogram
        spin_image_range_rows: Row count of the histogram before flattening
        polar_image: Polar image (rows = range bins, columns = angle bins)
        log_polar_image: Log-polar image, same layout as polar_image
        no_rotation_search: Compare polar images only at zero rotation
    """

    sift: np.ndarray = field(default_factory=lambda: _empty('sift'))
    surf: np.ndarray = field(default_factory=lambda: _empty('surf'))
    spin_image: np.ndarray = field(default_factory=lambda: _empty('spin_image'))
    spin_image_range_rows: int = 0
    polar_image: np.ndarray = field(default_factory=lambda: _empty('polar_image'))
    log_polar_image: np.ndarray = field(default_factory=lambda: _empty('log_polar_image'))
    no_rotation_search: bool = False

    def __setattr__(self, name, value):
        if name in _BY_NAME:
            value = _as_descriptor(name, value)
        super().__setattr__(name, value)

    def get(self, kind: DescriptorType) -> np.ndarray:
        """Return the array stored for a single descriptor kind."""
        try:
            name = _FIELDS[DescriptorType(kind)][0]
        except KeyError:
            raise ValueError(f"Not a single descriptor kind: {kind!r}") from None
        return getattr(self, name)

    def has(self, kind: DescriptorType) -> bool:
        return self.get(kind).size > 0

    def has_sift(self) -> bool:
        return self.sift.size > 0

    def has_surf(self) -> bool:
        return self.surf.size > 0

    def has_spin_image(self) -> bool:
        return self.spin_image.size > 0

    def has_polar_image(self) -> bool:
        return self.polar_image.size > 0

    def has_log_polar_image(self) -> bool:
        return self.log_polar_image.size > 0

    def present_kinds(self) -> List[DescriptorType]:
        """Present descriptor kinds, in selection priority order."""
        return [kind for kind in DESCRIPTOR_PRIORITY if self.has(kind)]

    def first_present(self) -> Optional[DescriptorType]:
        kinds = self.present_kinds()
        return kinds[0] if kinds else None

    def spin_image_as_matrix(self) -> np.ndarray:
        """Reshape the flattened spin image back to its 2D histogram."""
        rows = self.spin_image_range_rows
        if rows <= 0 or self.spin_image.size % rows != 0:
            raise SizeMismatchError(
                f"Spin image of length {self.spin_image.size} cannot be "
                f"reshaped into {rows} rows"
            )
        return self.spin_image.reshape(rows, -1)
