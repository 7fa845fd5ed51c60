"""Patch similarity through normalized cross-correlation."""

from typing import Optional

import cv2
import numpy as np

from visfeat.exceptions import SizeMismatchError


def patch_correlation(patch1: Optional[np.ndarray], patch2: Optional[np.ndarray]) -> float:
    """
    Normalized cross-correlation of two equal-size patches.
    
    Args:
        patch1: First patch
        patch2: Second patch, same shape as patch1
        
    Returns:
        Score in [0, 1] with 0 the best match and 1 the worst
    """
    if patch1 is None or patch2 is None:
        raise SizeMismatchError("Both features need a patch to be correlated")
    if patch1.shape != patch2.shape:
        raise SizeMismatchError(f"Patch sizes differ: {patch1.shape} vs {patch2.shape}")
    
    image = np.ascontiguousarray(patch1, dtype=np.float32)
    template = np.ascontiguousarray(patch2, dtype=np.float32)
    result = cv2.matchTemplate(image, template, cv2.TM_CCOEFF_NORMED)
    score = float(result[0, 0])
    
    # Flat patches have no defined correlation
    if not np.isfinite(score):
        score = 0.0
    score = min(max(score, -1.0), 1.0)
    
    return min(max(0.5 - 0.5 * score, 0.0), 1.0)
