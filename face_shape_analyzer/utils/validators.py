"""Input validation utilities"""

import numpy as np

from .exceptions import (
    InvalidFeatureVectorError,
    InvalidImageError,
    InvalidLandmarksError,
)

NUM_LANDMARKS = 68


def validate_image(image: np.ndarray) -> None:
    """
    Validate a decoded image

    Args:
        image: image to check (numpy array)

    Raises:
        InvalidImageError: the image is not usable
    """
    if image is None:
        raise InvalidImageError("Image is None")

    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")

    if image.size == 0:
        raise InvalidImageError("Image is empty")

    if len(image.shape) not in [2, 3]:
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")

    if len(image.shape) == 3 and image.shape[2] not in [1, 3, 4]:
        raise InvalidImageError(f"Image channels must be 1, 3, or 4, got {image.shape[2]}")


def validate_landmark_points(points: np.ndarray) -> None:
    """
    Validate a landmark array against the 68-point layout

    Raises:
        InvalidLandmarksError: wrong shape or missing coordinates
    """
    if points.ndim != 2 or points.shape != (NUM_LANDMARKS, 2):
        raise InvalidLandmarksError(
            f"Expected {NUM_LANDMARKS} (x, y) points, got array of shape {points.shape}"
        )

    if not np.all(np.isfinite(points)):
        raise InvalidLandmarksError("Landmark coordinates must be finite")


def validate_feature_vector(vector: np.ndarray, dimensions: int) -> None:
    """Check a feature vector against the dataset dimensionality"""
    if vector.ndim != 1 or vector.shape[0] != dimensions:
        raise InvalidFeatureVectorError(
            f"Feature vector must have {dimensions} values, got shape {vector.shape}"
        )

    if not np.all(np.isfinite(vector)):
        raise InvalidFeatureVectorError(f"Feature vector must be finite, got {vector.tolist()}")


def validate_k(k: int) -> None:
    """Neighbor count check (k >= 1)"""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ValueError(f"k must be an integer, got {k!r}")
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
