"""
MediaPipe 468-point to 68-point landmark mapping.

Converts MediaPipe Face Mesh output into the 68-point layout the feature
extractor expects (0-16 jaw, 17-26 brows, 27-35 nose, 36-47 eyes,
48-67 mouth). Left/right follow the 68-point convention, i.e. image left.
"""

import numpy as np

from ...models.landmark_models import LandmarkSet
from ...utils.exceptions import InvalidLandmarksError

MEDIAPIPE_TO_68 = {
    # Jaw line 0-16
    0: 127,
    1: 234,
    2: 93,
    3: 132,
    4: 58,    # gonion
    5: 172,
    6: 136,
    7: 150,
    8: 152,   # chin tip
    9: 377,
    10: 365,
    11: 397,
    12: 288,  # gonion
    13: 361,
    14: 323,
    15: 454,
    16: 356,

    # Eyebrows 17-26
    17: 70,
    18: 63,
    19: 105,
    20: 66,
    21: 107,
    22: 336,
    23: 296,
    24: 334,
    25: 293,
    26: 300,

    # Nose 27-35
    27: 168,  # bridge top
    28: 6,
    29: 197,
    30: 195,
    31: 98,
    32: 97,
    33: 2,    # nose bottom
    34: 326,
    35: 327,

    # Eyes 36-47
    36: 33,   # left eye outer corner
    37: 160,
    38: 158,
    39: 133,  # left eye inner corner
    40: 153,
    41: 144,
    42: 362,  # right eye inner corner
    43: 385,
    44: 387,
    45: 263,  # right eye outer corner
    46: 373,
    47: 380,

    # Mouth outer 48-59
    48: 61,
    49: 39,
    50: 37,
    51: 0,
    52: 267,
    53: 269,
    54: 291,
    55: 405,
    56: 314,
    57: 17,
    58: 84,
    59: 181,

    # Mouth inner 60-67
    60: 78,
    61: 82,
    62: 13,
    63: 312,
    64: 308,
    65: 317,
    66: 14,
    67: 87,
}

NUM_MEDIAPIPE_LANDMARKS = 468


def convert_mediapipe_to_68(mediapipe_landmarks, img_width: int, img_height: int) -> np.ndarray:
    """
    Map MediaPipe landmarks to the 68-point layout in pixel coordinates.

    Args:
        mediapipe_landmarks: face_landmarks.landmark (normalized 0.0-1.0, x/y attributes)
        img_width: image width (pixels)
        img_height: image height (pixels)

    Returns:
        np.ndarray: (68, 2) float array of (x, y)
    """
    if len(mediapipe_landmarks) < NUM_MEDIAPIPE_LANDMARKS:
        raise InvalidLandmarksError(
            f"Expected at least {NUM_MEDIAPIPE_LANDMARKS} MediaPipe landmarks, "
            f"got {len(mediapipe_landmarks)}"
        )

    points = []
    for idx in range(68):
        lm = mediapipe_landmarks[MEDIAPIPE_TO_68[idx]]
        # keep sub-pixel precision, ratios are computed from these
        points.append([lm.x * img_width, lm.y * img_height])

    return np.array(points, dtype=np.float64)


def to_landmark_set(mediapipe_landmarks, img_width: int, img_height: int) -> LandmarkSet:
    """MediaPipe landmarks -> LandmarkSet"""
    return LandmarkSet(convert_mediapipe_to_68(mediapipe_landmarks, img_width, img_height))
