"""Face proportion features from 68 landmarks"""

import math

import numpy as np

from ..models.landmark_models import FEATURE_NAMES, FaceFeatures, LandmarkSet
from ..utils.exceptions import InvalidLandmarksError
from ..utils import get_logger

logger = get_logger(__name__)

# 68-point indices used for the eye_chin measurements
FEATURE_LANDMARKS = {
    'jaw_left': 0,            # face width
    'jaw_right': 16,
    'gonion_left': 4,         # jaw width
    'gonion_right': 12,
    'chin_curve_left': 6,     # chin width
    'chin_curve_right': 10,
    'chin_tip': 8,
    'nose_bottom': 33,
    'left_eye_outer': 36,
    'left_eye_inner': 39,
    'right_eye_inner': 42,
    'right_eye_outer': 45,
}

# eye-to-chin span -> full face height
FACE_HEIGHT_SCALE = 1.618


class FeatureExtractor:
    """
    Geometric ratio extraction (eye_chin convention)

    The face height is estimated from the eye-to-chin span because the
    forehead top is not part of the 68-point layout. Only the four ratios
    are used for classification; raw distances depend on image resolution
    and camera distance.
    """

    name = "eye_chin"
    feature_names = FEATURE_NAMES

    def __init__(self, face_height_scale: float = FACE_HEIGHT_SCALE):
        self.face_height_scale = face_height_scale

    @staticmethod
    def _calculate_distance(p1: np.ndarray, p2: np.ndarray) -> float:
        return math.hypot(float(p2[0] - p1[0]), float(p2[1] - p1[1]))

    @staticmethod
    def _midpoint(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
        return (p1 + p2) / 2.0

    def extract(self, landmarks: LandmarkSet) -> FaceFeatures:
        """
        Compute distances and ratios for one face

        Args:
            landmarks: 68-point landmark set

        Returns:
            FaceFeatures

        Raises:
            InvalidLandmarksError: zero face or jaw width
        """
        lm = FEATURE_LANDMARKS

        face_width = self._calculate_distance(landmarks[lm['jaw_left']], landmarks[lm['jaw_right']])
        jaw_width = self._calculate_distance(landmarks[lm['gonion_left']], landmarks[lm['gonion_right']])
        chin_width = self._calculate_distance(
            landmarks[lm['chin_curve_left']], landmarks[lm['chin_curve_right']]
        )

        if face_width == 0 or jaw_width == 0:
            raise InvalidLandmarksError(
                f"Degenerate landmarks: face width {face_width}, jaw width {jaw_width}"
            )

        left_eye_center = self._midpoint(landmarks[lm['left_eye_outer']], landmarks[lm['left_eye_inner']])
        right_eye_center = self._midpoint(landmarks[lm['right_eye_inner']], landmarks[lm['right_eye_outer']])
        eye_mid = self._midpoint(left_eye_center, right_eye_center)

        chin_tip = landmarks[lm['chin_tip']]
        nose_bottom = landmarks[lm['nose_bottom']]

        eye_to_chin = self._calculate_distance(chin_tip, eye_mid)
        face_height = eye_to_chin * self.face_height_scale

        nose_to_chin = self._calculate_distance(chin_tip, nose_bottom)
        eye_to_nose = self._calculate_distance(eye_mid, nose_bottom)

        features = FaceFeatures(
            face_width=face_width,
            face_height=face_height,
            jaw_width=jaw_width,
            cheekbone_width=face_width,
            chin_width=chin_width,
            eye_to_chin=eye_to_chin,
            nose_to_chin=nose_to_chin,
            eye_to_nose=eye_to_nose,
            height_width_ratio=face_height / face_width,
            jaw_cheek_ratio=jaw_width / face_width,
            chin_jaw_ratio=chin_width / jaw_width,
            # eyes on the nose line: treat the mid-face span as 1
            vertical_ratio=nose_to_chin / (eye_to_nose or 1.0),
        )

        logger.debug(
            "Features: H/W=%.3f jaw/cheek=%.3f chin/jaw=%.3f vertical=%.3f",
            features.height_width_ratio,
            features.jaw_cheek_ratio,
            features.chin_jaw_ratio,
            features.vertical_ratio,
        )
        return features

    def feature_vector(self, landmarks: LandmarkSet) -> np.ndarray:
        """Classification vector in FEATURE_NAMES order"""
        return self.extract(landmarks).feature_vector()

    def __repr__(self):
        return f"FeatureExtractor(name={self.name!r}, face_height_scale={self.face_height_scale})"


def extract_features(landmarks: LandmarkSet) -> FaceFeatures:
    """Extract features with the default eye_chin convention"""
    return FeatureExtractor().extract(landmarks)
