"""Landmark and face-shape data models"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from enum import Enum
import numpy as np

from ..utils.exceptions import InvalidLandmarksError
from ..utils.validators import validate_landmark_points
from .knn_models import FrameRecommendation, KNNResult


class FaceShape(Enum):
    """Face shape categories"""
    OVAL = "Oval"
    ROUND = "Round"
    SQUARE = "Square"
    HEART = "Heart"
    OBLONG = "Oblong"


# 68-point layout (dlib / face-api.js convention)
JAW = tuple(range(0, 17))
LEFT_EYEBROW = tuple(range(17, 22))
RIGHT_EYEBROW = tuple(range(22, 27))
NOSE = tuple(range(27, 36))
LEFT_EYE = tuple(range(36, 42))
RIGHT_EYE = tuple(range(42, 48))
MOUTH = tuple(range(48, 68))


@dataclass(frozen=True, eq=False)
class LandmarkSet:
    """
    68 facial landmarks as a read-only (68, 2) array

    Index order is an external contract: reordering points breaks every
    ratio computed from them.
    """

    points: np.ndarray

    def __post_init__(self):
        try:
            points = np.array(self.points, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidLandmarksError(f"Landmarks must be numeric (x, y) pairs: {e}")

        validate_landmark_points(points)
        points.setflags(write=False)
        object.__setattr__(self, 'points', points)

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float]]) -> "LandmarkSet":
        """Build from any sequence of (x, y) pairs"""
        return cls(list(points))

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> np.ndarray:
        return self.points[index]

    def scaled(self, factor: float) -> "LandmarkSet":
        """Copy with every coordinate multiplied by factor"""
        return LandmarkSet(self.points * factor)

    def to_list(self) -> List[List[float]]:
        return self.points.tolist()


@dataclass(frozen=True)
class FaceFeatures:
    """Raw distances and the four classification ratios of one face"""

    face_width: float        # jaw outline 0-16 (cheekbone proxy)
    face_height: float       # eye-to-chin scaled to full height
    jaw_width: float         # gonions 4-12
    cheekbone_width: float   # alias of face_width
    chin_width: float        # chin curve 6-10
    eye_to_chin: float
    nose_to_chin: float
    eye_to_nose: float

    height_width_ratio: float
    jaw_cheek_ratio: float
    chin_jaw_ratio: float
    vertical_ratio: float

    def feature_vector(self) -> np.ndarray:
        """Ratios in FEATURE_NAMES order"""
        return np.array([getattr(self, name) for name in FEATURE_NAMES], dtype=np.float64)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'face_width': round(self.face_width, 2),
            'face_height': round(self.face_height, 2),
            'jaw_width': round(self.jaw_width, 2),
            'cheekbone_width': round(self.cheekbone_width, 2),
            'chin_width': round(self.chin_width, 2),
            'eye_to_chin': round(self.eye_to_chin, 2),
            'nose_to_chin': round(self.nose_to_chin, 2),
            'eye_to_nose': round(self.eye_to_nose, 2),
            'height_width_ratio': round(self.height_width_ratio, 3),
            'jaw_cheek_ratio': round(self.jaw_cheek_ratio, 3),
            'chin_jaw_ratio': round(self.chin_jaw_ratio, 3),
            'vertical_ratio': round(self.vertical_ratio, 3),
        }


# Order of the classification vector; reference datasets use the same order
FEATURE_NAMES: Tuple[str, ...] = (
    'height_width_ratio',
    'jaw_cheek_ratio',
    'chin_jaw_ratio',
    'vertical_ratio',
)


@dataclass(frozen=True)
class FaceShapeAnalysis:
    """Result of classifying one face"""

    features: FaceFeatures
    knn: KNNResult
    recommendation: Optional[FrameRecommendation]
    profile: str

    @property
    def label(self) -> str:
        return self.knn.label

    @property
    def confidence(self) -> float:
        return self.knn.confidence

    @property
    def face_shape(self) -> Optional[FaceShape]:
        """Canonical shape, None for labels outside the five categories"""
        try:
            return FaceShape(self.knn.label)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'face_shape': self.label,
            'confidence': round(self.confidence, 3),
            'profile': self.profile,
            'features': self.features.to_dict(),
            'knn': self.knn.to_dict(),
            'recommendation': self.recommendation.to_dict() if self.recommendation else None,
        }
