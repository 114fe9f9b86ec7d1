"""
Data models for landmarks, features, reference datasets and results.
"""
from .knn_models import (
    FrameRecommendation,
    KNNResult,
    Neighbor,
    ReferenceDataset,
    ReferencePoint,
)
from .landmark_models import (
    FEATURE_NAMES,
    FaceFeatures,
    FaceShape,
    FaceShapeAnalysis,
    LandmarkSet,
)

__all__ = [
    'FEATURE_NAMES', 'FaceFeatures', 'FaceShape', 'FaceShapeAnalysis', 'LandmarkSet',
    'FrameRecommendation', 'KNNResult', 'Neighbor', 'ReferenceDataset', 'ReferencePoint',
]
