"""
Face Shape Analyzer
68-point facial landmarks -> geometric ratios -> KNN face shape -> eyewear frame recommendation
"""

__version__ = "1.0.0"

from .models import (
    FaceShape,
    LandmarkSet,
    FaceFeatures,
    FaceShapeAnalysis,
    ReferencePoint,
    ReferenceDataset,
    KNNResult,
    FrameRecommendation,
)
from .core import (
    FeatureExtractor,
    extract_features,
    KNNClassifier,
    predict_knn,
    ShapeProfile,
    default_profile,
    load_profile,
    FaceShapeAnalyzer,
)

__all__ = [
    '__version__',
    'FaceShape', 'LandmarkSet', 'FaceFeatures', 'FaceShapeAnalysis',
    'ReferencePoint', 'ReferenceDataset', 'KNNResult', 'FrameRecommendation',
    'FeatureExtractor', 'extract_features',
    'KNNClassifier', 'predict_knn',
    'ShapeProfile', 'default_profile', 'load_profile',
    'FaceShapeAnalyzer',
]
