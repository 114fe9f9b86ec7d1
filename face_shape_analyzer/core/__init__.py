"""
Core analysis engine package.
"""
# mediapipe is not imported here; the detector module loads it on demand
from .feature_extractor import FeatureExtractor, extract_features
from .knn_classifier import KNNClassifier, predict_knn, normalize_features, get_dataset_bounds
from .profiles import ShapeProfile, build_profile, default_profile
from .profile_loader import load_profile
from .face_shape_analyzer import FaceShapeAnalyzer

__all__ = [
    'FeatureExtractor', 'extract_features',
    'KNNClassifier', 'predict_knn', 'normalize_features', 'get_dataset_bounds',
    'ShapeProfile', 'build_profile', 'default_profile', 'load_profile',
    'FaceShapeAnalyzer',
]
