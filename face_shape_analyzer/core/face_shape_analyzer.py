"""
Face Shape Analyzer
landmarks -> features -> KNN vote -> frame recommendation
"""

from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from ..models.knn_models import KNNResult
from ..models.landmark_models import FaceShapeAnalysis, LandmarkSet
from ..utils import get_config, get_logger
from ..utils.exceptions import InvalidImageError, MultipleFacesError, NoFaceDetectedError
from ..utils.validators import validate_image
from .knn_classifier import KNNClassifier, VectorLike
from .profiles import ShapeProfile, default_profile

logger = get_logger(__name__)


class FaceShapeAnalyzer:
    """
    Face shape classification pipeline

    Features:
    - 68-point landmarks -> eye_chin ratios (profile extractor)
    - KNN majority vote against the profile's reference dataset
    - Eyewear frame recommendation for the winning shape
    - Optional image input through an external landmark detector
    """

    def __init__(self, profile: Optional[ShapeProfile] = None, k: Optional[int] = None, detector=None):
        """
        Args:
            profile: extractor/dataset/recommendation bundle
                (None: classifier.profile_path from config, else built-in)
            k: neighbor count (None: classifier.k from config)
            detector: object with detect(image) -> List[LandmarkSet]
                (None: MediaPipe detector built on first image)
        """
        self.config = get_config()

        if profile is None:
            profile = self._profile_from_config()
        if k is None:
            k = self.config.get('classifier.k', 3)

        self.profile = profile
        self.classifier = KNNClassifier(profile.dataset, k)
        self._detector = detector
        self._owns_detector = detector is None

        logger.info(f"FaceShapeAnalyzer initialized (profile={profile.name}, k={k})")

    def _profile_from_config(self) -> ShapeProfile:
        profile_path = self.config.get('classifier.profile_path')
        if profile_path:
            from .profile_loader import load_profile
            return load_profile(profile_path)
        return default_profile()

    @property
    def k(self) -> int:
        return self.classifier.k

    @property
    def detector(self):
        if self._detector is None:
            from .mediapipe.face_detector import FaceMeshLandmarkDetector
            self._detector = FaceMeshLandmarkDetector()
        return self._detector

    def close(self):
        """Release the MediaPipe detector built by this analyzer (injected detectors stay open)"""
        if self._owns_detector and self._detector is not None:
            self._detector.close()
            self._detector = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def classify_features(self, feature_vector: VectorLike) -> KNNResult:
        """KNN vote for a feature vector already in the profile's order"""
        return self.classifier.predict(feature_vector)

    def classify_landmarks(self, landmarks: LandmarkSet) -> FaceShapeAnalysis:
        """
        Classify one face from its 68 landmarks

        Args:
            landmarks: 68-point landmark set

        Returns:
            FaceShapeAnalysis
        """
        if not isinstance(landmarks, LandmarkSet):
            landmarks = LandmarkSet(landmarks)

        features = self.profile.extractor.extract(landmarks)
        knn_result = self.classify_features(features.feature_vector())
        recommendation = self.profile.recommendation_for(knn_result.label)

        logger.info(
            f"Face shape: {knn_result.label} "
            f"(confidence {knn_result.confidence:.2f}, votes {knn_result.votes})"
        )

        return FaceShapeAnalysis(
            features=features,
            knn=knn_result,
            recommendation=recommendation,
            profile=self.profile.name,
        )

    def analyze_image(self, image: Union[str, Path, np.ndarray]) -> FaceShapeAnalysis:
        """
        Detect the single face in an image and classify it

        Args:
            image: image path or BGR numpy array

        Raises:
            InvalidImageError: unreadable image
            NoFaceDetectedError: no face
            MultipleFacesError: more than one face
        """
        if isinstance(image, (str, Path)):
            image = self._load_image(Path(image))
        validate_image(image)

        faces = self.detector.detect(image)

        if not faces:
            raise NoFaceDetectedError("No face detected. Use a photo that shows the face clearly.")
        if len(faces) > 1:
            raise MultipleFacesError(len(faces))

        return self.classify_landmarks(faces[0])

    @staticmethod
    def _load_image(image_path: Path) -> np.ndarray:
        if not image_path.exists():
            logger.error(f"Image not found: {image_path}")
            raise InvalidImageError(f"Image not found: {image_path}")

        image = cv2.imread(str(image_path))
        if image is None:
            logger.error(f"Failed to load image: {image_path}")
            raise InvalidImageError(f"Failed to load image: {image_path}")
        return image

    def __repr__(self):
        return f"FaceShapeAnalyzer(profile={self.profile.name!r}, k={self.k})"
