"""
MediaPipe landmark detector producing 68-point landmark sets.

Two MediaPipe front ends are supported:
- Tasks FaceLandmarker, used when `detection.model_path` points to a
  face_landmarker.task model (the only API in current MediaPipe releases)
- legacy FaceMesh (`mp.solutions`), used when no model path is set and the
  installed MediaPipe still ships it
"""

import time
from pathlib import Path
from typing import List

import cv2
import mediapipe as mp
import numpy as np

from ...models.landmark_models import LandmarkSet
from ...utils import get_config, get_logger
from ...utils.exceptions import DetectionError
from ...utils.validators import validate_image
from .landmark_mapping import to_landmark_set

logger = get_logger(__name__)

DETECTION_DEFAULTS = {
    'static_image_mode': True,
    'max_num_faces': 2,
    'refine_landmarks': False,
    'min_detection_confidence': 0.5,
    'min_tracking_confidence': 0.5,
    'model_path': '',
}


def to_rgb(image: np.ndarray) -> np.ndarray:
    """Grayscale, BGR or BGRA -> RGB"""
    if image.ndim == 2 or image.shape[2] == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


class _TasksBackend:
    """mediapipe.tasks FaceLandmarker (IMAGE running mode)"""

    name = "face_landmarker"

    def __init__(self, settings):
        model_path = Path(settings['model_path'])
        if not model_path.exists():
            raise DetectionError(f"FaceLandmarker model not found: {model_path}")

        vision = mp.tasks.vision
        options = vision.FaceLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.IMAGE,
            num_faces=settings['max_num_faces'],
            min_face_detection_confidence=settings['min_detection_confidence'],
            min_face_presence_confidence=settings['min_detection_confidence'],
            min_tracking_confidence=settings['min_tracking_confidence'],
        )
        self.landmarker = vision.FaceLandmarker.create_from_options(options)

    def process(self, image_rgb: np.ndarray):
        """-> list of per-face landmark lists (normalized x, y)"""
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(image_rgb))
        result = self.landmarker.detect(mp_image)
        return list(result.face_landmarks or [])

    def close(self):
        self.landmarker.close()


class _FaceMeshBackend:
    """Legacy mp.solutions FaceMesh"""

    name = "face_mesh"

    def __init__(self, settings):
        self.face_mesh = mp.solutions.face_mesh.FaceMesh(
            static_image_mode=settings['static_image_mode'],
            max_num_faces=settings['max_num_faces'],
            refine_landmarks=settings['refine_landmarks'],
            min_detection_confidence=settings['min_detection_confidence'],
            min_tracking_confidence=settings['min_tracking_confidence'],
        )

    def process(self, image_rgb: np.ndarray):
        results = self.face_mesh.process(image_rgb)
        return [face.landmark for face in (results.multi_face_landmarks or [])]

    def close(self):
        self.face_mesh.close()


def _select_backend(settings):
    if settings['model_path']:
        return _TasksBackend
    if hasattr(mp, 'solutions'):
        return _FaceMeshBackend
    raise DetectionError(
        "This MediaPipe release has no FaceMesh solution; set detection.model_path "
        "to a face_landmarker.task model to use the Tasks FaceLandmarker"
    )


class FaceMeshLandmarkDetector:
    """
    External landmark source for the analyzer.

    Returns one LandmarkSet per detected face; the analyzer decides what to
    do with zero or several faces.
    """

    def __init__(self, **overrides):
        """
        Args:
            overrides: detection settings taking precedence over the
                `detection` config section

        Raises:
            DetectionError: MediaPipe could not be initialized
        """
        settings = dict(DETECTION_DEFAULTS)
        section = get_config().get('detection') or {}
        settings.update({key: section[key] for key in DETECTION_DEFAULTS if key in section})
        settings.update(overrides)
        self.settings = settings

        backend_class = _select_backend(settings)
        try:
            self.backend = backend_class(settings)
        except DetectionError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize MediaPipe {backend_class.name}: {e}")
            raise DetectionError(f"Failed to initialize MediaPipe {backend_class.name}: {e}") from e

        logger.info(
            f"MediaPipe {self.backend.name} initialized (max_faces={settings['max_num_faces']})"
        )

    def detect(self, image: np.ndarray) -> List[LandmarkSet]:
        """
        Detect faces and map their landmarks to the 68-point layout

        Args:
            image: BGR, BGRA or grayscale image

        Returns:
            List[LandmarkSet], empty when no face is found
        """
        validate_image(image)
        start_time = time.time()

        h, w = image.shape[:2]
        face_list = self.backend.process(to_rgb(image))
        elapsed_ms = (time.time() - start_time) * 1000

        faces = [to_landmark_set(landmarks, w, h) for landmarks in face_list]

        logger.debug(f"{self.backend.name} found {len(faces)} face(s) in {elapsed_ms:.1f}ms")
        return faces

    def close(self):
        self.backend.close()
        logger.debug(f"MediaPipe {self.backend.name} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
