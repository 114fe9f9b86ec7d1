"""MediaPipe landmark source mapped to the 68-point layout"""

from .landmark_mapping import (
    convert_mediapipe_to_68,
    to_landmark_set,
    MEDIAPIPE_TO_68,
)

# FaceMeshLandmarkDetector is imported from .face_detector directly so that
# mediapipe is only loaded when a detector is actually built

__all__ = [
    'convert_mediapipe_to_68',
    'to_landmark_set',
    'MEDIAPIPE_TO_68',
]
