"""
Shared fixtures: synthetic 68-point landmarks built from target ratios,
the built-in profile, and a detector stand-in so no test needs MediaPipe.
"""
import numpy as np
import pytest

from face_shape_analyzer.core.feature_extractor import FACE_HEIGHT_SCALE
from face_shape_analyzer.core.face_shape_analyzer import FaceShapeAnalyzer
from face_shape_analyzer.core.profiles import default_profile
from face_shape_analyzer.models import LandmarkSet

FACE_WIDTH = 200.0
EYE_LINE_Y = -50.0


def build_points(height_width, jaw_cheek, chin_jaw, vertical, face_width=FACE_WIDTH):
    """
    (68, 2) landmark array whose eye_chin ratios equal the arguments.

    Face centered on x=0 with the cheek line at y=0 and the eyes above it.
    Points the extractor does not read stay at the origin.
    """
    points = np.zeros((68, 2), dtype=np.float64)
    half = face_width / 2.0

    points[0] = (-half, 0.0)
    points[16] = (half, 0.0)

    jaw_width = jaw_cheek * face_width
    points[4] = (-jaw_width / 2.0, 40.0)
    points[12] = (jaw_width / 2.0, 40.0)

    chin_width = chin_jaw * jaw_width
    points[6] = (-chin_width / 2.0, 80.0)
    points[10] = (chin_width / 2.0, 80.0)

    # eye centers at (-40, y) and (40, y) -> eye midpoint (0, y)
    points[36] = (-60.0, EYE_LINE_Y)
    points[39] = (-20.0, EYE_LINE_Y)
    points[42] = (20.0, EYE_LINE_Y)
    points[45] = (60.0, EYE_LINE_Y)

    eye_to_chin = height_width * face_width / FACE_HEIGHT_SCALE
    chin_y = EYE_LINE_Y + eye_to_chin
    points[8] = (0.0, chin_y)

    # nose bottom splits eye-to-chin so that nose_to_chin / eye_to_nose == vertical
    points[33] = (0.0, EYE_LINE_Y + eye_to_chin / (1.0 + vertical))

    return points


class FakeDetector:
    """Returns a fixed list of faces for any image"""

    def __init__(self, faces):
        self.faces = list(faces)
        self.calls = 0
        self.closed = 0

    def detect(self, image):
        self.calls += 1
        return list(self.faces)

    def close(self):
        self.closed += 1


@pytest.fixture
def make_points():
    return build_points


@pytest.fixture
def make_landmarks():
    def _make(height_width, jaw_cheek, chin_jaw, vertical, face_width=FACE_WIDTH):
        return LandmarkSet(build_points(height_width, jaw_cheek, chin_jaw, vertical, face_width))
    return _make


@pytest.fixture
def square_landmarks(make_landmarks):
    # wide jaw, flat chin, short face
    return make_landmarks(1.26, 0.93, 0.65, 1.05)


@pytest.fixture
def profile():
    return default_profile()


@pytest.fixture
def fake_detector_factory():
    return FakeDetector


@pytest.fixture
def analyzer(profile, square_landmarks):
    return FaceShapeAnalyzer(profile=profile, k=3, detector=FakeDetector([square_landmarks]))
