"""JSON export tests"""

import json

import pytest

from face_shape_analyzer.core.face_shape_analyzer import FaceShapeAnalyzer
from face_shape_analyzer.core.profiles import build_profile
from face_shape_analyzer.utils.json_exporter import (
    FACE_SHAPE_ENUM,
    save_json,
    to_json_string,
    to_result_json,
)


@pytest.fixture
def analysis(analyzer, square_landmarks):
    return analyzer.classify_landmarks(square_landmarks)


def test_result_json_fields(analysis):
    data = to_result_json(analysis, image_path="photos/me.jpg")

    assert data['face_shape'] == FACE_SHAPE_ENUM["Square"]
    assert data['face_shape_name'] == "Square"
    assert data['recommendation']['frames'] == "Round / Oval frames"
    assert data['k'] == 3
    assert len(data['neighbors']) == 3
    assert data['profile'] == "eye_chin_v1"
    assert data['image_path'] == "photos/me.jpg"
    assert 'timestamp' in data


def test_json_string_is_valid_json(analysis):
    data = json.loads(to_json_string(analysis))

    assert data['face_shape_name'] == "Square"
    assert data['features']['height_width_ratio'] == pytest.approx(1.26, abs=1e-3)


def test_save_json_creates_directories(analysis, tmp_path):
    output_path = tmp_path / "out" / "nested" / "result.json"

    written = save_json(analysis, str(output_path), image_path="me.jpg")

    assert output_path.exists()
    with open(output_path, encoding='utf-8') as f:
        loaded = json.load(f)
    assert loaded == written
    assert loaded['image_path'] == "me.jpg"


def test_label_outside_canonical_shapes(make_landmarks, fake_detector_factory):
    diamond = build_profile(
        name="diamond_only",
        extractor_name="eye_chin",
        reference_data={"Diamond": [[1.40, 0.70, 0.40, 1.05], [1.30, 0.75, 0.45, 1.00]]},
        recommendations={},
    )
    analyzer = FaceShapeAnalyzer(profile=diamond, k=1, detector=fake_detector_factory([]))
    analysis = analyzer.classify_landmarks(make_landmarks(1.35, 0.72, 0.42, 1.02))

    data = to_result_json(analysis)

    assert analysis.face_shape is None
    assert data["face_shape"] == -1
    assert data["face_shape_name"] == "Diamond"
    assert data["recommendation"] is None
