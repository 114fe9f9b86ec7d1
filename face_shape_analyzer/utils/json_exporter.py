"""
Convert analysis results to JSON
"""
import json
import os
from datetime import datetime

from .config_loader import get_config


# Stable integer codes for downstream consumers
FACE_SHAPE_ENUM = {
    "Oval": 0,
    "Round": 1,
    "Square": 2,
    "Heart": 3,
    "Oblong": 4,
    "Unknown": -1
}


def to_result_json(analysis, image_path=""):
    """
    FaceShapeAnalysis -> JSON-serializable dict

    Args:
        analysis: FaceShapeAnalysis
        image_path: source image path (optional)

    Returns:
        dict
    """
    result = analysis.to_dict()

    output = {
        "face_shape": FACE_SHAPE_ENUM.get(analysis.label, -1),
        "face_shape_name": analysis.label,
        "confidence": result["confidence"],
        "recommendation": result["recommendation"],
        "features": result["features"],
        "neighbors": result["knn"]["neighbors"],
        "k": result["knn"]["k"],
        "profile": result["profile"],

        "timestamp": datetime.now().isoformat(),
        "image_path": str(image_path)
    }

    return output


def to_json_string(analysis, image_path=""):
    """Analysis as a JSON string"""
    indent = get_config().get('export.indent', 2)
    return json.dumps(to_result_json(analysis, image_path), indent=indent, ensure_ascii=False)


def save_json(analysis, output_path, image_path=""):
    """
    Write the analysis to output_path, creating parent directories

    Returns:
        dict: the data written
    """
    dir_path = os.path.dirname(output_path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    json_data = to_result_json(analysis, image_path)
    indent = get_config().get('export.indent', 2)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(json_data, f, indent=indent, ensure_ascii=False)

    return json_data
