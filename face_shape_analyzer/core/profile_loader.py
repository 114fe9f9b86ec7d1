"""
Profile file loader.
Reads a YAML shape profile so the reference dataset and recommendations
can be retuned without code changes.

Format:
    name: eye_chin_custom
    extractor: eye_chin
    feature_order: [height_width_ratio, jaw_cheek_ratio, chin_jaw_ratio, vertical_ratio]
    reference_data:
      Oval:
        - [1.45, 0.75, 0.45, 1.00]
    recommendations:          # optional, built-in table when omitted
      Oval:
        frames: "Almost any frame style"
        description: "..."
        image_key: aviator
        emoji: "✨"              # optional
"""
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..models.knn_models import FrameRecommendation
from ..utils.exceptions import ConfigurationError, InvalidFeatureVectorError
from ..utils import get_logger
from .profiles import EXTRACTORS, FRAME_RECOMMENDATIONS, ShapeProfile, build_profile

logger = get_logger(__name__)

REQUIRED_KEYS = ('name', 'extractor', 'feature_order', 'reference_data')


def _parse_recommendations(data: Dict[str, Any]) -> Dict[str, FrameRecommendation]:
    recommendations = {}
    for label, entry in data.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Recommendation for '{label}' must be a mapping")
        try:
            recommendations[str(label)] = FrameRecommendation(
                frames=str(entry['frames']),
                description=str(entry.get('description', '')),
                image_key=str(entry['image_key']),
                emoji=str(entry.get('emoji', '')),
            )
        except KeyError as e:
            raise ConfigurationError(f"Recommendation for '{label}' is missing {e}")
    return recommendations


def profile_from_dict(data: Dict[str, Any]) -> ShapeProfile:
    """Build a ShapeProfile from parsed profile data"""
    if not isinstance(data, dict):
        raise ConfigurationError("Profile must be a mapping")

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ConfigurationError(f"Profile is missing keys: {', '.join(missing)}")

    extractor_name = data['extractor']
    if extractor_name not in EXTRACTORS:
        available = ', '.join(EXTRACTORS)
        raise ConfigurationError(f"Unknown extractor '{extractor_name}'. Available: {available}")

    expected_order = list(EXTRACTORS[extractor_name].feature_names)
    if list(data['feature_order']) != expected_order:
        raise ConfigurationError(
            f"feature_order {list(data['feature_order'])} does not match "
            f"extractor '{extractor_name}' order {expected_order}"
        )

    reference_data = data['reference_data']
    if not isinstance(reference_data, dict) or not reference_data:
        raise ConfigurationError("reference_data must be a non-empty mapping of label -> vectors")

    if 'recommendations' in data and data['recommendations'] is not None:
        recommendations = _parse_recommendations(data['recommendations'])
    else:
        recommendations = dict(FRAME_RECOMMENDATIONS)

    try:
        profile = build_profile(
            name=str(data['name']),
            extractor_name=extractor_name,
            reference_data={str(label): vectors for label, vectors in reference_data.items()},
            recommendations=recommendations,
        )
    except (TypeError, ValueError, InvalidFeatureVectorError) as e:
        raise ConfigurationError(f"Invalid reference_data: {e}")

    logger.info(f"Loaded profile '{profile.name}' ({profile.dataset!r})")
    return profile


def load_profile(path: Union[str, Path]) -> ShapeProfile:
    """
    Load a YAML shape profile

    Raises:
        ConfigurationError: missing file, invalid YAML, or a profile that
            does not fit its extractor
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Profile file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format in {path}: {e}")

    return profile_from_dict(data)
