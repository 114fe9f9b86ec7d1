"""
Shape profiles: one feature extractor paired with the reference dataset
and frame recommendations tuned for its feature vectors.

A dataset only makes sense for the extractor it was authored against, so
the two always travel together.
"""
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..models.knn_models import FrameRecommendation, ReferenceDataset
from ..models.landmark_models import FaceShape
from ..utils.exceptions import ConfigurationError
from ..utils import get_logger
from .feature_extractor import FeatureExtractor

logger = get_logger(__name__)


# Features: [height_width_ratio, jaw_cheek_ratio, chin_jaw_ratio, vertical_ratio]
# Hand-authored class centers with small jitter.
EYE_CHIN_REFERENCE_DATA = {
    # balanced, slightly longer than wide, soft chin
    FaceShape.OVAL.value: [
        [1.45, 0.75, 0.45, 1.00],
        [1.48, 0.73, 0.42, 1.02],
        [1.42, 0.77, 0.48, 0.98],
        [1.50, 0.72, 0.44, 1.05],
        [1.46, 0.76, 0.46, 0.99],
        [1.44, 0.74, 0.43, 1.01],
    ],
    # short face, wide jaw, soft chin
    FaceShape.ROUND.value: [
        [1.15, 0.82, 0.50, 0.95],
        [1.10, 0.85, 0.52, 0.92],
        [1.20, 0.80, 0.48, 0.98],
        [1.12, 0.83, 0.51, 0.94],
        [1.18, 0.81, 0.49, 0.96],
        [1.16, 0.84, 0.53, 0.93],
    ],
    # short/medium face, jaw nearly as wide as cheeks, flat chin
    FaceShape.SQUARE.value: [
        [1.25, 0.92, 0.65, 1.05],
        [1.22, 0.95, 0.68, 1.02],
        [1.30, 0.90, 0.62, 1.08],
        [1.28, 0.93, 0.66, 1.04],
        [1.24, 0.91, 0.64, 1.06],
        [1.26, 0.94, 0.67, 1.03],
    ],
    # medium height, strongly tapered jaw, pointed chin
    FaceShape.HEART.value: [
        [1.35, 0.65, 0.35, 1.10],
        [1.32, 0.62, 0.32, 1.08],
        [1.40, 0.68, 0.38, 1.12],
        [1.38, 0.64, 0.34, 1.09],
        [1.34, 0.66, 0.36, 1.11],
        [1.36, 0.63, 0.33, 1.07],
    ],
    # very long face, balanced jaw and chin
    FaceShape.OBLONG.value: [
        [1.60, 0.78, 0.50, 1.15],
        [1.65, 0.75, 0.48, 1.18],
        [1.58, 0.80, 0.52, 1.12],
        [1.62, 0.77, 0.49, 1.16],
        [1.56, 0.79, 0.51, 1.14],
        [1.68, 0.76, 0.47, 1.20],
    ],
}

FRAME_RECOMMENDATIONS = {
    FaceShape.OVAL.value: FrameRecommendation(
        frames="Almost any frame style",
        description="Oval is the most versatile face shape. Aviator, wayfarer, "
                    "cat-eye and rectangular frames all work.",
        image_key="aviator",
        emoji="✨",
    ),
    FaceShape.ROUND.value: FrameRecommendation(
        frames="Rectangular / Angular frames",
        description="Angular and rectangular frames add definition and make the "
                    "face look slimmer and more proportional.",
        image_key="rectangular",
        emoji="📐",
    ),
    FaceShape.SQUARE.value: FrameRecommendation(
        frames="Round / Oval frames",
        description="Round or oval frames soften the angles of the face for a "
                    "gentler, balanced look.",
        image_key="round",
        emoji="⭕",
    ),
    FaceShape.HEART.value: FrameRecommendation(
        frames="Bottom-heavy frames",
        description="Frames that are wider at the bottom balance a broad forehead "
                    "and a narrower chin.",
        image_key="bottom-heavy",
        emoji="💜",
    ),
    FaceShape.OBLONG.value: FrameRecommendation(
        frames="Oversized / Wide frames",
        description="Oversized or wide frames make the face look shorter and more "
                    "proportional.",
        image_key="oversized",
        emoji="🔲",
    ),
}

# extractor name -> class
EXTRACTORS = {
    FeatureExtractor.name: FeatureExtractor,
}


@dataclass(frozen=True)
class ShapeProfile:
    """Extractor, reference dataset and recommendations that belong together"""

    name: str
    extractor: FeatureExtractor
    dataset: ReferenceDataset
    recommendations: Mapping[str, FrameRecommendation] = field(default_factory=dict)

    def __post_init__(self):
        names = self.dataset.feature_names
        if names is not None and tuple(names) != tuple(self.extractor.feature_names):
            raise ConfigurationError(
                f"Profile '{self.name}': dataset features {list(names)} do not match "
                f"extractor '{self.extractor.name}' features {list(self.extractor.feature_names)}"
            )
        if self.dataset.dimensions != len(self.extractor.feature_names):
            raise ConfigurationError(
                f"Profile '{self.name}': dataset has {self.dataset.dimensions} dimensions, "
                f"extractor '{self.extractor.name}' produces {len(self.extractor.feature_names)}"
            )

    def recommendation_for(self, label: str) -> Optional[FrameRecommendation]:
        recommendation = self.recommendations.get(label)
        if recommendation is None:
            logger.warning(f"No frame recommendation for '{label}' in profile '{self.name}'")
        return recommendation


def build_profile(
    name: str,
    extractor_name: str,
    reference_data: Mapping[str, list],
    recommendations: Mapping[str, FrameRecommendation],
) -> ShapeProfile:
    """Assemble a profile from plain data, looking the extractor up by name"""
    if extractor_name not in EXTRACTORS:
        available = ', '.join(EXTRACTORS)
        raise ConfigurationError(f"Unknown extractor '{extractor_name}'. Available: {available}")

    extractor = EXTRACTORS[extractor_name]()
    dataset = ReferenceDataset.from_mapping(dict(reference_data), extractor.feature_names)
    return ShapeProfile(
        name=name,
        extractor=extractor,
        dataset=dataset,
        recommendations=dict(recommendations),
    )


def default_profile() -> ShapeProfile:
    """Built-in eye_chin profile"""
    return build_profile(
        name="eye_chin_v1",
        extractor_name=FeatureExtractor.name,
        reference_data=EYE_CHIN_REFERENCE_DATA,
        recommendations=FRAME_RECOMMENDATIONS,
    )
