"""
K-nearest-neighbors face shape classifier.

Feature vectors are min-max normalized against the reference dataset's
per-dimension bounds, so ratios with different natural ranges weigh equally
in the Euclidean distance. Sized for a handful of dimensions and a few
dozen reference points.
"""
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from ..models.knn_models import KNNResult, Neighbor, ReferenceDataset
from ..utils.exceptions import InsufficientDataError
from ..utils.validators import validate_feature_vector, validate_k
from ..utils import get_logger

logger = get_logger(__name__)

DEFAULT_K = 3

VectorLike = Union[Sequence[float], np.ndarray]


def calculate_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two vectors"""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def normalize_features(features: np.ndarray, mins: np.ndarray, maxs: np.ndarray) -> np.ndarray:
    """
    Scale values to [0, 1] per dimension with (v - min) / (max - min)

    A dimension with max == min maps to 0, so it adds nothing to distances.
    Works on a single vector or on an (n, d) matrix. Values outside the
    bounds (inputs only) fall outside [0, 1].
    """
    features = np.asarray(features, dtype=np.float64)
    ranges = maxs - mins
    return np.divide(
        features - mins,
        ranges,
        out=np.zeros(np.broadcast(features, ranges).shape, dtype=np.float64),
        where=ranges != 0,
    )


def get_dataset_bounds(dataset: ReferenceDataset) -> Tuple[np.ndarray, np.ndarray]:
    """Per-dimension (mins, maxs) of the reference points"""
    if len(dataset) == 0:
        raise InsufficientDataError("Reference dataset is empty")
    return dataset.bounds


def majority_vote(neighbors: Sequence[Neighbor]) -> Tuple[str, int]:
    """
    Winning label and its vote count

    Neighbors must be sorted by distance. On a tie the label seen first
    wins, which is the tied label with the closest single neighbor.
    """
    votes: Dict[str, int] = {}
    for neighbor in neighbors:
        votes[neighbor.label] = votes.get(neighbor.label, 0) + 1

    winner, count = None, 0
    for label, label_count in votes.items():
        if label_count > count:
            winner, count = label, label_count
    return winner, count


def predict_knn(input_vector: VectorLike, dataset: ReferenceDataset, k: int = DEFAULT_K) -> KNNResult:
    """
    Classify a feature vector by majority vote of its k nearest reference points

    Args:
        input_vector: feature vector in the dataset's dimension order
        dataset: labeled reference points
        k: neighbor count; more than the dataset size uses every point

    Returns:
        KNNResult (label, confidence = votes / k, neighbors ascending by distance)

    Raises:
        InsufficientDataError: empty dataset
        InvalidFeatureVectorError: wrong length or non-finite input
        ValueError: k < 1
    """
    validate_k(k)
    k = int(k)
    mins, maxs = get_dataset_bounds(dataset)

    vector = np.asarray(input_vector, dtype=np.float64)
    validate_feature_vector(vector, dataset.dimensions)

    if k > len(dataset):
        logger.warning(f"k={k} exceeds dataset size {len(dataset)}, using {len(dataset)} neighbors")
        k = len(dataset)

    normalized_input = normalize_features(vector, mins, maxs)
    normalized_reference = normalize_features(dataset.features, mins, maxs)

    distances = np.linalg.norm(normalized_reference - normalized_input, axis=1)

    # stable: equal distances keep dataset order
    order = np.argsort(distances, kind='stable')[:k]

    labels = dataset.labels
    neighbors = tuple(
        Neighbor(label=labels[i], distance=float(distances[i]), index=int(i))
        for i in order
    )

    label, count = majority_vote(neighbors)
    confidence = count / k

    logger.debug(
        "KNN neighbors: %s",
        ", ".join(f"{n.label}({n.distance:.4f})" for n in neighbors),
    )

    return KNNResult(label=label, confidence=confidence, neighbors=neighbors, k=k)


class KNNClassifier:
    """KNN classifier bound to one reference dataset"""

    def __init__(self, dataset: ReferenceDataset, k: int = DEFAULT_K):
        """
        Args:
            dataset: labeled reference points (must not be empty)
            k: default neighbor count
        """
        validate_k(k)
        k = int(k)
        if len(dataset) == 0:
            raise InsufficientDataError("Reference dataset is empty")

        self.dataset = dataset
        self.k = k

        smallest = dataset.min_label_count()
        if smallest < k:
            logger.warning(
                f"Some labels have fewer than k={k} reference points "
                f"(counts: {dataset.label_counts()})"
            )

    def predict(self, input_vector: VectorLike, k: int = None) -> KNNResult:
        return predict_knn(input_vector, self.dataset, self.k if k is None else k)

    def normalize(self, input_vector: VectorLike) -> np.ndarray:
        """Input vector scaled by the dataset bounds"""
        mins, maxs = self.dataset.bounds
        return normalize_features(input_vector, mins, maxs)

    def __repr__(self):
        return f"KNNClassifier(k={self.k}, dataset={self.dataset!r})"
