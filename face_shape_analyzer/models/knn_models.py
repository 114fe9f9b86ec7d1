"""Reference dataset and KNN result models"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple
import numpy as np

from ..utils.exceptions import InvalidFeatureVectorError


@dataclass(frozen=True)
class ReferencePoint:
    """One labeled feature vector"""

    features: Tuple[float, ...]
    label: str


class ReferenceDataset:
    """
    Immutable set of labeled feature vectors

    Per-dimension bounds are computed once here; the dataset never changes
    after construction, so callers may share one instance across threads.
    """

    def __init__(self, points: Sequence[ReferencePoint], feature_names: Optional[Sequence[str]] = None):
        """
        Args:
            points: labeled reference vectors, all of the same length
            feature_names: names of the vector positions (optional)
        """
        self._points: Tuple[ReferencePoint, ...] = tuple(points)

        if self._points:
            lengths = {len(p.features) for p in self._points}
            if len(lengths) != 1:
                raise InvalidFeatureVectorError(
                    f"Reference vectors have mixed lengths: {sorted(lengths)}"
                )
            matrix = np.array([p.features for p in self._points], dtype=np.float64)
            if not np.all(np.isfinite(matrix)):
                raise InvalidFeatureVectorError("Reference vectors must be finite")
        else:
            dims = len(feature_names) if feature_names is not None else 0
            matrix = np.empty((0, dims), dtype=np.float64)

        if feature_names is not None and len(feature_names) != matrix.shape[1]:
            raise InvalidFeatureVectorError(
                f"{len(feature_names)} feature names for {matrix.shape[1]}-dimensional vectors"
            )

        matrix.setflags(write=False)
        self._matrix = matrix
        self._labels: Tuple[str, ...] = tuple(p.label for p in self._points)
        self.feature_names: Optional[Tuple[str, ...]] = tuple(feature_names) if feature_names is not None else None

        if len(self._points):
            self._mins = matrix.min(axis=0)
            self._maxs = matrix.max(axis=0)
        else:
            self._mins = np.zeros(matrix.shape[1])
            self._maxs = np.zeros(matrix.shape[1])
        self._mins.setflags(write=False)
        self._maxs.setflags(write=False)

    @classmethod
    def from_mapping(
        cls,
        mapping: Dict[str, Sequence[Sequence[float]]],
        feature_names: Optional[Sequence[str]] = None
    ) -> "ReferenceDataset":
        """Build from {label: [vector, ...]}, keeping mapping order"""
        points = [
            ReferencePoint(tuple(float(v) for v in vector), label)
            for label, vectors in mapping.items()
            for vector in vectors
        ]
        return cls(points, feature_names)

    @property
    def features(self) -> np.ndarray:
        """(n, d) read-only matrix"""
        return self._matrix

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @property
    def dimensions(self) -> int:
        return self._matrix.shape[1]

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """(mins, maxs) per dimension"""
        return self._mins, self._maxs

    def label_counts(self) -> Dict[str, int]:
        return dict(Counter(self._labels))

    def min_label_count(self) -> int:
        """Smallest number of points of any label (0 when empty)"""
        counts = self.label_counts()
        return min(counts.values()) if counts else 0

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[ReferencePoint]:
        return iter(self._points)

    def __getitem__(self, index: int) -> ReferencePoint:
        return self._points[index]

    def __repr__(self):
        return f"ReferenceDataset(points={len(self)}, labels={self.label_counts()})"


@dataclass(frozen=True)
class Neighbor:
    """One of the k nearest reference points"""

    label: str
    distance: float
    index: int  # position in the reference dataset

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'distance': round(self.distance, 4),
            'index': self.index,
        }


@dataclass(frozen=True)
class KNNResult:
    """Majority-vote outcome over the k nearest neighbors"""

    label: str
    confidence: float              # winning votes / k
    neighbors: Tuple[Neighbor, ...]  # ascending by distance
    k: int                         # neighbors actually used

    @property
    def votes(self) -> Dict[str, int]:
        """Vote count per label, in order of first appearance"""
        counts: Dict[str, int] = {}
        for neighbor in self.neighbors:
            counts[neighbor.label] = counts.get(neighbor.label, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'confidence': round(self.confidence, 3),
            'k': self.k,
            'neighbors': [n.to_dict() for n in self.neighbors],
        }


@dataclass(frozen=True)
class FrameRecommendation:
    """Eyewear suggestion for a face shape"""

    frames: str
    description: str
    image_key: str
    emoji: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'frames': self.frames,
            'description': self.description,
            'image_key': self.image_key,
            'emoji': self.emoji,
        }
