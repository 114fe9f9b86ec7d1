"""KNN classifier tests"""

import logging

import numpy as np
import pytest

from face_shape_analyzer.core.knn_classifier import (
    KNNClassifier,
    calculate_distance,
    get_dataset_bounds,
    majority_vote,
    normalize_features,
    predict_knn,
)
from face_shape_analyzer.models import FEATURE_NAMES, Neighbor, ReferenceDataset, ReferencePoint
from face_shape_analyzer.utils.exceptions import InsufficientDataError, InvalidFeatureVectorError


def line_dataset():
    """x positions on a line; second dimension constant"""
    return ReferenceDataset([
        ReferencePoint((0.0, 5.0), "A"),
        ReferencePoint((0.3, 5.0), "B"),
        ReferencePoint((1.0, 5.0), "A"),
        ReferencePoint((0.9, 5.0), "B"),
    ])


def test_exact_reference_point_is_its_own_nearest_neighbor(profile):
    result = predict_knn([1.45, 0.75, 0.45, 1.00], profile.dataset, k=3)

    assert result.label == "Oval"
    assert result.neighbors[0].distance == 0
    assert result.neighbors[0].index == 0
    assert result.k == 3


def test_midpoint_between_oval_and_heart_mixes_neighbors(profile):
    result = predict_knn([1.40, 0.70, 0.40, 1.05], profile.dataset, k=4)

    labels = [n.label for n in result.neighbors]
    assert labels.count("Oval") == 3
    assert labels.count("Heart") == 1
    assert result.label == "Oval"
    assert result.confidence == pytest.approx(0.75)
    assert result.confidence < 1.0


def test_midpoint_between_oval_and_heart_at_default_k(profile):
    # the three nearest points are all Oval; the first Heart point is fourth
    result = predict_knn([1.40, 0.70, 0.40, 1.05], profile.dataset, k=3)

    assert [n.label for n in result.neighbors] == ["Oval", "Oval", "Oval"]
    assert result.label == "Oval"
    assert result.confidence == 1.0

    wider = predict_knn([1.40, 0.70, 0.40, 1.05], profile.dataset, k=4)
    assert wider.neighbors[:3] == result.neighbors
    assert wider.neighbors[3].label == "Heart"


def test_numpy_integer_k_is_stored_as_int(profile):
    result = predict_knn([1.45, 0.75, 0.45, 1.00], profile.dataset, k=np.int64(3))
    classifier = KNNClassifier(profile.dataset, k=np.int32(5))

    assert type(result.k) is int
    assert type(classifier.k) is int
    assert type(classifier.predict([1.45, 0.75, 0.45, 1.00]).k) is int


def test_neighbors_sorted_ascending(profile):
    result = predict_knn([1.30, 0.85, 0.55, 1.0], profile.dataset, k=7)

    distances = [n.distance for n in result.neighbors]
    assert distances == sorted(distances)
    assert len(result.neighbors) == 7


@pytest.mark.parametrize("vector", [
    [1.45, 0.75, 0.45, 1.00],
    [1.15, 0.82, 0.50, 0.95],
    [1.33, 0.80, 0.50, 1.05],
    [1.70, 0.60, 0.30, 1.25],
    [0.90, 1.00, 0.80, 0.80],
])
@pytest.mark.parametrize("k", [1, 3, 5])
def test_confidence_is_vote_share(profile, vector, k):
    result = predict_knn(vector, profile.dataset, k=k)

    assert result.confidence == pytest.approx(result.votes[result.label] / k)
    assert 0 < result.confidence <= 1
    assert result.votes[result.label] == max(result.votes.values())


def test_normalization_bounds(profile):
    mins, maxs = get_dataset_bounds(profile.dataset)
    normalized = normalize_features(profile.dataset.features, mins, maxs)

    assert np.allclose(normalized.min(axis=0), 0.0)
    assert np.allclose(normalized.max(axis=0), 1.0)
    assert np.all((normalized >= 0) & (normalized <= 1))


def test_normalization_outside_bounds():
    mins = np.array([1.0, 0.0])
    maxs = np.array([2.0, 10.0])

    assert np.allclose(normalize_features([3.0, -5.0], mins, maxs), [2.0, -0.5])


def test_constant_dimension_normalizes_to_zero():
    mins = np.array([0.0, 5.0])
    maxs = np.array([1.0, 5.0])

    normalized = normalize_features([0.5, 7.0], mins, maxs)

    assert normalized[1] == 0
    assert np.all(np.isfinite(normalized))


def test_constant_dimension_does_not_affect_distance():
    dataset = line_dataset()

    first = predict_knn([0.1, 5.0], dataset, k=2)
    second = predict_knn([0.1, 99.0], dataset, k=2)

    assert [n.distance for n in first.neighbors] == [n.distance for n in second.neighbors]
    assert first.label == second.label


def test_tie_goes_to_label_of_closest_neighbor():
    dataset = line_dataset()

    near_a = predict_knn([0.1, 5.0], dataset, k=2)
    near_b = predict_knn([0.25, 5.0], dataset, k=2)

    assert near_a.votes == {"A": 1, "B": 1}
    assert near_a.label == "A"
    assert near_b.label == "B"
    assert near_a.confidence == pytest.approx(0.5)


def test_equal_distances_keep_dataset_order():
    dataset = ReferenceDataset([
        ReferencePoint((0.0, 0.0), "C"),
        ReferencePoint((0.5, 0.5), "A"),
        ReferencePoint((0.5, 0.5), "B"),
        ReferencePoint((1.0, 1.0), "C"),
    ])

    result = predict_knn([0.5, 0.5], dataset, k=1)

    assert result.label == "A"
    assert result.neighbors[0].index == 1


def test_majority_vote_counts():
    neighbors = [
        Neighbor("B", 0.1, 0),
        Neighbor("A", 0.2, 1),
        Neighbor("A", 0.3, 2),
    ]

    assert majority_vote(neighbors) == ("A", 2)


def test_k_larger_than_dataset_uses_every_point(caplog):
    dataset = line_dataset()

    with caplog.at_level(logging.WARNING):
        result = predict_knn([0.1, 5.0], dataset, k=10)

    assert result.k == len(dataset)
    assert len(result.neighbors) == len(dataset)
    assert result.confidence == pytest.approx(0.5)
    assert "exceeds dataset size" in caplog.text


def test_empty_dataset_raises():
    empty = ReferenceDataset([], feature_names=FEATURE_NAMES)

    with pytest.raises(InsufficientDataError):
        predict_knn([1.0, 1.0, 1.0, 1.0], empty)

    with pytest.raises(InsufficientDataError):
        KNNClassifier(empty)


@pytest.mark.parametrize("vector", [
    [1.4, 0.7, 0.4],
    [1.4, 0.7, 0.4, 1.0, 0.2],
    [1.4, float('nan'), 0.4, 1.0],
    [1.4, 0.7, float('inf'), 1.0],
])
def test_invalid_feature_vector_raises(profile, vector):
    with pytest.raises(InvalidFeatureVectorError):
        predict_knn(vector, profile.dataset)


@pytest.mark.parametrize("k", [0, -1, 2.5, True])
def test_invalid_k_raises(profile, k):
    with pytest.raises(ValueError):
        predict_knn([1.45, 0.75, 0.45, 1.00], profile.dataset, k=k)


def test_classifier_default_and_override_k(profile):
    classifier = KNNClassifier(profile.dataset, k=5)
    vector = [1.45, 0.75, 0.45, 1.00]

    assert classifier.predict(vector).k == 5
    assert classifier.predict(vector, k=1).k == 1
    assert classifier.predict(vector).neighbors[0].distance == 0


def test_classifier_warns_when_label_has_fewer_than_k_points(caplog):
    with caplog.at_level(logging.WARNING):
        KNNClassifier(line_dataset(), k=3)

    assert "fewer than k=3" in caplog.text


def test_classifier_normalize_uses_dataset_bounds(profile):
    classifier = KNNClassifier(profile.dataset)
    mins, maxs = profile.dataset.bounds

    assert np.allclose(classifier.normalize(mins), 0.0)
    assert np.allclose(classifier.normalize(maxs), 1.0)


def test_calculate_distance():
    assert calculate_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_dataset_is_read_only(profile):
    with pytest.raises(ValueError):
        profile.dataset.features[0, 0] = 9.9


def test_dataset_rejects_mixed_lengths():
    with pytest.raises(InvalidFeatureVectorError):
        ReferenceDataset([
            ReferencePoint((1.0, 2.0), "A"),
            ReferencePoint((1.0, 2.0, 3.0), "B"),
        ])


def test_knn_result_to_dict(profile):
    data = predict_knn([1.40, 0.70, 0.40, 1.05], profile.dataset, k=4).to_dict()

    assert data['label'] == "Oval"
    assert data['confidence'] == 0.75
    assert data['k'] == 4
    assert len(data['neighbors']) == 4


def test_prediction_is_deterministic(profile):
    vector = [1.33, 0.80, 0.50, 1.05]

    first = predict_knn(vector, profile.dataset, k=5)
    second = predict_knn(vector, profile.dataset, k=5)

    assert first == second
