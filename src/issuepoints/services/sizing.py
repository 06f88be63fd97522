from __future__ import annotations

from typing import Iterable, Mapping

from issuepoints.config import DEFAULT_SIZE_LABELS
from issuepoints.models import UNSIZED_POINTS


class SizeClassifier:
    """Maps an issue's labels to a point value.

    Labels are scanned in the order given and the first recognized size label
    wins. Issues without a size label get ``unsized_points`` (500 by default)
    so they stand out in point sums instead of quietly counting as zero.
    """

    def __init__(
        self,
        size_labels: Mapping[str, int] | None = None,
        unsized_points: int = UNSIZED_POINTS,
    ):
        self.size_labels = dict(DEFAULT_SIZE_LABELS if size_labels is None else size_labels)
        self.unsized_points = unsized_points

    def classify(self, labels: Iterable[str]) -> int:
        for label in labels:
            points = self.size_labels.get(label)
            if points is not None:
                return points
        return self.unsized_points


def size_points(labels: Iterable[str]) -> int:
    return SizeClassifier().classify(labels)
