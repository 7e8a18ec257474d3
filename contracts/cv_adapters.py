"""Conversions from OpenCV keypoint and match objects into frame contracts.

OpenCV matchers report correspondences as ``cv2.DMatch`` with ``queryIdx``
referring to the previous frame and ``trainIdx`` to the current frame.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import cv2

from contracts.types import DetectionRegion, Keypoint, KeypointCorrespondence, PixelRect


def keypoints_from_cv(keypoints: Iterable[cv2.KeyPoint]) -> List[Keypoint]:
    return [Keypoint(u=float(kp.pt[0]), v=float(kp.pt[1]), size=float(kp.size)) for kp in keypoints]


def correspondences_from_cv(matches: Iterable[cv2.DMatch]) -> List[KeypointCorrespondence]:
    return [
        KeypointCorrespondence(
            prev_index=int(m.queryIdx),
            curr_index=int(m.trainIdx),
            distance=float(m.distance),
        )
        for m in matches
    ]


def region_from_xywh(
    region_id: int,
    box: Sequence[float],
    class_id: int | None = None,
    confidence: float | None = None,
) -> DetectionRegion:
    """Build a region from an ``(x, y, w, h)`` box as produced by ``cv2.dnn.NMSBoxes`` callers."""
    x, y, w, h = box
    if w < 0 or h < 0:
        raise ValueError(f"Region {region_id}: negative box size {w}x{h}")
    return DetectionRegion(
        region_id=region_id,
        rect=PixelRect(float(x), float(y), float(w), float(h)),
        class_id=class_id,
        confidence=confidence,
    )
