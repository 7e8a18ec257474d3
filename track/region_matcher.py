"""Frame-to-frame region association by keypoint correspondence voting.

Each correspondence links a keypoint in the previous frame to one in the
current frame. Both keypoints are resolved to a region in their frame and
the pair casts one vote. A previous region is matched to the current region
with the most votes, provided the vote count exceeds ``min_support``.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from contracts import DetectionRegion, Frame, Keypoint, KeypointCorrespondence, RegionMatch
from exceptions import InvalidCorrespondenceError
from log_config.logger import get_logger

logger = get_logger(__name__)


class AssignmentPolicy(str, Enum):
    PER_REGION = "per_region"
    EXCLUSIVE = "exclusive"


def first_containing_region(
    regions: Sequence[DetectionRegion], u: float, v: float
) -> Optional[int]:
    """Index of the first region (in list order) whose rectangle contains (u, v).

    Overlapping regions are not disambiguated: the earliest one wins.
    """
    for index, region in enumerate(regions):
        if region.rect.contains(u, v):
            return index
    return None


def _keypoint(keypoints: Sequence[Keypoint], index: int, role: str) -> Keypoint:
    if not 0 <= index < len(keypoints):
        raise InvalidCorrespondenceError(
            f"{role} keypoint index {index} out of range (frame has {len(keypoints)} keypoints)",
            index=index,
        )
    return keypoints[index]


def build_vote_matrix(
    correspondences: Sequence[KeypointCorrespondence],
    prev_frame: Frame,
    curr_frame: Frame,
) -> Tuple[np.ndarray, int]:
    """Count correspondences per (previous region, current region) pair.

    Rows follow ``prev_frame.regions`` order and columns ``curr_frame.regions``
    order. Correspondences with either keypoint outside every region are
    discarded.

    Returns:
        (votes, discarded)
    """
    votes = np.zeros((len(prev_frame.regions), len(curr_frame.regions)), dtype=int)
    discarded = 0
    for corr in correspondences:
        prev_kp = _keypoint(prev_frame.keypoints, corr.prev_index, "previous")
        curr_kp = _keypoint(curr_frame.keypoints, corr.curr_index, "current")

        row = first_containing_region(prev_frame.regions, prev_kp.u, prev_kp.v)
        if row is None:
            discarded += 1
            continue
        col = first_containing_region(curr_frame.regions, curr_kp.u, curr_kp.v)
        if col is None:
            discarded += 1
            continue
        votes[row, col] += 1
    return votes, discarded


def _best_per_region(votes: np.ndarray) -> Dict[int, int]:
    # argmax returns the first maximum, so ties go to the earliest column
    return {row: int(np.argmax(votes[row])) for row in range(votes.shape[0])}


def _best_exclusive(votes: np.ndarray) -> Dict[int, int]:
    rows, cols = linear_sum_assignment(votes, maximize=True)
    return {int(r): int(c) for r, c in zip(rows, cols)}


def match_regions(
    correspondences: Sequence[KeypointCorrespondence],
    prev_frame: Frame,
    curr_frame: Frame,
    min_support: int = 1,
    policy: AssignmentPolicy = AssignmentPolicy.PER_REGION,
) -> RegionMatch:
    """Match previous-frame regions to current-frame regions.

    Args:
        correspondences: Keypoint pairs, processed in the given order
        prev_frame: Frame providing the previous keypoints and regions
        curr_frame: Frame providing the current keypoints and regions
        min_support: A match needs strictly more votes than this
        policy: PER_REGION picks each previous region's best column
            independently, so two previous regions may claim the same current
            region. EXCLUSIVE solves a one-to-one assignment maximising votes.

    Returns:
        RegionMatch keyed by previous region id. Regions without enough
        support are absent.

    Raises:
        InvalidCorrespondenceError: If a correspondence index is out of range
    """
    if not prev_frame.regions or not curr_frame.regions:
        return RegionMatch(discarded=len(correspondences))

    votes, discarded = build_vote_matrix(correspondences, prev_frame, curr_frame)
    if AssignmentPolicy(policy) is AssignmentPolicy.EXCLUSIVE:
        candidates = _best_exclusive(votes)
    else:
        candidates = _best_per_region(votes)

    pairs: Dict[int, int] = {}
    support: Dict[int, int] = {}
    for row, prev_region in enumerate(prev_frame.regions):
        col = candidates.get(row)
        if col is None or votes[row, col] <= min_support:
            continue
        pairs[prev_region.region_id] = curr_frame.regions[col].region_id
        support[prev_region.region_id] = int(votes[row, col])

    claimed = list(pairs.values())
    for curr_id in sorted({cid for cid in claimed if claimed.count(cid) > 1}):
        prev_ids = [pid for pid, cid in pairs.items() if cid == curr_id]
        logger.warning(f"Current region {curr_id} matched by several previous regions: {prev_ids}")

    logger.debug(
        f"Matched {len(pairs)}/{len(prev_frame.regions)} regions "
        f"from {len(correspondences)} correspondences ({discarded} discarded)"
    )
    return RegionMatch(pairs=pairs, support=support, discarded=discarded)
