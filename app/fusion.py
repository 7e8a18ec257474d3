"""Per-frame fusion pipeline: crop, cluster, match and estimate TTC.

Only the previous and the current frame are retained. Each call to
``FusionPipeline.process`` clusters the incoming frame's range points into
its detection regions and, once a previous frame exists, matches regions
across the pair and computes a range-based TTC for every matched pair.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, Dict, Optional, Sequence

from cluster import ClusterStats, cluster_range_points, crop_range_points
from configs.settings import DEFAULT_CONFIG_PATH, AppConfig, load_config
from contracts import Frame, KeypointCorrespondence, RegionMatch
from log_config.logger import configure_logging, get_logger
from track import match_regions
from ttc import TTCResult, compute_ttc_range

logger = get_logger(__name__)


@dataclass(frozen=True)
class FramePairResult:
    prev_frame_index: int
    curr_frame_index: int
    matches: RegionMatch
    ttc_by_region: Dict[int, TTCResult] = field(default_factory=dict)
    cluster_stats: ClusterStats = field(default_factory=ClusterStats)
    elapsed_ms: float = 0.0

    def ttc(self, prev_region_id: int) -> Optional[TTCResult]:
        return self.ttc_by_region.get(prev_region_id)


class FusionPipeline:
    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._frames: Deque[Frame] = deque(maxlen=2)

    @classmethod
    def from_config_file(cls, path: Path = DEFAULT_CONFIG_PATH) -> "FusionPipeline":
        config = load_config(path)
        configure_logging(config.logging.level, config.logging.log_dir)
        return cls(config)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def previous_frame(self) -> Optional[Frame]:
        return self._frames[0] if len(self._frames) == 2 else None

    @property
    def current_frame(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def reset(self) -> None:
        self._frames.clear()

    def cluster_frame(self, frame: Frame) -> ClusterStats:
        """Crop the frame's range points and attach them to its regions."""
        points = crop_range_points(frame.range_points, self._config.crop)
        return cluster_range_points(
            frame.regions,
            points,
            self._config.clustering.shrink_factor,
            self._config.calibration,
        )

    def process(
        self,
        frame: Frame,
        correspondences: Sequence[KeypointCorrespondence],
    ) -> Optional[FramePairResult]:
        """Ingest a frame; returns None for the first frame of a sequence.

        Args:
            frame: Incoming frame with regions, keypoints and raw range points
            correspondences: Keypoint pairs from the previous frame to ``frame``
        """
        start = time.perf_counter()
        stats = self.cluster_frame(frame)
        self._frames.append(frame)

        prev = self.previous_frame
        if prev is None:
            logger.debug(f"Frame {frame.frame_index}: first frame, nothing to match")
            return None

        matches = match_regions(
            correspondences,
            prev,
            frame,
            min_support=self._config.matching.min_support,
            policy=self._config.matching.assignment,
        )

        ttc_cfg = self._config.ttc
        ttc_by_region: Dict[int, TTCResult] = {}
        for prev_id, curr_id in matches.items():
            prev_region = prev.region(prev_id)
            curr_region = frame.region(curr_id)
            ttc_by_region[prev_id] = compute_ttc_range(
                prev_region.range_points,
                curr_region.range_points,
                ttc_cfg.frame_rate_hz,
                percentile=ttc_cfg.percentile,
                min_closing_m=ttc_cfg.min_closing_m,
            )

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            f"Frame {prev.frame_index}->{frame.frame_index}: {len(matches)} matched regions, "
            f"{sum(1 for r in ttc_by_region.values() if r.is_valid)} TTC estimates ({elapsed_ms:.1f}ms)"
        )
        return FramePairResult(
            prev_frame_index=prev.frame_index,
            curr_frame_index=frame.frame_index,
            matches=matches,
            ttc_by_region=ttc_by_region,
            cluster_stats=stats,
            elapsed_ms=elapsed_ms,
        )
