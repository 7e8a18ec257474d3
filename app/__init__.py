"""Application-level pipeline wiring."""

from app.fusion import FramePairResult, FusionPipeline

__all__ = ["FramePairResult", "FusionPipeline"]
