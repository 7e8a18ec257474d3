"""Time-to-collision estimation."""

from .range_ttc import TTCResult, TTCStatus, compute_ttc_range, near_edge_distance

__all__ = ["TTCResult", "TTCStatus", "compute_ttc_range", "near_edge_distance"]
