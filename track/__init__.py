"""Region tracking across consecutive frames."""

from .region_matcher import AssignmentPolicy, build_vote_matrix, first_containing_region, match_regions

__all__ = ["AssignmentPolicy", "build_vote_matrix", "first_containing_region", "match_regions"]
