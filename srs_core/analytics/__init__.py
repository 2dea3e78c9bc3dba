"""
Analytics package exports.
"""

from srs_core.analytics.service import build_review_stats
from srs_core.analytics.types import ReviewStats

__all__ = [
    "build_review_stats",
    "ReviewStats",
]
