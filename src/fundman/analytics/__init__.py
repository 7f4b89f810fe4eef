"""
Analytics module for fundman.

Tracks cross-cycle statistics of the portfolio.
"""

from fundman.analytics.extremes import ExtremesTracker

__all__ = [
    "ExtremesTracker",
]
