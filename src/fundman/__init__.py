"""
fundman - terminal fund valuation monitor

Periodically fetches intraday valuation estimates for a portfolio of fund
holdings, derives per-holding and portfolio-level income figures, tracks
the day's income extremes and keeps per-holding intraday chart series.
"""

__version__ = "0.1.0"
__author__ = "fundman contributors"
