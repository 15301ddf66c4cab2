"""Leaderboards and trade statistics for the prediction market platform."""

__version__ = "1.0.0"
