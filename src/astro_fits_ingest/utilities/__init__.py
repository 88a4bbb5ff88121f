"""Utility classes for FITS metadata.

This module provides helpers that interpret decoded header metadata.
"""

from .metadata import ObservationSummarizer, ObservationSummary

__all__ = ['ObservationSummarizer', 'ObservationSummary']
