"""Observation summary from decoded FITS metadata.

This module provides the ObservationSummarizer class for pulling the common
observation keywords (telescope, instrument, filter, exposure, date, target)
out of a Metadata mapping, handling the keyword variants used by different
observatories.
"""

from typing import Any, List, Optional
from dataclasses import dataclass, field
import logging

from ..header.metadata import Metadata, MetadataKind

logger = logging.getLogger(__name__)


@dataclass
class ObservationSummary:
    """Observation keywords found in a header.

    Attributes:
        telescope: Telescope name
        instrument: Instrument name
        filter_name: Filter/band name
        exposure_time: Exposure time in seconds
        observation_date: Observation date string
        target_name: Target object name
        warnings: Keywords that could not be found
    """
    telescope: Optional[str] = None
    instrument: Optional[str] = None
    filter_name: Optional[str] = None
    exposure_time: Optional[float] = None
    observation_date: Optional[str] = None
    target_name: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def __repr__(self):
        """Pretty representation."""
        parts = []
        if self.telescope:
            parts.append(f"Telescope={self.telescope}")
        if self.instrument:
            parts.append(f"Instrument={self.instrument}")
        if self.filter_name:
            parts.append(f"Filter={self.filter_name}")
        if self.exposure_time is not None:
            parts.append(f"ExpTime={self.exposure_time:.1f}s")
        if self.target_name:
            parts.append(f"Object={self.target_name}")
        return f"ObservationSummary({', '.join(parts)})"


class ObservationSummarizer:
    """Summarize observation keywords from decoded metadata.

    Examples:
        >>> from astro_fits_ingest import FITSFile
        >>> with FITSFile('example.fits') as fits_file:
        ...     summary = ObservationSummarizer().summarize(fits_file.read_header())
        ...     print(f"Filter: {summary.filter_name}, ExpTime: {summary.exposure_time}s")
    """

    TELESCOPE_KEYWORDS = ['TELESCOP', 'TELESC']
    INSTRUMENT_KEYWORDS = ['INSTRUME', 'INSTRU']
    FILTER_KEYWORDS = ['FILTER', 'FILTNAM', 'FILTER1']
    EXPOSURE_KEYWORDS = ['EXPTIME', 'EXPOSURE']
    DATE_KEYWORDS = ['DATE-OBS', 'DATE_OBS']
    TARGET_KEYWORDS = ['OBJECT', 'TARGNAME', 'TARGET']

    def summarize(self, metadata: Metadata) -> ObservationSummary:
        """Extract the observation summary.

        Args:
            metadata: Decoded header

        Returns:
            ObservationSummary with whatever keywords were present
        """
        result = ObservationSummary(
            telescope=self._get_keyword(metadata, self.TELESCOPE_KEYWORDS),
            instrument=self._get_keyword(metadata, self.INSTRUMENT_KEYWORDS),
            filter_name=self._get_keyword(metadata, self.FILTER_KEYWORDS),
            exposure_time=self._get_keyword(metadata, self.EXPOSURE_KEYWORDS, float),
            observation_date=self._get_keyword(metadata, self.DATE_KEYWORDS),
            target_name=self._get_keyword(metadata, self.TARGET_KEYWORDS),
        )

        if result.filter_name is None:
            result.warnings.append("No filter information found")
        if result.exposure_time is None:
            result.warnings.append("No exposure time found")

        logger.debug(f"Extracted observation summary: {result}")
        return result

    def _get_keyword(
        self,
        metadata: Metadata,
        keywords: List[str],
        dtype: type = str,
        default: Any = None
    ) -> Any:
        """Try multiple keyword names, return first usable value.

        Comment-valued (blank) entries are skipped; numeric values are
        accepted for str and float targets.
        """
        for key in keywords:
            if key not in metadata:
                continue
            entry = metadata[key]
            if entry.kind is MetadataKind.COMMENT:
                continue

            if dtype is float:
                if entry.kind in (MetadataKind.INTEGER, MetadataKind.FLOATING_POINT):
                    return float(entry.value)
                if entry.kind is MetadataKind.STRING:
                    try:
                        return float(entry.value)
                    except ValueError:
                        continue
                continue

            text = entry.render().strip()
            if text:
                return text

        return default
