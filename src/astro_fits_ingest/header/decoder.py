"""Header keyword decoding.

This module provides the HeaderDecoder class, which turns the raw
(keyword, value, comment) text of a header record into a typed
MetadataValue following the FITS fixed-format conventions.
"""

from typing import Iterable, Optional, Tuple
import re
import logging

from .metadata import Metadata, MetadataValue, normalize_keyword

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(r'^[+-]?\d+$')
# Decimal point and/or exponent; FITS allows D as the exponent marker
_FLOAT_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([EeDd][+-]?\d+)?$')

# Records that carry no header data; blank-keyword commentary is kept under ''
NON_DATA_KEYWORDS = {'END'}


class HeaderDecoder:
    """Decode header records into typed metadata.

    Rules, first match wins:
    1. empty value -> Comment holding the comment text
    2. T / F -> Boolean
    3. signed integer literal within 64 bits -> Integer
    4. literal with a decimal point and/or E/D exponent -> FloatingPoint
    5. single-quoted text -> String (quotes stripped, '' unescaped)
    6. anything else -> String holding the trimmed raw value

    Decoding never raises: malformed values degrade to rule 6.

    Example:
        >>> decoder = HeaderDecoder()
        >>> decoder.decode('EXPTIME', '300.0', 'seconds')
        ('EXPTIME', FloatingPoint(300.0))
    """

    def decode(
        self,
        keyword: str,
        value: Optional[str],
        comment: Optional[str] = None
    ) -> Optional[Tuple[str, MetadataValue]]:
        """Decode one header record.

        Args:
            keyword: Keyword text
            value: Value field text (None or empty for commentary records)
            comment: Comment field text

        Returns:
            (normalized keyword, MetadataValue), or None for the END record.
            Blank-keyword lines decode to a Comment under the key ''
        """
        key = normalize_keyword(keyword or '')
        if key in NON_DATA_KEYWORDS:
            return None

        return key, self.decode_value(value, comment)

    def decode_value(self, value: Optional[str], comment: Optional[str] = None) -> MetadataValue:
        """Classify a value field into a MetadataValue."""
        text = (value or '').strip()

        if not text:
            return MetadataValue.comment((comment or '').strip())

        if text in ('T', 'F'):
            return MetadataValue.boolean(text == 'T')

        if _INTEGER_RE.match(text):
            number = int(text)
            if INT64_MIN <= number <= INT64_MAX:
                return MetadataValue.integer(number)

        if _FLOAT_RE.match(text):
            return MetadataValue.floating_point(float(text.replace('D', 'E').replace('d', 'e')))

        if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
            # Trailing blanks inside the quotes are not significant
            return MetadataValue.string(text[1:-1].replace("''", "'").rstrip())

        return MetadataValue.string(text)

    def decode_records(self, records: Iterable[Tuple[str, str, str]]) -> Metadata:
        """Fold (keyword, value, comment) records into a Metadata mapping."""
        entries = []
        for keyword, value, comment in records:
            decoded = self.decode(keyword, value, comment)
            if decoded is not None:
                entries.append(decoded)

        metadata = Metadata(entries)
        logger.debug(f"Decoded {len(entries)} header records into {len(metadata)} keywords")
        return metadata
