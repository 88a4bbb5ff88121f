"""Typed header metadata model.

MetadataValue is a closed sum over the five kinds of value a header record
can decode to; Metadata is a read-only keyword -> MetadataValue mapping with
one entry per normalized keyword.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union


class MetadataKind(Enum):
    """Variant tag of a MetadataValue."""
    STRING = 'string'
    INTEGER = 'integer'
    FLOATING_POINT = 'floating_point'
    BOOLEAN = 'boolean'
    COMMENT = 'comment'


_PAYLOAD_TYPES = {
    MetadataKind.STRING: str,
    MetadataKind.INTEGER: int,
    MetadataKind.FLOATING_POINT: float,
    MetadataKind.BOOLEAN: bool,
    MetadataKind.COMMENT: str,
}


@dataclass(frozen=True)
class MetadataValue:
    """One decoded header value.

    Attributes:
        kind: Which variant is active
        value: Payload (str, int, float or bool depending on kind)
    """
    kind: MetadataKind
    value: Union[str, int, float, bool]

    def __post_init__(self):
        expected = _PAYLOAD_TYPES[self.kind]
        # bool is an int subclass, so INTEGER must reject it explicitly
        if not isinstance(self.value, expected) or (
            self.kind is MetadataKind.INTEGER and isinstance(self.value, bool)
        ):
            raise TypeError(
                f"{self.kind.name} value must be {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )

    @classmethod
    def string(cls, text: str) -> MetadataValue:
        return cls(MetadataKind.STRING, text)

    @classmethod
    def integer(cls, number: int) -> MetadataValue:
        return cls(MetadataKind.INTEGER, number)

    @classmethod
    def floating_point(cls, number: float) -> MetadataValue:
        return cls(MetadataKind.FLOATING_POINT, float(number))

    @classmethod
    def boolean(cls, flag: bool) -> MetadataValue:
        return cls(MetadataKind.BOOLEAN, flag)

    @classmethod
    def comment(cls, text: str) -> MetadataValue:
        return cls(MetadataKind.COMMENT, text)

    @property
    def string_value(self) -> Optional[str]:
        return self.value if self.kind is MetadataKind.STRING else None

    @property
    def int_value(self) -> Optional[int]:
        return self.value if self.kind is MetadataKind.INTEGER else None

    @property
    def float_value(self) -> Optional[float]:
        return self.value if self.kind is MetadataKind.FLOATING_POINT else None

    @property
    def bool_value(self) -> Optional[bool]:
        return self.value if self.kind is MetadataKind.BOOLEAN else None

    @property
    def comment_value(self) -> Optional[str]:
        return self.value if self.kind is MetadataKind.COMMENT else None

    def render(self) -> str:
        """Format the value for display (booleans as T/F)."""
        if self.kind is MetadataKind.STRING:
            return self.value
        elif self.kind is MetadataKind.INTEGER:
            return str(self.value)
        elif self.kind is MetadataKind.FLOATING_POINT:
            return repr(self.value)
        elif self.kind is MetadataKind.BOOLEAN:
            return 'T' if self.value else 'F'
        elif self.kind is MetadataKind.COMMENT:
            return self.value
        raise ValueError(f"Unhandled metadata kind {self.kind}")

    def __repr__(self):
        return f"{self.kind.name.title().replace('_', '')}({self.value!r})"


def normalize_keyword(keyword: str) -> str:
    """Normalize a header keyword for use as a Metadata key."""
    return keyword.strip().upper()


class Metadata(Mapping):
    """Read-only mapping of normalized keyword to MetadataValue.

    Built from (keyword, value) pairs; a later pair with the same
    normalized keyword replaces the earlier one.

    Example:
        >>> metadata = Metadata([('object', MetadataValue.string('M31'))])
        >>> metadata['OBJECT'].string_value
        'M31'
    """

    def __init__(self, entries: Iterable[Tuple[str, MetadataValue]] = ()):
        self._entries: Dict[str, MetadataValue] = {}
        for keyword, value in entries:
            self._entries[normalize_keyword(keyword)] = value

    def __getitem__(self, keyword: str) -> MetadataValue:
        return self._entries[normalize_keyword(keyword)]

    def __contains__(self, keyword) -> bool:
        return isinstance(keyword, str) and normalize_keyword(keyword) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def sorted_keys(self) -> List[str]:
        """Keywords in alphabetical order."""
        return sorted(self._entries)

    def __repr__(self):
        return f"Metadata({len(self)} keywords)"
