"""Header decoding and the typed metadata model."""

from .metadata import Metadata, MetadataKind, MetadataValue
from .decoder import HeaderDecoder

__all__ = ['Metadata', 'MetadataKind', 'MetadataValue', 'HeaderDecoder']
