"""Remote page sources."""

from .artic import ArtworkSource, ARTIC_API_URL
from .records import Artwork, ARTWORK_FIELDS

__all__ = ["ArtworkSource", "ARTIC_API_URL", "Artwork", "ARTWORK_FIELDS"]
