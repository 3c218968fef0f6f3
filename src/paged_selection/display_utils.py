"""Display utilities for prettifying item field names."""

_ACRONYMS = {
    "id", "url", "api", "uuid", "iiif",
}

# Column headers that do not follow from the field name.
_HEADERS = {
    "place_of_origin": "Place of Origin",
    "artist_display": "Artist",
}


def prettify_name(name: str) -> str:
    """Convert snake_case names to Title Case with smart acronyms.

    Examples::

        prettify_name("date_start")       # -> "Date Start"
        prettify_name("image_id")         # -> "Image ID"
        prettify_name("place_of_origin")  # -> "Place of Origin"
    """
    if name in _HEADERS:
        return _HEADERS[name]
    words = name.replace("_", " ").split()
    return " ".join(
        w.upper() if w.lower() in _ACRONYMS else w.capitalize()
        for w in words
    )
