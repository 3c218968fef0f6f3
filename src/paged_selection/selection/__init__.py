"""Selection over the whole remote collection, not just the loaded page."""

from .coordinator import SelectionCoordinator, HeaderSelectionState, derive_header_state

__all__ = ["SelectionCoordinator", "HeaderSelectionState", "derive_header_state"]
