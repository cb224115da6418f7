from .base import Box, Document, Element, SelectOption, FORM_FIELD_SELECTOR
from .live import LiveDocument, LiveElement
from .static import StaticDocument, StaticElement

__all__ = [
    "Box", "Document", "Element", "SelectOption", "FORM_FIELD_SELECTOR",
    "LiveDocument", "LiveElement", "StaticDocument", "StaticElement",
]
