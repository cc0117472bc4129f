# Models package init
# Importing every model here registers all tables on Base.metadata before
# the string-based relationships ("Page", "Element") are resolved.
from app.models.board import BOARD_SKINS, Board
from app.models.element import Element, ElementKind
from app.models.page import Page

__all__ = ["BOARD_SKINS", "Board", "Element", "ElementKind", "Page"]
