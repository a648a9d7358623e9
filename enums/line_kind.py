from enum import Enum


class LineKind(str, Enum):
    ITEM = "item"
    BUNDLE = "bundle"
