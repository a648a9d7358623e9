from enum import Enum


class ItemStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
