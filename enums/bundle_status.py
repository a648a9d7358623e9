from enum import Enum


class BundleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
