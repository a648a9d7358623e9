"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.category import Category
from models.item import InventoryItem
from models.bundle import Bundle, BundleComponent
from models.discount import Discount
from models.order import Order, OrderLine
