"""
Custom exceptions for the POS engine.

Exception Hierarchy:
--------------------
PosEngineException (base)
├── CartException
│   ├── EmptyCartException
│   ├── CartLineNotFoundException
│   └── CustomBundleNotAllowedException
├── BundleException
│   ├── InvalidBundleException
│   └── IncompleteCustomBundleException
├── DiscountException
│   └── InvalidDiscountException
└── OrderException
    ├── MissingActorException
    ├── InsufficientStockException
    └── OrderCommitException

Capacity rejections (adding past a stock or piece ceiling) are not exceptions:
the operation is a no-op and returns False.

Usage:
------
    try:
        result = await checkout.checkout("w-1", OrderType.DINE_IN)
    except InsufficientStockException as e:
        show_error(str(e))
"""

from .base import PosEngineException
from .cart import CartException, EmptyCartException, CartLineNotFoundException, CustomBundleNotAllowedException
from .bundle import BundleException, InvalidBundleException, IncompleteCustomBundleException
from .discount import DiscountException, InvalidDiscountException
from .order import (
    OrderException,
    MissingActorException,
    InsufficientStockException,
    OrderCommitException
)

__all__ = [
    # Base
    'PosEngineException',

    # Cart
    'CartException',
    'EmptyCartException',
    'CartLineNotFoundException',
    'CustomBundleNotAllowedException',

    # Bundle
    'BundleException',
    'InvalidBundleException',
    'IncompleteCustomBundleException',

    # Discount
    'DiscountException',
    'InvalidDiscountException',

    # Order
    'OrderException',
    'MissingActorException',
    'InsufficientStockException',
    'OrderCommitException',
]
