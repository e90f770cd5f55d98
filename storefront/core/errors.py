"""Cart exceptions"""


class CartError(Exception):
    """Base class for cart errors"""


class CartValidationError(CartError):
    """An operation violated a cart precondition.

    The message is human-readable and is what ends up on ``CartState.error``.
    """
