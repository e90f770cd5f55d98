# Core modules

from .config import Settings, get_settings
from .errors import CartError, CartValidationError
from .pricing import DEFAULT_TAX_RATE, compute_summary
from .store import CartStore

__all__ = [
    "Settings",
    "get_settings",
    "CartError",
    "CartValidationError",
    "DEFAULT_TAX_RATE",
    "compute_summary",
    "CartStore",
]
