from .products import PRODUCTS
from .sizes import SIZES, validate_sizes

__all__ = ['PRODUCTS', 'SIZES', 'validate_sizes']
