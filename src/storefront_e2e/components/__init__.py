# Page components
from .cart_panel import CartPanel
from .filters import Filters
from .product_grid import ProductGrid

__all__ = ['CartPanel', 'Filters', 'ProductGrid']
