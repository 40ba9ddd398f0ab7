from .store_page import StorePage

__all__ = ['StorePage']
