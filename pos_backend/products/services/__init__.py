from .stock import check_availability, current_stock, low_stock_products, restock_product

__all__ = [
    "check_availability",
    "current_stock",
    "low_stock_products",
    "restock_product",
]
