"""
Bakery back office: products, customers and markets
"""
__version__ = "1.0.0"
