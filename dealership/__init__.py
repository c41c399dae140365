"""
Dealer Management System: vehicles, customers and contracts over a REST API.
"""
__version__ = "1.0.0"
