"""
hrgraph backend
Accounts and employee records served over GraphQL
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
