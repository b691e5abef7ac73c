"""
Maintenance desk - ticket lifecycle engine for property maintenance requests
"""
__version__ = "0.1.0"
