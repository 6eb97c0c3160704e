"""
smschunk - chunked payload transport over SMS.
"""

__version__ = "0.1.0"
