"""
Completion progress block for course pages.
"""

__version__ = '0.1.0'
