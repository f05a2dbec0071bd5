"""
Configuration package.
"""

from .settings import Settings

__all__ = ['Settings']
