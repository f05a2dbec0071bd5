"""
Search package for brute-forcing the combination space.
"""

from .search_driver import SearchDriver, iter_candidates

__all__ = ['SearchDriver', 'iter_candidates']
