"""
Console package for operator interaction.
"""

from .dial_console import DialConsole

__all__ = ['DialConsole']
