"""
Environment models.

This module provides the standard atmosphere and the wind model.
"""

from .atmosphere import StandardAtmosphere
from .wind import WindModel

__all__ = ['StandardAtmosphere', 'WindModel']
