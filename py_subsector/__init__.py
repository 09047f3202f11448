"""
Traveller subsector generator.

Rolls an 8x10 subsector of star systems and connects them with communication,
trade and rich-trade routes.
"""

from .core import Subsector, SubsectorOptions, generate_subsector

__version__ = "0.1.0"

__all__ = ['Subsector', 'SubsectorOptions', 'generate_subsector', '__version__']
