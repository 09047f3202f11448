"""
Core subsector generation functionality.
"""

from .alea_prng import AleaPRNG
from .geometry import GridGeometry, SquareGeometry, HexGeometry, get_geometry
from .name_generator import DigraphTable, NameGenerator
from .system_generator import (
    StarSystem, Starport, WorldFlag, SystemGenerator, SystemGeneratorOptions,
    encode_code, decode_code,
)
from .routes import RouteKind, Route, RouteSynthesizer, SubsectorRoutes, minimum_spanning_forest
from .subsector import Subsector, SubsectorGenerator, SubsectorOptions, generate_subsector

__all__ = ['AleaPRNG',
           'GridGeometry', 'SquareGeometry', 'HexGeometry', 'get_geometry',
           'DigraphTable', 'NameGenerator',
           'StarSystem', 'Starport', 'WorldFlag', 'SystemGenerator', 'SystemGeneratorOptions',
           'encode_code', 'decode_code',
           'RouteKind', 'Route', 'RouteSynthesizer', 'SubsectorRoutes', 'minimum_spanning_forest',
           'Subsector', 'SubsectorGenerator', 'SubsectorOptions', 'generate_subsector']
