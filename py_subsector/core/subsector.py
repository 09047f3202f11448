"""
Subsector generation and text output.

A subsector is a fixed 8x10 grid. About half of the cells hold a star system;
the rest are empty. After all systems are rolled, the route networks are
synthesized and the whole map is written in the text-mapper layout: one line
per system, then the route labels, then an include directive for the map
definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

import structlog
from pydantic import BaseModel, Field

from ..config import settings
from ..utils.random import Seed, new_seed
from .alea_prng import AleaPRNG
from .geometry import GridGeometry, get_geometry
from .name_generator import NameGenerator
from .routes import RouteSynthesizer, SubsectorRoutes
from .system_generator import StarSystem, SystemGenerator, SystemGeneratorOptions

logger = structlog.get_logger()

COLS = 8
ROWS = 10
EMPTY_TAG = "empty"


class SubsectorOptions(BaseModel):
    """Per-run generation options."""

    geometry: Literal["square", "hex"] = Field(
        default="square", description="Grid topology: square or hex"
    )
    density_threshold: int = Field(
        default=3, ge=0, le=6, description="A cell is occupied when 1d6 exceeds this"
    )
    gas_giant_threshold: int = Field(
        default=9, ge=0, description="A gas giant is present when 1d6 is at or below this"
    )
    include_file: str = Field(
        default="traveller.txt", description="File named by the trailing include directive"
    )

    @classmethod
    def from_settings(cls) -> SubsectorOptions:
        return cls(
            geometry=settings.geometry,
            density_threshold=settings.density_threshold,
            gas_giant_threshold=settings.gas_giant_threshold,
            include_file=settings.include_file,
        )


@dataclass
class Subsector:
    """A generated subsector: systems by cell index plus their routes."""

    geometry: GridGeometry
    systems: Dict[int, StarSystem]
    routes: SubsectorRoutes = field(default_factory=SubsectorRoutes)
    include_file: str = "traveller.txt"
    seed: Optional[str] = None

    @property
    def cols(self) -> int:
        return self.geometry.cols

    @property
    def rows(self) -> int:
        return self.geometry.rows

    def tiles(self) -> List[List[str]]:
        """Tags for every cell in index order, ``["empty"]`` for unoccupied cells."""
        return [
            self.systems[i].tags() if i in self.systems else [EMPTY_TAG]
            for i in range(self.geometry.size)
        ]

    def to_text(self) -> str:
        """Serialize to the text-mapper map format."""
        lines = []
        for x in range(self.cols):
            for y in range(self.rows):
                i = x + y * self.cols
                system = self.systems.get(i)
                if system is None:
                    continue
                lines.append(f"{x + 1:02d}{y + 1:02d} " + " ".join(system.tags()))

        text = "".join(line + "\n" for line in lines)
        text += "\n".join(self.routes.all_labels() + [f"\ninclude {self.include_file}\n"])
        return text


class SubsectorGenerator:
    """Rolls the systems of a subsector and connects them."""

    def __init__(
        self,
        prng: Optional[AleaPRNG] = None,
        options: Optional[SubsectorOptions] = None,
        geometry: Optional[GridGeometry] = None,
    ):
        """
        Initialize subsector generator.

        Args:
            prng: Random number generator used for every roll of this map
            options: Generation options
            geometry: Grid geometry; built from ``options.geometry`` if omitted
        """
        self.prng = prng or AleaPRNG("subsector")
        self.options = options or SubsectorOptions()
        self.geometry = geometry or get_geometry(self.options.geometry, COLS, ROWS)
        self.name_generator = NameGenerator(self.prng)

    def populate(self) -> Dict[int, StarSystem]:
        """Roll occupancy for every cell, in random order, and generate the systems."""
        digraphs = self.name_generator.build_digraph_table()
        system_generator = SystemGenerator(
            prng=self.prng,
            name_generator=self.name_generator,
            digraphs=digraphs,
            options=SystemGeneratorOptions(
                gas_giant_threshold=self.options.gas_giant_threshold
            ),
        )

        systems: Dict[int, StarSystem] = {}
        for cell in self.prng.shuffle(range(self.geometry.size)):
            if self.prng.roll1d6() > self.options.density_threshold:
                systems[cell] = system_generator.generate()
        return systems

    def generate_map(self) -> Subsector:
        """Generate systems and routes for a full subsector."""
        logger.info("Starting subsector generation", seed=self.prng.seed)
        systems = self.populate()
        logger.info("Systems generated", systems=len(systems), cells=self.geometry.size)

        routes = RouteSynthesizer(self.geometry).synthesize(systems)
        return Subsector(
            geometry=self.geometry,
            systems=systems,
            routes=routes,
            include_file=self.options.include_file,
            seed=str(self.prng.seed),
        )


def generate_subsector(
    seed: Optional[Seed] = None, options: Optional[SubsectorOptions] = None
) -> Subsector:
    """
    Generate a subsector from a seed.

    Args:
        seed: Seed for reproducible output; falls back to ``settings.default_seed``
              and then to a fresh random seed
        options: Generation options; defaults come from settings

    Returns:
        Generated Subsector
    """
    if seed is None:
        seed = settings.default_seed or new_seed()
    generator = SubsectorGenerator(
        prng=AleaPRNG(seed), options=options or SubsectorOptions.from_settings()
    )
    return generator.generate_map()
