"""
Star system generation following the classic Traveller world rules.

A handful of 2d6 rolls is turned into a complete world: physical codes,
social codes, starport and bases, tech level, trade classifications and
travel zone. The numeric record is the source of truth; classification flags
and the textual tags are derived from it on demand.

Roll order matters for reproducibility and must not be changed:
size, atmosphere, hydrographics, population, government, law, starport,
tech die, base rolls, gas giant, name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .alea_prng import AleaPRNG
from .name_generator import DigraphTable, NameGenerator

logger = structlog.get_logger()

MAX_CODE = 15
DIGITS = "0123456789ABCDEF"


def encode_code(value: int) -> str:
    """Encode 0-15 as a single digit, 10 and up as A-F. Out of range values are clamped."""
    return DIGITS[min(MAX_CODE, max(0, value))]


def decode_code(char: str) -> int:
    """Inverse of ``encode_code``."""
    value = DIGITS.find(char.upper())
    if len(char) != 1 or value < 0:
        raise ValueError(f"Not a profile digit: {char!r}")
    return value


class Starport(str, Enum):
    """Starport classes, A best, X none."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    X = "X"


class WorldFlag(str, Enum):
    """Derived classifications of a world. Values are the tag texts."""

    GAS = "gas"
    ASTEROID = "asteroid"
    VACUUM = "vacuum"
    WATER = "water"
    DESERT = "desert"
    ICE = "ice"
    FLUID = "fluid"
    BARREN = "barren"
    LOW = "low"
    HIGH = "high"
    AGRICULTURE = "agriculture"
    NON_AGRICULTURE = "non-agriculture"
    INDUSTRIAL = "industrial"
    NON_INDUSTRIAL = "non-industrial"
    RICH = "rich"
    POOR = "poor"
    NAVAL = "naval"
    SCOUT = "scout"
    RESEARCH = "research"
    PIRATE = "pirate"
    AMBER = "amber"


# Extra tag emitted next to a pirate base.
RED_ZONE_TAG = "red"


@dataclass(frozen=True)
class StarportProfile:
    """Tech bonus and 2d6 base thresholds for one starport class (None: never)."""

    tech_bonus: int
    scout: Optional[int] = None
    naval: Optional[int] = None
    research: Optional[int] = None
    pirate: Optional[int] = None


STARPORT_TABLE: Dict[Starport, StarportProfile] = {
    Starport.A: StarportProfile(tech_bonus=6, scout=10, naval=8, research=8),
    Starport.B: StarportProfile(tech_bonus=4, scout=9, naval=8, research=10),
    Starport.C: StarportProfile(tech_bonus=2, scout=8, research=10, pirate=12),
    Starport.D: StarportProfile(tech_bonus=0, scout=7, pirate=10),
    Starport.E: StarportProfile(tech_bonus=0, pirate=10),
    Starport.X: StarportProfile(tech_bonus=-4),
}


def starport_for_roll(roll: int) -> Starport:
    """Map a 2d6 starport roll to its class."""
    if roll <= 4:
        return Starport.A
    if roll <= 6:
        return Starport.B
    if roll <= 8:
        return Starport.C
    if roll <= 9:
        return Starport.D
    if roll <= 11:
        return Starport.E
    return Starport.X


def tech_level_modifier(
    size: int, atmosphere: int, hydrographics: int, population: int, government: int
) -> int:
    """Tech level modifier from the world's physical and social codes."""
    dm = 0
    if size <= 4:
        dm += 1
    if size <= 1:
        dm += 1
    if atmosphere <= 3 or atmosphere >= 10:
        dm += 1
    if hydrographics >= 9:
        dm += 1
    if hydrographics >= 10:
        dm += 1
    if 1 <= population <= 5:
        dm += 1
    if population >= 9:
        dm += 2
    if population >= 10:
        dm += 2
    if government in (0, 5):
        dm += 1
    if government == 13:
        dm -= 2
    return dm


class StarSystem(BaseModel):
    """A single world and everything the rules derive from it."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(description="Size code")
    atmosphere: int = Field(description="Atmosphere code")
    hydrographics: int = Field(description="Hydrographics code")
    population: int = Field(description="Population code")
    government: int = Field(description="Government code")
    law: int = Field(description="Law level")
    tech: int = Field(description="Tech level")
    starport: Starport = Field(description="Starport class")
    naval_base: bool = Field(default=False, description="Naval base present")
    scout_base: bool = Field(default=False, description="Scout base present")
    research_base: bool = Field(default=False, description="Research base present")
    pirate_base: bool = Field(default=False, description="Pirate base present")
    gas_giant: bool = Field(default=True, description="Gas giant in the system")
    name: str = Field(default="", description="System name")

    @field_validator(
        "size", "atmosphere", "hydrographics", "population", "government", "law", "tech"
    )
    @classmethod
    def _clamp_code(cls, value: int) -> int:
        return min(MAX_CODE, max(0, value))

    @model_validator(mode="after")
    def _no_bases_without_starport(self) -> "StarSystem":
        if self.starport is Starport.X and (
            self.naval_base or self.scout_base or self.research_base or self.pirate_base
        ):
            raise ValueError("A system without a starport cannot host bases")
        return self

    @property
    def has_starport(self) -> bool:
        return self.starport is not Starport.X

    @property
    def uwp(self) -> str:
        """Universal World Profile, e.g. ``A788899-C``."""
        codes = (
            self.size,
            self.atmosphere,
            self.hydrographics,
            self.population,
            self.government,
            self.law,
        )
        return (
            self.starport.value
            + "".join(encode_code(c) for c in codes)
            + "-"
            + encode_code(self.tech)
        )

    @property
    def flags(self) -> FrozenSet[WorldFlag]:
        return frozenset(self._derive_flags())

    def _derive_flags(self) -> List[WorldFlag]:
        atm = self.atmosphere
        hyd = self.hydrographics
        pop = self.population
        gov = self.government
        law = self.law

        checks = [
            (WorldFlag.GAS, self.gas_giant),
            (WorldFlag.ASTEROID, self.size == 0),
            (WorldFlag.VACUUM, atm == 0),
            (WorldFlag.WATER, hyd == 10),
            (WorldFlag.DESERT, atm >= 2 and hyd == 0),
            (WorldFlag.ICE, hyd >= 1 and atm <= 1),
            (WorldFlag.FLUID, hyd >= 1 and atm >= 10),
            (WorldFlag.BARREN, pop == 0 and gov == 0 and law == 0),
            (WorldFlag.LOW, 1 <= pop <= 3),
            (WorldFlag.HIGH, pop >= 9),
            (WorldFlag.AGRICULTURE, 4 <= atm <= 9 and 4 <= hyd <= 8 and 5 <= pop <= 7),
            (WorldFlag.NON_AGRICULTURE, atm <= 3 and hyd <= 3 and pop >= 6),
            (WorldFlag.INDUSTRIAL, atm in (0, 1, 2, 4, 7, 9) and pop >= 9),
            (WorldFlag.NON_INDUSTRIAL, pop <= 6),
            (WorldFlag.RICH, 4 <= gov <= 9 and atm in (6, 8) and 6 <= pop <= 8),
            (WorldFlag.POOR, 2 <= atm <= 5 and hyd <= 3),
            (WorldFlag.NAVAL, self.naval_base),
            (WorldFlag.SCOUT, self.scout_base),
            (WorldFlag.RESEARCH, self.research_base),
            (WorldFlag.PIRATE, self.pirate_base),
            (
                WorldFlag.AMBER,
                not self.pirate_base
                and (
                    atm >= 10
                    or (pop > 0 and gov == 0)
                    or (pop > 0 and law == 0)
                    or gov in (7, 10)
                    or law >= 9
                ),
            ),
        ]
        return [flag for flag, present in checks if present]

    def tags(self) -> List[str]:
        """Textual tags in the order renderers expect."""
        flags = self.flags
        tags: List[str] = []

        def add(flag: WorldFlag) -> None:
            if flag in flags:
                tags.append(flag.value)

        add(WorldFlag.GAS)
        tags.append("size-" + encode_code(self.size))
        add(WorldFlag.ASTEROID)
        tags.append("atmosphere-" + encode_code(self.atmosphere))
        add(WorldFlag.VACUUM)
        tags.append("hydrosphere-" + encode_code(self.hydrographics))
        for flag in (WorldFlag.WATER, WorldFlag.DESERT, WorldFlag.ICE, WorldFlag.FLUID):
            add(flag)
        tags.append("population-" + encode_code(self.population))
        for flag in (
            WorldFlag.BARREN,
            WorldFlag.LOW,
            WorldFlag.HIGH,
            WorldFlag.AGRICULTURE,
            WorldFlag.NON_AGRICULTURE,
            WorldFlag.INDUSTRIAL,
            WorldFlag.NON_INDUSTRIAL,
            WorldFlag.RICH,
            WorldFlag.POOR,
        ):
            add(flag)
        tags.append("tech-" + encode_code(self.tech))
        tags.append("government-" + encode_code(self.government))
        tags.append("starport-" + self.starport.value)
        tags.append("law-" + encode_code(self.law))
        for flag in (WorldFlag.NAVAL, WorldFlag.SCOUT, WorldFlag.RESEARCH):
            add(flag)
        if WorldFlag.PIRATE in flags:
            tags.extend([WorldFlag.PIRATE.value, RED_ZONE_TAG])
        add(WorldFlag.AMBER)
        tags.append(f'name="{self.name}"')
        tags.append(f'uwp="{self.uwp}"')
        return tags


class SystemGeneratorOptions(BaseModel):
    """Tunable thresholds of system generation."""

    gas_giant_threshold: int = Field(
        default=9,
        description="A gas giant is present when 1d6 rolls at or below this",
    )


class SystemGenerator:
    """Rolls up star systems with a shared PRNG and digraph table."""

    def __init__(
        self,
        prng: Optional[AleaPRNG] = None,
        name_generator: Optional[NameGenerator] = None,
        digraphs: Optional[DigraphTable] = None,
        options: Optional[SystemGeneratorOptions] = None,
    ):
        """
        Initialize system generator.

        Args:
            prng: Random number generator for all rolls
            name_generator: Name generator; shares ``prng`` when omitted
            digraphs: Digraph table of the subsector; built on first use if omitted
            options: Generation thresholds
        """
        self.prng = prng or AleaPRNG("systems")
        self.name_generator = name_generator or NameGenerator(self.prng)
        self.digraphs = digraphs
        self.options = options or SystemGeneratorOptions()

    def generate(self) -> StarSystem:
        """Roll one star system."""
        roll2d6 = self.prng.roll2d6

        size = roll2d6() - 2
        atmosphere = max(0, roll2d6() - 7 + size)
        if size == 0:
            atmosphere = 0

        hydrographics = roll2d6() - 7 + atmosphere
        if atmosphere < 2 or atmosphere >= 10:
            hydrographics -= 4
        if hydrographics < 0 or size < 2:
            hydrographics = 0
        if hydrographics > 10:
            hydrographics = 10

        population = roll2d6() - 2
        government = max(0, roll2d6() - 7 + population)
        law = max(0, roll2d6() - 7 + government)

        starport = starport_for_roll(roll2d6())
        tech = self.prng.roll1d6()
        profile = STARPORT_TABLE[starport]
        tech += profile.tech_bonus
        scout_base = self._roll_base(profile.scout)
        naval_base = self._roll_base(profile.naval)
        research_base = self._roll_base(profile.research)
        pirate_base = self._roll_base(profile.pirate)

        tech += tech_level_modifier(size, atmosphere, hydrographics, population, government)
        tech = max(0, tech)

        # the threshold may exceed six, in which case a gas giant is certain
        gas_giant = self.prng.roll1d6() <= self.options.gas_giant_threshold

        if self.digraphs is None:
            self.digraphs = self.name_generator.build_digraph_table()
        name = self.name_generator.generate_name(self.digraphs)
        if population >= 9:
            name = name.upper()

        system = StarSystem(
            size=size,
            atmosphere=atmosphere,
            hydrographics=hydrographics,
            population=population,
            government=government,
            law=law,
            tech=tech,
            starport=starport,
            naval_base=naval_base,
            scout_base=scout_base,
            research_base=research_base,
            pirate_base=pirate_base,
            gas_giant=gas_giant,
            name=name,
        )
        logger.debug("System generated", name=system.name, uwp=system.uwp)
        return system

    def _roll_base(self, threshold: Optional[int]) -> bool:
        if threshold is None:
            return False
        return self.prng.roll2d6() >= threshold
