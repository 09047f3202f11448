#!/usr/bin/env python3
"""
Simple demo script showing subsector generation.
"""

from collections import Counter

from py_subsector.config import configure_logging
from py_subsector.core import SubsectorOptions, generate_subsector


def main():
    """Demonstrate subsector generation."""
    configure_logging("WARNING")

    print("Py-Subsector Generation Demo")
    print("=" * 40)

    for geometry in ("square", "hex"):
        subsector = generate_subsector("demo123", SubsectorOptions(geometry=geometry))

        print(f"\n{geometry.upper()} grid:")
        print("-" * 30)
        ports = Counter(system.starport.value for system in subsector.systems.values())
        print(f"  Systems: {len(subsector.systems)} of {subsector.cols * subsector.rows} cells")
        print(f"  Starports: {', '.join(f'{k}={ports[k]}' for k in sorted(ports))}")
        print(f"  Communication routes: {len(subsector.routes.communication)}")
        print(f"  Trade routes: {len(subsector.routes.trade)}")
        print(f"  Rich trade routes: {len(subsector.routes.rich_trade)}")

    print("\nMap text:")
    print("-" * 30)
    print(subsector.to_text())


if __name__ == "__main__":
    main()
