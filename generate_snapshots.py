#!/usr/bin/env python3
"""
Write determinism snapshots of constellation generation.

Generates 30-point constellations for the regression seeds and dumps them as
JSON. Run it on different platforms and diff the outputs: they must match
byte for byte.

Usage:
    python generate_snapshots.py [output_path]

If no output path is provided, the stored test snapshot
(tests/snapshots/constellation_snapshots.json) is rewritten
"""

import json
import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent))

from constellations.core.constellation import make_snapshot
from constellations.utils.logging import configure_logging

SEEDS = [1, 2, 2**63 - 1, -(2**63)]

# Do not use 2000 here, the files become too unwieldy
NUM_POINTS = 30
MAX_NEIGHBOR_COUNT = 2
RADIUS = 5.0


def build_snapshots():
    return [
        make_snapshot(seed, NUM_POINTS, RADIUS, MAX_NEIGHBOR_COUNT).to_dict()
        for seed in SEEDS
    ]


def main():
    default = Path(__file__).parent / "tests" / "snapshots" / "constellation_snapshots.json"
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else default
    configure_logging("WARNING", "plain")

    snapshots = build_snapshots()
    output.write_text(json.dumps(snapshots, indent=2, sort_keys=True))

    for snap in snapshots:
        graph = snap["constellation_graph"]
        sizes = sorted((len(i) for i in graph["islands"]), reverse=True)
        print(
            f"seed={snap['global_seed']}: {len(graph['nodes'])} nodes, "
            f"{len(graph['edges'])} edges, islands={sizes}, chord={graph['chord']}"
        )
    print(f"Wrote {output}")


if __name__ == "__main__":
    main()
