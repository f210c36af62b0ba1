#!/usr/bin/env python3
"""Run a hyperembed demo on a random tree-shaped graph."""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def main():
    parser = argparse.ArgumentParser(description="Run hyperembed demo")
    parser.add_argument(
        "--nodes", type=int, default=1000, help="Number of graph nodes (default: 1000)"
    )
    parser.add_argument(
        "--dim", type=int, default=2, help="Poincaré ball dimension (default: 2)"
    )
    parser.add_argument(
        "--batch-size", type=int, default=None, help="Nodes per batch (default: from config)"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    args = parser.parse_args()

    import hyperembed as he
    from hyperembed.storage.codec import read_header

    rng = np.random.default_rng(args.seed)
    directions = rng.normal(size=(args.nodes, args.dim))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    radii = rng.uniform(0.0, 0.95, size=(args.nodes, 1))
    nodes = (directions * radii).tolist()
    edges = [(int(rng.integers(0, i)), i) for i in range(1, args.nodes)]

    provider = he.OptimizedProvider()
    points = provider.generate_batch_embeddings(
        {"nodes": nodes, "edges": edges}, batch_size=args.batch_size, show_progress=True
    )
    print(f"✓ Projected {len(points)} nodes onto the hyperboloid")

    buffer = he.encode_embeddings(points)
    header = read_header(buffer)
    print(f"✓ Encoded {header.record_count} x {header.dimension} ({header.total_size} bytes)")

    decoded = he.decode_embeddings(buffer)
    exact = all(np.array_equal(e.to_numpy(), p) for e, p in zip(decoded, points))
    print(f"✓ Decoded {len(decoded)} embeddings (bit-exact: {exact})")

    for index, distance in provider.find_similar(points, query_index=0, k=5):
        print(f"  node {index}: d = {distance:.4f}")


if __name__ == "__main__":
    main()
