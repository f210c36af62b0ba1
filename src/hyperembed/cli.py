"""Command-line interface for hyperembed."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from hyperembed.core.errors import HyperembedError
from hyperembed.core.graph import Graph
from hyperembed.embeddings.projection import ProjectionEngine
from hyperembed.embeddings.provider import OptimizedProvider
from hyperembed.storage.codec import decode_embeddings, encode_embeddings
from hyperembed.storage.config import EngineConfig

logger = logging.getLogger(__name__)


def parse_coords(text: str) -> list[float]:
    """Parse a comma-separated list of numbers such as ``"0.1,0.2"``."""
    try:
        return [float(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a comma-separated list of numbers: {text!r}") from exc


def format_coords(values) -> str:
    return ",".join(repr(float(v)) for v in values)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hyperembed",
        description="hyperembed - Hyperbolic embedding projection and binary codec",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: HYPEREMBED_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    project_parser = subparsers.add_parser("project", help="Lift a Poincaré-ball point")
    project_parser.add_argument("coords", type=parse_coords, help="Ball point, e.g. 0.1,0.2")

    unproject_parser = subparsers.add_parser(
        "unproject", help="Map a Lorentz point back into the ball"
    )
    unproject_parser.add_argument("coords", type=parse_coords, help="Lorentz point, x0 first")

    distance_parser = subparsers.add_parser("distance", help="Geodesic distance of two points")
    distance_parser.add_argument("a", type=parse_coords)
    distance_parser.add_argument("b", type=parse_coords)
    distance_parser.add_argument(
        "--poincare",
        action="store_true",
        help="Treat inputs as ball points and lift them first",
    )

    encode_parser = subparsers.add_parser("encode", help="Encode a JSON list of vectors")
    encode_parser.add_argument("input", type=Path, help="JSON file with a list of vectors")
    encode_parser.add_argument("output", type=Path, help="Binary output file")

    decode_parser = subparsers.add_parser("decode", help="Decode a binary buffer to JSON")
    decode_parser.add_argument("input", type=Path, help="Binary input file")
    decode_parser.add_argument(
        "-o", "--output", type=Path, default=None, help="JSON output file (default: stdout)"
    )

    embed_parser = subparsers.add_parser("embed", help="Project a graph file and encode it")
    embed_parser.add_argument("graph", type=Path, help='JSON file with "nodes" and "edges"')
    embed_parser.add_argument("output", type=Path, help="Binary output file")
    embed_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Nodes per batch (default: HYPEREMBED_BATCH_SIZE or 256)",
    )
    embed_parser.add_argument("--progress", action="store_true", help="Show a progress bar")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = EngineConfig.default()
        if args.log_level:
            config.log_level = args.log_level.upper()
        logging.basicConfig(level=config.log_level)
        engine = ProjectionEngine(tolerance=config.tolerance)

        if args.command == "project":
            print(format_coords(engine.project_to_hyperbolic(args.coords)))
        elif args.command == "unproject":
            print(format_coords(engine.project_from_hyperbolic(args.coords)))
        elif args.command == "distance":
            run_distance(engine, args.a, args.b, args.poincare)
        elif args.command == "encode":
            run_encode(args.input, args.output)
        elif args.command == "decode":
            run_decode(args.input, args.output)
        elif args.command == "embed":
            run_embed(config, engine, args.graph, args.output, args.batch_size, args.progress)
    except HyperembedError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def run_distance(engine: ProjectionEngine, a: list[float], b: list[float], poincare: bool):
    """Print the geodesic distance between two points."""
    if poincare:
        a = engine.project_to_hyperbolic(a)
        b = engine.project_to_hyperbolic(b)
    print(repr(engine.compute_hyperbolic_distance(a, b)))


def run_encode(input_path: Path, output_path: Path):
    """Encode a JSON list of vectors to the binary format."""
    vectors = json.loads(input_path.read_text())
    buffer = encode_embeddings(vectors)
    output_path.write_bytes(buffer)
    print(f"✓ Encoded {len(vectors)} vectors to {output_path} ({len(buffer)} bytes)")


def run_decode(input_path: Path, output_path: Path | None):
    """Decode a binary buffer to a JSON list of vectors."""
    embeddings = decode_embeddings(input_path.read_bytes())
    payload = json.dumps([list(embedding.vector) for embedding in embeddings])
    if output_path is None:
        print(payload)
    else:
        output_path.write_text(payload)
        print(f"✓ Decoded {len(embeddings)} vectors to {output_path}")


def run_embed(
    config: EngineConfig,
    engine: ProjectionEngine,
    graph_path: Path,
    output_path: Path,
    batch_size: int | None,
    show_progress: bool,
):
    """Project every node of a graph file and write the encoded points."""
    graph = Graph.from_input(json.loads(graph_path.read_text()))
    provider = OptimizedProvider(config=config, engine=engine)
    points = provider.generate_batch_embeddings(
        graph, batch_size=batch_size, show_progress=show_progress
    )
    buffer = encode_embeddings(points, dimension=len(graph.nodes[0]) + 1 if graph.nodes else None)
    output_path.write_bytes(buffer)
    print(f"✓ Embedded {len(points)} nodes to {output_path} ({len(buffer)} bytes)")


if __name__ == "__main__":
    sys.exit(main())
