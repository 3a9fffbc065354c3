from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from route_engine.engine import ShortestPathEngine
from route_engine.errors import GraphDataError
from route_engine.graph_loader import load_graph
from route_engine.logging_utils import configure_logging


def run_find_path(args: argparse.Namespace) -> dict[str, Any]:
    start = str(args.start).strip()
    end = str(args.end).strip()
    if not start or not end:
        raise ValueError("start and end must not be empty")

    graph = load_graph(Path(args.graph).resolve())
    result, stats = ShortestPathEngine().find_path_with_stats(graph, start, end)
    return {
        "graph": str(Path(args.graph).resolve()),
        "start": start,
        "end": end,
        **result.as_dict(),
        "stats": stats,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the lowest-cost path between two nodes of a JSON graph.")
    parser.add_argument("--graph", required=True, help="JSON file with 'nodes' and 'edges'")
    parser.add_argument("--start", required=True)
    parser.add_argument("--end", required=True)
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL, e.g. WARNING to silence query events")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    if args.log_level:
        configure_logging(level=args.log_level)
    try:
        payload = run_find_path(args)
    except GraphDataError as e:
        print(json.dumps({"reason_code": e.reason_code, "error": e.message}), file=sys.stderr)
        return 2
    except ValueError as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 2
    print(json.dumps(payload, indent=2))
    return 0 if payload["reachable"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
