from __future__ import annotations

import argparse
import math
import sys

from querybench_probe.benchmark import exceeds_budget, summarize_latency
from querybench_probe.config import ConfigError, load_config
from querybench_probe.db import DatabaseConnectError, connect
from querybench_probe.logging import get_logger
from querybench_probe.report import render_json, render_text
from querybench_probe.sampler import ProbeError, run_probes

logger = get_logger("querybench.cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark round-trip latency of a minimal Postgres query"
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Postgres connection URL. Defaults to DATABASE_URL.",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Number of measured probes. Defaults to ITERATIONS, then 100.",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=None,
        help="Number of unmeasured probes run before measurement.",
    )
    parser.add_argument(
        "--query",
        default=None,
        help="Probe query (default: select 1).",
    )
    parser.add_argument(
        "--p95-budget-ms",
        type=float,
        default=None,
        help="Optional p95 budget. Exits non-zero when exceeded.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON output",
    )
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.p95_budget_ms is not None and not math.isfinite(args.p95_budget_ms):
        print(
            "benchmark-query-latency: --p95-budget-ms must be a finite number",
            file=sys.stderr,
        )
        return 2
    try:
        config = load_config(
            database_url=args.database_url,
            iterations=args.iterations,
            warmup=args.warmup,
            query=args.query,
        )
    except ConfigError as exc:
        print(f"benchmark-query-latency: {exc}", file=sys.stderr)
        return 2

    try:
        conn = connect(
            config.database_url,
            connect_timeout_seconds=config.connect_timeout_seconds,
        )
    except DatabaseConnectError as exc:
        print(f"unable to connect to database: {exc}", file=sys.stderr)
        return 1

    with conn:
        try:
            probe_run = run_probes(
                conn,
                iterations=config.iterations,
                warmup=config.warmup,
                query=config.query,
            )
        except ProbeError as exc:
            print(f"benchmark-query-latency: {exc}", file=sys.stderr)
            return 1

    summary = summarize_latency(probe_run)
    if args.json:
        print(render_json(summary))
    else:
        print(render_text(summary))

    if exceeds_budget(summary, args.p95_budget_ms):
        logger.warning(
            "p95 budget exceeded",
            p95_ms=summary.p95.total_seconds() * 1000,
            budget_ms=args.p95_budget_ms,
        )
        print(
            f"benchmark-query-latency: p95 exceeds budget {args.p95_budget_ms:.2f}ms",
            file=sys.stderr,
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
