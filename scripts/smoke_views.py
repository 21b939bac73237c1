#!/usr/bin/env python3
"""Smoke test for views over a population hierarchy.

Builds islands of random genomes, views the whole archipelago from
several threads sharing one pool, and checks every result against a
two-pass numpy computation.

Usage:
    python scripts/smoke_views.py [--islands N] [--size N] [--threads N]

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import numpy as np

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from evoview.config import PoolSettings  # noqa: E402
from evoview.genomes import StaticPopulation, genomes_from_values  # noqa: E402
from evoview.models.types import ViewSummary  # noqa: E402
from evoview.stats.pool import ViewPool  # noqa: E402
from evoview.stats.view import new_view  # noqa: E402

logger = logging.getLogger("smoke_views")

TOLERANCE = 1e-9


def build_archipelago(
    rng: np.random.Generator, islands: int, size: int, pool: ViewPool
) -> tuple[list[StaticPopulation], np.ndarray]:
    """Create islands of genomes and the flat array of their fitness."""
    populations = []
    chunks = []
    for _ in range(islands):
        values = rng.normal(loc=rng.uniform(-10, 10), scale=rng.uniform(0.5, 3.0), size=size)
        populations.append(StaticPopulation(genomes_from_values(values), pool=pool))
        chunks.append(values)
    return populations, np.concatenate(chunks)


def view_once(populations: list[StaticPopulation], pool: ViewPool) -> ViewSummary:
    """View the whole archipelago and return a detached summary."""
    with new_view(populations, pool=pool) as view:
        return view.summary()


def check_summary(summary: ViewSummary, values: np.ndarray) -> bool:
    """Compare a summary with numpy's two-pass statistics."""
    expected = {
        "size": len(values),
        "mean": float(np.mean(values)),
        "variance": float(np.var(values)),
        "max_fitness": float(np.max(values)),
        "min_fitness": float(np.min(values)),
    }
    ok = True
    for name, want in expected.items():
        got = getattr(summary, name)
        if abs(got - want) > TOLERANCE * max(1.0, abs(want)):
            print(f"FAIL: {name}={got} expected {want}")
            ok = False
    return ok


def main(argv: list[str] | None = None) -> int:
    """Run smoke checks."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--islands", type=int, default=8)
    parser.add_argument("--size", type=int, default=250)
    parser.add_argument("--threads", type=int, default=4)
    parser.add_argument("--rounds", type=int, default=50)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("evoview smoke test")
    print("=" * 60)

    pool = ViewPool(PoolSettings(max_idle=args.threads * 2))
    rng = np.random.default_rng(0)
    populations, values = build_archipelago(rng, args.islands, args.size, pool)
    logger.info(f"Built {args.islands} islands, {len(values)} genomes")

    with ThreadPoolExecutor(max_workers=args.threads) as executor:
        summaries = list(executor.map(lambda _: view_once(populations, pool), range(args.rounds)))

    checks_passed = 0
    checks_failed = 0
    for summary in summaries:
        if check_summary(summary, values):
            checks_passed += 1
        else:
            checks_failed += 1

    if checks_failed == 0:
        print(f"OK: {checks_passed} views match two-pass statistics")
    else:
        print(f"FAIL: {checks_failed} of {len(summaries)} views differ from two-pass statistics")
    print(f"    Idle storage in pool: {pool.idle_count}")
    print(
        f"    Last summary: max={summaries[-1].max_fitness:f} "
        f"min={summaries[-1].min_fitness:f} sd={summaries[-1].std_deviation:f}"
    )

    print("\n" + "=" * 60)
    if checks_failed == 0:
        print(f"RESULT: ALL PASSED ({checks_passed} checks)")
        print("=" * 60)
        return 0
    else:
        print(f"RESULT: {checks_passed} passed, {checks_failed} failed")
        print("=" * 60)
        return 1


if __name__ == "__main__":
    sys.exit(main())
