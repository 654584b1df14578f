"""Reproducible random order files for benchmarking the order book."""

from __future__ import annotations

import argparse
import random
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Optional

DEFAULT_SEED = 12345
HEADER = "SIDE,PRICE,QUANTITY,TYPE,TIF"

#: File names and order counts written by the command.
DATASETS = (
    ("orders_small.csv", 1_000),
    ("orders_medium.csv", 10_000),
    ("orders_large.csv", 100_000),
)

_SIDES = ("BUY", "SELL")
_TIFS = ("GTC", "IOC", "FOK")
_MIN_PRICE = 500.0
_MAX_PRICE = 540.0
_MIN_QTY = 10
_MAX_QTY = 500


def generate_orders(
    num_orders: int, seed: int = DEFAULT_SEED
) -> Iterator[tuple[str, float, int, str, str]]:
    """Yield (side, price, quantity, type, tif) rows of random limit orders.

    The same seed always yields the same rows.
    """
    rng = random.Random(seed)
    for _ in range(num_orders):
        side = rng.choice(_SIDES)
        price = _MIN_PRICE + rng.random() * (_MAX_PRICE - _MIN_PRICE)
        quantity = rng.randint(_MIN_QTY, _MAX_QTY)
        tif = rng.choice(_TIFS)
        yield side, price, quantity, "LIMIT", tif


def write_csv(path, num_orders: int, seed: int = DEFAULT_SEED) -> Path:
    """Write a CSV file of random orders and return its path."""
    target = Path(path)
    with target.open("w", encoding="utf-8", newline="") as handle:
        handle.write(HEADER + "\n")
        for side, price, quantity, order_type, tif in generate_orders(num_orders, seed):
            handle.write(f"{side},{price:.2f},{quantity},{order_type},{tif}\n")
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate CSV files of test orders.")
    parser.add_argument(
        "--directory", default=".", help="directory to write the files into"
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    args = parser.parse_args(argv)

    directory = Path(args.directory)
    print("=== Generating CSV Test Files ===\n")
    for name, count in DATASETS:
        try:
            path = write_csv(directory / name, count, args.seed)
        except OSError as exc:
            print(f"Failed to create {directory / name}: {exc}", file=__import_stderr())
            return 1
        print(f"✓ Created {path} with {count} orders")

    print("\n✅ All CSV files generated successfully!")
    print("These files contain randomized orders for performance testing.")
    return 0


def __import_stderr():
    import sys

    return sys.stderr


if __name__ == "__main__":
    raise SystemExit(main())