"""Replay order files through the book and render an HTML performance report."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from matchbook.book import (
    TICK_PRECISION,
    Order,
    OrderBook,
    OrderRejected,
    OrderType,
    Side,
    TimeInForce,
)

_LIQUIDITY_OWNER = 999
_CSV_OWNER = 1


@dataclass
class TestResult:
    """Timing and fill figures for one replayed order file."""

    __test__ = False

    orders_processed: int = 0
    fills_generated: int = 0
    total_time_ms: float = 0.0
    avg_latency_ns: float = 0.0
    median_latency_ns: float = 0.0
    p95_latency_ns: float = 0.0
    p99_latency_ns: float = 0.0
    throughput_per_sec: float = 0.0


class WebDemo:
    """Feeds CSV order files into a single order book and measures latency."""

    def __init__(self) -> None:
        self.book = OrderBook(200_000)
        self.next_order_id = 1000

    def parse_line(self, line: str) -> Optional[Order]:
        """Turn one CSV row into an order, or None if a required field is empty."""
        fields = line.rstrip("\r\n").split(",")
        fields += [""] * (5 - len(fields))
        side_str, price_str, qty_str, _type_str, tif_str = fields[:5]
        if not side_str or not price_str or not qty_str:
            return None

        side = Side.BUY if side_str == "BUY" else Side.SELL
        price = float(price_str)
        quantity = int(qty_str)
        tif = {"IOC": TimeInForce.IOC, "FOK": TimeInForce.FOK}.get(
            tif_str.strip(), TimeInForce.GTC
        )

        order = Order(
            id=self.next_order_id,
            side=side,
            price_tick=int(price * TICK_PRECISION),
            quantity=quantity,
            order_type=OrderType.LIMIT,
            tif=tif,
            owner_id=_CSV_OWNER,
        )
        self.next_order_id += 1
        return order

    def run_csv_test(self, path) -> TestResult:
        """Replay an order file and return its timing statistics.

        Raises OSError if the file cannot be read and ValueError if it holds
        no orders.
        """
        path = Path(path)
        print(f"Processing {path}...")
        self._setup_liquidity()

        with path.open(encoding="utf-8") as handle:
            next(handle, None)  # header
            orders = [order for order in map(self.parse_line, handle) if order is not None]

        if not orders:
            raise ValueError(f"no valid orders found in {path}")

        latencies: list[int] = []
        total_fills = 0
        start = time.perf_counter_ns()
        for order in orders:
            order_start = time.perf_counter_ns()
            try:
                fills = self.book.submit_order(order)
            except OrderRejected:
                fills = []
            latencies.append(time.perf_counter_ns() - order_start)
            total_fills += len(fills)
        total_time_ms = (time.perf_counter_ns() - start) / 1e6

        latencies.sort()
        count = len(latencies)
        result = TestResult(
            orders_processed=count,
            fills_generated=total_fills,
            total_time_ms=total_time_ms,
            avg_latency_ns=sum(latencies) / count,
            median_latency_ns=latencies[count // 2],
            p95_latency_ns=latencies[int(count * 0.95)],
            p99_latency_ns=latencies[int(count * 0.99)],
            throughput_per_sec=(
                count * 1000.0 / total_time_ms if total_time_ms > 0 else float("inf")
            ),
        )

        print(f"  Processed: {result.orders_processed} orders")
        print(f"  Avg Latency: {int(result.avg_latency_ns)} ns")
        print(f"  Throughput: {result.throughput_per_sec:.0f} orders/sec\n")
        return result

    def _setup_liquidity(self) -> None:
        for i in range(50):
            for side, price in (
                (Side.BUY, (52000 - i * 10) * TICK_PRECISION),
                (Side.SELL, (52001 + i * 10) * TICK_PRECISION),
            ):
                self.book.submit_order(
                    Order(
                        id=self.next_order_id,
                        side=side,
                        price_tick=price,
                        quantity=100 + i * 5,
                        order_type=OrderType.LIMIT,
                        tif=TimeInForce.GTC,
                        owner_id=_LIQUIDITY_OWNER,
                    )
                )
                self.next_order_id += 1


_PAGE_HEAD = """<!DOCTYPE html>
<html>
<head>
    <title>Order Book Performance Demo</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 40px 20px;
        }
        .header { text-align: center; color: white; margin-bottom: 40px; }
        .header h1 { font-size: 2.5em; margin-bottom: 10px; }
        .header p { font-size: 1.2em; opacity: 0.9; }
        .container {
            max-width: 1400px;
            margin: 0 auto;
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(350px, 1fr));
            gap: 30px;
        }
        .card {
            background: white;
            border-radius: 15px;
            padding: 30px;
            box-shadow: 0 10px 40px rgba(0,0,0,0.2);
            transition: transform 0.3s ease;
        }
        .card:hover { transform: translateY(-5px); }
        .card h2 {
            color: #667eea;
            margin-bottom: 25px;
            font-size: 1.8em;
            border-bottom: 3px solid #667eea;
            padding-bottom: 10px;
        }
        .metric {
            margin: 20px 0;
            padding: 15px;
            background: linear-gradient(135deg, #f5f7fa 0%, #c3cfe2 100%);
            border-radius: 8px;
            border-left: 5px solid #667eea;
        }
        .metric-label { font-size: 0.95em; color: #666; font-weight: 600; margin-bottom: 5px; }
        .metric-value { font-size: 2em; font-weight: bold; color: #333; }
        .highlight {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            padding: 5px 12px;
            border-radius: 5px;
            display: inline-block;
        }
        .badge {
            display: inline-block;
            padding: 5px 15px;
            border-radius: 20px;
            font-size: 0.85em;
            font-weight: bold;
            margin-top: 10px;
        }
        .badge-small { background: #e3f2fd; color: #1976d2; }
        .badge-medium { background: #fff3e0; color: #f57c00; }
        .badge-large { background: #fce4ec; color: #c2185b; }
        .footer { text-align: center; margin-top: 50px; color: white; }
        .footer h3 { font-size: 1.5em; margin-bottom: 15px; }
        .footer p { font-size: 1.1em; margin: 10px 0; opacity: 0.9; }
    </style>
</head>
<body>
    <div class="header">
        <h1>🏆 High-Performance Order Book Demo</h1>
        <p>Real-time performance metrics across different order volumes</p>
    </div>

    <div class="container">
"""

_PAGE_FOOT = """
    </div>

    <div class="footer">
        <h3>🎯 Key Performance Insights</h3>
        <p><strong>Linear Scalability:</strong> Latency scales predictably with order book depth</p>
        <p><strong>Linear Scalability:</strong> Throughput scales efficiently from 1K to 100K orders</p>
        <p><strong>Production-Ready:</strong> Demonstrates institutional-grade HFT capabilities</p>
    </div>
</body>
</html>
"""


def _metric(label: str, value: str) -> str:
    return f"""            <div class="metric">
                <div class="metric-label">{label}</div>
                <div class="metric-value">{value}</div>
            </div>
"""


def _card(title: str, badge: str, badge_text: str, result: TestResult) -> str:
    metrics = "".join(
        [
            _metric(
                "Average Latency",
                f'<span class="highlight">{int(result.avg_latency_ns)} ns</span>',
            ),
            _metric("Median Latency", f"{int(result.median_latency_ns)} ns"),
            _metric("P99 Latency", f"{int(result.p99_latency_ns)} ns"),
            _metric("Throughput", f"{result.throughput_per_sec:.0f} ops/s"),
            _metric("Total Time", f"{result.total_time_ms:.2f} ms"),
            _metric("Fills Generated", f"{result.fills_generated}"),
        ]
    )
    return f"""
        <div class="card">
            <h2>{title}</h2>
            <span class="badge badge-{badge}">{badge_text}</span>
{metrics}        </div>
"""


def generate_html(small: TestResult, medium: TestResult, large: TestResult) -> str:
    """Render the three results as a standalone HTML page."""
    return (
        _PAGE_HEAD
        + _card("Small Test", "small", "1,000 Orders", small)
        + _card("Medium Test", "medium", "10,000 Orders", medium)
        + _card("Large Test", "large", "100,000 Orders", large)
        + _PAGE_FOOT
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay order files and write an HTML report.")
    parser.add_argument("--directory", default=".", help="directory holding the order files")
    parser.add_argument("--output", default="performance_report.html")
    args = parser.parse_args(argv)

    directory = Path(args.directory)
    print("=== Order Book Performance Demo ===\n")
    demo = WebDemo()
    print("Running performance tests...\n")

    results = []
    for name in ("orders_small.csv", "orders_medium.csv", "orders_large.csv"):
        try:
            results.append(demo.run_csv_test(directory / name))
        except (OSError, ValueError) as exc:
            print(f"Failed to process {directory / name}: {exc}", file=sys.stderr)
            results.append(TestResult())
    small, medium, large = results

    output = Path(args.output)
    output.write_text(generate_html(small, medium, large), encoding="utf-8")

    print("=== Results Summary ===")
    print(f"Performance report generated: {output}")
    print("Open this file in a web browser to view the interactive demo\n")
    print("Latency Summary:")
    print(f"  Small (1K):   {small.avg_latency_ns:.0f} ns avg")
    print(f"  Medium (10K): {medium.avg_latency_ns:.0f} ns avg")
    print(f"  Large (100K): {large.avg_latency_ns:.0f} ns avg\n")
    print("✅ Demo complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())