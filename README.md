# matchbook

A thread-safe limit order book that matches orders by price, then by time.

It supports:

- Limit orders with Good-Till-Cancel, Immediate-Or-Cancel and Fill-Or-Kill time in force
- Self-trade prevention: an incoming order stops matching at a price level when the next resting order there has the same `owner_id`
- Cancel, modify (cancel and resubmit), and cancel everything on one side
- Market data: best bid and ask, depth by price level, total resting volume per side and a volume-weighted mid price
- A fill callback, plus running counters of orders processed and fills generated

Prices are whole numbers of ticks. `TICK_PRECISION` in `matchbook.book` is 100, so a price is `price_tick / 100`. For example, `price_tick=100_000` is a price of `1000.0`.

## Installation

```
pip install .
```

To run the tests, install with `pip install .[test]` and then run `pytest`.

## Using the book

```python
from matchbook.book import Order, OrderBook, OrderType, Side, TimeInForce

book = OrderBook(max_orders=1000)

book.submit_order(Order(id=1001, side=Side.BUY, price_tick=100_000, quantity=50,
                        order_type=OrderType.LIMIT, tif=TimeInForce.GTC, owner_id=1))
book.submit_order(Order(id=1002, side=Side.SELL, price_tick=101_000, quantity=30,
                        order_type=OrderType.LIMIT, tif=TimeInForce.GTC, owner_id=2))

print(book.best_bid(), book.best_ask())   # 1000.0 1010.0

fills = book.submit_order(Order(id=1003, side=Side.BUY, price_tick=101_000, quantity=20,
                                tif=TimeInForce.IOC, owner_id=3))
for fill in fills:
    print(fill.maker_order_id, fill.quantity, fill.price_tick, fill.price)
```

`Order` defaults to `order_type=OrderType.LIMIT`, `tif=TimeInForce.GTC` and `owner_id=0`.

- `submit_order(order)` matches the order against the opposite side and returns the list of `Fill` objects it produced. A GTC remainder rests on the book. An IOC or FOK remainder is dropped.
- A Fill-Or-Kill order that cannot be filled in full raises `OrderRejected`, and the book is left unchanged.
- `cancel_order(order_id)` returns `False` if the order is not resting on the book.
- `modify_order(order_id, new_price, new_qty)` cancels the order and resubmits it with the new price and quantity. It returns the fills from the resubmission, or `[]` if the order was not found.
- `cancel_all(side)` cancels every resting order on one side.
- `best_bid()` and `best_ask()` return the price as a float, or `None` when that side is empty.
- `top_levels(side, depth)` returns up to `depth` `LevelInfo(price_tick, total_quantity, count)` entries. Bids come highest price first and asks come lowest price first.
- `total_volume(side)` returns the sum of resting quantities on one side.
- `weighted_mid_price()` returns the mid price weighted by top-of-book size, or `None` if either side is empty.
- `order_count()` returns the number of orders rested on the book, minus those cancelled.
- `set_fill_handler(handler)` registers a callable that is called with each `Fill` as it happens. Pass `None` to remove it.
- `stats` is a `Stats` object with `orders_processed`, `fills_generated` and `last_processing_time_ns`. `reset_stats()` sets them back to zero.

## Benchmark demo

The package includes two commands.

1. `matchbook-generate` writes reproducible order files: `orders_small.csv` (1,000 orders), `orders_medium.csv` (10,000) and `orders_large.csv` (100,000). It accepts these options:
   - `--directory`: where to write the files (default `.`)
   - `--seed`: random seed (default `12345`)

   ```
   matchbook-generate
   ```

   The same rows are available from Python through `matchbook.generate.generate_orders(num_orders, seed)` and `write_csv(path, num_orders, seed)`.

2. `matchbook-demo` replays those three files against one book that already holds resting liquidity. It prints latency and throughput figures and writes an HTML report. It accepts these options:
   - `--directory`: where the CSV files are (default `.`)
   - `--output`: the report file (default `performance_report.html`)

   If a file is missing or holds no orders, the demo prints an error and shows zeros for that file in the report.

   ```
   matchbook-demo
   ```

   From Python, `matchbook.demo.WebDemo().run_csv_test(path)` returns a `TestResult`, and `generate_html(small, medium, large)` renders the report page.

The CSV files use the header `SIDE,PRICE,QUANTITY,TYPE,TIF`. Each row looks like this:

```
BUY,512.34,120,LIMIT,IOC
```

## What it does not do

- `OrderType.MARKET` is recorded on an order but not treated specially. Every order matches as a limit order at its `price_tick`.
- `TimeInForce.GFD` rests like GTC. Nothing expires orders at the end of a day.
- The book lives in memory only. It has no persistence, network interface or market-data feed.
- `max_orders` is a capacity hint only. The book does not enforce it.