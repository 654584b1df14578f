"""Price-time priority limit order book with GTC, IOC and FOK handling."""

from __future__ import annotations

import bisect
import dataclasses
import enum
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

#: Number of ticks per currency unit; a price tick of 100 is a price of 1.00.
TICK_PRECISION = 100


class Side(enum.Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(enum.Enum):
    LIMIT = "LIMIT"
    MARKET = "MARKET"


class TimeInForce(enum.Enum):
    GTC = "GTC"  # good till cancel
    IOC = "IOC"  # immediate or cancel
    FOK = "FOK"  # fill or kill
    GFD = "GFD"  # good for day


@dataclass(frozen=True)
class Fill:
    """One execution between a resting (maker) and an incoming (taker) order."""

    maker_order_id: int
    taker_order_id: int
    quantity: int
    price_tick: int
    timestamp: int

    @property
    def price(self) -> float:
        return self.price_tick / TICK_PRECISION


@dataclass
class Order:
    id: int
    side: Side
    price_tick: int
    quantity: int
    order_type: OrderType = OrderType.LIMIT
    tif: TimeInForce = TimeInForce.GTC
    owner_id: int = 0
    timestamp: int = 0


@dataclass(frozen=True)
class LevelInfo:
    """Aggregated depth at one price level."""

    price_tick: int
    total_quantity: int
    count: int


@dataclass
class Stats:
    """Counters kept by an order book while it processes orders."""

    orders_processed: int = 0
    fills_generated: int = 0
    last_processing_time_ns: int = 0
    peak_orders_per_second: int = 0

    def reset(self) -> None:
        self.orders_processed = 0
        self.fills_generated = 0
        self.last_processing_time_ns = 0
        self.peak_orders_per_second = 0


class OrderRejected(Exception):
    """Raised when a fill-or-kill order cannot be filled in full."""

    def __init__(self, order: Order) -> None:
        super().__init__(f"order {order.id} cannot be filled in full")
        self.order = order


FillHandler = Callable[[Fill], None]


class _Levels:
    """Price levels of one side of the book, kept sorted by price."""

    def __init__(self) -> None:
        self._prices: list[int] = []
        self._queues: dict[int, deque[Order]] = {}

    def __bool__(self) -> bool:
        return bool(self._prices)

    def get(self, price: int) -> Optional[deque[Order]]:
        return self._queues.get(price)

    def queue(self, price: int) -> deque[Order]:
        found = self._queues.get(price)
        if found is None:
            found = self._queues[price] = deque()
            bisect.insort(self._prices, price)
        return found

    def remove(self, price: int) -> None:
        """Drop the price level and its queue."""
        self._queues.pop(price)
        self._prices.pop(bisect.bisect_left(self._prices, price))

    def prices(self, descending: bool) -> list[int]:
        return self._prices[::-1] if descending else list(self._prices)

    def best(self, highest: bool) -> Optional[int]:
        if not self._prices:
            return None
        return self._prices[-1] if highest else self._prices[0]

    def all_orders(self):
        for queue in self._queues.values():
            yield from queue


class OrderBook:
    """A thread-safe limit order book matching by price, then time."""

    def __init__(self, max_orders: int = 1_000_000) -> None:
        self.max_orders = max_orders  # capacity hint only
        self._lock = threading.RLock()
        self._bids = _Levels()
        self._asks = _Levels()
        self._orders: dict[int, Order] = {}
        self._order_count = 0
        self._fill_handler: Optional[FillHandler] = None
        self.stats = Stats()

    # -- core operations -------------------------------------------------

    def submit_order(self, order: Order) -> list[Fill]:
        """Match an order against the book and rest any GTC remainder.

        Returns the fills produced. Raises OrderRejected for a fill-or-kill
        order that cannot be filled in full.
        """
        with self._lock:
            start = time.perf_counter_ns()
            if order.tif is TimeInForce.FOK and not self._can_fully_fill(order):
                raise OrderRejected(order)

            fills, remaining = self._match(order)

            if remaining > 0:
                if order.tif in (TimeInForce.IOC, TimeInForce.FOK):
                    return fills
                self._rest(order, remaining)

            self.stats.orders_processed += 1
            self.stats.last_processing_time_ns = time.perf_counter_ns() - start
            return fills

    def cancel_order(self, order_id: int) -> bool:
        """Remove a resting order; return False if it is not on the book."""
        with self._lock:
            order = self._orders.pop(order_id, None)
            if order is None:
                return False
            levels = self._levels_for(order.side)
            queue = levels.get(order.price_tick)
            if queue is not None:
                kept = [o for o in queue if o.id != order_id]
                queue.clear()
                queue.extend(kept)
                if not queue:
                    levels.remove(order.price_tick)
            self._order_count -= 1
            return True

    def modify_order(self, order_id: int, new_price: int, new_qty: int) -> list[Fill]:
        """Cancel a resting order and resubmit it with a new price and size."""
        with self._lock:
            original = self._orders.get(order_id)
            if original is None:
                return []
            snapshot = dataclasses.replace(original)

        self.cancel_order(order_id)
        modified = dataclasses.replace(snapshot, price_tick=new_price, quantity=new_qty)
        try:
            return self.submit_order(modified)
        except OrderRejected:
            return []

    def cancel_all(self, side: Side) -> None:
        with self._lock:
            to_cancel = [oid for oid, order in self._orders.items() if order.side is side]
        for order_id in to_cancel:
            self.cancel_order(order_id)

    # -- market data -----------------------------------------------------

    def best_bid(self) -> Optional[float]:
        """Highest bid price, or None when there are no bids."""
        with self._lock:
            tick = self._bids.best(highest=True)
            return None if tick is None else tick / TICK_PRECISION

    def best_ask(self) -> Optional[float]:
        """Lowest ask price, or None when there are no asks."""
        with self._lock:
            tick = self._asks.best(highest=False)
            return None if tick is None else tick / TICK_PRECISION

    def top_levels(self, side: Side, depth: int) -> list[LevelInfo]:
        """Best `depth` levels of one side: bids highest first, asks lowest first."""
        with self._lock:
            levels = self._levels_for(side)
            result = []
            for price in levels.prices(descending=side is Side.BUY)[:depth]:
                queue = levels.get(price)
                result.append(
                    LevelInfo(price, sum(o.quantity for o in queue), len(queue))
                )
            return result

    def total_volume(self, side: Side) -> int:
        with self._lock:
            return sum(o.quantity for o in self._levels_for(side).all_orders())

    def weighted_mid_price(self) -> Optional[float]:
        """Mid price weighted by the opposite top-of-book size, or None."""
        with self._lock:
            bid_tick = self._bids.best(highest=True)
            ask_tick = self._asks.best(highest=False)
            if bid_tick is None or ask_tick is None:
                return None
            bid = bid_tick / TICK_PRECISION
            ask = ask_tick / TICK_PRECISION
            bid_vol = sum(o.quantity for o in self._bids.get(bid_tick))
            ask_vol = sum(o.quantity for o in self._asks.get(ask_tick))
            if bid_vol + ask_vol == 0:
                return (bid + ask) / 2.0
            return (bid * ask_vol + ask * bid_vol) / (bid_vol + ask_vol)

    def order_count(self) -> int:
        """Number of orders rested on the book minus those cancelled."""
        return self._order_count

    def set_fill_handler(self, handler: Optional[FillHandler]) -> None:
        with self._lock:
            self._fill_handler = handler

    def reset_stats(self) -> None:
        self.stats.reset()

    # -- internals -------------------------------------------------------

    def _levels_for(self, side: Side) -> _Levels:
        return self._bids if side is Side.BUY else self._asks

    def _contra(self, order: Order) -> tuple[_Levels, list[int], Callable[[int], bool]]:
        if order.side is Side.BUY:
            return self._asks, self._asks.prices(descending=False), (
                lambda price: price <= order.price_tick
            )
        return self._bids, self._bids.prices(descending=True), (
            lambda price: price >= order.price_tick
        )

    def _match(self, order: Order) -> tuple[list[Fill], int]:
        levels, prices, crosses = self._contra(order)
        remaining = order.quantity
        fills: list[Fill] = []

        for price in prices:
            if remaining == 0 or not crosses(price):
                break
            queue = levels.get(price)
            while remaining > 0 and queue:
                resting = queue[0]
                if resting.owner_id == order.owner_id:
                    break  # no trading against oneself
                qty = min(remaining, resting.quantity)
                fill = Fill(resting.id, order.id, qty, price, time.time_ns())
                fills.append(fill)
                if self._fill_handler is not None:
                    self._fill_handler(fill)
                resting.quantity -= qty
                remaining -= qty
                if resting.quantity == 0:
                    self._orders.pop(resting.id, None)
                    queue.popleft()
                self.stats.fills_generated += 1
            if not queue:
                levels.remove(price)

        return fills, remaining

    def _can_fully_fill(self, order: Order) -> bool:
        levels, prices, crosses = self._contra(order)
        needed = order.quantity
        for price in prices:
            if not crosses(price):
                break
            for resting in levels.get(price):
                if resting.owner_id == order.owner_id:
                    continue
                if resting.quantity >= needed:
                    return True
                needed -= resting.quantity
        return needed == 0

    def _rest(self, order: Order, remaining: int) -> None:
        resting = dataclasses.replace(order, quantity=remaining, timestamp=time.time_ns())
        self._orders[order.id] = resting
        self._levels_for(order.side).queue(order.price_tick).append(resting)
        self._order_count += 1