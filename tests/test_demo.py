import pytest

from matchbook.book import Side, TimeInForce
from matchbook.demo import TestResult, WebDemo, generate_html, main
from matchbook.generate import write_csv


def _write(path, rows):
    path.write_text("SIDE,PRICE,QUANTITY,TYPE,TIF\n" + "".join(r + "\n" for r in rows))
    return path


def test_parse_line_buy_gtc():
    demo = WebDemo()
    order = demo.parse_line("BUY,520.50,100,LIMIT,GTC")
    assert order.id == 1000
    assert order.side is Side.BUY
    assert order.price_tick == 52050
    assert order.quantity == 100
    assert order.tif is TimeInForce.GTC
    assert order.owner_id == 1


def test_parse_line_sell_ioc_and_ids_increase():
    demo = WebDemo()
    first = demo.parse_line("SELL,510.25,20,LIMIT,IOC\n")
    second = demo.parse_line("BUY,510.25,20,LIMIT,FOK")
    assert first.side is Side.SELL
    assert first.tif is TimeInForce.IOC
    assert first.price_tick == 51025
    assert second.tif is TimeInForce.FOK
    assert second.id == first.id + 1


def test_parse_line_unknown_values_fall_back():
    demo = WebDemo()
    order = demo.parse_line("HOLD,500.00,5,LIMIT,XYZ")
    assert order.side is Side.SELL
    assert order.tif is TimeInForce.GTC


def test_parse_line_missing_field_returns_none_without_consuming_id():
    demo = WebDemo()
    assert demo.parse_line("BUY,,100,LIMIT,GTC") is None
    assert demo.parse_line("") is None
    assert demo.parse_line("BUY,500.00,1,LIMIT,GTC").id == 1000


def test_parse_line_bad_price_raises():
    with pytest.raises(ValueError):
        WebDemo().parse_line("BUY,abc,100,LIMIT,GTC")


def test_run_csv_test_statistics(tmp_path):
    path = write_csv(tmp_path / "orders.csv", 300, 4)
    demo = WebDemo()
    result = demo.run_csv_test(path)
    assert result.orders_processed == 300
    assert result.fills_generated == demo.book.stats.fills_generated
    assert result.median_latency_ns <= result.p95_latency_ns <= result.p99_latency_ns
    assert result.total_time_ms > 0
    assert result.throughput_per_sec > 0


def test_run_csv_test_skips_invalid_rows_and_survives_fok(tmp_path):
    path = _write(
        tmp_path / "orders.csv",
        ["BUY,520.00,10,LIMIT,FOK", ",,,,", "BUY,520.00,10,LIMIT,IOC"],
    )
    result = WebDemo().run_csv_test(path)
    assert result.orders_processed == 2
    assert result.fills_generated == 0


def test_run_csv_test_sells_cross_resting_bids(tmp_path):
    path = _write(tmp_path / "orders.csv", ["SELL,500.00,50,LIMIT,GTC"])
    demo = WebDemo()
    result = demo.run_csv_test(path)
    assert result.fills_generated == 1
    assert demo.book.total_volume(Side.SELL) == sum(100 + i * 5 for i in range(50))


def test_run_csv_test_empty_file_raises(tmp_path):
    path = _write(tmp_path / "orders.csv", [])
    with pytest.raises(ValueError):
        WebDemo().run_csv_test(path)


def test_run_csv_test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        WebDemo().run_csv_test(tmp_path / "nope.csv")


def test_generate_html_contains_cards_and_values():
    result = TestResult(
        orders_processed=10,
        fills_generated=7,
        total_time_ms=2.0,
        avg_latency_ns=1234.0,
        median_latency_ns=1000.0,
        p99_latency_ns=4321.0,
        throughput_per_sec=5000.0,
    )
    html = generate_html(result, TestResult(), TestResult())
    assert html.startswith("<!DOCTYPE html>")
    assert html.rstrip().endswith("</html>")
    for title in ("Small Test", "Medium Test", "Large Test"):
        assert title in html
    assert '<span class="highlight">1234 ns</span>' in html
    assert "4321 ns" in html
    assert "5000 ops/s" in html
    assert "2.00 ms" in html
    assert html.count('<div class="card">') == 3


def test_main_writes_report(tmp_path):
    for name in ("orders_small.csv", "orders_medium.csv", "orders_large.csv"):
        write_csv(tmp_path / name, 30, 2)
    output = tmp_path / "report.html"
    assert main(["--directory", str(tmp_path), "--output", str(output)]) == 0
    html = output.read_text(encoding="utf-8")
    assert "Large Test" in html
    assert "100,000 Orders" in html


def test_main_with_missing_files_still_reports(tmp_path):
    output = tmp_path / "report.html"
    assert main(["--directory", str(tmp_path / "empty"), "--output", str(output)]) == 0
    html = output.read_text(encoding="utf-8")
    assert '<span class="highlight">0 ns</span>' in html