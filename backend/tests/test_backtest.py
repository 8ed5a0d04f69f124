"""Tests for the backtest price source, runner, statistics and CLI."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from backtest.__main__ import main as backtest_main
from backtest.price_source import CsvPriceSource, PricePoint
from backtest.report import ReportFormatter
from backtest.runner import BacktestConfig, BacktestRunner
from backtest.stats import BacktestResult, Fill, StatisticsCalculator
from core.models.config import StrategyConfig
from core.models.hand import Hand


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def points(*prices: str) -> list[PricePoint]:
    return [PricePoint(price=Decimal(p)) for p in prices]


def run(prices: list[PricePoint], **strategy) -> BacktestResult:
    config = BacktestConfig(source="test", strategy=StrategyConfig(**strategy))
    return BacktestRunner(config, prices).run()


def write_csv(tmp_path, rows: list[str], name: str = "prices.csv"):
    path = tmp_path / name
    path.write_text("\n".join(rows) + "\n")
    return path


# ---------------------------------------------------------------------------
# CsvPriceSource
# ---------------------------------------------------------------------------

class TestCsvPriceSource:
    def test_load_prices_in_order(self, tmp_path):
        path = write_csv(tmp_path, ["timestamp,price", "1700000000,150.10", "1700000002,150.05"])

        loaded = CsvPriceSource(path).load()

        assert [p.price for p in loaded] == [Decimal("150.10"), Decimal("150.05")]
        assert loaded[0].timestamp == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_iso_timestamp(self, tmp_path):
        path = write_csv(tmp_path, ["timestamp,price", "2025-06-01T12:00:00,150"])

        loaded = CsvPriceSource(path).load()

        assert loaded[0].timestamp == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_price_only(self, tmp_path):
        path = write_csv(tmp_path, ["price", "150", "151"])

        loaded = CsvPriceSource(path).load()

        assert len(loaded) == 2
        assert loaded[0].timestamp is None

    def test_invalid_rows_skipped(self, tmp_path):
        path = write_csv(tmp_path, ["price", "150", "nan", "0", "-1", "abc", "149.98"])
        source = CsvPriceSource(path)

        loaded = source.load()

        assert [p.price for p in loaded] == [Decimal("150"), Decimal("149.98")]
        assert source.skipped == 4

    @pytest.mark.parametrize("stamp", ["inf", "-inf", "1e30", "not-a-date"])
    def test_unusable_timestamp_becomes_none(self, tmp_path, stamp):
        path = write_csv(tmp_path, ["timestamp,price", f"{stamp},150.0"])

        loaded = CsvPriceSource(path).load()

        assert loaded == [PricePoint(price=Decimal("150.0"), timestamp=None)]

    def test_cli_survives_out_of_range_timestamp(self, tmp_path):
        path = write_csv(tmp_path, ["timestamp,price", "inf,150.0", "1700000000,149.98"])

        assert backtest_main(["--prices", str(path)]) == 0

    def test_missing_price_column(self, tmp_path):
        path = write_csv(tmp_path, ["close", "150"])

        with pytest.raises(ValueError, match="missing 'price' column"):
            CsvPriceSource(path).load()

    def test_custom_column(self, tmp_path):
        path = write_csv(tmp_path, ["close", "150"])

        loaded = CsvPriceSource(path, price_column="close").load()

        assert loaded[0].price == Decimal("150")


# ---------------------------------------------------------------------------
# BacktestRunner
# ---------------------------------------------------------------------------

class TestBacktestRunner:
    def test_empty_series(self):
        result = run([])

        assert result.ticks == 0
        assert result.first_price is None
        assert result.hands_opened == 0
        assert result.total_pnl_usd == Decimal("0")

    def test_flat_series_never_trades(self):
        result = run(points("150", "150.01", "149.99", "150"))

        assert result.ticks == 4
        assert result.buy_steps == 0
        assert result.sell_steps == 0
        assert result.fills == []

    def test_decline_and_recovery(self):
        result = run(points("150.00", "149.98", "149.96", "149.94", "150.44"))

        assert result.buy_steps == 3
        assert result.sell_steps == 1
        assert result.hands_opened == 3
        assert result.hands_sold == 1
        assert result.hands_held == 2
        assert result.hands_locked == 0

        sell = [f for f in result.fills if f.side == "sell"][0]
        assert sell.tick == 5
        assert sell.entry_price == Decimal("149.94")
        assert sell.pnl == Decimal("0.50") * Decimal("0.005")
        assert result.realized_pnl_usd == sell.pnl

    def test_min_max_first_last(self):
        result = run(points("150", "152", "148", "149"))

        assert result.first_price == Decimal("150")
        assert result.last_price == Decimal("149")
        assert result.min_price == Decimal("148")
        assert result.max_price == Decimal("152")

    def test_batches_ready_counted(self):
        prices = [str(Decimal("150") - Decimal("0.02") * i) for i in range(7)]
        result = run(points(*prices), batch_size=3)

        assert result.hands_opened == 6
        assert result.batches_ready == 2

    def test_invested_usd(self):
        result = run(points("200.00", "199.98"))

        assert result.invested_usd == Decimal("199.98") * Decimal("0.005")

    def test_unrealized_marked_to_last_price(self):
        result = run(points("150.00", "149.98", "150.00"))

        assert result.hands_held == 1
        assert result.unrealized_pnl_usd == Decimal("0.02") * Decimal("0.005")

    def test_timestamps_carried(self):
        t0 = datetime(2025, 6, 1, tzinfo=timezone.utc)
        t1 = datetime(2025, 6, 2, tzinfo=timezone.utc)
        result = run([PricePoint(Decimal("150"), t0), PricePoint(Decimal("149.98"), t1)])

        assert result.start_time == t0
        assert result.end_time == t1
        assert result.fills[0].timestamp == t1


# ---------------------------------------------------------------------------
# StatisticsCalculator
# ---------------------------------------------------------------------------

class TestStatisticsCalculator:
    def test_held_hands_by_identity(self):
        """A sold hand and a free hand at the same price are told apart."""
        free = Hand(price=Decimal("10"), size_sol=Decimal("1"), locked=False)
        sold = Hand(price=Decimal("10"), size_sol=Decimal("1"), locked=False)
        result = BacktestResult(
            source="x",
            buy_trigger_usd=Decimal("0.02"),
            sell_trigger_usd=Decimal("0.03"),
            buy_size_pct=Decimal("0.005"),
            batch_size=10,
            last_price=Decimal("11"),
        )

        StatisticsCalculator().calculate(result, (free, sold), [sold])

        assert result.hands_held == 1
        assert result.hands_sold == 1
        assert result.unrealized_pnl_usd == Decimal("1")

    def test_fill_pnl_only_for_sells(self):
        buy = Fill(side="buy", tick=1, price=Decimal("10"), size_sol=Decimal("2"))
        sell = Fill(
            side="sell", tick=2, price=Decimal("11"), size_sol=Decimal("2"), entry_price=Decimal("10")
        )

        assert buy.pnl == Decimal("0")
        assert buy.usd == Decimal("20")
        assert sell.pnl == Decimal("2")


# ---------------------------------------------------------------------------
# Report and CLI
# ---------------------------------------------------------------------------

class TestReport:
    def test_to_dict(self):
        result = run(points("150.00", "149.98"))

        data = ReportFormatter.to_dict(result)

        assert data["metadata"]["buy_trigger_usd"] == Decimal("0.02")
        assert data["overall"]["hands_opened"] == 1
        assert data["fills"][0]["side"] == "buy"

    def test_save_json(self, tmp_path):
        result = run(points("150.00", "149.98"))
        out = tmp_path / "result.json"

        ReportFormatter.save_json(result, str(out))

        data = json.loads(out.read_text())
        assert data["prices"]["first"] == 150.0
        assert data["overall"]["buy_steps"] == 1

    def test_print_console(self, capsys):
        ReportFormatter.print_console(run(points("150.00", "149.98")))

        out = capsys.readouterr().out
        assert "BACKTEST RESULTS" in out
        assert "Hands opened:   1" in out


class TestCli:
    def test_main_runs(self, tmp_path, capsys):
        path = write_csv(tmp_path, ["price", "150.00", "149.50", "150.10"])
        out = tmp_path / "out.json"

        code = backtest_main(
            ["--prices", str(path), "--buy-trigger", "0.5", "--sell-trigger", "0.43", "-o", str(out)]
        )

        assert code == 0
        data = json.loads(out.read_text())
        assert data["overall"]["buy_steps"] == 1
        assert data["overall"]["sell_steps"] == 1
        assert data["metadata"]["buy_trigger_usd"] == 0.5

    def test_missing_file(self, tmp_path):
        assert backtest_main(["--prices", str(tmp_path / "nope.csv")]) == 1

    def test_invalid_strategy(self, tmp_path):
        path = write_csv(tmp_path, ["price", "150"])
        assert backtest_main(["--prices", str(path), "--batch-size", "0"]) == 1

    def test_bad_number_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            backtest_main(["--prices", "x.csv", "--buy-trigger", "abc"])
