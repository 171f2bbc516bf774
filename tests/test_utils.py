"""Tests for validators, paging helpers, config and event logging."""

import json

import pytest

from crystara.common.services.logging import log_event
from crystara.common.utils.pagination import normalize_paging, page_count, parse_int
from crystara.common.utils.validators import ensure_non_negative_int, parse_amount, to_minor_units
from crystara.config import CrystaraConfig, validate_currency


class TestAmounts:
    @pytest.mark.parametrize("value,expected", [(499.5, 49950), ("0.01", 1), (1, 100), (0.5, 50), ("1098", 109800)])
    def test_to_minor_units(self, value, expected):
        assert to_minor_units(parse_amount(value)) == expected

    @pytest.mark.parametrize("value", [0, -1, "abc", None, "", "nan", "inf", False, [1], 1e308, "1e307"])
    def test_parse_amount_rejects(self, value):
        with pytest.raises(ValueError, match="Invalid amount"):
            parse_amount(value)

    def test_non_negative_int(self):
        assert ensure_non_negative_int("42", "amount") == 42
        assert ensure_non_negative_int(0, "amount") == 0
        with pytest.raises(ValueError):
            ensure_non_negative_int(1.5, "amount")


class TestPaging:
    def test_normalize(self):
        assert normalize_paging(0, 0) == (1, 20)
        assert normalize_paging(3, 500) == (3, 100)

    def test_page_count(self):
        assert page_count(0, 20) == 0
        assert page_count(40, 20) == 2
        assert page_count(41, 20) == 3

    def test_parse_int(self):
        assert parse_int("7", 1) == 7
        assert parse_int(None, 1) == 1
        assert parse_int("x", 20) == 20


class TestConfig:
    def test_validate_currency(self):
        assert validate_currency(None) == "INR"
        assert validate_currency(" usd ") == "USD"
        with pytest.raises(ValueError):
            validate_currency("RUPEE")

    @pytest.mark.parametrize("value", [356, ["INR"], {"code": "INR"}])
    def test_validate_currency_rejects_non_strings(self, value):
        with pytest.raises(ValueError, match="Invalid currency code"):
            validate_currency(value)

    def test_load_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test_1")
        monkeypatch.setenv("RAZORPAY_KEY_SECRET", "shh")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.delenv("DEFAULT_CURRENCY", raising=False)

        config = CrystaraConfig.load(str(tmp_path / "missing.env"))

        assert config.gateway_configured is True
        assert config.port == 8080
        assert config.log_level == "DEBUG"
        assert config.default_currency == "INR"


class TestLogEvent:
    def test_writes_json_line_and_masks_secrets(self, capsys):
        log_event("INFO", "payment.verified", payment_id="pay_1", signature="abcdef0123456789")

        line = json.loads(capsys.readouterr().out.strip())
        assert line["level"] == "info"
        assert line["event"] == "payment.verified"
        assert line["payment_id"] == "pay_1"
        assert line["signature"] == "abcd***"
