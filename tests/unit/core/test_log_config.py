import pytest

from modules.core.log_config import (
    SHARED_PROCESSORS,
    build_logging_config,
    mask_sensitive_data,
)

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    @pytest.mark.parametrize(
        ("raw", "secret"),
        [
            ("password='s3cret123'", "s3cret123"),
            ("token=abc123xyz", "abc123xyz"),
            ("api_key: k-998877", "k-998877"),
            ("Authorization: Bearer-xyz", "Bearer-xyz"),
        ],
    )
    def test_credentials_masked(self, raw, secret):
        result = mask_sensitive_data(None, None, {"event": "test", "data": raw})
        assert secret not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_key_name_is_kept(self):
        result = mask_sensitive_data(None, None, {"event": "test", "data": "secret=hunter2"})
        assert result["data"] == "secret=***MASKED***"

    def test_order_fields_unchanged(self):
        event_dict = {"event": "order.created", "order_number": "ORD-20240101-ABC123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result == {"event": "order.created", "order_number": "ORD-20240101-ABC123"}

    def test_non_string_values_untouched(self):
        result = mask_sensitive_data(None, None, {"event": "stock.decremented", "quantity": 3})
        assert result["quantity"] == 3


class TestLoggingConfig:
    def test_root_level_follows_argument(self):
        assert build_logging_config("DEBUG")["root"]["level"] == "DEBUG"

    def test_foreign_logs_get_the_same_processors(self):
        formatter = build_logging_config()["formatters"]["json"]
        assert formatter["foreign_pre_chain"] is SHARED_PROCESSORS
        assert mask_sensitive_data in SHARED_PROCESSORS
