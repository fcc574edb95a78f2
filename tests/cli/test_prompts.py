import pytest
from pydantic import ValidationError

from invoicer.cli.prompts import ask_amount_type, ask_number, error_message
from invoicer.models.client import Client
from invoicer.models.invoice import AmountType


class TestAskNumber:
    def test_parses_answer(self, mock_q):
        mock_q.text.return_value.ask.return_value = "1,250.50"
        assert ask_number("Amount:") == 1250.5

    def test_retries_until_valid(self, mock_q):
        mock_q.text.return_value.ask.side_effect = ["abc", "-3", "", "7"]
        assert ask_number("Amount:") == 7
        assert mock_q.text.return_value.ask.call_count == 4

    def test_positive_rejects_zero(self, mock_q):
        mock_q.text.return_value.ask.side_effect = ["0", "2"]
        assert ask_number("Quantity:", positive=True) == 2

    def test_zero_allowed_by_default(self, mock_q):
        mock_q.text.return_value.ask.return_value = "0"
        assert ask_number("Discount:") == 0


class TestAskAmountType:
    def test_fixed(self, mock_q):
        mock_q.select.return_value.ask.return_value = "Fixed amount"
        assert ask_amount_type("Type:") == AmountType.FIXED

    def test_cancel_defaults_to_percentage(self, mock_q):
        mock_q.select.return_value.ask.return_value = None
        assert ask_amount_type("Type:") == AmountType.PERCENTAGE

    def test_default_preselects_label(self, mock_q):
        mock_q.select.return_value.ask.return_value = "Fixed amount"
        ask_amount_type("Type:", default=AmountType.FIXED)
        assert mock_q.select.call_args.kwargs["default"] == "Fixed amount"


class TestErrorMessage:
    def test_plain_value_error(self):
        assert error_message(ValueError("boom")) == "boom"

    def test_validation_error(self):
        with pytest.raises(ValidationError) as excinfo:
            Client(client_name="Globex", client_address="500 Oak Ave", contact_number="5551234567", email="bad")
        assert "Invalid email address" in error_message(excinfo.value)
