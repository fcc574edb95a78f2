from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture()
def mock_q():
    """One questionary mock shared by the menus and the prompt helpers."""
    q = MagicMock()
    with (
        patch("invoicer.cli.prompts.questionary", q),
        patch("invoicer.cli.invoice_menu.questionary", q),
        patch("invoicer.cli.client_menu.questionary", q),
        patch("invoicer.cli.company_menu.questionary", q),
    ):
        yield q
