import json

import pytest

from storefront import main as cli
from tests.conftest import SHIPPING_FORM, cart_body, cart_item


@pytest.fixture
def run(app, monkeypatch):
    monkeypatch.setattr(cli, "create_storefront", lambda base_url=None: app)
    return cli.main


@pytest.fixture
def logged_in(app):
    app.session_repo.save("tok-123", {"id": 7, "username": "budi", "role": "user"})


class TestCli:
    def test_set_token_and_clear(self, run, app, capsys):
        assert run(["session", "set-token", "tok-9", "--user", json.dumps({"id": 1, "username": "ana"})]) == 0
        assert app.credentials.token == "tok-9"
        assert "ana" in capsys.readouterr().out

        assert run(["session", "clear"]) == 0
        assert not app.credentials.is_authenticated

    def test_invalid_user_json(self, run, capsys):
        assert run(["session", "set-token", "tok-9", "--user", "{oops"]) == 1
        assert "Invalid user data" in capsys.readouterr().err

    def test_cart_show(self, run, session, logged_in, capsys):
        session.route("GET", "/cart", cart_body(cart_item(1, 2, 100000, name="Kopi")))

        assert run(["cart", "show"]) == 0

        out = capsys.readouterr().out
        assert "Kopi" in out
        assert "Rp200.000" in out

    def test_command_without_session_fails(self, run, session, capsys):
        assert run(["cart", "show"]) == 1
        assert "log in" in capsys.readouterr().err
        assert session.calls == []

    def test_checkout(self, run, session, logged_in, capsys):
        session.route("GET", "/cart", cart_body(cart_item(1, 2, 100000), cart_item(2, 1, 50000)))
        session.route(
            "POST",
            "/order/place",
            {"success": True, "order": {"id": 42, "order_number": "ORD-20250301-ABC123", "total_amount": 265000}},
        )
        args = ["checkout"]
        for name, value in SHIPPING_FORM.items():
            args += [f"--{name.replace('_', '-')}", value]

        assert run(args) == 0

        out = capsys.readouterr().out
        assert "ORD-20250301-ABC123" in out
        assert "Rp265.000" in out

    def test_checkout_without_receipt(self, run, session, logged_in, capsys):
        session.route("GET", "/cart", cart_body(cart_item(1, 1, 100000)))
        session.route("POST", "/order/place", {"success": True})
        args = ["checkout"]
        for name, value in SHIPPING_FORM.items():
            args += [f"--{name.replace('_', '-')}", value]

        assert run(args) == 0
        assert "Check your orders" in capsys.readouterr().out

    def test_remove_with_yes_skips_prompt(self, run, session, logged_in):
        session.route("DELETE", "/cart/remove", {"success": True})
        session.route("GET", "/cart", cart_body())

        assert run(["cart", "remove", "3", "--yes"]) == 0
        assert session.calls_to("DELETE", "/cart/remove")[0].json == {"product_id": 3}
