import json
import pytest
import stripe

from storefront.errors import (
    InternalError,
    MissingOrderDataError,
    PaymentNotSucceededError,
    ValidationError,
)
from storefront.payments import service as payments_service

CART = [{"id": "p1", "name": "Canvas Tote", "price": 12.5, "image": "/img/tote.png", "quantity": 2}]


def _create(**overrides):
    kwargs = {"amount": 27.0, "customer_email": "a@b.com", "cart_items": CART}
    kwargs.update(overrides)
    return payments_service.create_payment_intent(**kwargs)


def test_create_payment_intent_success(fake_stripe):
    result = _create()
    assert result == {"client_secret": "pi_1_secret_abc", "payment_intent_id": "pi_1"}
    call = fake_stripe.create_calls[0]
    assert call["amount"] == 2700
    assert call["currency"] == "usd"
    assert call["metadata"]["customerEmail"] == "a@b.com"
    assert json.loads(call["metadata"]["cartItems"]) == CART


@pytest.mark.parametrize("amount", [0, -5, None, "27", True, float("nan"), float("inf")])
def test_create_payment_intent_invalid_amount(fake_stripe, amount):
    with pytest.raises(ValidationError) as exc:
        _create(amount=amount)
    assert exc.value.message == "Invalid amount"
    assert fake_stripe.create_calls == []


@pytest.mark.parametrize("cart_items", [[], None, "[]", {"id": "p1"}])
def test_create_payment_intent_missing_cart(fake_stripe, cart_items):
    with pytest.raises(ValidationError) as exc:
        _create(cart_items=cart_items)
    assert exc.value.message == "Missing required order information"
    assert fake_stripe.create_calls == []


@pytest.mark.parametrize("email", [None, "", "not-an-email"])
def test_create_payment_intent_invalid_email(fake_stripe, email):
    with pytest.raises(ValidationError):
        _create(customer_email=email)
    assert fake_stripe.create_calls == []


def test_create_payment_intent_invalid_cart_item(fake_stripe):
    with pytest.raises(ValidationError) as exc:
        _create(cart_items=[{"name": "no id"}])
    assert exc.value.message == "Invalid cart item"


def test_create_payment_intent_currency(fake_stripe):
    _create(currency="EUR")
    assert fake_stripe.create_calls[0]["currency"] == "eur"
    with pytest.raises(ValidationError):
        _create(currency="euro")


def test_create_payment_intent_stripe_failure(monkeypatch):
    def _boom(**kwargs):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr("storefront.payments.stripe_client.create_payment_intent", _boom)
    with pytest.raises(InternalError) as exc:
        _create()
    assert exc.value.status_code == 500
    assert exc.value.message == "Internal server error"


def test_confirm_payment_requires_id(fake_stripe):
    for value in (None, "", "   "):
        with pytest.raises(ValidationError) as exc:
            payments_service.confirm_payment(value)
        assert exc.value.message == "Payment Intent ID is required"
    assert fake_stripe.retrieve_calls == []


def test_confirm_payment_not_succeeded_creates_nothing(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    with pytest.raises(PaymentNotSucceededError) as exc:
        payments_service.confirm_payment(pid)
    assert exc.value.status == "requires_payment_method"
    assert exc.value.status_code == 400
    assert orders_db.orders == []


def test_confirm_payment_creates_order(fake_stripe, orders_db):
    pid = _create(amount=25.99)["payment_intent_id"]
    fake_stripe.succeed(pid)

    result = payments_service.confirm_payment(pid)

    assert result["created"] is True
    order = result["order"]
    assert order["total"] == 25.99
    assert order["customer_email"] == "a@b.com"
    assert order["status"] == "pending"
    assert order["payment_intent_id"] == pid
    assert order["shipping_address"]["name"] == "N/A"
    assert orders_db.items == [
        {
            "order_id": order["id"],
            "product_id": "p1",
            "quantity": 2,
            "price": 12.5,
            "product_snapshot": {"name": "Canvas Tote", "image": "/img/tote.png"},
        }
    ]


def test_confirm_payment_twice_returns_existing_order(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    fake_stripe.succeed(pid)

    first = payments_service.confirm_payment(pid)
    second = payments_service.confirm_payment(pid)

    assert second["created"] is False
    assert second["order"]["id"] == first["order"]["id"]
    assert len(orders_db.orders) == 1
    assert len(orders_db.items) == 1


def test_confirm_payment_missing_metadata(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    fake_stripe.succeed(pid, metadata={"customerEmail": "a@b.com"})
    with pytest.raises(MissingOrderDataError):
        payments_service.confirm_payment(pid)
    assert orders_db.orders == []


def test_confirm_payment_stripe_failure(monkeypatch, orders_db):
    def _boom(pid):
        raise stripe.InvalidRequestError("No such payment_intent", "id")

    monkeypatch.setattr("storefront.payments.stripe_client.retrieve_payment_intent", _boom)
    with pytest.raises(InternalError) as exc:
        payments_service.confirm_payment("pi_unknown")
    assert exc.value.message == "Failed to process order"


def test_confirm_payment_order_write_failure(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    fake_stripe.succeed(pid)
    orders_db.fail_insert = True
    with pytest.raises(InternalError) as exc:
        payments_service.confirm_payment(pid)
    assert exc.value.message == "Failed to process order"


@pytest.mark.parametrize("amount", [1e20, 1_000_000.0, 0.001])
def test_create_payment_intent_amount_outside_stripe_bounds(fake_stripe, amount):
    with pytest.raises(ValidationError) as exc:
        _create(amount=amount)
    assert exc.value.message == "Invalid amount"
    assert fake_stripe.create_calls == []


def test_create_payment_intent_accepts_stripe_maximum(fake_stripe):
    _create(amount=999_999.99)
    assert fake_stripe.create_calls[0]["amount"] == 99_999_999


def test_confirm_payment_retry_restores_missing_items(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    fake_stripe.succeed(pid)

    orders_db.fail_items = True
    with pytest.raises(InternalError):
        payments_service.confirm_payment(pid)
    assert len(orders_db.orders) == 1
    assert orders_db.items == []

    orders_db.fail_items = False
    result = payments_service.confirm_payment(pid)

    assert result["created"] is True
    assert len(orders_db.orders) == 1
    assert [(i["order_id"], i["product_id"], i["quantity"]) for i in orders_db.items] == [("order-1", "p1", 2)]

    # une fois les lignes écrites, la confirmation suivante est un simple rejeu
    assert payments_service.confirm_payment(pid)["created"] is False
    assert len(orders_db.items) == 1


def test_confirm_payment_lookup_failure_never_duplicates(fake_stripe, orders_db):
    pid = _create()["payment_intent_id"]
    fake_stripe.succeed(pid)
    payments_service.confirm_payment(pid)

    orders_db.fail_lookup = True
    with pytest.raises(InternalError) as exc:
        payments_service.confirm_payment(pid)

    assert exc.value.status_code == 500
    assert len(orders_db.orders) == 1
