"""
Integration tests for payments.

Payment intents, the one-shot unpaid → paid confirmation and the payment
history views.
"""

import pytest
from sqlalchemy import func, select

from zapshift.app.models.payment import PaymentRecord


async def book_parcel(client, cost=25, created_by="user@zapshift.com") -> int:
    response = await client.post("/parcels", json={"created_by": created_by, "cost": cost})
    return response.json()["insertedId"]


def confirmation(parcel_id, email="user@zapshift.com", amount=25):
    return {
        "parcelId": parcel_id,
        "email": email,
        "amount": amount,
        "paymentMethod": "card",
        "transactionId": f"txn_{parcel_id}",
    }


@pytest.mark.asyncio
async def test_payment_intent_charges_cost_in_cents(client, payment_gateway):
    parcel_id = await book_parcel(client, cost=25)

    response = await client.post("/create-payment-intent", json={"parcelId": parcel_id})

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_test_1_secret"}
    assert payment_gateway.requests[0]["amount"] == 2500
    assert payment_gateway.requests[0]["metadata"]["parcelId"] == str(parcel_id)


@pytest.mark.asyncio
async def test_payment_intent_rounds_fractional_cents(client, payment_gateway):
    parcel_id = await book_parcel(client, cost=19.99)

    await client.post("/create-payment-intent", json={"parcelId": parcel_id})

    assert payment_gateway.requests[0]["amount"] == 1999


@pytest.mark.asyncio
async def test_payment_intent_for_unknown_parcel(client, payment_gateway):
    response = await client.post("/create-payment-intent", json={"parcelId": 9999})

    assert response.status_code == 404
    assert payment_gateway.requests == []


@pytest.mark.asyncio
async def test_payment_intent_for_paid_parcel(client, payment_gateway):
    parcel_id = await book_parcel(client)
    await client.post("/payments", json=confirmation(parcel_id))

    response = await client.post("/create-payment-intent", json={"parcelId": parcel_id})

    assert response.status_code == 400
    assert payment_gateway.requests == []


@pytest.mark.asyncio
async def test_confirm_payment_marks_parcel_paid(client):
    parcel_id = await book_parcel(client)

    response = await client.post("/payments", json=confirmation(parcel_id))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Payment history stored in db"
    assert data["paymentResult"]["insertedId"] > 0

    parcel = (await client.get(f"/parcels/{parcel_id}")).json()
    assert parcel["payment"] == "paid"


@pytest.mark.asyncio
async def test_parcel_can_only_be_paid_once(client, db_session):
    parcel_id = await book_parcel(client)

    first = await client.post("/payments", json=confirmation(parcel_id))
    second = await client.post("/payments", json=confirmation(parcel_id))

    assert first.status_code == 201
    assert second.status_code == 404
    assert second.json()["message"] == "Parcel not found or already paid."

    records = await db_session.scalar(
        select(func.count(PaymentRecord.id)).where(PaymentRecord.parcel_id == parcel_id)
    )
    assert records == 1


@pytest.mark.asyncio
async def test_payment_for_unknown_parcel_writes_nothing(client, db_session):
    response = await client.post("/payments", json=confirmation(9999))

    assert response.status_code == 404
    assert await db_session.scalar(select(func.count(PaymentRecord.id))) == 0


@pytest.mark.asyncio
async def test_confirm_payment_requires_email_and_amount(client):
    parcel_id = await book_parcel(client)

    response = await client.post("/payments", json={"parcelId": parcel_id})

    assert response.status_code == 400
    assert "email" in response.json()["message"]
    assert "amount" in response.json()["message"]


@pytest.mark.asyncio
async def test_own_payment_history_newest_first(client, auth):
    first = await book_parcel(client)
    second = await book_parcel(client)
    other = await book_parcel(client, created_by="other@zapshift.com")
    await client.post("/payments", json=confirmation(first))
    await client.post("/payments", json=confirmation(second))
    await client.post("/payments", json=confirmation(other, email="other@zapshift.com"))

    response = await client.get(
        "/payments",
        params={"email": "user@zapshift.com"},
        headers=auth("user@zapshift.com")
    )

    assert response.status_code == 200
    assert [p["parcelId"] for p in response.json()] == [second, first]


@pytest.mark.asyncio
async def test_payment_history_of_someone_else_is_forbidden(client, auth):
    response = await client.get(
        "/payments",
        params={"email": "user@zapshift.com"},
        headers=auth("other@zapshift.com")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_full_payment_history_is_admin_only(client, auth, admin_account, user_account):
    parcel_id = await book_parcel(client)
    await client.post("/payments", json=confirmation(parcel_id))

    as_user = await client.get("/payments", headers=auth(user_account.email))
    as_admin = await client.get("/payments", headers=auth(admin_account.email))

    assert as_user.status_code == 403
    assert as_admin.status_code == 200
    assert len(as_admin.json()) == 1


@pytest.mark.asyncio
async def test_payment_history_requires_token(client):
    response = await client.get("/payments", params={"email": "user@zapshift.com"})

    assert response.status_code == 401
