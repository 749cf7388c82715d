"""
Integration tests for riders.

Registration, lookup, admin moderation and the rider delivery views.
"""

import pytest

from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole, RiderStatus
from zapshift.app.models.rider import Rider

APPLICATION = {
    "email": "rider@zapshift.com",
    "name": "Rahim",
    "phone": "+8801700000000",
    "age": 27,
    "nid": "1234567890",
    "region": "Dhaka",
    "district": "Dhaka",
    "preferredDistrict": "Gazipur",
    "bike_brand": "Yamaha",
    "bike_registration": "DHA-11-2233",
}


async def apply(client, **overrides) -> int:
    response = await client.post("/riders", json={**APPLICATION, **overrides})
    assert response.status_code == 201
    return response.json()["insertedId"]


async def resolve(client, auth, rider_id, status, caller="admin@zapshift.com"):
    return await client.patch(
        "/riders/update-status",
        json={"id": rider_id, "status": status},
        headers=auth(caller)
    )


@pytest.mark.asyncio
async def test_application_starts_pending(client):
    await apply(client, status="active")

    response = await client.get("/rider", params={"email": "rider@zapshift.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pending"
    assert data["workStatus"] == "idle"
    assert data["preferredDistrict"] == "Gazipur"


@pytest.mark.asyncio
async def test_application_requires_district(client):
    application = {k: v for k, v in APPLICATION.items() if k != "district"}

    response = await client.post("/riders", json=application)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_open_application_is_rejected(client):
    await apply(client)

    response = await client.post("/riders", json=APPLICATION)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rider_lookup_errors(client):
    missing_email = await client.get("/rider")
    unknown = await client.get("/rider", params={"email": "ghost@zapshift.com"})

    assert missing_email.status_code == 400
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_list_riders_prefers_preferred_district(client):
    dhaka = await apply(client, email="a@zapshift.com", district="Dhaka", preferredDistrict=None)
    gazipur = await apply(client, email="b@zapshift.com", district="Dhaka", preferredDistrict="Gazipur")

    by_district = await client.get("/riders", params={"district": "Dhaka"})
    by_preferred = await client.get("/riders", params={"district": "Dhaka", "preferredDistrict": "Gazipur"})
    everyone = await client.get("/riders")

    assert [r["id"] for r in by_district.json()] == [dhaka, gazipur]
    assert [r["id"] for r in by_preferred.json()] == [gazipur]
    assert len(everyone.json()) == 2


@pytest.mark.asyncio
async def test_moderation_queues_are_admin_only(client, auth, admin_account, user_account):
    await apply(client)

    as_user = await client.get("/pending-riders", headers=auth(user_account.email))
    pending = await client.get("/pending-riders", headers=auth(admin_account.email))
    active = await client.get("/active-riders", headers=auth(admin_account.email))

    assert as_user.status_code == 403
    assert len(pending.json()) == 1
    assert active.json() == []


@pytest.mark.asyncio
async def test_approval_promotes_user_account(client, auth, admin_account, make_account, db_session):
    applicant = await make_account("rider@zapshift.com")
    rider_id = await apply(client)

    response = await resolve(client, auth, rider_id, "active")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Application active",
        "updated": True,
        "riderModified": 1,
        "roleModified": 1,
    }

    account = await db_session.get(Account, applicant.id, populate_existing=True)
    assert account.role == AccountRole.RIDER

    active = await client.get("/active-riders", headers=auth(admin_account.email))
    assert [r["id"] for r in active.json()] == [rider_id]


@pytest.mark.asyncio
async def test_rejection_leaves_role_alone(client, auth, admin_account, make_account, db_session):
    applicant = await make_account("rider@zapshift.com")
    rider_id = await apply(client)

    response = await resolve(client, auth, rider_id, "rejected")

    assert response.status_code == 200
    assert response.json()["message"] == "Application rejected"
    assert response.json()["roleModified"] == 0

    account = await db_session.get(Account, applicant.id, populate_existing=True)
    assert account.role == AccountRole.USER


@pytest.mark.asyncio
async def test_approval_never_demotes_an_admin(client, auth, admin_account, db_session):
    rider_id = await apply(client, email=admin_account.email)

    response = await resolve(client, auth, rider_id, "active")

    assert response.json()["roleModified"] == 0
    account = await db_session.get(Account, admin_account.id, populate_existing=True)
    assert account.role == AccountRole.ADMIN


@pytest.mark.asyncio
async def test_application_is_resolved_once(client, auth, admin_account, db_session):
    rider_id = await apply(client)
    await resolve(client, auth, rider_id, "rejected")

    response = await resolve(client, auth, rider_id, "active")

    assert response.status_code == 404
    assert response.json()["message"] == "Rider not found or already updated"
    rider = await db_session.get(Rider, rider_id, populate_existing=True)
    assert rider.status == RiderStatus.REJECTED


@pytest.mark.asyncio
async def test_rejected_applicant_may_apply_again(client, auth, admin_account):
    rider_id = await apply(client)
    await resolve(client, auth, rider_id, "rejected")

    response = await client.post("/riders", json=APPLICATION)

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_resolution_status_must_be_final(client, auth, admin_account):
    rider_id = await apply(client)

    pending = await resolve(client, auth, rider_id, "pending")
    bogus = await resolve(client, auth, rider_id, "suspended")

    assert pending.status_code == 400
    assert bogus.status_code == 400


@pytest.mark.asyncio
async def test_applicant_cannot_approve_own_application(client, auth, make_account, db_session):
    applicant = await make_account("rider@zapshift.com")
    rider_id = await apply(client)

    response = await resolve(client, auth, rider_id, "active", caller=applicant.email)

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: admins only"

    account = await db_session.get(Account, applicant.id, populate_existing=True)
    assert account.role == AccountRole.USER
    rider = await db_session.get(Rider, rider_id, populate_existing=True)
    assert rider.status == RiderStatus.PENDING


@pytest.mark.asyncio
async def test_resolution_requires_token(client):
    response = await client.patch("/riders/update-status", json={"id": 1, "status": "active"})

    assert response.status_code == 401


async def deliver(client, parcel_id, final="delivered"):
    await client.patch("/parcels/update-status", json={"parcelId": parcel_id, "status": "in-transit"})
    await client.patch("/parcels/update-status", json={"parcelId": parcel_id, "status": final})


@pytest.mark.asyncio
async def test_pending_and_completed_deliveries(client, auth, admin_account, make_account):
    await make_account("rider@zapshift.com")
    rider_id = await apply(client)
    await resolve(client, auth, rider_id, "active")

    parcel_ids = []
    for _ in range(3):
        booked = await client.post("/parcels", json={"created_by": "user@zapshift.com", "cost": 80})
        parcel_ids.append(booked.json()["insertedId"])
        await client.patch("/assign-rider", json={"riderId": rider_id, "parcelId": parcel_ids[-1]})

    await deliver(client, parcel_ids[0])
    await deliver(client, parcel_ids[1], final="service-center-delivered")

    pending = await client.get(f"/rider/pending-delivery/{rider_id}")
    completed = await client.get(
        f"/rider/completed-deliveries/{rider_id}",
        headers=auth("rider@zapshift.com")
    )

    assert [p["id"] for p in pending.json()] == [parcel_ids[2]]
    assert completed.status_code == 200
    assert [p["id"] for p in completed.json()] == [parcel_ids[1], parcel_ids[0]]


@pytest.mark.asyncio
async def test_completed_deliveries_are_private(client, auth, admin_account, make_account):
    for email in ("rider@zapshift.com", "other-rider@zapshift.com"):
        await make_account(email)
        rider_id = await apply(client, email=email)
        await resolve(client, auth, rider_id, "active")

    first_rider = (await client.get("/rider", params={"email": "rider@zapshift.com"})).json()["id"]

    someone_else = await client.get(
        f"/rider/completed-deliveries/{first_rider}",
        headers=auth("other-rider@zapshift.com")
    )
    not_a_rider = await client.get(
        f"/rider/completed-deliveries/{first_rider}",
        headers=auth(admin_account.email)
    )

    assert someone_else.status_code == 403
    assert not_a_rider.status_code == 403
