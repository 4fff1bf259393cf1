from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from ecoganha.core.database import get_db
from ecoganha.main import create_app


@pytest.fixture
async def client(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def as_actor(user_id):
    return {"X-Actor-Id": str(user_id)}


async def test_health(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_counting_mode_is_public(client, world):
    response = await client.get("/api/v1/config/counting-mode")
    assert response.status_code == 200
    assert response.json()["countingMode"] == "weight"


async def test_deposit_returns_receipt(client, world):
    response = await client.post(
        "/api/v1/transactions",
        json={"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id, "weight": 2.5},
        headers=as_actor(world.operator_id),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["countingMode"] == "weight"
    assert body["transaction"]["points"] == 25
    assert Decimal(body["transaction"]["weight"]) == Decimal("2.5")
    assert body["transaction"]["materialName"] == "PET"
    assert body["transaction"]["ecoPointName"] == "Praça Central"
    assert body["user"] == {"id": world.ana_id, "name": "Ana Souza", "phone": "11999990000", "role": "regular", "points": 125}


async def test_deposit_without_amount_is_unprocessable(client, world):
    response = await client.post(
        "/api/v1/transactions",
        json={"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id},
        headers=as_actor(world.operator_id),
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "validation"


async def test_deposit_requires_operator_role(client, world):
    payload = {"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id, "weight": 1}

    assert (await client.post("/api/v1/transactions", json=payload)).status_code == 401
    assert (await client.post("/api/v1/transactions", json=payload, headers=as_actor(9999))).status_code == 401
    response = await client.post("/api/v1/transactions", json=payload, headers=as_actor(world.partner_user_id))
    assert response.status_code == 403


async def test_deposit_at_foreign_eco_point_is_forbidden(client, world):
    response = await client.post(
        "/api/v1/transactions",
        json={"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id, "weight": 1},
        headers=as_actor(world.other_operator_id),
    )

    assert response.status_code == 403
    assert response.json()["detail"]["kind"] == "authorization"


async def test_redemption_returns_receipt(client, world):
    response = await client.post(
        "/api/v1/redemptions",
        json={"userId": world.ana_id, "offerId": world.coffee_id},
        headers=as_actor(world.partner_user_id),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["redemption"]["points"] == 40
    assert body["redemption"]["title"] == "Free coffee"
    assert body["redemption"]["partnerName"] == "Café Verde Ltda"
    assert body["redemption"]["remainingQuantity"] == 9
    assert body["user"]["points"] == 60


async def test_redemption_conflicts_carry_a_reason(client, world):
    headers = as_actor(world.partner_user_id)

    poor = await client.post("/api/v1/redemptions", json={"userId": world.carla_id, "offerId": world.coffee_id}, headers=headers)
    assert poor.status_code == 409
    assert poor.json()["detail"]["reason"] == "insufficient_points"

    sold_out = await client.post("/api/v1/redemptions", json={"userId": world.ana_id, "offerId": world.sold_out_id}, headers=headers)
    assert sold_out.status_code == 409
    assert sold_out.json()["detail"]["reason"] == "out_of_stock"


async def test_partner_history_and_eco_point_views(client, world):
    await client.post(
        "/api/v1/redemptions",
        json={"userId": world.ana_id, "offerId": world.coffee_id},
        headers=as_actor(world.partner_user_id),
    )
    await client.post(
        "/api/v1/transactions",
        json={"userId": world.bruno_id, "materialId": world.glass_id, "ecoPointId": world.central_id, "weight": "2"},
        headers=as_actor(world.operator_id),
    )

    redemptions = await client.get("/api/v1/redemptions/partner", headers=as_actor(world.partner_user_id))
    assert redemptions.status_code == 200
    assert [r["userName"] for r in redemptions.json()] == ["Ana Souza"]

    history = await client.get(f"/api/v1/transactions/eco-point/{world.central_id}", headers=as_actor(world.operator_id))
    assert history.status_code == 200
    assert history.json()[0]["userPhone"] == "11999990001"

    stats = await client.get(f"/api/v1/transactions/eco-point/{world.central_id}/stats", headers=as_actor(world.operator_id))
    assert stats.status_code == 200
    assert stats.json()["pointsDistributedToday"] == 9
    assert stats.json()["mostRecycledMaterial"] == "Glass"


async def test_deleting_redeemed_offer_conflicts(client, world):
    headers = as_actor(world.partner_user_id)
    await client.post("/api/v1/redemptions", json={"userId": world.ana_id, "offerId": world.coffee_id}, headers=headers)

    response = await client.delete(f"/api/v1/offers/{world.coffee_id}", headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "has_dependents"

    assert (await client.delete(f"/api/v1/offers/{world.last_unit_id}", headers=headers)).status_code == 204


async def test_catalog_deletions_require_admin(client, world):
    operator = as_actor(world.operator_id)
    admin = as_actor(world.admin_id)

    assert (await client.delete(f"/api/v1/materials/{world.metal_id}", headers=operator)).status_code == 403
    assert (await client.delete(f"/api/v1/materials/{world.metal_id}", headers=admin)).status_code == 409
    assert (await client.delete(f"/api/v1/eco-points/{world.central_id}", headers=admin)).status_code == 204


async def test_any_caller_sees_their_own_history(client, world):
    await client.post(
        "/api/v1/transactions",
        json={"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id, "weight": "1.5"},
        headers=as_actor(world.operator_id),
    )
    await client.post(
        "/api/v1/redemptions",
        json={"userId": world.ana_id, "offerId": world.coffee_id},
        headers=as_actor(world.partner_user_id),
    )

    deposits = await client.get("/api/v1/users/recycle-history", headers=as_actor(world.ana_id))
    assert deposits.status_code == 200
    assert [(d["materialName"], d["ecoPointName"], d["points"]) for d in deposits.json()] == [
        ("PET", "Praça Central", 15)
    ]

    redemptions = await client.get("/api/v1/users/redemption-history", headers=as_actor(world.ana_id))
    assert redemptions.status_code == 200
    assert [(r["title"], r["partnerName"], r["points"]) for r in redemptions.json()] == [
        ("Free coffee", "Café Verde Ltda", 40)
    ]

    empty = await client.get("/api/v1/users/redemption-history", headers=as_actor(world.bruno_id))
    assert empty.json() == []
    assert (await client.get("/api/v1/users/recycle-history")).status_code == 401


async def test_weight_beyond_gram_precision_is_unprocessable(client, world):
    response = await client.post(
        "/api/v1/transactions",
        json={"userId": world.ana_id, "materialId": world.pet_id, "ecoPointId": world.central_id, "weight": "0.0004"},
        headers=as_actor(world.operator_id),
    )
    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "validation"


async def test_history_views_reject_foreign_callers(client, world):
    foreign = as_actor(world.other_operator_id)

    history = await client.get(f"/api/v1/transactions/eco-point/{world.central_id}", headers=foreign)
    assert history.status_code == 403
    stats = await client.get(f"/api/v1/transactions/eco-point/{world.central_id}/stats", headers=foreign)
    assert stats.status_code == 403
    missing = await client.get("/api/v1/transactions/eco-point/9999/stats", headers=foreign)
    assert missing.status_code == 404
