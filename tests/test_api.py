import pytest

HEADERS_A = {"X-Owner-Id": "owner-a"}
HEADERS_B = {"X-Owner-Id": "owner-b"}


async def _catalog(client, headers=HEADERS_A):
    brand = await client.post("/brands/", json={"name": "Polymaker"}, headers=headers)
    assert brand.status_code == 201
    mtype = await client.post("/material-types/", json={"name": "PLA"}, headers=headers)
    assert mtype.status_code == 201
    return brand.json(), mtype.json()


def _unit_body(brand, mtype, **overrides):
    body = {
        "brand_id": brand["id"],
        "type_id": mtype["id"],
        "color_name": "Red",
        "color_code": "#FF0000",
        "total_weight": 1000,
        "unit_price": 20,
        "acquired_on": "2026-01-15",
    }
    body.update(overrides)
    return body


async def test_missing_owner_header(client):
    resp = await client.get("/units/")
    assert resp.status_code == 401


async def test_unit_lifecycle_over_http(client):
    brand, mtype = await _catalog(client)

    resp = await client.post("/units/", json=_unit_body(brand, mtype), headers=HEADERS_A)
    assert resp.status_code == 201
    unit = resp.json()
    assert unit["status"] == "unopened"
    assert unit["is_opened"] is False
    assert unit["remaining_weight"] == 1000
    assert unit["brand"]["name"] == "Polymaker"

    resp = await client.post(f"/units/{unit['id']}/deplete", headers=HEADERS_A)
    assert resp.status_code == 409

    resp = await client.post(f"/units/{unit['id']}/open", json={"at": "2026-02-01T10:00:00"}, headers=HEADERS_A)
    assert resp.status_code == 200
    assert resp.json()["status"] == "opened"
    assert resp.json()["opened_at"].startswith("2026-02-01T10:00:00")

    resp = await client.post(f"/units/{unit['id']}/usage", json={"amount": 1200}, headers=HEADERS_A)
    assert resp.status_code == 201
    assert resp.json()["remaining_weight"] == 0
    assert resp.json()["warning"]

    resp = await client.post(f"/units/{unit['id']}/deplete", headers=HEADERS_A)
    assert resp.status_code == 200

    resp = await client.get("/units/", headers=HEADERS_A)
    assert resp.json() == []
    resp = await client.get("/units/", params={"include_depleted": "true"}, headers=HEADERS_A)
    assert len(resp.json()) == 1

    resp = await client.post(f"/units/{unit['id']}/restore", headers=HEADERS_A)
    assert resp.status_code == 200
    assert resp.json()["status"] == "opened"


async def test_validation_errors_map_to_400(client):
    brand, mtype = await _catalog(client)
    resp = await client.post("/units/", json=_unit_body(brand, mtype, total_weight=0), headers=HEADERS_A)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Weight must be positive"

    resp = await client.post(f"/brands/{brand['id']}/colors", json={"color_name": "Red", "color_code": "red"}, headers=HEADERS_A)
    assert resp.status_code == 400

    resp = await client.get("/dashboard/stats", params={"threshold": 2}, headers=HEADERS_A)
    assert resp.status_code == 400


async def test_referenced_brand_delete_is_conflict(client):
    brand, mtype = await _catalog(client)
    resp = await client.post("/units/", json=_unit_body(brand, mtype), headers=HEADERS_A)
    unit_id = resp.json()["id"]

    resp = await client.delete(f"/brands/{brand['id']}", headers=HEADERS_A)
    assert resp.status_code == 409

    assert (await client.delete(f"/units/{unit_id}", headers=HEADERS_A)).status_code == 204
    assert (await client.delete(f"/brands/{brand['id']}", headers=HEADERS_A)).status_code == 204
    assert (await client.get(f"/brands/{brand['id']}", headers=HEADERS_A)).status_code == 404


async def test_duplicate_color_is_conflict(client):
    brand, _ = await _catalog(client)
    url = f"/brands/{brand['id']}/colors"
    assert (await client.post(url, json={"color_name": "Red"}, headers=HEADERS_A)).status_code == 201
    assert (await client.post(url, json={"color_name": "Red"}, headers=HEADERS_A)).status_code == 409

    resp = await client.get(url, params={"name": "Red"}, headers=HEADERS_A)
    assert [c["color_code"] for c in resp.json()] == ["#CCCCCC"]


async def test_other_owner_gets_404(client):
    brand, mtype = await _catalog(client)
    resp = await client.post("/units/", json=_unit_body(brand, mtype), headers=HEADERS_A)
    unit_id = resp.json()["id"]

    assert (await client.get(f"/units/{unit_id}", headers=HEADERS_B)).status_code == 404
    assert (await client.patch(f"/units/{unit_id}", json={"notes": "x"}, headers=HEADERS_B)).status_code == 404
    assert (await client.get(f"/brands/{brand['id']}/colors", headers=HEADERS_B)).status_code == 404
    assert (await client.get("/units/", headers=HEADERS_B)).json() == []


@pytest.mark.parametrize("quantity, expected", [(3, 201), (0, 400)])
async def test_bulk_create(client, quantity, expected):
    brand, mtype = await _catalog(client)
    body = _unit_body(brand, mtype, quantity=quantity, opened=True)
    resp = await client.post("/units/bulk", json=body, headers=HEADERS_A)
    assert resp.status_code == expected
    if expected == 201:
        assert resp.json()["count"] == quantity
        assert {u["status"] for u in resp.json()["units"]} == {"opened"}


async def test_dashboard_endpoints(client):
    brand, mtype = await _catalog(client)
    await client.post("/units/", json=_unit_body(brand, mtype), headers=HEADERS_A)
    await client.post("/units/", json=_unit_body(brand, mtype, color_name="Blue", unit_price=30), headers=HEADERS_A)

    stats = (await client.get("/dashboard/stats", headers=HEADERS_A)).json()
    assert stats["total_units"] == 2
    assert stats["total_spend"] == 50
    assert stats["unopened_count"] == 2

    overview = (await client.get("/dashboard/inventory", params={"color": "blu"}, headers=HEADERS_A)).json()
    assert [g["name"] for g in overview["by_color"]] == ["Blue"]

    prices = (await client.get("/dashboard/prices", headers=HEADERS_A)).json()
    assert prices["total_count"] == 2
    assert prices["max_price"] == 30


async def test_list_units_by_color_code(client):
    brand, mtype = await _catalog(client)
    for name, code in (("Red", "#FF0000"), ("Blue", "#0000FF"), ("Natural", None)):
        resp = await client.post("/units/", json=_unit_body(brand, mtype, color_name=name, color_code=code), headers=HEADERS_A)
        assert resp.status_code == 201

    resp = await client.get("/units/", params={"color_code": "ff0000"}, headers=HEADERS_A)
    assert resp.status_code == 200
    assert [u["color_name"] for u in resp.json()] == ["Red"]

    resp = await client.get("/dashboard/inventory", params={"color_code": "#"}, headers=HEADERS_A)
    assert resp.status_code == 200
    assert sum(g["unit_count"] for g in resp.json()["by_brand"]) == 2
