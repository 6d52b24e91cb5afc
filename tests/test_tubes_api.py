"""
Tube list API: /api/tubes, /api/catalog.
"""

import pytest


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_empty_list(client):
    data = client.get("/api/tubes/").json()
    assert data["tubes"] == []
    assert data["total_weight"] == 0
    assert data["price_per_kg"] == 260
    assert data["material"] == "stainless-steel"


def test_add_round_tube(client, round_tube):
    response = client.post("/api/tubes/", json=round_tube)
    assert response.status_code == 200
    item = response.json()
    assert item["weight_per_tube"] == 1.82
    assert item["total_weight"] == 3.64
    assert item["price"] == pytest.approx(946.4)
    assert item["label"] == '1"'
    assert item["uses_standard_weight"] is False
    assert item["spec"]["shape"] == "round"


def test_list_is_persisted_between_requests(client, add_tube, round_tube):
    add_tube(round_tube)
    add_tube({"spec": {"shape": "sheet", "width": 24, "length": 96, "thickness": 2.0}, "quantity": 1})
    data = client.get("/api/tubes/").json()
    assert len(data["tubes"]) == 2
    assert data["total_weight"] == pytest.approx(3.64 + 25.40)
    assert data["total_price"] == pytest.approx((3.64 + 25.40) * 260)


def test_catalog_tube_flagged(client, add_tube):
    item = add_tube({"spec": {"shape": "square", "size": 2.0, "thickness": 2.0, "length": 240}})
    assert item["uses_standard_weight"] is True
    assert item["weight_per_tube"] == 18.68
    assert item["quantity"] == 1


def test_degenerate_wall_rejected_and_not_stored(client):
    response = client.post("/api/tubes/", json={
        "spec": {"shape": "round", "size": 0.1, "thickness": 1.5, "length": 10},
    })
    assert response.status_code == 422
    assert response.json()["detail"] == "Unable to calculate weight with the given parameters."
    assert client.get("/api/tubes/").json()["tubes"] == []


@pytest.mark.parametrize("spec", [
    {"shape": "round", "size": 1.0, "thickness": 1.3, "length": 100},      # not a catalog wall
    {"shape": "round", "size": 25, "thickness": 1.2, "length": 100},       # too big
    {"shape": "square", "size": 0.05, "thickness": 1.2, "length": 100},    # too small
    {"shape": "round", "size": 1.0, "thickness": 1.2, "length": 10001},    # too long
    {"shape": "round", "size": 1.0, "thickness": 1.2, "length": 0},
    {"shape": "rectangular", "width": 1.0, "thickness": 1.2, "length": 10},  # missing height
    {"shape": "sheet", "width": 0.5, "length": 10, "thickness": 2.0},      # sheet width < 1"
    {"shape": "sheet", "width": 24, "length": 10, "thickness": 1.2},       # tube-only wall
    {"shape": "hexagon", "size": 1.0, "thickness": 1.2, "length": 10},
])
def test_invalid_specs_rejected(client, spec):
    response = client.post("/api/tubes/", json={"spec": spec})
    assert response.status_code == 422


def test_invalid_quantity_rejected(client, round_tube):
    round_tube["quantity"] = 0
    assert client.post("/api/tubes/", json=round_tube).status_code == 422


def test_preview_does_not_store(client, round_tube):
    response = client.post("/api/tubes/preview", json=round_tube)
    assert response.status_code == 200
    data = response.json()
    assert data["weight_per_tube"] == 1.82
    assert data["density"] == 7.85
    assert client.get("/api/tubes/").json()["tubes"] == []


def test_update_tube(client, add_tube, round_tube):
    item = add_tube(round_tube)
    response = client.put(f"/api/tubes/{item['id']}", json={
        "spec": {"shape": "rectangular", "width": 2, "height": 1, "thickness": 1.5, "length": 120},
        "quantity": 4,
    })
    assert response.status_code == 200
    updated = response.json()
    assert updated["id"] == item["id"]
    assert updated["label"] == '2" × 1"'
    assert updated["weight_per_tube"] == 5.25
    assert client.get("/api/tubes/").json()["total_weight"] == 21.0


def test_update_unknown_tube(client, round_tube):
    assert client.put("/api/tubes/missing", json=round_tube).status_code == 404


def test_update_to_degenerate_spec_keeps_original(client, add_tube, round_tube):
    item = add_tube(round_tube)
    response = client.put(f"/api/tubes/{item['id']}", json={
        "spec": {"shape": "square", "size": 0.1, "thickness": 3.0, "length": 10},
    })
    assert response.status_code == 422
    assert client.get("/api/tubes/").json()["tubes"][0]["weight_per_tube"] == 1.82


def test_duplicate_and_remove(client, add_tube, round_tube):
    item = add_tube(round_tube)
    dup = client.post(f"/api/tubes/{item['id']}/duplicate").json()
    assert dup["id"] != item["id"]
    assert len(client.get("/api/tubes/").json()["tubes"]) == 2

    assert client.delete(f"/api/tubes/{item['id']}").status_code == 200
    tubes = client.get("/api/tubes/").json()["tubes"]
    assert [t["id"] for t in tubes] == [dup["id"]]
    assert client.delete(f"/api/tubes/{item['id']}").status_code == 404


def test_clear_all(client, add_tube, round_tube):
    add_tube(round_tube)
    add_tube(round_tube)
    response = client.delete("/api/tubes/")
    assert response.json() == {"ok": True, "removed": 2}
    assert client.get("/api/tubes/").json()["tubes"] == []


def test_search(client, add_tube, round_tube):
    add_tube(round_tube)
    add_tube({"spec": {"shape": "sheet", "width": 24, "length": 96, "thickness": 2.0}})
    data = client.get("/api/tubes/", params={"q": "sheet"}).json()
    assert [t["spec"]["shape"] for t in data["tubes"]] == ["sheet"]
    # Totals are for the whole list, not the filtered view
    assert data["total_weight"] == pytest.approx(3.64 + 25.40)


def test_summary_in_pounds(client, add_tube, round_tube):
    add_tube(round_tube)
    client.patch("/api/settings/", json={"weight_unit": "lb"})
    data = client.get("/api/tubes/summary").json()
    assert data["count"] == 1
    assert data["weight_unit"] == "lb"
    assert data["total_weight"] == pytest.approx(3.64 * 2.20462, abs=0.01)


def test_catalog_endpoint(client):
    data = client.get("/api/catalog/").json()
    assert data["shapes"] == ["round", "square", "rectangular", "sheet"]
    assert data["thickness_options"]["tube"] == [1.0, 1.2, 1.5, 2.0, 3.0]
    assert 6.0 in data["thickness_options"]["sheet"]
    assert data["materials"]["aluminum"] == 2.7
    rows = client.get("/api/catalog/standard-weights/round").json()
    assert {"size": 2.0, "thickness": 2.0, "weight_per_20ft": 14.67} in rows
