"""
HTTP tests: stair calculation, task rates, carriers.
"""


# ============================================================
# Seed and list
# ============================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_seed_task_rates_is_idempotent(client):
    first = client.get("/api/task-rates/seed").json()
    second = client.get("/api/task-rates/seed").json()
    assert first["seeded"] > 0
    assert second["seeded"] == 0
    rates = client.get("/api/task-rates/").json()
    assert len(rates) == first["seeded"]


def test_patch_task_rate(client):
    client.get("/api/task-rates/seed")
    response = client.patch("/api/task-rates/mixing mortar", json={"estimated_hours": 0.75})
    assert response.status_code == 200
    assert response.json()["estimated_hours"] == 0.75


def test_patch_unknown_task_rate_404(client):
    response = client.patch("/api/task-rates/welding", json={"estimated_hours": 1.0})
    assert response.status_code == 404


def test_seed_and_list_carriers(client):
    assert client.get("/api/carriers/seed").json()["seeded"] == 3
    carriers = client.get("/api/carriers/").json()
    assert carriers[0]["name"] == "wheelbarrow"
    assert carriers[0]["size_tonnes"] == 0.125


# ============================================================
# Calculation
# ============================================================

def test_calculate_with_stored_rates(client, flight_fields):
    client.get("/api/task-rates/seed")
    response = client.post("/api/stairs/u-shape/calculate", json={"fields": flight_fields})
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["total_blocks"] == 132
    building = [t for t in data["task_breakdown"] if t["task"] == "building steps with 4-inch blocks"]
    assert building[0]["hours"] == 7.68


def test_calculate_with_inline_rates(client, flight_fields):
    response = client.post("/api/stairs/u-shape/calculate", json={
        "fields": flight_fields,
        "task_rates": [{"name": "mixing mortar", "unit": "batch", "estimated_hours": 1.0}],
    })
    assert response.status_code == 200
    tasks = response.json()["task_breakdown"]
    assert [t["task"] for t in tasks] == ["mixing mortar"]


def test_calculate_with_carrier(client, flight_fields):
    client.get("/api/task-rates/seed")
    client.get("/api/carriers/seed")
    response = client.post("/api/stairs/u-shape/calculate", json={
        "fields": flight_fields, "carrier_name": "petrol barrow",
    })
    assert response.status_code == 200
    names = [t["task"] for t in response.json()["task_breakdown"]]
    assert "transport slabs" in names


def test_unknown_carrier_404(client, flight_fields):
    response = client.post("/api/stairs/u-shape/calculate", json={
        "fields": flight_fields, "carrier_name": "crane",
    })
    assert response.status_code == 404


def test_bad_input_400(client, flight_fields):
    fields = dict(flight_fields)
    del fields["total_height"]
    response = client.post("/api/stairs/u-shape/calculate", json={"fields": fields})
    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "total_height"


def test_malformed_lists_400(client, flight_fields):
    for extra in ({"hand_carried": ["posts"]}, {"hand_carried": "posts"}, {"materials": 4}):
        response = client.post("/api/stairs/u-shape/calculate",
                               json={"fields": dict(flight_fields, **extra)})
        assert response.status_code == 400, "%r gave %d" % (extra, response.status_code)
        assert response.json()["detail"]["field"] == list(extra)[0]


def test_short_arm_422(client, flight_fields):
    fields = dict(flight_fields, arm_a_length=200)
    response = client.post("/api/stairs/u-shape/calculate", json={"fields": fields})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["arm"] == "A"
    assert detail["required"] == 276.0
