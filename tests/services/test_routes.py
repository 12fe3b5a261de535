"""HTTP Routes — status codes, error envelopes, and end-to-end load flow.

Invariants:
    - Domain errors surface as {"error": {...}} with the mapped status code
    - Pydantic validation errors are 400 with field-level details
    - created_by comes from the acting-user header when no claims are present
"""


async def _ranch(client, name: str) -> int:
    res = await client.post("/api/v1/ranches", json={"name": name})
    assert res.status_code == 201
    return res.json()["id"]


async def _calf(client, ranch_id: int, primary_id: str, **fields) -> dict:
    res = await client.post("/api/v1/calves", json={
        "primary_id": primary_id,
        "breed": "angus",
        "seller": "smith farms",
        "sex": "steer",
        "current_ranch_id": ranch_id,
        "placed_date": "2024-03-01",
        **fields,
    })
    assert res.status_code == 201, res.text
    return res.json()


# ─── Health ─────────────────────────────────────────────────────

async def test_liveness_and_readiness(client):
    live = await client.get("/api/v1/health/")
    ready = await client.get("/api/v1/health/ready")
    assert live.status_code == 200
    assert live.json()["status"] == "healthy"
    assert ready.status_code == 200
    assert ready.json()["checks"] == {"database": "healthy", "schema": "current"}


# ─── Ranches and master data ────────────────────────────────────

async def test_ranch_crud(client):
    created = await client.post(
        "/api/v1/ranches",
        json={"name": " North ", "weight_brackets": [{"label": "Light", "max": 300}]},
        headers={"X-Acting-User": "Dana"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "North"
    assert body["created_by"] == "Dana"
    assert body["weight_brackets"][0]["max_weight"] == 300
    assert len(body["price_periods"]) == 1

    patched = await client.patch(f"/api/v1/ranches/{body['id']}", json={"manager": "Lee"})
    assert patched.json()["manager"] == "Lee"

    listed = await client.get("/api/v1/ranches")
    assert [r["name"] for r in listed.json()] == ["North"]

    deleted = await client.delete(f"/api/v1/ranches/{body['id']}")
    assert deleted.json() == {"id": body["id"]}
    missing = await client.get(f"/api/v1/ranches/{body['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_duplicate_ranch_is_409(client):
    await _ranch(client, "North")
    res = await client.post("/api/v1/ranches", json={"name": "NORTH"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"
    assert res.json()["error"]["field"] == "name"


async def test_blank_ranch_name_is_400(client):
    res = await client.post("/api/v1/ranches", json={"name": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert res.json()["error"]["details"][0]["field"] == "body.name"


async def test_breed_and_seller_registries(client):
    breed = await client.post("/api/v1/breeds", json={"name": "  black angus "})
    assert breed.status_code == 201
    assert breed.json()["name"] == "Black Angus"
    dup = await client.post("/api/v1/breeds", json={"name": "BLACK ANGUS"})
    assert dup.status_code == 409

    seller = await client.post(
        "/api/v1/sellers", json={"name": "smith farms", "state": "tx", "zip_code": "79101"},
    )
    assert seller.status_code == 201
    assert seller.json()["state"] == "TX"

    renamed = await client.patch(
        f"/api/v1/sellers/{seller.json()['id']}", json={"city": "amarillo"},
    )
    assert renamed.json()["city"] == "Amarillo"
    assert (await client.get("/api/v1/sellers")).json()[0]["name"] == "Smith Farms"
    assert (await client.delete(f"/api/v1/breeds/{breed.json()['id']}")).status_code == 200


# ─── Calves ─────────────────────────────────────────────────────

async def test_calf_intake_stamps_creator_and_days_on_feed(client):
    ranch_id = await _ranch(client, "North")
    res = await client.post(
        "/api/v1/calves",
        json={
            "primary_id": 17, "eid": 982000000000017, "breed": "angus",
            "seller": "smith farms", "sex": "bull", "current_ranch_id": ranch_id,
            "placed_date": "2024-03-01", "pre_days_on_feed": 10,
            "death_date": "2024-03-05",
        },
        headers={"X-Acting-User": "Dana"},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["primary_id"] == "17"
    assert body["eid"] == "982000000000017"
    assert body["created_by"] == "Dana"
    assert body["status"] == "deceased"
    assert body["days_on_feed"] == 15


async def test_calf_with_bad_date_is_400_with_field(client):
    ranch_id = await _ranch(client, "North")
    res = await client.post("/api/v1/calves", json={
        "primary_id": "A", "breed": "angus", "seller": "smith", "sex": "bull",
        "current_ranch_id": ranch_id, "placed_date": "someday",
    })
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "placed_date"


async def test_calf_with_unknown_ranch_is_400(client):
    res = await client.post("/api/v1/calves", json={
        "primary_id": "A", "breed": "angus", "seller": "smith", "sex": "bull",
        "current_ranch_id": 999,
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "REFERENTIAL_INTEGRITY"


async def test_bulk_intake_reports_failing_record(client):
    ranch_id = await _ranch(client, "North")
    base = {"breed": "angus", "seller": "smith", "current_ranch_id": ranch_id}
    res = await client.post("/api/v1/calves/bulk", json={"calves": [
        {**base, "primary_id": "A", "sex": "bull"},
        {**base, "primary_id": "B", "sex": "cow"},
    ]})
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["record"] == 1
    inventory = await client.get(f"/api/v1/calves/by-ranch/{ranch_id}/inventory")
    assert inventory.json() == []


async def test_calf_patch_and_views(client):
    north = await _ranch(client, "North")
    south = await _ranch(client, "South")
    calf = await _calf(client, north, "A")

    moved = await client.patch(f"/api/v1/calves/{calf['id']}", json={"current_ranch_id": south})
    assert moved.status_code == 200
    assert moved.json()["current_ranch_id"] == south

    by_origin = await client.get(f"/api/v1/calves/by-ranch/{north}")
    inventory = await client.get(f"/api/v1/calves/by-ranch/{south}/inventory")
    managed = await client.get(f"/api/v1/calves/by-ranch/{south}/manage")
    assert [c["id"] for c in by_origin.json()] == [calf["id"]]
    assert [c["id"] for c in inventory.json()] == [calf["id"]]
    assert [c["id"] for c in managed.json()] == [calf["id"]]

    history = await client.get(f"/api/v1/calves/{calf['id']}/history")
    assert [e["movement_type"] for e in history.json()] == ["intake", "ranch_transfer"]

    assert (await client.delete(f"/api/v1/calves/{calf['id']}")).json() == {"id": calf["id"]}
    assert (await client.get(f"/api/v1/calves/{calf['id']}")).status_code == 404


# ─── Loads ──────────────────────────────────────────────────────

async def test_load_lifecycle_over_http(client):
    north = await _ranch(client, "North")
    south = await _ranch(client, "South")
    west = await _ranch(client, "West")
    calf = await _calf(client, north, "A", eid="982000000000001")
    await _calf(client, north, "B", status="sold")

    created = await client.post("/api/v1/loads", json={
        "origin_ranch_id": north, "destination_ranch_id": south,
        "departure_date": "2024-04-01", "trucking": "Truck 7",
        "eids": [982000000000001], "primary_ids": ["B", "ghost"],
    }, headers={"X-Acting-User": "Dana"})
    assert created.status_code == 201
    body = created.json()
    load_id = body["load"]["id"]
    assert body["head_count"] == 1
    assert body["shipped_calf_ids"] == [calf["id"]]
    assert body["excluded_identifiers"] == ["B", "ghost"]
    assert body["load"]["created_by"] == "Dana"

    detail = (await client.get(f"/api/v1/loads/{load_id}")).json()
    assert detail["status"] == "in_transit"
    assert detail["calves"][0]["calf_id"] == calf["id"]

    arrival_path = f"/api/v1/loads/{load_id}/calves/{calf['id']}/arrival-status"
    early = await client.patch(arrival_path, json={"acting_ranch_id": south, "arrival_status": "doa"})
    assert early.status_code == 400
    assert early.json()["error"]["code"] == "LOAD_NOT_ARRIVED"

    arrived = await client.patch(f"/api/v1/loads/{load_id}", json={"arrival_date": "2024-04-02"})
    assert arrived.status_code == 200

    forbidden = await client.patch(arrival_path, json={"acting_ranch_id": west, "arrival_status": "doa"})
    assert forbidden.status_code == 403
    flagged = await client.patch(arrival_path, json={"acting_ranch_id": south, "arrival_status": "doa"})
    assert flagged.status_code == 200
    assert flagged.json()["arrival_status"] == "doa"

    received = (await client.get(f"/api/v1/ranches/{south}/loads")).json()
    assert received[0]["direction"] == "received"
    assert received[0]["status"] == "arrived"

    deleted = await client.delete(f"/api/v1/loads/{load_id}")
    assert deleted.json() == {"id": load_id, "restored_calf_ids": [calf["id"]]}
    restored = (await client.get(f"/api/v1/calves/{calf['id']}")).json()
    assert restored["status"] == "feeding"
    assert restored["current_ranch_id"] == north


async def test_load_patch_swaps_calves(client):
    north = await _ranch(client, "North")
    south = await _ranch(client, "South")
    first = await _calf(client, north, "A")
    second = await _calf(client, north, "B")
    created = await client.post("/api/v1/loads", json={
        "origin_ranch_id": north, "destination_ranch_id": south,
        "departure_date": "2024-04-01", "primary_ids": ["A"],
    })
    load_id = created.json()["load"]["id"]

    res = await client.patch(f"/api/v1/loads/{load_id}", json={"primary_ids": ["B"]})
    assert res.status_code == 200

    detail = (await client.get(f"/api/v1/loads/{load_id}")).json()
    assert [c["calf_id"] for c in detail["calves"]] == [second["id"]]
    dropped = (await client.get(f"/api/v1/calves/{first['id']}")).json()
    assert dropped["status"] == "feeding"
    assert dropped["current_ranch_id"] == north


async def test_load_without_destination_is_400(client):
    north = await _ranch(client, "North")
    res = await client.post("/api/v1/loads", json={
        "origin_ranch_id": north, "departure_date": "2024-04-01",
    })
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "destination_ranch_id"


async def test_ranch_summaries_endpoint(client):
    north = await _ranch(client, "North")
    await _calf(client, north, "A")
    res = await client.get("/api/v1/ranches/summaries")
    assert res.status_code == 200
    assert res.json()[0]["total_cattle"] == 1
