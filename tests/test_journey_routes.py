def _signup(client, name="casey"):
    resp = client.post("/api/users", json={"screenName": name})
    assert resp.status_code == 200
    return resp.json()["user"]["userId"]


def test_journey_lifecycle_over_http(client):
    user_id = _signup(client)

    resp = client.post(
        "/api/journeys/start",
        json={"userId": user_id, "resentmentDescription": "my brother"},
    )
    assert resp.status_code == 200
    journey = resp.json()["journey"]
    assert journey["journeyNumber"] == 1
    assert journey["currentStep"] == 1
    assert journey["completedSteps"] == []
    assert journey["status"] == "active"

    resp = client.put(
        "/api/journeys/1/step",
        json={"userId": user_id, "stepNumber": 1, "completed": True},
    )
    assert resp.json()["journey"]["currentStep"] == 2
    assert resp.json()["journey"]["completedSteps"] == [1]

    for step in range(2, 8):
        resp = client.put(
            "/api/journeys/1/step",
            json={"userId": user_id, "stepNumber": step, "completed": True},
        )
    final = resp.json()["journey"]
    assert final["status"] == "completed"
    assert final["isComplete"] is True
    assert final["currentStep"] == 7
    assert final["completedDate"] is not None

    detail = client.get(f"/api/journeys/{user_id}/1").json()["journey"]
    assert detail["progress"] == 100
    assert detail["currentStep"] == {"number": 7, "name": "Evolve"}
    assert detail["completedSteps"][0] == {"number": 1, "name": "Recognize"}
    assert detail["daysActive"] >= 0

    stats = client.get(f"/api/journeys/{user_id}/stats").json()["stats"]
    assert stats["totalJourneys"] == 1
    assert stats["completedJourneys"] == 1
    assert stats["activeJourneys"] == 0


def test_free_user_blocked_from_second_active_journey_until_upgrade(client, store, make_user):
    user = make_user()

    first = client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "one"})
    assert first.status_code == 200

    blocked = client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "two"})
    assert blocked.status_code == 403
    assert blocked.json()["success"] is False
    assert "premium" in blocked.json()["message"].lower()

    upgraded = store.require(user.id)
    upgraded.subscription_tier = "premium"
    upgraded.subscription_status = "active"
    store.save(upgraded)

    allowed = client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "two"})
    assert allowed.status_code == 200
    assert allowed.json()["journey"]["journeyNumber"] == 2


def test_pause_resume_and_status_filter(client, make_user):
    user = make_user()
    client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "one"})

    paused = client.put("/api/journeys/1/pause", json={"userId": user.id})
    assert paused.json()["journey"]["status"] == "paused"

    listing = client.get(f"/api/journeys/{user.id}", params={"status": "paused"}).json()
    assert [j["journeyNumber"] for j in listing["journeys"]] == [1]
    assert listing["stats"] == {"total": 1, "active": 0, "completed": 0}

    resumed = client.put("/api/journeys/1/resume", json={"userId": user.id})
    assert resumed.json()["journey"]["status"] == "active"
    assert resumed.json()["journey"]["currentStep"] == 1


def test_completed_journey_cannot_be_paused(client, make_user):
    user = make_user()
    client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "one"})
    for step in range(1, 8):
        client.put("/api/journeys/1/step", json={"userId": user.id, "stepNumber": step, "completed": True})

    resp = client.put("/api/journeys/1/pause", json={"userId": user.id})
    assert resp.status_code == 409


def test_resource_completion_counts(client, make_user):
    user = make_user()
    body = {"userId": user.id, "resourceId": "med-7", "resourceName": "Loving Kindness"}

    first = client.post("/api/journeys/complete-resource", json=body).json()
    second = client.post("/api/journeys/complete-resource", json=body).json()

    assert first["resource"]["timesCompleted"] == 1
    assert second["resource"]["timesCompleted"] == 2
    assert second["totalCompleted"] == 1


def test_not_found_and_validation_errors(client, make_user):
    assert client.get("/api/journeys/999999").status_code == 404

    user = make_user()
    missing = client.put("/api/journeys/5/step", json={"userId": user.id, "stepNumber": 1, "completed": True})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Journey not found"

    client.post("/api/journeys/start", json={"userId": user.id, "resentmentDescription": "one"})
    bad_step = client.put("/api/journeys/1/step", json={"userId": user.id, "stepNumber": 9, "completed": False})
    assert bad_step.status_code == 400

    no_user = client.post("/api/journeys/start", json={"resentmentDescription": "one"})
    assert no_user.status_code == 400


def test_static_step_guidance(client):
    resp = client.get("/api/journeys/steps/3")
    assert resp.status_code == 200
    guidance = resp.json()["guidance"]
    assert guidance["stepName"] == "Learn"
    assert "cognitive reframing" in guidance["description"]

    assert client.get("/api/journeys/steps/8").status_code == 400
