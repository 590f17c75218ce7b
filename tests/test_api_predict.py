import time


def test_predict_returns_stored_prediction(client, predict_payload) -> None:
    r = client.post("/api/predict", json=predict_payload)
    assert r.status_code == 200
    body = r.json()

    prediction = body["prediction"]
    assert isinstance(prediction["id"], int)
    assert prediction["jobTitle"] == "Software Engineer"
    assert prediction["linearRegressionPrediction"] == 224804
    assert prediction["confidence"] == 85
    assert prediction["createdAt"]
    assert body["engine"] == "rule-based"
    assert body["cached"] is False
    assert body["fallback"] is False
    assert "message" not in body
    assert set(body["featureImportance"]) == {"experience", "department", "location", "education", "companySize"}
    assert body["responseTime"] >= 0
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"


def test_repeated_prediction_is_cached(client, predict_payload) -> None:
    first = client.post("/api/predict", json=predict_payload).json()
    second = client.post("/api/predict", json=predict_payload).json()
    assert first["cached"] is False
    assert second["cached"] is True
    assert second["prediction"]["randomForestPrediction"] == first["prediction"]["randomForestPrediction"]
    # Both requests are persisted.
    assert second["prediction"]["id"] != first["prediction"]["id"]


def test_predict_accepts_snake_case_fields(client) -> None:
    r = client.post(
        "/api/predict",
        json={
            "job_title": "Data Scientist",
            "experience": 8,
            "department": "Data Science",
            "location": "Mumbai",
            "education_level": "Master",
            "company_size": "Large (1000+)",
        },
    )
    assert r.status_code == 200
    assert r.json()["prediction"]["linearRegressionPrediction"] == 508588


def test_invalid_prediction_input_returns_400(client, predict_payload) -> None:
    missing = dict(predict_payload)
    del missing["jobTitle"]
    r = client.post("/api/predict", json=missing)
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Invalid input data"
    assert body["errors"]

    negative = dict(predict_payload, experience=-1)
    assert client.post("/api/predict", json=negative).status_code == 400

    blank = dict(predict_payload, department="   ")
    assert client.post("/api/predict", json=blank).status_code == 400


def test_predict_falls_back_to_emergency_estimate(client, predict_payload, monkeypatch) -> None:
    services = client.app.state.services

    def broken(_data):
        raise RuntimeError("model exploded")

    monkeypatch.setattr(services.predictor, "predict", broken)
    r = client.post("/api/predict", json=predict_payload)
    assert r.status_code == 200
    body = r.json()
    assert body["fallback"] is True
    assert body["engine"] == "emergency"
    assert body["message"]
    assert body["prediction"]["linearRegressionPrediction"] == 90000
    assert body["prediction"]["confidence"] == 70
    assert services.monitor.requests_failed == 1


def test_predict_timeout_returns_408(client, predict_payload, monkeypatch) -> None:
    from salary_api.config import settings

    services = client.app.state.services

    def slow(_data):
        time.sleep(0.5)

    monkeypatch.setattr(services.predictor, "predict", slow)
    monkeypatch.setattr(settings, "predict_timeout_seconds", 0.05)
    r = client.post("/api/predict", json=predict_payload)
    assert r.status_code == 408


def test_predictions_are_listed_newest_first(client, predict_payload) -> None:
    client.post("/api/predict", json=predict_payload)
    client.post("/api/predict", json=dict(predict_payload, jobTitle="Data Scientist"))
    client.post("/api/predict", json=dict(predict_payload, jobTitle="Product Manager"))

    r = client.get("/api/predictions", params={"limit": 2})
    assert r.status_code == 200
    items = r.json()
    assert [i["prediction"]["jobTitle"] for i in items] == ["Product Manager", "Data Scientist"]
    assert items[0]["featureImportance"]["experience"] == 0.35

    assert len(client.get("/api/predictions").json()) == 3
