import pytest
from fastapi.testclient import TestClient

from conftest import FakeGeolocator, OpenWeatherStub, forecast_payload
from weather_webhook.api import endpoints
from weather_webhook.api.endpoints import get_weather_service
from weather_webhook.intents import messages
from weather_webhook.main import create_app
from weather_webhook.weather.dates import utc_today


def _body(intent, **parameters):
    return {
        "responseId": "abc-123",
        "queryResult": {
            "queryText": "what's the weather",
            "intent": {"displayName": intent},
            "parameters": parameters,
        },
    }


@pytest.fixture
def webhook_client(settings, make_service):
    def _make(stub=None, geolocator=None):
        stub = stub or OpenWeatherStub(forecast=forecast_payload(utc_today()))
        geolocator = geolocator or FakeGeolocator()
        app = create_app(settings)

        async def _service():
            async with make_service(stub, geolocator) as service:
                yield service

        app.dependency_overrides[get_weather_service] = _service
        return TestClient(app), stub, geolocator
    return _make


def test_root_liveness(webhook_client):
    client, _, _ = webhook_client()
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Weather Webhook Service is running!"


def test_health(webhook_client):
    client, _, _ = webhook_client()
    assert client.get("/health").json() == {"status": "healthy", "service": "weather-webhook"}


def test_current_weather(webhook_client):
    client, _, _ = webhook_client()
    response = client.post("/webhook", json=_body("CurrentWeather", **{"geo-city": "Lahore"}))

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"fulfillmentText"}
    for fragment in ("30.2°C", "clear sky", "40%", "3.1 m/s"):
        assert fragment in data["fulfillmentText"]


def test_multi_day_default(webhook_client):
    client, _, _ = webhook_client()
    response = client.post("/webhook", json=_body("MultiDayForecast", **{"geo-city": "Lahore"}))
    assert len(response.json()["fulfillmentText"].split("\n")) == 3


def test_multi_day_refusal_makes_no_upstream_call(webhook_client):
    client, stub, geolocator = webhook_client()
    response = client.post(
        "/webhook", json=_body("MultiDayForecast", **{"geo-city": "Lahore", "number": 7})
    )

    assert response.status_code == 200
    assert "only provide forecasts for up to 5 days" in response.json()["fulfillmentText"]
    assert stub.requests == []
    assert geolocator.calls == []


def test_unknown_intent(webhook_client):
    client, stub, _ = webhook_client()
    response = client.post("/webhook", json=_body("Small Talk", **{"geo-city": "Lahore"}))

    assert response.json() == {"fulfillmentText": messages.FALLBACK_TEXT}
    assert stub.requests == []


def test_upstream_failure_still_answers_200(webhook_client):
    client, _, _ = webhook_client(stub=OpenWeatherStub(status_code=503))
    response = client.post("/webhook", json=_body("CurrentWeather", **{"geo-city": "Lahore"}))

    assert response.status_code == 200
    data = response.json()
    assert data["payload"] == {"errorCode": "upstream_error"}
    assert data["fulfillmentText"].startswith("Sorry, there was an error processing your request:")


def test_unexpected_exception_still_answers_200(webhook_client):
    client, _, _ = webhook_client(geolocator=FakeGeolocator(error=RuntimeError("kaboom")))
    response = client.post("/webhook", json=_body("CurrentWeather", **{"geo-city": "Lahore"}))

    assert response.status_code == 200
    data = response.json()
    assert data["payload"] == {"errorCode": "internal_error"}
    assert "kaboom" in data["fulfillmentText"]


def test_invalid_body_answers_200(webhook_client):
    client, _, _ = webhook_client()
    response = client.post("/webhook", json={"queryResult": {"parameters": "not-a-dict"}})

    assert response.status_code == 200
    assert response.json() == {
        "fulfillmentText": messages.FALLBACK_TEXT,
        "payload": {"errorCode": "invalid_request"},
    }


def test_empty_body_gets_fallback(webhook_client):
    client, _, _ = webhook_client()
    response = client.post("/webhook", json={})
    assert response.json() == {"fulfillmentText": messages.FALLBACK_TEXT}


@pytest.fixture
def tracked_services(monkeypatch, make_service):
    """Route the real service dependency through stubs and keep every service it builds."""
    built = []

    def _build(settings):
        service = make_service(OpenWeatherStub(forecast=forecast_payload(utc_today())), FakeGeolocator())
        built.append(service)
        return service

    monkeypatch.setattr(endpoints, "WeatherService", _build)
    return built


def test_service_client_closed_after_request(settings, tracked_services):
    client = TestClient(create_app(settings))
    response = client.post("/webhook", json=_body("CurrentWeather", **{"geo-city": "Lahore"}))

    assert "30.2°C" in response.json()["fulfillmentText"]
    assert len(tracked_services) == 1
    assert tracked_services[0].client.client.is_closed


def test_service_client_closed_after_invalid_body(settings, tracked_services):
    client = TestClient(create_app(settings))
    response = client.post("/webhook", json={"queryResult": {"parameters": "not-a-dict"}})

    assert response.json()["payload"] == {"errorCode": "invalid_request"}
    assert all(service.client.client.is_closed for service in tracked_services)
