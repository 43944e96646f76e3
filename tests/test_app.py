from drkleen.config import Settings, get_settings
from drkleen.main import app


def test_health_reports_store(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["store"] == "connected"


def test_root(client):
    assert client.get("/").json()["status"] == "ok"


def test_unknown_endpoint_uses_error_envelope(client):
    response = client.get("/no-such-endpoint")
    assert response.status_code == 404
    assert response.json() == {"error": {"code": "NOT_FOUND", "message": "Endpoint not found"}}


def test_cors_preflight(client):
    response = client.options(
        "/admin-auth/login",
        headers={
            "Origin": "https://drkleen.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type, apikey",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_api_key_enforced_when_configured(client, settings):
    locked = Settings(**{**settings.model_dump(), "API_KEY": "public-anon-key"})
    app.dependency_overrides[get_settings] = lambda: locked

    refused = client.get("/services-api")
    assert refused.status_code == 401
    assert refused.json()["error"]["code"] == "INVALID_CREDENTIALS"

    allowed = client.get("/services-api", headers={"apikey": "public-anon-key"})
    assert allowed.status_code == 200


def test_service_errors_are_wrapped_once(client):
    response = client.post(
        "/admin-auth/login",
        json={"email": "ghost@example.com", "password": "whatever"},
    )
    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "ACCOUNT_NOT_FOUND", "message": "No admin account found"}
    }


def test_cors_origins_accepts_plain_strings():
    assert Settings(CORS_ORIGINS="*").cors_origins == ["*"]
    listed = Settings(CORS_ORIGINS="https://a.test, https://b.test,")
    assert listed.cors_origins == ["https://a.test", "https://b.test"]
