from datetime import datetime

from fastapi.testclient import TestClient

from shortlink_app.config import settings
from shortlink_app.events import EventType


def parse_ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def shorten(client, **body):
    body.setdefault("originalUrl", "https://www.example.com/")
    return client.post("/api/shorten", json=body)


class TestURLShortener:
    """Test URL shortener HTTP endpoints"""

    def test_create_short_url(self, client: TestClient, event_sink):
        """Test creating a short URL"""
        response = shorten(client, validityPeriod=5)
        assert response.status_code == 201

        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["originalUrl"] == "https://www.example.com/"
        assert len(data["shortCode"]) == 6
        assert data["shortUrl"] == f"{settings.base_url}/{data['shortCode']}"
        assert data["validityPeriod"] == 5

        created = parse_ts(data["createdAt"])
        expires = parse_ts(data["expiryDate"])
        assert (expires - created).total_seconds() == 300

        events = event_sink.of_type(EventType.URL_CREATED)
        assert [e.short_code for e in events] == [data["shortCode"]]

    def test_create_with_custom_code(self, client: TestClient):
        response = shorten(client, customShortcode="my-link")
        assert response.status_code == 201
        assert response.json()["data"]["shortCode"] == "my-link"

    def test_default_validity(self, client: TestClient):
        response = shorten(client)
        assert response.json()["data"]["validityPeriod"] == 30

    def test_missing_url(self, client: TestClient, event_sink):
        response = client.post("/api/shorten", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Original URL is required"}
        assert len(event_sink.of_type(EventType.VALIDATION_FAILURE)) == 1

    def test_invalid_url(self, client: TestClient):
        """Test creating URL with invalid URL"""
        response = shorten(client, originalUrl="not-a-valid-url")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL format"}

    def test_invalid_custom_code(self, client: TestClient):
        assert shorten(client, customShortcode="ab").status_code == 400
        assert shorten(client, customShortcode="abc!").status_code == 400

    def test_negative_validity(self, client: TestClient):
        assert shorten(client, validityPeriod=-1).status_code == 400

    def test_custom_code_conflict(self, client: TestClient):
        shorten(client, customShortcode="dupe")

        response = shorten(client, customShortcode="dupe")
        assert response.status_code == 409
        assert response.json() == {"error": "Custom shortcode already exists"}

    def test_quota_per_client_address(self, client: TestClient):
        for _ in range(5):
            assert shorten(client).status_code == 201

        response = shorten(client)
        assert response.status_code == 429
        assert "Maximum 5" in response.json()["error"]

        other = client.post(
            "/api/shorten",
            json={"originalUrl": "https://www.example.com/"},
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}
        )
        assert other.status_code == 201
        assert other.json()["data"]["shortCode"]

    def test_redirect_url(self, client: TestClient, event_sink):
        """Test URL redirection"""
        short_code = shorten(client, originalUrl="https://www.github.com/").json()["data"]["shortCode"]

        response = client.get(
            f"/{short_code}", headers={"User-Agent": "pytest-agent"}, follow_redirects=False
        )
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

        accessed = event_sink.of_type(EventType.URL_ACCESSED)
        assert accessed[0].short_code == short_code
        assert accessed[0].detail == "pytest-agent"

    def test_redirect_nonexistent_url(self, client: TestClient, event_sink):
        """Test redirecting non-existent URL"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}
        assert len(event_sink.of_type(EventType.INVALID_CODE_ACCESS)) == 1

    def test_redirect_expired_url(self, client: TestClient, registry, event_sink):
        short_code = shorten(client, customShortcode="old-one").json()["data"]["shortCode"]
        # Replace with a copy that expired in the past
        record = registry.get(short_code)
        expired = record.model_copy(update={"expiry_date": record.created_at.replace(year=2000)})
        registry.remove(short_code)
        registry.create(expired)

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 410

        body = response.json()
        assert body["error"] == "Short URL has expired"
        assert parse_ts(body["expiredAt"]).year == 2000
        assert len(event_sink.of_type(EventType.URL_EXPIRED_ACCESS)) == 1

    def test_analytics(self, client: TestClient):
        short_code = shorten(client).json()["data"]["shortCode"]
        client.get(f"/{short_code}", headers={"User-Agent": "agent-1"}, follow_redirects=False)
        client.get(f"/{short_code}", headers={"User-Agent": "agent-2"}, follow_redirects=False)

        response = client.get(f"/api/analytics/{short_code}")
        assert response.status_code == 200

        data = response.json()["data"]
        assert data["shortCode"] == short_code
        assert data["totalClicks"] == 2
        assert data["isExpired"] is False
        assert [c["userAgent"] for c in data["clickHistory"]] == ["agent-1", "agent-2"]
        assert data["clickHistory"][0]["location"] == "Test City, TC"
        assert data["clickHistory"][0]["ip"] == "testclient"

    def test_analytics_nonexistent(self, client: TestClient):
        response = client.get("/api/analytics/nonexistent")
        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_list_urls(self, client: TestClient):
        first = shorten(client, customShortcode="first").json()["data"]["shortCode"]
        shorten(client, customShortcode="second")
        client.get(f"/{first}", follow_redirects=False)

        response = client.get("/api/urls")
        assert response.status_code == 200

        items = response.json()["data"]
        assert [item["shortCode"] for item in items] == ["first", "second"]
        assert items[0]["totalClicks"] == 1
        assert items[0]["clickHistory"][0]["location"] == "Test City, TC"
        assert set(items[0]["clickHistory"][0]) == {"timestamp", "location"}
        assert items[1]["totalClicks"] == 0
        assert items[1]["isExpired"] is False
        assert items[0]["createdBy"] == "testclient"

    def test_health(self, client: TestClient):
        shorten(client)

        response = client.get("/api/health")
        assert response.status_code == 200

        body = response.json()
        assert body["success"] is True
        assert body["totalUrls"] == 1
        assert body["activeUrls"] == 1

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/api/health"

    def test_process_time_header(self, client: TestClient):
        response = client.get("/api/health")
        assert "x-process-time" in response.headers

    def test_broken_event_sink_does_not_change_response(self, client: TestClient, event_sink):
        def explode(event):
            raise ConnectionError("collector unreachable")

        event_sink.emit = explode

        response = shorten(client)
        assert response.status_code == 201

    def test_wrongly_typed_field_returns_400_error(self, client: TestClient):
        response = shorten(client, validityPeriod="abc")
        assert response.status_code == 400

        body = response.json()
        assert "validityPeriod" in body["error"]
        assert "detail" not in body

    def test_malformed_json_returns_400_error(self, client: TestClient):
        response = client.post(
            "/api/shorten",
            content="not json",
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}

    def test_long_url_accepted(self, client: TestClient):
        long_url = "https://example.com/" + "a" * 2100

        response = shorten(client, originalUrl=long_url)
        assert response.status_code == 201
        assert response.json()["data"]["originalUrl"] == long_url

    def test_cors_preflight(self, client: TestClient):
        origin = "http://localhost:3000"
        response = client.options(
            "/api/shorten",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "POST",
            }
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] in ("*", origin)
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_cors_header_on_simple_request(self, client: TestClient):
        response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
        assert "access-control-allow-origin" in response.headers
