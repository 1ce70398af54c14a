from shared.core.health import HealthStatus, ServiceHealth


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "pass"
    assert body["service"] == "inventory-service"


def test_liveness(client):
    assert client.get("/health/live").json() == {"status": "alive"}


def test_root_and_info(client):
    assert client.get("/").json()["status"] == "running"
    info = client.get("/info").json()
    assert info["endpoints"]["inventory"] == "/inventory"


def test_readiness_against_sqlite():
    health = ServiceHealth("inventory-service", database_url="sqlite://")
    check = health._check_database()
    assert check["status"] == HealthStatus.PASS


def test_readiness_without_database_warns():
    health = ServiceHealth("inventory-service")
    checks = {"database:connectivity": health._check_database()}
    assert ServiceHealth.calculate_overall_status(checks) == HealthStatus.WARN


def test_overall_status_prefers_failure():
    checks = {
        "a": {"status": HealthStatus.PASS},
        "b": {"status": HealthStatus.WARN},
        "c": {"status": HealthStatus.FAIL},
    }
    assert ServiceHealth.calculate_overall_status(checks) == HealthStatus.FAIL
