# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Roster Sync Service HTTP API Tests
==================================
Run:  pytest test_main.py -v --cov=roster_sync --cov-report=term-missing
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from main import app, register_rosters
from roster_sync.core.config import settings
from roster_sync.core.dependencies import (
    get_backoff,
    get_consumer_registry,
    get_http_transport,
    get_permission_store,
    get_roster_registry,
    get_scheduler,
    get_sync_engine,
    get_timers,
)
from roster_sync.core.errors import DuplicateRosterError
from roster_sync.models.domain import MemberRecord

client = TestClient(app)


# ============================================
# Fixtures
# ============================================
@pytest.fixture(autouse=True)
def reset_state():
    """Reset in-memory state before each test."""
    engine = get_sync_engine()
    engine.cache.clear()
    engine.queue.clear()
    get_roster_registry().clear()
    get_permission_store().clear()
    get_consumer_registry().clear()
    backoff = get_backoff()
    backoff.cancel()
    if backoff.active:
        backoff.expire()
    yield


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health_returns_200(self):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_ok_status(self):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["service"] == settings.SERVICE_NAME
        assert data["version"] == settings.SERVICE_VERSION
        assert "timestamp" in data

    def test_health_reports_rosters_and_backoff(self):
        asyncio.run(get_roster_registry().register("MyClan", "vip"))
        data = client.get("/health").json()
        assert data["rosters_count"] == 1
        assert data["backoff_active"] is False


class TestReadiness:
    def test_readiness_without_rosters(self):
        data = client.get("/health/ready").json()
        assert data["status"] == "ready"
        assert data["rosters_loaded"] is False
        assert data["scheduler_running"] is False

    def test_readiness_with_rosters(self):
        asyncio.run(get_roster_registry().register("MyClan", "vip"))
        assert client.get("/health/ready").json()["rosters_loaded"] is True


class TestRequestID:
    def test_response_has_request_id_header(self):
        response = client.get("/health")
        assert "X-Request-ID" in response.headers

    def test_request_id_propagated(self):
        response = client.get("/health", headers={"X-Request-ID": "test-req-12345"})
        assert response.headers["X-Request-ID"] == "test-req-12345"


class TestMetrics:
    def test_metrics_returns_200(self):
        assert client.get("/metrics").status_code == 200

    def test_metrics_contains_sync_series(self):
        client.post("/api/v1/sync")
        text = client.get("/metrics").text
        assert "rostersync_sweeps_total" in text
        assert "rostersync_apply_queue_depth" in text
        assert "rostersync_backoff_active" in text

    def test_metrics_counts_api_requests(self):
        client.get("/api/v1/members/123")
        assert "rostersync_requests_total" in client.get("/metrics").text

    def test_member_path_parameter_is_collapsed(self):
        client.get("/api/v1/members/76561198000000042")
        text = client.get("/metrics").text
        assert 'endpoint="/api/v1/members/{param}"' in text
        assert "76561198000000042" not in text

    def test_health_is_not_metered(self):
        client.get("/health")
        assert 'endpoint="/health"' not in client.get("/metrics").text


# ============================================
# On-demand sync
# ============================================
class TestTriggerSync:
    def test_trigger_acknowledges(self):
        with patch.object(get_scheduler(), "trigger_now", return_value=2) as trigger:
            response = client.post("/api/v1/sync")
        assert response.status_code == 202
        assert response.json() == {
            "message": "Checking for new roster members...",
            "rosters": 2,
        }
        trigger.assert_called_once()

    def test_trigger_with_no_rosters(self):
        response = client.post("/api/v1/sync")
        assert response.status_code == 202
        assert response.json()["rosters"] == 0

    def test_trigger_ignores_backoff(self):
        with patch.object(get_timers(), "once"):
            get_backoff().activate()
        with patch.object(get_sync_engine(), "sweep", return_value=1) as sweep:
            response = client.post("/api/v1/sync")
        assert response.json()["rosters"] == 1
        sweep.assert_called_once_with(trigger="manual")


class TestSyncStatus:
    def test_status_fields(self):
        engine = get_sync_engine()
        engine.cache.add("1")
        engine.queue.enqueue(MemberRecord(member_id="1", roster_id="MyClan"))
        get_consumer_registry().connect("player-1")

        data = client.get("/api/v1/sync/status").json()
        assert data["queue_depth"] == 1
        assert data["known_members"] == 1
        assert data["connected_consumers"] == 1
        assert data["backoff"]["active"] is False
        assert data["backoff"]["until"] is None
        assert data["update_interval_seconds"] == get_scheduler().update_interval

    def test_status_during_backoff(self):
        with patch.object(get_timers(), "once"):
            get_backoff().activate()
        data = client.get("/api/v1/sync/status").json()
        assert data["backoff"]["active"] is True
        assert data["backoff"]["until"] is not None


# ============================================
# Membership & rosters
# ============================================
class TestMembership:
    def test_unknown_member(self):
        response = client.get("/api/v1/members/76561198000000001")
        assert response.status_code == 200
        assert response.json() == {"member_id": "76561198000000001", "known": False}

    def test_known_member(self):
        get_sync_engine().cache.add("76561198000000001")
        data = client.get("/api/v1/members/76561198000000001").json()
        assert data["known"] is True


class TestRosters:
    def test_empty(self):
        assert client.get("/api/v1/rosters").json() == []

    def test_lists_registered_rosters(self):
        registry = get_roster_registry()
        asyncio.run(registry.register("MyClan", "vip"))
        asyncio.run(registry.register("98765", "default"))

        data = client.get("/api/v1/rosters").json()
        assert [r["roster_id"] for r in data] == ["MyClan", "98765"]
        assert "/groups/MyClan/memberslistxml/?xml=1" in data[0]["fetch_url"]
        assert "/gid/98765/memberslistxml/?xml=1" in data[1]["fetch_url"]
        assert data[0]["target_group"] == "vip"

    def test_duplicate_config_aborts_registration(self):
        with patch.object(settings, "ROSTER_GROUPS", "MyClan:vip,MyClan:other"):
            with pytest.raises(DuplicateRosterError):
                asyncio.run(register_rosters())


class TestGroups:
    def test_unknown_group_404(self):
        assert client.get("/api/v1/groups/ghost/members").status_code == 404

    def test_group_members(self):
        store = get_permission_store()
        asyncio.run(store.create_group("vip", "vip", 0))
        asyncio.run(store.add_user_group("2", "vip"))
        asyncio.run(store.add_user_group("1", "vip"))
        data = client.get("/api/v1/groups/vip/members").json()
        assert data == {"group": "vip", "members": ["1", "2"], "count": 2}


# ============================================
# Consumers
# ============================================
class TestConsumers:
    def test_connect_and_disconnect(self):
        response = client.put("/api/v1/consumers/player-1")
        assert response.status_code == 200
        assert response.json() == {
            "consumer_id": "player-1", "changed": True, "connected_count": 1,
        }
        assert client.put("/api/v1/consumers/player-1").json()["changed"] is False

        data = client.get("/api/v1/consumers").json()
        assert data == {"connected": ["player-1"], "count": 1}

        response = client.delete("/api/v1/consumers/player-1")
        assert response.json()["connected_count"] == 0
        assert client.delete("/api/v1/consumers/player-1").json()["changed"] is False


# ============================================
# Lifespan
# ============================================
class TestLifespan:
    def test_startup_registers_rosters_and_starts_scheduler(self):
        page = "<steamID64>1</steamID64><currentPage>1</currentPage><totalPages>1</totalPages>"
        transport = get_http_transport()
        with patch.object(settings, "ROSTER_GROUPS", "MyClan:vip,98765:vip"), \
                patch.object(transport, "get", AsyncMock(return_value=(200, page))) as get:
            with TestClient(app) as live:
                data = live.get("/health/ready").json()
                assert data["rosters_loaded"] is True
                assert data["scheduler_running"] is True
            assert get.await_count <= 2
        assert get_scheduler().running is False
        assert [r.roster_id for r in get_roster_registry().all()] == ["MyClan", "98765"]
        assert asyncio.run(get_permission_store().group_exists("vip")) is True
