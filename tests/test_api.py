"""Tests for the SiteBoss API endpoints."""

import pytest

from api.channels.base import ChannelProvider, ChannelMessage, ChannelResponse
from api.services import get_services

SCENARIO_A = "Need colorbond fencing, 20m, 1.8m height, easy access"


class FakeMessenger(ChannelProvider):
    """Records outbound messages instead of calling the Graph API."""

    def __init__(self):
        self.sent = []

    async def send_message(self, message: ChannelMessage) -> ChannelResponse:
        self.sent.append(message)
        return ChannelResponse(success=True, message_id=f"m_{len(self.sent)}")

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def messenger(client):
    services = get_services()
    original = services.messenger
    fake = FakeMessenger()
    services.messenger = fake
    yield fake
    services.messenger = original


def _page_event(text, sender_id="psid-1", is_echo=False):
    return {
        "object": "page",
        "entry": [{
            "id": "page-1",
            "time": 1700000000,
            "messaging": [{
                "sender": {"id": sender_id},
                "recipient": {"id": "page-1"},
                "timestamp": 1700000000,
                "message": {"mid": "mid.1", "text": text, "is_echo": is_echo},
            }],
        }],
    }


# ── Service ───────────────────────────────────────────

def test_root_endpoint(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["service"] == "SiteBoss Quoting"
    assert "version" in data


def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["core_config_version"] == "1.0"
    assert data["services"]["messenger_reachable"] is None


def test_health_probes_messenger(client, messenger):
    data = client.get("/health").json()
    assert data["services"]["messenger"] is True
    assert data["services"]["messenger_reachable"] is True


# ── Quoting ───────────────────────────────────────────

def test_decide_range(client):
    resp = client.post("/api/v1/replies/decide", json={"message": SCENARIO_A})
    assert resp.status_code == 200
    data = resp.json()
    assert data["action"] == "range"
    assert "$1440–$1920" in data["message"]


def test_decide_pass(client):
    resp = client.post("/api/v1/replies/decide", json={"message": "Hi there"})
    assert resp.status_code == 200
    assert resp.json() == {"action": "pass"}


def test_decide_empty_message(client):
    resp = client.post("/api/v1/replies/decide", json={"message": ""})
    assert resp.status_code == 422


def test_extract_lead(client):
    resp = client.post("/api/v1/leads/extract", json={"message": "paling fence 12m, steep block, budget 4k"})
    assert resp.status_code == 200
    assert resp.json() == {
        "service": "timber_fencing",
        "budget": 4000,
        "qty": 12,
        "height": "1.8m",
        "access": "restricted",
        "ground": "unknown",
        "wet_season": False,
    }


def test_evaluate_lead(client):
    resp = client.post("/api/v1/leads/evaluate", json={"service": "pressure_washing", "budget": 10000})
    assert resp.status_code == 200
    data = resp.json()
    assert data["allowed"] is False
    assert data["rule_id"] == "unsupported_service"
    assert data["action"] == "decline"


def test_evaluate_allowed(client):
    resp = client.post("/api/v1/leads/evaluate", json={"service": "excavation", "budget": 5000, "access": "tight"})
    assert resp.json() == {"allowed": True}


def test_quote(client):
    resp = client.post("/api/v1/quotes", json={"service": "colorbond_fencing", "qty": 20})
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert (data["raw"], data["low"], data["high"]) == (1600, 1440, 1920)
    assert data["factors"]["height_key"] == "1.8m"


def test_quote_unsupported(client):
    resp = client.post("/api/v1/quotes", json={"service": "roofing", "qty": 20})
    assert resp.json() == {"ok": False, "reason": "unsupported_service"}


# ── Policies ──────────────────────────────────────────

def test_deposit(client):
    resp = client.post("/api/v1/deposits", json={"total": 2000})
    assert resp.status_code == 200
    assert resp.json() == {"total": 2000, "deposit": 400}


def test_payment_chase_schedule(client):
    resp = client.get("/api/v1/payment-chasing/schedule")
    assert resp.status_code == 200
    schedule = resp.json()
    assert schedule[0] == {"day": 0, "type": "invoice_sent"}
    assert [s["day"] for s in schedule] == [0, 7, 14, 21]


def test_policy_gates(client):
    assert client.post("/api/v1/policies/block-new-work", json={"is_overdue": True}).json() == {"result": True}
    assert client.post("/api/v1/policies/block-new-work", json={}).json() == {"result": False}
    assert client.post("/api/v1/policies/schedule-job", json={"deposit_paid": False}).json() == {"result": False}
    assert client.post("/api/v1/policies/variation-work", json={"approved": True}).json() == {"result": True}


# ── Messenger Webhook ─────────────────────────────────

def test_webhook_verification(client):
    resp = client.get("/webhook", params={
        "hub.mode": "subscribe",
        "hub.verify_token": "test-verify-token",
        "hub.challenge": "challenge-123",
    })
    assert resp.status_code == 200
    assert resp.text == "challenge-123"


def test_webhook_verification_bad_token(client):
    resp = client.get("/webhook", params={
        "hub.mode": "subscribe",
        "hub.verify_token": "wrong",
        "hub.challenge": "challenge-123",
    })
    assert resp.status_code == 403


def test_webhook_sends_range_reply(client, messenger):
    resp = client.post("/webhook", json=_page_event(SCENARIO_A))
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "EVENT_RECEIVED"
    assert data["replies"][0]["action"] == "range"

    assert len(messenger.sent) == 1
    assert messenger.sent[0].to == "psid-1"
    assert messenger.sent[0].content.startswith("Typical price range: $1440–$1920.")


def test_webhook_sends_decline_reply(client, messenger):
    resp = client.post("/webhook", json=_page_event("Can you pressure wash 30m of path?"))
    assert resp.json()["replies"][0]["action"] == "decline"
    assert len(messenger.sent) == 1


def test_webhook_pass_sends_nothing(client, messenger):
    resp = client.post("/webhook", json=_page_event("What are your opening hours?"))
    assert resp.json()["replies"] == [{"sender_id": "psid-1", "action": "pass"}]
    assert messenger.sent == []


def test_webhook_ignores_echoes(client, messenger):
    resp = client.post("/webhook", json=_page_event(SCENARIO_A, is_echo=True))
    assert resp.json()["replies"] == []
    assert messenger.sent == []


def test_webhook_without_messenger(client):
    # No page token configured: decision still made, reply dropped
    resp = client.post("/webhook", json=_page_event(SCENARIO_A))
    assert resp.status_code == 200
    assert resp.json()["replies"][0]["action"] == "range"


def test_webhook_rejects_non_page_object(client):
    resp = client.post("/webhook", json={"object": "instagram", "entry": []})
    assert resp.status_code == 404
