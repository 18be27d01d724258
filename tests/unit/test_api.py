"""Test HTTP endpoints"""

from datetime import datetime, timezone


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["dependencies"]["store"] == "connected"
    assert data["documents"] == 0
    assert data["chunks"] == 0


def test_settings_round_trip(client):
    defaults = client.get("/api/settings").json()
    assert defaults["retriever"] == {"k": 5, "recency_boost": 0.2}

    defaults["tone"] = "direct"
    defaults["retriever"]["k"] = 2
    assert client.post("/api/settings", json=defaults).json() == {"success": True}

    saved = client.get("/api/settings").json()
    assert saved["tone"] == "direct"
    assert saved["retriever"]["k"] == 2


def test_invalid_settings_rejected(client):
    response = client.post("/api/settings", json={"llm_backend": "eliza"})
    assert response.status_code == 422


def test_session_save_conflict_and_append(client):
    payload = {"content": "# Evening\nTired but productive.", "duration_seconds": 120, "tags": ["work"]}

    first = client.post("/api/vault/sessions", json=payload)
    assert first.status_code == 200
    assert first.json()["success"] is True

    conflict = client.post("/api/vault/sessions", json={"content": "again"})
    assert conflict.status_code == 409
    body = conflict.json()
    assert body["exists"] is True
    assert "Tired but productive." in body["existing_content"]

    appended = client.post("/api/vault/sessions", json={"content": "more", "is_append": True})
    assert appended.status_code == 200

    today = datetime.now(timezone.utc).date().isoformat()
    session = client.get(f"/api/vault/sessions/{today}").json()
    assert "more" in session["content"]
    assert session["data"]["duration_seconds"] == 120
    assert len(session["data"]["appended_sessions"]) == 1

    recent = client.get("/api/vault/sessions/recent", params={"days": 2}).json()
    assert len(recent) == 1

    health = client.get("/health").json()
    assert health["documents"] == 1
    assert health["chunks"] >= 1


def test_missing_session_is_null(client):
    response = client.get("/api/vault/sessions/1999-01-01")
    assert response.status_code == 200
    assert response.json() is None


def test_save_entry(client):
    payload = {
        "content": "couldn't sleep",
        "metadata": {"entry_number": 1, "started_at": "2024-03-05T23:10:00Z"},
    }

    response = client.post("/api/vault/entries", json=payload)

    assert response.status_code == 200
    assert response.json()["filepath"].endswith(".session.md")


def test_chat_cites_journal(client, generator):
    client.post("/api/vault/sessions", json={"content": "# Evening\nTired but productive."})

    response = client.post("/api/llm", json={"messages": [{"role": "user", "content": "was I productive?"}]})

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == generator.reply
    assert data["citations"][0].endswith(" - Evening")


def test_chat_without_context_omits_citations(client):
    response = client.post("/api/llm", json={"messages": [{"role": "user", "content": "hello"}]})

    assert response.status_code == 200
    assert "citations" not in response.json()


def test_chat_requires_messages(client):
    assert client.post("/api/llm", json={"messages": []}).status_code == 422


def test_chat_with_only_assistant_message_fails(client):
    response = client.post("/api/llm", json={"messages": [{"role": "assistant", "content": "hi"}]})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate response"


def test_stt_session_lifecycle(client):
    started = client.post("/api/stt/sessions", json={"session_id": "abc"})
    assert started.status_code == 200
    assert started.json()["engine"] == "browser"

    assert client.get("/api/stt").json()["active_sessions"] == 1

    processed = client.post("/api/stt/sessions/abc/process")
    assert processed.json() == {"transcript": "", "is_final": False, "confidence": None}

    ended = client.delete("/api/stt/sessions/abc")
    assert ended.json()["final_transcript"] == ""

    missing = client.delete("/api/stt/sessions/abc")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Session not found"


def test_stt_audio_upload(client):
    client.post("/api/stt/sessions", json={"session_id": "up"})

    response = client.post(
        "/api/stt/sessions/up/audio",
        files={"audio": ("chunk.webm", b"\x00" * 10, "audio/webm")}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "chunks": 1}
