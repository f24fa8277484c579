def test_status_empty(client):
    r = client.get("/api/status")
    assert r.status_code == 200
    assert r.json() == {"status": "Server is running", "activeSessions": 0}


def test_status_counts_distinct_successful_setups(client):
    for sid in ("a", "b", "a"):
        assert client.post("/api/setup", json={"apiKey": "good-key", "sessionId": sid}).status_code == 200
    # failed setup adds nothing
    assert client.post("/api/setup", json={"apiKey": "bad-key", "sessionId": "c"}).status_code == 400

    for _ in range(3):
        assert client.post("/api/chat", json={"message": "x", "sessionId": "a"}).status_code == 200

    assert client.get("/api/status").json()["activeSessions"] == 2
