def test_root_reports_running(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


def test_errors_use_message_body(client):
    resp = client.post("/api/auth/login", json={})
    assert resp.status_code == 400
    assert set(resp.json()) == {"message"}
