MESSAGE = {"name": "Jane Doe", "email": "jane@example.com", "message": "Let's work together."}


def send(client, **overrides):
    return client.post("/api/contact-message", json={**MESSAGE, **overrides})


def test_public_intake(client):
    res = send(client)
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Message sent successfully"
    assert body["data"]["name"] == "Jane Doe"
    assert body["data"]["is_read"] is False


def test_intake_ignores_is_read_from_client(client):
    res = client.post("/api/contact-message", json={**MESSAGE, "is_read": True})
    assert res.status_code == 201
    assert res.json()["data"]["is_read"] is False


def test_message_length_boundary(client, db):
    assert send(client, message="x" * 5000).status_code == 201

    res = send(client, message="x" * 5001)
    assert res.status_code == 422
    assert "message" in res.json()["errors"]
    assert db["contactmessage"].count_documents({}) == 1


def test_intake_validation(client):
    res = client.post("/api/contact-message", json={"name": "Jane", "email": "nope", "message": "hi"})
    assert res.status_code == 422
    assert "email" in res.json()["errors"]

    res = client.post("/api/contact-message", json={"email": "jane@example.com"})
    assert res.status_code == 422
    errors = res.json()["errors"]
    assert "name" in errors
    assert "message" in errors


def test_intake_rejects_blank_fields(client, db):
    res = send(client, name="", message="")
    assert res.status_code == 422
    errors = res.json()["errors"]
    assert "name" in errors
    assert "message" in errors

    res = send(client, message="   ")
    assert res.status_code == 422
    assert db["contactmessage"].count_documents({}) == 0


def test_inbox_is_admin_only(client):
    send(client)
    assert client.get("/api/contact-messages").status_code == 401


def test_inbox_newest_first(client, admin_headers):
    for name in ["First", "Second"]:
        send(client, name=name)

    res = client.get("/api/contact-messages", headers=admin_headers)
    assert res.status_code == 200
    assert [m["name"] for m in res.json()["data"]] == ["Second", "First"]


def test_mark_read_is_idempotent(client, admin_headers):
    msg_id = send(client).json()["data"]["id"]

    for _ in range(2):
        res = client.patch(f"/api/contact-messages/{msg_id}/read", headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Message marked as read"
        assert res.json()["data"]["is_read"] is True

    inbox = client.get("/api/contact-messages", headers=admin_headers).json()["data"]
    assert inbox[0]["is_read"] is True


def test_mark_read_unknown_message(client, admin_headers):
    res = client.patch("/api/contact-messages/000000000000000000000000/read", headers=admin_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Message not found"}


def test_delete_message(client, admin_headers):
    msg_id = send(client).json()["data"]["id"]

    res = client.delete(f"/api/contact-messages/{msg_id}", headers=admin_headers)
    assert res.status_code == 204
    assert client.get("/api/contact-messages", headers=admin_headers).json()["data"] == []
    assert client.delete(f"/api/contact-messages/{msg_id}", headers=admin_headers).status_code == 404
