"""End-to-end flow tests: full user journeys."""

from fastapi.testclient import TestClient

from guildhall.tests.conftest import auth_headers


class TestFullChatFlow:
    def test_create_invite_join_chat_react(self, client: TestClient):
        alice = auth_headers("u1")
        bob = auth_headers("u2")

        # 1. Profiles
        assert client.post("/users", json={"userId": "u1", "username": "alice"}, headers=alice).status_code == 200
        assert client.post("/users", json={"userId": "u2", "username": "bob"}, headers=bob).status_code == 200

        # 2. Create server
        created = client.post("/servers", json={"name": "Guild", "ownerId": "u1"}, headers=alice)
        assert created.status_code == 201
        server = created.json()
        assert server["memberIds"] == ["u1"]

        # 3. Owner sees it
        listed = client.get("/servers?userId=u1", headers=alice).json()["servers"]
        assert server["id"] in [s["id"] for s in listed]

        # 4. Invite and join
        invite = client.post(f"/servers/{server['id']}/invite", json={"inviterId": "u1"}, headers=alice)
        assert invite.status_code == 200
        joined = client.post(
            "/servers/join",
            json={"userId": "u2", "serverId": server["id"], "inviterId": "u1", "hash": invite.json()["hash"]},
            headers=bob,
        )
        assert joined.status_code == 200
        assert [s["id"] for s in client.get("/servers?userId=u2", headers=bob).json()["servers"]] == [server["id"]]

        # 5. Channel and message
        channel = client.post(f"/servers/{server['id']}/channels", json={"name": "general", "userId": "u1"}, headers=alice)
        assert channel.status_code == 201
        ch_id = channel.json()["id"]

        msg = client.post(
            f"/channels/{ch_id}/messages",
            json={"authorId": "u2", "authorName": "bob", "content": "Hola!", "serverId": server["id"]},
            headers=bob,
        )
        assert msg.status_code == 201
        msg_id = msg.json()["id"]

        # 6. React
        assert client.post(f"/messages/{msg_id}/reactions", json={"userId": "u1", "emoji": "🎉"}, headers=alice).status_code == 201
        assert client.get(f"/messages/{msg_id}/reactions", headers=bob).json() == {"🎉": {"count": 1, "users": ["u1"]}}

        # 7. Only the author deletes
        denied = client.request(
            "DELETE", f"/channels/{ch_id}/messages/{msg_id}", json={"authorId": "u1", "serverId": server["id"]}, headers=alice
        )
        assert denied.status_code == 403
        deleted = client.request(
            "DELETE", f"/channels/{ch_id}/messages/{msg_id}", json={"authorId": "u2", "serverId": server["id"]}, headers=bob
        )
        assert deleted.status_code == 200

        # 8. Audit trail, newest first
        logs = client.get(f"/servers/{server['id']}/logs", headers=alice).json()
        assert logs["count"] == 6
        assert [(e["type"], e["action"]) for e in logs["logs"]] == [
            ("message", "deleted"),
            ("message", "created"),
            ("channel", "created"),
            ("invitation", "joined"),
            ("invitation", "invited"),
            ("server", "created"),
        ]

        # 9. Health check
        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["status"] == "started"
