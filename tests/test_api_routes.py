"""
tests/test_api_routes.py — FastAPI Route Integration Tests
============================================================
Integration tests for the public and master-only routes using the FastAPI
TestClient against an in-memory database.

These tests verify:
- Token guards (401) and ownership guards (403)
- Master-only listings
- The register → login → create → deposit flow end to end
- Every error body carries a ``message``
"""

from __future__ import annotations

from conftest import auth, make_token

from pokeroster.database.models import Role


# ===========================================================================
# Health endpoint
# ===========================================================================
class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ===========================================================================
# Token guard
# ===========================================================================
class TestTokenGuard:
    def test_no_token_returns_401(self, client):
        resp = client.get("/trainer/1/pokemons")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Access denied. No token provided."}

    def test_invalid_token_returns_401(self, client):
        resp = client.get("/mochila", headers=auth("not-a-jwt"))
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid or expired token."}

    def test_token_with_unknown_role_returns_401(self, client):
        import jwt

        from pokeroster.api.deps import JWT_ALGORITHM, JWT_SECRET

        token = jwt.encode({"sub": "1", "role": "X"}, JWT_SECRET, algorithm=JWT_ALGORITHM)
        assert client.get("/mochila", headers=auth(token)).status_code == 401


# ===========================================================================
# Ownership & master-only guards
# ===========================================================================
class TestAccessGuards:
    def test_trainer_cannot_read_other_roster(self, client, ash, misty):
        token = make_token(misty.id, Role.TRAINER, "Misty")
        resp = client.get(f"/trainer/{ash.id}/pokemons", headers=auth(token))
        assert resp.status_code == 403
        assert "message" in resp.json()

    def test_master_can_read_any_roster(self, client, master, ash):
        token = make_token(master.id, Role.MASTER, "master")
        resp = client.get(f"/trainer/{ash.id}/pokemons", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json() == []

    def test_users_all_master_only(self, client, master, ash):
        resp = client.get("/users/all", headers=auth(make_token(ash.id, Role.TRAINER, "Ash")))
        assert resp.status_code == 403

        resp = client.get("/users/all", headers=auth(make_token(master.id, Role.MASTER)))
        assert resp.status_code == 200
        assert [u["username"] for u in resp.json()] == ["Ash"]
        assert all("password" not in u for u in resp.json())

    def test_audit_master_only(self, client, master, ash):
        resp = client.get("/auditoria", headers=auth(make_token(ash.id, Role.TRAINER)))
        assert resp.status_code == 403
        resp = client.get("/auditoria", headers=auth(make_token(master.id, Role.MASTER)))
        assert resp.status_code == 200

    def test_trainer_cannot_delete_accounts(self, client, ash, misty):
        token = make_token(ash.id, Role.TRAINER, "Ash")
        resp = client.delete(f"/user/{misty.id}", headers=auth(token))
        assert resp.status_code == 403


# ===========================================================================
# End-to-end trainer flow
# ===========================================================================
class TestTrainerFlow:
    def test_register_login_create_deposit(self, client):
        resp = client.post("/register", data={"username": "Ash", "password": "pikapika"})
        assert resp.status_code == 201
        user_id = resp.json()["userId"]

        resp = client.post("/login", json={"username": "Ash", "password": "pikapika"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["user"]["role"] == "T"
        headers = auth(body["token"])

        resp = client.post(
            "/pokemons",
            data={"name": "Pikachu", "type": "Electric", "trainer_id": str(user_id)},
            headers=headers,
        )
        assert resp.status_code == 201
        pokemon_id = resp.json()["pokemon"]["id"]

        team = client.get(f"/trainer/{user_id}/pokemons", headers=headers).json()
        assert [(p["name"], p["status"]) for p in team] == [("Pikachu", "U")]

        resp = client.put(f"/pokemon/{pokemon_id}/deposit", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["pokemon"]["status"] == "D"

        assert client.get(f"/trainer/{user_id}/pokemons", headers=headers).json() == []
        box = client.get("/deposito", headers=headers).json()
        assert [p["name"] for p in box] == ["Pikachu"]

    def test_bad_login(self, client, ash):
        resp = client.post("/login", json={"username": "Ash", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid credentials."}

    def test_login_missing_fields(self, client):
        resp = client.post("/login", json={"username": "Ash"})
        assert resp.status_code == 400
        assert "message" in resp.json()

    def test_duplicate_registration(self, client, ash):
        resp = client.post("/register", data={"username": "Ash", "password": "x"})
        assert resp.status_code == 409

    def test_seventh_pokemon_rejected(self, client, ash, cfg):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        for i in range(cfg.max_team_size):
            resp = client.post(
                "/pokemons",
                data={"name": f"P{i}", "type": "Normal", "trainer_id": str(ash.id)},
                headers=headers,
            )
            assert resp.status_code == 201
        resp = client.post(
            "/pokemons",
            data={"name": "Seventh", "type": "Normal", "trainer_id": str(ash.id)},
            headers=headers,
        )
        assert resp.status_code == 403
        assert "limit" in resp.json()["message"]


# ===========================================================================
# Pokédex, backpack and sheets
# ===========================================================================
class TestOwnedCollections:
    def test_pokedex_add_twice(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        payload = {"id": 25, "name": "Pikachu", "type": "Electric"}
        assert client.post("/pokedex", json=payload, headers=headers).status_code == 201
        resp = client.post("/pokedex", json=payload, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["added"] is False
        assert len(client.get("/pokedex", headers=headers).json()) == 1

    def test_backpack_stack_and_remove(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        client.post("/mochila/item", json={"item_name": "Potion", "quantity": 3}, headers=headers)
        resp = client.post(
            "/mochila/item", json={"item_name": "Potion", "quantity": 2}, headers=headers
        )
        assert resp.status_code == 201
        item = resp.json()
        assert item["quantity"] == 5

        resp = client.put(f"/mochila/item/{item['id']}", json={"quantity": 0}, headers=headers)
        assert resp.status_code == 200
        assert client.get(f"/mochila/item/{item['id']}", headers=headers).status_code == 404

    def test_backpack_invalid_quantity(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        resp = client.post(
            "/mochila/item", json={"item_name": "Potion", "quantity": "abc"}, headers=headers
        )
        assert resp.status_code == 400
        assert "message" in resp.json()

    def test_sheet_roundtrip(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        assert client.get("/ficha", headers=headers).status_code == 404
        resp = client.put(
            "/ficha",
            json={"name": "Ash", "advantages": ["A", "B"], "attributes": {"str": 3}},
            headers=headers,
        )
        assert resp.status_code == 200
        sheet = client.get("/ficha", headers=headers).json()
        assert sheet["advantages"] == ["A", "B"]
        assert sheet["attributes"] == {"str": 3}
        assert sheet["skills"] == {}

    def test_sheet_of_other_trainer_forbidden(self, client, ash, misty):
        headers = auth(make_token(misty.id, Role.TRAINER, "Misty"))
        assert client.get(f"/ficha/{ash.id}", headers=headers).status_code == 403


# ===========================================================================
# Audit trail over HTTP
# ===========================================================================
class TestAuditTrail:
    def test_actions_are_listed_newest_first(self, client, master, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        client.post("/pokedex", json={"id": 1, "name": "Bulbasaur", "type": "Grass"},
                    headers=headers)
        client.post("/mochila/item", json={"item_name": "Potion", "quantity": 1},
                    headers=headers)

        resp = client.get("/auditoria?limit=1", headers=auth(make_token(master.id, Role.MASTER)))
        assert resp.status_code == 200
        (entry,) = resp.json()
        assert entry["action"] == "ITEM_ADDED"
        assert entry["username"] == "Ash"


# ===========================================================================
# Original client payloads
# ===========================================================================
class TestOriginalFieldNames:
    def test_backpack_portuguese_keys(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        resp = client.post(
            "/mochila/item", json={"item_nome": "Potion", "quantidade": 3}, headers=headers
        )
        assert resp.status_code == 201
        item = resp.json()
        assert (item["item_nome"], item["quantidade"]) == ("Potion", 3)

        resp = client.put(f"/mochila/item/{item['id']}", json={"quantidade": 7}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 7

    def test_pokemon_especial_fields(self, client, ash):
        headers = auth(make_token(ash.id, Role.TRAINER, "Ash"))
        resp = client.post(
            "/pokemons",
            data={"name": "Abra", "type": "Psychic", "trainer_id": str(ash.id),
                  "especial": "25", "especial_total": "30"},
            headers=headers,
        )
        assert resp.status_code == 201
        pokemon = resp.json()["pokemon"]
        assert (pokemon["special"], pokemon["especial_total"]) == (25, 30)

        resp = client.put(
            f"/pokemon-stats/{pokemon['id']}", json={"especial": 12}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["pokemon"]["especial"] == 12
        assert resp.json()["pokemon"]["special_total"] == 30

    def test_login_reports_tipo_usuario(self, client, ash):
        resp = client.post("/login", json={"username": "Ash", "password": "pikapika"})
        assert resp.json()["user"]["tipo_usuario"] == "T"


# ===========================================================================
# Avatar files stay with the record that uploaded them
# ===========================================================================
class TestAvatarOwnership:
    def test_cannot_link_an_existing_upload(self, client, misty):
        headers = auth(make_token(misty.id, Role.TRAINER, "Misty"))
        resp = client.post(
            "/pokemons",
            data={"name": "Staryu", "type": "Water", "trainer_id": str(misty.id),
                  "image_url": "/uploads/1700000000000-ash.png"},
            headers=headers,
        )
        assert resp.status_code == 400
        assert "message" in resp.json()

    def test_deleting_linked_external_url_keeps_local_file(self, client, misty, monkeypatch,
                                                            tmp_path):
        from pokeroster.services import upload_service

        monkeypatch.setattr(upload_service, "UPLOAD_DIR", tmp_path)
        victim = tmp_path / "1700000000000-ash.png"
        victim.write_bytes(b"img")

        headers = auth(make_token(misty.id, Role.TRAINER, "Misty"))
        resp = client.post(
            "/pokemons",
            data={"name": "Staryu", "type": "Water", "trainer_id": str(misty.id),
                  "image_url": "https://cdn.example.com/uploads/1700000000000-ash.png"},
            headers=headers,
        )
        assert resp.status_code == 201
        pokemon_id = resp.json()["pokemon"]["id"]

        assert client.delete(f"/pokemon/{pokemon_id}", headers=headers).status_code == 200
        assert victim.exists()

    def test_upload_removed_when_create_fails_unexpectedly(self, client, ash, monkeypatch,
                                                          tmp_path):
        from pokeroster.services import pokemon_service, upload_service

        def broken(*args, **kwargs):
            raise RuntimeError("database went away")

        monkeypatch.setattr(upload_service, "UPLOAD_DIR", tmp_path)
        monkeypatch.setattr(pokemon_service, "create_pokemon", broken)

        resp = client.post(
            "/pokemons",
            data={"name": "Pikachu", "type": "Electric", "trainer_id": str(ash.id)},
            files={"imageFile": ("pikachu.png", b"\x89PNG", "image/png")},
            headers=auth(make_token(ash.id, Role.TRAINER, "Ash")),
        )
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error."}
        assert list(tmp_path.iterdir()) == []
