from conftest import login, register
from todo_api.repositories import get_todo_repository, get_user_repository
from todo_api.security import hash_password


def create_todo_payload(name="Test Task", is_complete=False):
    return {"name": name, "isComplete": is_complete}


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "name", "isComplete"}
    assert isinstance(todo["id"], int)
    assert isinstance(todo["name"], str)
    assert isinstance(todo["isComplete"], bool)


class TestAuthRequired:
    def test_every_route_rejects_anonymous_callers(self, client):
        calls = [
            ("GET", "/todoitems", None),
            ("GET", "/todoitems/1", None),
            ("POST", "/todoitems", create_todo_payload()),
            ("PUT", "/todoitems/1", create_todo_payload()),
            ("DELETE", "/todoitems/1", None),
        ]
        for method, url, body in calls:
            res = client.request(method, url, json=body)
            assert res.status_code == 401, (method, url)
            assert res.json()["detail"] == "Not authenticated"
        assert get_todo_repository().list() == []

    def test_role_outside_allowed_set_is_forbidden(self, client):
        get_user_repository().add("guest", hash_password("pw"), role="Guest")
        assert login(client, "guest", "pw").status_code == 200

        res = client.get("/todoitems")
        assert res.status_code == 403
        assert res.json()["detail"] == "Forbidden"

    def test_admin_role_is_allowed(self, client):
        get_user_repository().add("root", hash_password("pw"), role="Admin")
        login(client, "root", "pw")
        assert client.get("/todoitems").status_code == 200


class TestTodosCRUD:
    def test_create_todo(self, auth_client):
        res = auth_client.post("/todoitems", json=create_todo_payload("Buy milk"))
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["name"] == "Buy milk"
        assert todo["isComplete"] is False
        assert res.headers["location"] == f"/todoitems/{todo['id']}"

    def test_create_defaults_completion_flag_and_accepts_snake_case(self, auth_client):
        res = auth_client.post("/todoitems", json={"name": "Walk dog"})
        assert res.status_code == 201
        assert res.json()["isComplete"] is False

        res_snake = auth_client.post("/todoitems", json={"name": "Feed cat", "is_complete": True})
        assert res_snake.status_code == 201
        assert res_snake.json()["isComplete"] is True

    def test_create_with_blank_name_is_rejected(self, auth_client):
        for body in ({"name": ""}, {"name": "   "}, {"isComplete": True}, {"name": None}):
            res = auth_client.post("/todoitems", json=body)
            assert res.status_code == 400, body
            assert res.json()["error"] == "ValidationError"
        assert get_todo_repository().list() == []

    def test_duplicate_names_are_allowed(self, auth_client):
        first = auth_client.post("/todoitems", json=create_todo_payload("Same"))
        second = auth_client.post("/todoitems", json=create_todo_payload("Same"))
        assert first.status_code == second.status_code == 201
        assert first.json()["id"] != second.json()["id"]

    def test_list_returns_all_in_id_order(self, auth_client):
        for name in ("one", "two", "three"):
            auth_client.post("/todoitems", json=create_todo_payload(name))
        res = auth_client.get("/todoitems")
        assert res.status_code == 200
        items = res.json()
        assert [t["name"] for t in items] == ["one", "two", "three"]
        for item in items:
            assert_todo_shape(item)

    def test_get_todo_and_not_found(self, auth_client):
        tid = auth_client.post("/todoitems", json=create_todo_payload("Read book")).json()["id"]

        res_get = auth_client.get(f"/todoitems/{tid}")
        assert res_get.status_code == 200
        assert res_get.json() == {"id": tid, "name": "Read book", "isComplete": False}

        res_404 = auth_client.get("/todoitems/999999")
        assert res_404.status_code == 404
        assert res_404.json()["detail"] == "Todo not found"

    def test_non_integer_id_is_a_client_error(self, auth_client):
        assert auth_client.get("/todoitems/abc").status_code == 400

    def test_put_replaces_todo(self, auth_client):
        tid = auth_client.post("/todoitems", json=create_todo_payload("Initial")).json()["id"]

        res_put = auth_client.put(f"/todoitems/{tid}", json=create_todo_payload("Replaced", True))
        assert res_put.status_code == 204
        assert res_put.content == b""
        assert auth_client.get(f"/todoitems/{tid}").json() == {
            "id": tid,
            "name": "Replaced",
            "isComplete": True,
        }

        # Omitted flag resets to false on a full replace
        auth_client.put(f"/todoitems/{tid}", json={"name": "Again"})
        assert auth_client.get(f"/todoitems/{tid}").json()["isComplete"] is False

    def test_put_not_found_and_blank_name(self, auth_client):
        res_nf = auth_client.put("/todoitems/424242", json=create_todo_payload("Nope"))
        assert res_nf.status_code == 404
        assert res_nf.json()["detail"] == "Todo not found"

        tid = auth_client.post("/todoitems", json=create_todo_payload("Keep")).json()["id"]
        assert auth_client.put(f"/todoitems/{tid}", json={"name": " "}).status_code == 400
        assert auth_client.get(f"/todoitems/{tid}").json()["name"] == "Keep"

    def test_delete_todo(self, auth_client):
        tid = auth_client.post("/todoitems", json=create_todo_payload("ToDelete")).json()["id"]

        res_del = auth_client.delete(f"/todoitems/{tid}")
        assert res_del.status_code == 204
        assert res_del.text == ""

        assert auth_client.get(f"/todoitems/{tid}").status_code == 404
        res_del_again = auth_client.delete(f"/todoitems/{tid}")
        assert res_del_again.status_code == 404
        assert res_del_again.json()["detail"] == "Todo not found"

    def test_delete_nonexistent_is_not_found(self, auth_client):
        assert auth_client.delete("/todoitems/12345").status_code == 404

    def test_todos_are_shared_between_sessions(self, auth_client, make_client):
        auth_client.post("/todoitems", json=create_todo_payload("Shared"))
        other = make_client()
        register(other, "bob", "pw2")
        login(other, "bob", "pw2")
        assert [t["name"] for t in other.get("/todoitems").json()] == ["Shared"]


class TestEndToEnd:
    def test_register_login_create_get_delete(self, client):
        assert register(client, "alice", "pw1").status_code == 201

        res_login = login(client, "alice", "pw1")
        assert res_login.status_code == 200
        assert "set-cookie" in res_login.headers

        res_create = client.post("/todoitems", json={"name": "buy milk", "isComplete": False})
        assert res_create.status_code == 201
        created = res_create.json()
        assert isinstance(created["id"], int)

        res_get = client.get(f"/todoitems/{created['id']}")
        assert res_get.status_code == 200
        assert res_get.json() == {"id": created["id"], "name": "buy milk", "isComplete": False}

        assert client.delete(f"/todoitems/{created['id']}").status_code == 204
        assert client.get(f"/todoitems/{created['id']}").status_code == 404
