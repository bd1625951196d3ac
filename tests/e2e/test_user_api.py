"""
End-to-end tests for the /api/v1/users endpoints.
"""
import re

import pytest

BASE = "/api/v1/users"


def _create(client, payload):
    response = client.post(BASE, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.e2e
class TestCreateUserApi:

    def test_create_user_with_valid_data(self, client, valid_payload):
        response = client.post(BASE, json={**valid_payload, "email": "John.Doe@Mailbox.org"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User created successfully"
        assert body["data"]["id"]
        assert body["data"]["email"] == "john.doe@mailbox.org"
        assert re.match(r"^XXXX-XXXX-\d{4}$", body["data"]["aadhaar_number"])
        assert re.match(r"^XXXXX\w{4}$", body["data"]["pan_number"])
        assert body["data"]["version"] == 0
        assert body["data"]["is_deleted"] is False

    def test_missing_fields_listed(self, client):
        response = client.post(BASE, json={"name": "J"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["kind"] == "validation_error"
        fields = {e["field"] for e in body["errors"]}
        assert {"name", "email", "aadhaar_number", "pan_number"} <= fields

    def test_duplicate_email(self, client, make_payload):
        _create(client, make_payload(1))
        response = client.post(BASE, json=make_payload(2, email="USER1@mailbox.org"))

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["field"] == "email"
        assert "already registered" in body["message"]

    def test_duplicate_aadhaar(self, client, make_payload):
        _create(client, make_payload(1))
        response = client.post(BASE, json=make_payload(2, aadhaar_number=f"{1:012d}"))
        assert response.status_code == 409
        assert response.json()["field"] == "aadhaar_number"

    def test_duplicate_pan(self, client, make_payload):
        _create(client, make_payload(1))
        response = client.post(BASE, json=make_payload(2, pan_number="ABCDE0001F"))
        assert response.status_code == 409
        assert response.json()["field"] == "pan_number"

    def test_non_object_body(self, client):
        response = client.post(BASE, json=[1, 2, 3])
        assert response.status_code == 400


@pytest.mark.e2e
class TestUpdateUserApi:

    def test_update_user(self, client, valid_payload):
        created = _create(client, valid_payload)
        response = client.put(f"{BASE}/{created['id']}", json={"name": "Jane Doe", "current_address": "New Address"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Jane Doe"
        assert data["current_address"] == "New Address"
        assert data["version"] == 1
        assert data["aadhaar_number"] == "XXXX-XXXX-9012"

    @pytest.mark.parametrize("field", ["aadhaar_number", "pan_number"])
    def test_identity_update_rejected(self, client, valid_payload, field):
        created = _create(client, valid_payload)
        response = client.put(f"{BASE}/{created['id']}", json={field: valid_payload[field]})

        assert response.status_code == 400
        assert response.json()["kind"] == "immutable_field"

    def test_unknown_field_rejected(self, client, valid_payload):
        created = _create(client, valid_payload)
        response = client.put(f"{BASE}/{created['id']}", json={"version": 99})
        assert response.status_code == 400
        assert response.json()["kind"] == "immutable_field"

    def test_update_missing_user(self, client):
        response = client.put(f"{BASE}/999", json={"name": "Nobody"})
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"


@pytest.mark.e2e
class TestReadAndDeleteApi:

    def test_get_user(self, client, valid_payload):
        created = _create(client, valid_payload)
        response = client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["aadhaar_number"] == "XXXX-XXXX-9012"
        assert data["pan_number"] == "XXXXX234F"
        assert "123456789012" not in response.text

    def test_invalid_id_format(self, client):
        response = client.get(f"{BASE}/not-a-number")
        assert response.status_code == 400

    @pytest.mark.parametrize("user_id", [2 ** 63, 10 ** 20])
    def test_id_beyond_storage_range_is_not_found(self, client, user_id):
        assert client.get(f"{BASE}/{user_id}").status_code == 404
        assert client.put(f"{BASE}/{user_id}", json={"name": "Nobody"}).status_code == 404
        response = client.delete(f"{BASE}/{user_id}")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_soft_delete(self, client, valid_payload):
        created = _create(client, valid_payload)

        response = client.delete(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"

        assert client.get(f"{BASE}/{created['id']}").status_code == 404
        assert client.delete(f"{BASE}/{created['id']}").status_code == 404
        assert client.post(BASE, json=valid_payload).status_code == 409

    def test_list_pagination(self, client, make_payload):
        for i in range(1, 16):
            _create(client, make_payload(i))

        response = client.get(BASE, params={"page": 2, "page_size": 10})
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 5
        assert body["meta"]["total"] == 15
        assert body["meta"]["total_pages"] == 2
        assert body["meta"]["has_next"] is False
        assert body["meta"]["has_prev"] is True
        assert all(u["aadhaar_number"].startswith("XXXX-XXXX-") for u in body["data"])

    def test_list_clamps_bad_params(self, client, make_payload):
        _create(client, make_payload(1))
        meta = client.get(BASE, params={"page": "0", "page_size": "500"}).json()["meta"]
        assert meta["page"] == 1
        assert meta["page_size"] == 100

        meta = client.get(BASE, params={"page": "abc"}).json()["meta"]
        assert meta["page"] == 1
        assert meta["page_size"] == 10

    def test_list_page_beyond_range_is_empty(self, client, make_payload):
        _create(client, make_payload(1))
        for path in (BASE, f"{BASE}/search?q=user"):
            response = client.get(path, params={"page": str(10 ** 20)})
            assert response.status_code == 200
            body = response.json()
            assert body["data"] == []
            assert body["meta"]["total"] == 1
            assert body["meta"]["has_next"] is False

    def test_list_sort_with_doubled_prefix_uses_default(self, client, make_payload):
        first = _create(client, make_payload(1, name="Zara Khan"))
        second = _create(client, make_payload(2, name="Amit Shah"))
        data = client.get(BASE, params={"sort": "--name"}).json()["data"]
        assert [u["id"] for u in data] == [second["id"], first["id"]]

    def test_list_sort(self, client, make_payload):
        _create(client, make_payload(1, name="Zara Khan"))
        _create(client, make_payload(2, name="Amit Shah"))
        data = client.get(BASE, params={"sort": "name"}).json()["data"]
        assert [u["name"] for u in data] == ["Amit Shah", "Zara Khan"]

    def test_search(self, client, make_payload):
        _create(client, make_payload(1, name="Jane Smith"))
        _create(client, make_payload(2, name="John Doe"))

        response = client.get(f"{BASE}/search", params={"q": "jane"})
        assert response.status_code == 200
        body = response.json()
        assert [u["name"] for u in body["data"]] == ["Jane Smith"]
        assert body["meta"]["total"] == 1

    def test_search_without_term(self, client):
        response = client.get(f"{BASE}/search")
        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"


@pytest.mark.e2e
class TestServiceEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_request_id_header(self, client):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}
