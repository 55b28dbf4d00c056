# This file tests the user CRUD endpoints against an in-memory user service.
# It exists to pin the status codes for validation, misses, conflicts, and store failures.
# The tests cover create/read round trips, partial updates, and repeated deletes.
# Store failures must surface as structured 500 payloads with detail only outside production.

from __future__ import annotations

from src.api.db_access import UniqueViolationError
from tests.api.support import (
    FailingUserService,
    InMemoryUserService,
    api_test_client,
    build_test_config,
    user_payload_keys,
)


def test_create_then_get_returns_same_user() -> None:
    service = InMemoryUserService()
    with api_test_client(user_service=service) as client:
        created = client.post("/users", json={"name": "Ana Torres", "email": "ana@example.com"})
        user_id = created.json()["user"]["id"]
        fetched = client.get(f"/users/{user_id}")

    assert created.status_code == 201
    assert created.json()["success"] is True
    assert fetched.status_code == 200
    user = fetched.json()["user"]
    assert set(user) == user_payload_keys()
    assert user["name"] == "Ana Torres"
    assert user["email"] == "ana@example.com"
    assert isinstance(user["id"], int)
    assert user["created_at"]


def test_create_accepts_legacy_nombre_field() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.post("/users", json={"nombre": "Luis", "email": "luis@example.com"})

    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Luis"


def test_create_trims_name_and_email() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.post("/users", json={"name": "  Eva ", "email": " eva@example.com "})

    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Eva"
    assert response.json()["user"]["email"] == "eva@example.com"


def test_duplicate_email_returns_conflict_and_keeps_one_user() -> None:
    service = InMemoryUserService()
    with api_test_client(user_service=service) as client:
        first = client.post("/users", json={"name": "Ana", "email": "dup@example.com"})
        second = client.post("/users", json={"name": "Other", "email": "dup@example.com"})

    assert first.status_code == 201
    assert second.status_code == 409
    payload = second.json()
    assert payload["success"] is False
    assert payload["error_code"] == "EMAIL_CONFLICT"
    assert "dup@example.com" in payload["error"]
    assert service.count_by_email("dup@example.com") == 1


def test_create_rejects_missing_or_invalid_fields() -> None:
    bodies = [
        {"email": "x@example.com"},
        {"name": "X"},
        {"name": "   ", "email": "x@example.com"},
        {"name": "X", "email": "not-an-email"},
        {"name": "X", "email": "with space@example.com"},
        {"name": "X", "email": "x@nodot"},
    ]
    with api_test_client(user_service=InMemoryUserService()) as client:
        responses = [client.post("/users", json=body) for body in bodies]

    for response in responses:
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert response.json()["error"]


def test_create_rejects_malformed_json() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.post(
            "/users",
            content=b'{"name": "broken"',
            headers={"content-type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_get_missing_user_returns_not_found_without_user_payload() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.get("/users/999")

    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["error_code"] == "USER_NOT_FOUND"
    assert "user" not in payload


def test_out_of_range_id_is_a_miss_not_a_server_error() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.get("/users/99999999999")
        negative = client.get("/users/-1")

    assert response.status_code == 404
    assert negative.status_code == 404


def test_non_integer_id_is_a_client_error() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.get("/users/abc")

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_list_users_returns_count_and_rows() -> None:
    service = InMemoryUserService(
        rows=[
            {"name": "Juan", "email": "juan@example.com"},
            {"name": "Maria", "email": "maria@example.com"},
        ]
    )
    with api_test_client(user_service=service) as client:
        response = client.get("/users")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["count"] == 2
    assert {user["email"] for user in payload["users"]} == {"juan@example.com", "maria@example.com"}


def test_partial_update_changes_only_email() -> None:
    service = InMemoryUserService(rows=[{"name": "Juan", "email": "juan@example.com"}])
    with api_test_client(user_service=service) as client:
        response = client.put("/users/1", json={"email": "juan.new@example.com"})
        fetched = client.get("/users/1")

    assert response.status_code == 200
    user = fetched.json()["user"]
    assert user["email"] == "juan.new@example.com"
    assert user["name"] == "Juan"
    assert user["updated_at"] is not None


def test_update_without_fields_is_rejected() -> None:
    service = InMemoryUserService(rows=[{"name": "Juan", "email": "juan@example.com"}])
    with api_test_client(user_service=service) as client:
        empty = client.put("/users/1", json={})
        nulls = client.put("/users/1", json={"name": None, "email": None})

    assert empty.status_code == 400
    assert nulls.status_code == 400
    assert "at least one field" in empty.json()["error"]
    assert service.get_user(1)["updated_at"] is None


def test_update_validates_supplied_fields() -> None:
    service = InMemoryUserService(rows=[{"name": "Juan", "email": "juan@example.com"}])
    with api_test_client(user_service=service) as client:
        bad_email = client.put("/users/1", json={"email": "nope"})
        blank_name = client.put("/users/1", json={"name": ""})

    assert bad_email.status_code == 400
    assert blank_name.status_code == 400


def test_update_missing_user_returns_not_found() -> None:
    with api_test_client(user_service=InMemoryUserService()) as client:
        response = client.put("/users/42", json={"name": "Ghost"})

    assert response.status_code == 404


def test_update_to_taken_email_returns_conflict() -> None:
    service = InMemoryUserService(
        rows=[
            {"name": "Juan", "email": "juan@example.com"},
            {"name": "Maria", "email": "maria@example.com"},
        ]
    )
    with api_test_client(user_service=service) as client:
        response = client.put("/users/2", json={"email": "juan@example.com"})

    assert response.status_code == 409
    assert response.json()["error_code"] == "EMAIL_CONFLICT"
    assert service.get_user(2)["email"] == "maria@example.com"


def test_delete_twice_returns_record_then_not_found() -> None:
    service = InMemoryUserService(rows=[{"name": "Juan", "email": "juan@example.com"}])
    with api_test_client(user_service=service) as client:
        first = client.delete("/users/1")
        second = client.delete("/users/1")

    assert first.status_code == 200
    assert first.json()["deleted_user"]["email"] == "juan@example.com"
    assert second.status_code == 404
    assert "deleted_user" not in second.json()


def test_store_failure_returns_500_with_detail_outside_production() -> None:
    with api_test_client(user_service=FailingUserService()) as client:
        listed = client.get("/users")
        created = client.post("/users", json={"name": "A", "email": "a@example.com"})

    for response in (listed, created):
        assert response.status_code == 500
        payload = response.json()
        assert payload["success"] is False
        assert payload["error_code"] == "STORE_ERROR"
        assert payload["details"] == 'relation "users" does not exist'


def test_store_failure_hides_detail_in_production() -> None:
    config = build_test_config(environment="production")
    with api_test_client(config=config, user_service=FailingUserService()) as client:
        response = client.get("/users/1")

    assert response.status_code == 500
    assert response.json()["details"] is None
    assert response.json()["error"]


def test_unique_violation_on_update_maps_to_conflict_even_from_failing_store() -> None:
    service = FailingUserService(UniqueViolationError("duplicate key"))
    with api_test_client(user_service=service) as client:
        response = client.put("/users/1", json={"email": "taken@example.com"})

    assert response.status_code == 409
