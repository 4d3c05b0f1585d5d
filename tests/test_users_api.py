import pytest
from fastapi import status

from jobly.core.security import decode_token

NEW_USER = {
    "username": "u-new",
    "firstName": "First-new",
    "lastName": "Last-newL",
    "password": "password-new",
    "email": "new@email.com",
    "isAdmin": False,
}


def _user(n, is_admin=False):
    return {
        "username": f"u{n}",
        "firstName": f"U{n}F",
        "lastName": f"U{n}L",
        "email": f"user{n}@user.com",
        "isAdmin": is_admin,
    }


# ---------------------------------------------------------------- POST /users

def test_admin_adds_user(client, seeded, admin_token, auth_header):
    response = client.post("/users", json=NEW_USER, headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["user"] == {k: v for k, v in NEW_USER.items() if k != "password"}
    assert decode_token(body["token"])["username"] == "u-new"


def test_admin_adds_admin(client, seeded, admin_token, auth_header):
    response = client.post("/users", json={**NEW_USER, "isAdmin": True}, headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["isAdmin"] is True


def test_non_admin_cannot_add_user(client, seeded, u1_token, auth_header):
    response = client.post("/users", json=NEW_USER, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_add_user_invalid_data(client, seeded, admin_token, auth_header):
    response = client.post(
        "/users", json={**NEW_USER, "email": "not-an-email"}, headers=auth_header(admin_token)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# ---------------------------------------------------------------- GET /users

def test_list_users_as_admin(client, seeded, admin_token, auth_header):
    response = client.get("/users", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"users": [_user(1), _user(2), _user(3, is_admin=True)]}


def test_list_users_as_non_admin(client, seeded, u1_token, auth_header):
    response = client.get("/users", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_users_anonymous(client, seeded):
    response = client.get("/users")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# ---------------------------------------------------------------- GET /users/:username

def test_get_own_user(client, seeded, u1_token, auth_header):
    response = client.get("/users/u1", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"user": {**_user(1), "jobs": seeded[:2]}}


def test_get_other_user_as_non_admin(client, seeded, u1_token, auth_header):
    response = client.get("/users/u2", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_other_user_as_admin(client, seeded, admin_token, auth_header):
    response = client.get("/users/u2", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["username"] == "u2"


def test_get_user_not_found(client, seeded, admin_token, auth_header):
    response = client.get("/users/nope", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_user_with_garbage_token(client, seeded, auth_header):
    response = client.get("/users/u1", headers=auth_header("not-a-token"))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# ---------------------------------------------------------------- PATCH /users/:username

def test_update_own_user(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u1", json={"firstName": "New"}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"user": {**_user(1), "firstName": "New"}}


def test_update_other_user_as_non_admin(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u2", json={"firstName": "New"}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_update_other_user_as_admin(client, seeded, admin_token, auth_header):
    response = client.patch("/users/u2", json={"firstName": "New"}, headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["firstName"] == "New"


def test_update_user_cannot_self_promote(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u1", json={"isAdmin": True}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_username_not_allowed(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u1", json={"username": "u1-new"}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_user_empty_body(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u1", json={}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_user_password_then_login(client, seeded, u1_token, auth_header):
    response = client.patch("/users/u1", json={"password": "new-password"}, headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_200_OK

    login = client.post("/auth/token", json={"username": "u1", "password": "new-password"})
    assert login.status_code == status.HTTP_200_OK


def test_update_user_not_found(client, seeded, admin_token, auth_header):
    response = client.patch("/users/nope", json={"firstName": "Nope"}, headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# ---------------------------------------------------------------- DELETE /users/:username

def test_delete_own_user(client, seeded, u1_token, auth_header):
    response = client.delete("/users/u1", headers=auth_header(u1_token))
    assert response.json() == {"deleted": "u1"}


def test_delete_other_user_as_non_admin(client, seeded, u1_token, auth_header, admin_token):
    response = client.delete("/users/u2", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert client.get("/users/u2", headers=auth_header(admin_token)).status_code == status.HTTP_200_OK


def test_delete_user_not_found(client, seeded, admin_token, auth_header):
    response = client.delete("/users/nope", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# ---------------------------------------------------------------- POST /users/:username/jobs/:id

def test_apply_for_job_as_self(client, seeded, u1_token, auth_header):
    response = client.post(f"/users/u1/jobs/{seeded[2]}", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"applied": seeded[2]}


def test_apply_for_job_as_admin(client, seeded, admin_token, auth_header):
    response = client.post(f"/users/u2/jobs/{seeded[0]}", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_201_CREATED


def test_apply_for_job_for_someone_else(client, seeded, u1_token, auth_header):
    response = client.post(f"/users/u2/jobs/{seeded[0]}", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_apply_for_job_twice(client, seeded, u1_token, auth_header):
    response = client.post(f"/users/u1/jobs/{seeded[0]}", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_apply_for_missing_job(client, seeded, u1_token, auth_header):
    response = client.post("/users/u1/jobs/0", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_apply_for_job_missing_user(client, seeded, admin_token, auth_header):
    response = client.post(f"/users/nope/jobs/{seeded[0]}", headers=auth_header(admin_token))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_apply_for_job_id_too_large(client, seeded, u1_token, auth_header):
    response = client.post(f"/users/u1/jobs/{10**30}", headers=auth_header(u1_token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
