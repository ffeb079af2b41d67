"""
TripNest Backend - Authorization Guard Tests
==============================================

What:  require_authenticated and require_role(OFFICER), exercised through
       the routes that use them (/addRequest, /reservations, /addHotel).
"""

import pytest

from tripnest.models.user import Role

SEASIDE = {"name": "Seaside Inn", "address": "1 Beach Rd", "latitude": 10.0, "longitude": 20.0}


class TestRequireAuthenticated:
    @pytest.mark.asyncio
    async def test_no_session_redirects_to_login(self, client):
        response = await client.get("/reservations")

        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    @pytest.mark.parametrize("role", [Role.USER, Role.OFFICER, Role.ADMIN])
    @pytest.mark.asyncio
    async def test_any_role_is_admitted(self, client, login_as, role):
        await login_as(role)

        response = await client.get("/reservations")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_tampered_cookie_is_anonymous(self, client, settings):
        client.cookies.set(settings.session_cookie_name, "not-a-signed-session")

        response = await client.get("/reservations")

        assert response.status_code == 302


class TestRequireRole:
    @pytest.mark.asyncio
    async def test_no_session_redirects_to_login(self, client):
        response = await client.post("/addHotel", json=SEASIDE)

        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    @pytest.mark.asyncio
    async def test_user_role_is_forbidden(self, client, login_as):
        await login_as(Role.USER)

        response = await client.post("/addHotel", json=SEASIDE)

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.parametrize("role", [Role.OFFICER, Role.ADMIN])
    @pytest.mark.asyncio
    async def test_officer_and_admin_are_admitted(self, client, login_as, role):
        await login_as(role)

        response = await client.post("/addHotel", json=SEASIDE)

        assert response.status_code == 201


class TestRoleOrdering:
    def test_ranks(self):
        assert Role.ADMIN.at_least(Role.OFFICER)
        assert Role.OFFICER.at_least(Role.OFFICER)
        assert not Role.USER.at_least(Role.OFFICER)

    def test_padded_role_is_not_a_role(self):
        assert Role.parse(" admin") is None
        assert Role.parse("admin") is Role.ADMIN
