from datetime import timedelta

from sqlalchemy import func, select, update

from conftest import auth
from menucard.core.timeutils import utcnow
from menucard.models.session import UserSession
from menucard.models.user import User
from menucard.models.verification import VerificationCode


async def request_code(client, email="a@x.com", full_name="A", country="US"):
    return await client.post("/auth/request-code", json={"email": email, "full_name": full_name, "country": country})


async def test_register_issues_code_and_creates_unverified_user(client, mailer, db_sessions):
    r = await request_code(client)
    assert r.status_code == 200
    assert r.json() == {"message": "Verification code sent"}

    code = mailer.last_code("a@x.com")
    assert len(code) == 6 and code.isdigit()

    async with db_sessions() as db:
        user = (await db.execute(select(User).where(User.email == "a@x.com"))).scalar_one()
        assert user.full_name == "A"
        assert user.email_verified is False


async def test_new_code_supersedes_previous_one(client, mailer, db_sessions):
    await request_code(client)
    c1 = mailer.last_code("a@x.com")
    await request_code(client)
    c2 = mailer.last_code("a@x.com")

    async with db_sessions() as db:
        count = (await db.execute(select(func.count()).select_from(VerificationCode))).scalar_one()
        assert count == 1

    if c1 != c2:
        r = await client.post("/auth/verify", json={"email": "a@x.com", "code": c1})
        assert r.status_code == 401
        assert r.json()["error_code"] == "unauthorized"

    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": c2})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["email_verified"] is True
    assert "session_token" in r.cookies


async def test_resubmission_updates_profile(client, db_sessions):
    await request_code(client, full_name="Old", country="US")
    await request_code(client, full_name="New", country="IN")

    async with db_sessions() as db:
        users = list((await db.execute(select(User))).scalars())
    assert len(users) == 1
    assert (users[0].full_name, users[0].country) == ("New", "IN")


async def test_code_cannot_be_used_twice(client, mailer):
    await request_code(client)
    code = mailer.last_code("a@x.com")

    first = await client.post("/auth/verify", json={"email": "a@x.com", "code": code})
    second = await client.post("/auth/verify", json={"email": "a@x.com", "code": code})
    assert first.status_code == 200
    assert second.status_code == 401


async def test_expired_code_never_verifies(client, mailer, db_sessions):
    await request_code(client)
    code = mailer.last_code("a@x.com")
    async with db_sessions() as db:
        await db.execute(update(VerificationCode).values(expires_at=utcnow() - timedelta(seconds=1)))
        await db.commit()

    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": code})
    assert r.status_code == 401


async def test_wrong_and_expired_codes_look_the_same(client, mailer, db_sessions):
    await request_code(client)
    code = mailer.last_code("a@x.com")
    wrong = "000000" if code != "000000" else "111111"
    wrong_resp = await client.post("/auth/verify", json={"email": "a@x.com", "code": wrong})

    async with db_sessions() as db:
        await db.execute(update(VerificationCode).values(expires_at=utcnow() - timedelta(minutes=1)))
        await db.commit()
    expired_resp = await client.post("/auth/verify", json={"email": "a@x.com", "code": code})

    assert wrong_resp.status_code == expired_resp.status_code == 401
    assert wrong_resp.json() == expired_resp.json()


async def test_verify_consumes_code_and_creates_session_together(client, mailer, db_sessions):
    await request_code(client)
    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": mailer.last_code("a@x.com")})
    token = r.cookies["session_token"]

    async with db_sessions() as db:
        assert (await db.execute(select(VerificationCode))).first() is None
        session = (await db.execute(select(UserSession).where(UserSession.token == token))).scalar_one()
        assert session.user_id == r.json()["user"]["id"]


async def test_session_cookie_attributes(client, mailer):
    await request_code(client)
    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": mailer.last_code("a@x.com")})
    header = r.headers["set-cookie"].lower()
    assert "httponly" in header
    assert "samesite=lax" in header
    assert f"max-age={30 * 24 * 60 * 60}" in header
    # Secure is only set in production
    assert "secure" not in header


async def test_login_unknown_email_is_not_found(client):
    r = await client.post("/auth/login", json={"email": "nobody@x.com"})
    assert r.status_code == 404
    assert r.json()["error_code"] == "user_not_found"


async def test_login_issues_new_code_for_registered_email(client, mailer, sign_in):
    await sign_in("a@x.com")
    r = await client.post("/auth/login", json={"email": "a@x.com"})
    assert r.status_code == 200

    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": mailer.last_code("a@x.com")})
    assert r.status_code == 200


async def test_me_returns_profile(client, sign_in):
    token = await sign_in("a@x.com", full_name="A", country="US")
    for path in ("/auth/me", "/users/me"):
        r = await client.get(path, headers=auth(token))
        assert r.status_code == 200
        body = r.json()
        assert body["email"] == "a@x.com"
        assert body["full_name"] == "A"
        assert body["country"] == "US"
        assert body["email_verified"] is True


async def test_missing_unknown_expired_and_revoked_sessions_are_all_unauthorized(client, sign_in, db_sessions):
    missing = await client.get("/auth/me")
    unknown = await client.get("/auth/me", headers=auth("not-a-real-token"))

    expired_token = await sign_in("expired@x.com")
    async with db_sessions() as db:
        await db.execute(
            update(UserSession)
            .where(UserSession.token == expired_token)
            .values(expires_at=utcnow() - timedelta(seconds=1))
        )
        await db.commit()
    expired = await client.get("/auth/me", headers=auth(expired_token))

    revoked_token = await sign_in("revoked@x.com")
    assert (await client.post("/auth/logout", headers=auth(revoked_token))).status_code == 200
    revoked = await client.get("/auth/me", headers=auth(revoked_token))

    responses = [missing, unknown, expired, revoked]
    assert {r.status_code for r in responses} == {401}
    assert len({r.text for r in responses}) == 1


async def test_logout_deletes_session_and_clears_cookie(client, sign_in, db_sessions):
    token = await sign_in("a@x.com")
    r = await client.post("/auth/logout", headers=auth(token))
    assert r.status_code == 200
    assert 'session_token=""' in r.headers["set-cookie"] or "max-age=0" in r.headers["set-cookie"].lower()

    async with db_sessions() as db:
        assert (await db.execute(select(UserSession).where(UserSession.token == token))).first() is None

    assert (await client.get("/auth/me", headers=auth(token))).status_code == 401


async def test_logout_only_revokes_presented_session(client, sign_in):
    first = await sign_in("a@x.com")
    second = await sign_in("a@x.com")

    await client.post("/auth/logout", headers=auth(first))
    assert (await client.get("/auth/me", headers=auth(first))).status_code == 401
    assert (await client.get("/auth/me", headers=auth(second))).status_code == 200


async def test_invalid_payloads_are_rejected(client):
    r = await client.post("/auth/request-code", json={"email": "not-an-email", "full_name": "A", "country": "US"})
    assert r.status_code == 422
    assert r.json()["error_code"] == "validation_error"

    r = await client.post("/auth/verify", json={"email": "a@x.com", "code": "12ab56"})
    assert r.status_code == 422


async def test_second_logout_with_same_cookie_is_unauthorized(client, sign_in):
    token = await sign_in("a@x.com")
    assert (await client.post("/auth/logout", headers=auth(token))).status_code == 200

    again = await client.post("/auth/logout", headers=auth(token))
    missing = await client.post("/auth/logout")
    assert again.status_code == missing.status_code == 401
    assert again.json() == missing.json()
    assert again.json()["error_code"] == "unauthorized"


async def test_framework_errors_use_the_error_envelope(client):
    r = await client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json()["error_code"] == "not_found"

    r = await client.put("/health")
    assert r.status_code == 405
    assert r.json()["error_code"] == "bad_request"
