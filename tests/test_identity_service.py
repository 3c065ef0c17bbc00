import httpx
import pytest

from api.config import Auth0Settings
from api.services.identity_service import IdentityService
from weatherwell.exceptions import IdentityNotConfiguredError, IdentityProviderError

SETTINGS = Auth0Settings(
    domain="tenant.auth0.test",
    audience="https://weatherwell-api",
    client_id="client-id",
    client_secret="client-secret",
)


def make_service(handler, settings=SETTINGS) -> IdentityService:
    return IdentityService(settings=settings, transport=httpx.MockTransport(handler))


def management_handler(users, job_status=201, token_status=200):
    """Fake Auth0 tenant recording every request it receives."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path == "/oauth/token":
            if token_status != 200:
                return httpx.Response(token_status, text="denied")
            return httpx.Response(200, json={"access_token": "mgmt-token", "token_type": "Bearer"})
        if path == "/api/v2/users-by-email":
            return httpx.Response(200, json=users)
        if path == "/api/v2/jobs/verification-email":
            return httpx.Response(job_status, json={"status": "pending"})
        return httpx.Response(404)

    handler.requests = requests
    return handler


class TestResendVerificationEmail:

    @pytest.mark.asyncio
    async def test_sends_job_for_existing_user(self):
        handler = management_handler(users=[{"user_id": "auth0|abc", "email": "user@example.com"}])

        assert await make_service(handler).resend_verification_email("user@example.com") is True

        token_request, lookup_request, job_request = handler.requests
        assert token_request.url == "https://tenant.auth0.test/oauth/token"
        assert b'"grant_type":"client_credentials"' in token_request.content.replace(b" ", b"")
        assert lookup_request.url.params["email"] == "user@example.com"
        assert lookup_request.headers["Authorization"] == "Bearer mgmt-token"
        assert b"auth0|abc" in job_request.content

    @pytest.mark.asyncio
    async def test_unknown_user_returns_false(self):
        handler = management_handler(users=[])

        assert await make_service(handler).resend_verification_email("ghost@example.com") is False
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_token_failure_returns_false(self):
        handler = management_handler(users=[], token_status=401)

        assert await make_service(handler).resend_verification_email("user@example.com") is False

    @pytest.mark.asyncio
    async def test_rejected_job_returns_false(self):
        handler = management_handler(users=[{"user_id": "auth0|abc"}], job_status=400)

        assert await make_service(handler).resend_verification_email("user@example.com") is False

    @pytest.mark.asyncio
    async def test_missing_credentials_raise(self):
        settings = Auth0Settings(domain="tenant.auth0.test", audience=None, client_id=None, client_secret=None)

        with pytest.raises(IdentityNotConfiguredError):
            await make_service(management_handler(users=[]), settings).resend_verification_email("a@b.c")

    @pytest.mark.asyncio
    async def test_missing_domain_raises(self):
        settings = Auth0Settings(domain=None, audience=None, client_id="id", client_secret="secret")

        with pytest.raises(IdentityNotConfiguredError):
            await make_service(management_handler(users=[]), settings).resend_verification_email("a@b.c")


class TestVerifyAccessToken:

    @pytest.mark.asyncio
    async def test_valid_token_cached(self):
        calls = []

        def handler(request):
            calls.append(request)
            assert request.headers["Authorization"] == "Bearer good"
            return httpx.Response(200, json={"sub": "auth0|abc"})

        service = make_service(handler)

        assert await service.verify_access_token("good") == {"sub": "auth0|abc"}
        assert await service.verify_access_token("good") == {"sub": "auth0|abc"}
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_rejected_token_returns_none(self):
        service = make_service(lambda request: httpx.Response(401))
        assert await service.verify_access_token("bad") is None

    @pytest.mark.asyncio
    async def test_provider_error_raises(self):
        service = make_service(lambda request: httpx.Response(500))

        with pytest.raises(IdentityProviderError):
            await service.verify_access_token("token")

    @pytest.mark.asyncio
    async def test_invalid_profile_body_raises(self):
        service = make_service(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(IdentityProviderError, match="invalid profile"):
            await service.verify_access_token("token")

    @pytest.mark.asyncio
    async def test_unreachable_provider_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(IdentityProviderError, match="unreachable"):
            await make_service(handler).verify_access_token("token")
