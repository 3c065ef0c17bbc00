"""
Auth0 identity service: access-token validation and verification e-mails.
"""
import hashlib
from typing import Any, Dict, Optional

import httpx

from api.config import Auth0Settings
from api.services.result_cache import ResultCache
from weatherwell.exceptions import IdentityNotConfiguredError, IdentityProviderError
from weatherwell.utils.logger import get_logger


class IdentityService:
    """
    Thin async wrapper over the Auth0 Authentication and Management APIs.
    """

    def __init__(
        self,
        settings: Auth0Settings,
        timeout: float = 10.0,
        token_cache_seconds: int = 300,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None
    ):
        """
        Initialize identity service.

        Args:
            settings: Auth0 domain, audience and management client credentials
            timeout: Request timeout in seconds
            token_cache_seconds: How long a validated access token is trusted
            transport: Optional httpx transport (tests)
            logger: Logger instance
        """
        self.settings = settings
        self.timeout = timeout
        self.transport = transport
        self.logger = logger or get_logger()
        self._validated_tokens = ResultCache(default_ttl_seconds=token_cache_seconds)

    @property
    def base_url(self) -> str:
        if not self.settings.domain:
            raise IdentityNotConfiguredError("AUTH0_DOMAIN environment variable is not set")
        return f"https://{self.settings.domain}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def verify_access_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Validate a bearer token against the /userinfo endpoint.

        Args:
            token: Raw access token

        Returns:
            User profile dict, or None if the provider rejects the token

        Raises:
            IdentityNotConfiguredError: If AUTH0_DOMAIN is missing
            IdentityProviderError: If the provider cannot be reached
        """
        cache_key = hashlib.sha256(token.encode("utf-8")).hexdigest()
        profile = self._validated_tokens.get(cache_key)
        if profile is not None:
            return profile

        url = f"{self.base_url}/userinfo"
        try:
            async with self._client() as client:
                response = await client.get(url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise IdentityProviderError(f"Token validation failed: {response.status_code}")

        try:
            profile = response.json()
        except ValueError as e:
            raise IdentityProviderError("Token validation returned an invalid profile") from e
        self._validated_tokens.set(cache_key, profile)
        return profile

    async def resend_verification_email(self, email: str) -> bool:
        """
        Send a new verification e-mail to the user registered with `email`.

        Args:
            email: User e-mail address

        Returns:
            True if the job was accepted, False if the user does not exist or
            the provider refused the request

        Raises:
            IdentityNotConfiguredError: If management credentials are missing
        """
        self.logger.info(f"Starting resend verification email process for {email}")

        try:
            access_token = await self._get_management_token()
            headers = {"Authorization": f"Bearer {access_token}"}

            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/api/v2/users-by-email",
                    params={"email": email},
                    headers=headers
                )
                if response.status_code != 200:
                    raise IdentityProviderError(f"User lookup failed: {response.status_code} - {response.text}")

                users = response.json()
                if not users:
                    self.logger.warning(f"User with email {email} not found")
                    return False

                user_id = users[0]["user_id"]
                self.logger.info(f"Found user {user_id}, sending verification email")

                response = await client.post(
                    f"{self.base_url}/api/v2/jobs/verification-email",
                    json={"user_id": user_id},
                    headers=headers
                )
                if response.status_code not in (200, 201):
                    raise IdentityProviderError(
                        f"Verification job rejected: {response.status_code} - {response.text}"
                    )

        except IdentityNotConfiguredError:
            raise
        except (IdentityProviderError, httpx.HTTPError, KeyError, ValueError) as e:
            self.logger.error(f"Failed to send verification email to {email}. Error: {e}")
            return False

        self.logger.info(f"Verification email sent successfully to {email}")
        return True

    async def _get_management_token(self) -> str:
        """
        Obtain a Management API token with the client-credentials grant.

        Returns:
            Access token string

        Raises:
            IdentityNotConfiguredError: If client credentials are missing
            IdentityProviderError: If the token request fails
        """
        if not self.settings.client_id or not self.settings.client_secret:
            raise IdentityNotConfiguredError("AUTH0_CLIENT_ID / AUTH0_CLIENT_SECRET environment variables are not set")

        token_url = f"{self.base_url}/oauth/token"
        payload = {
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "audience": f"{self.base_url}/api/v2/",
            "grant_type": "client_credentials"
        }

        self.logger.debug(f"Making token request to {token_url}")
        async with self._client() as client:
            response = await client.post(token_url, json=payload)

        if response.status_code != 200:
            raise IdentityProviderError(f"Failed to get access token: {response.status_code} - {response.text}")

        access_token = response.json().get("access_token")
        if not access_token:
            raise IdentityProviderError("Failed to get access token from response")

        return access_token
