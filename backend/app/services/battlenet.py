"""Battle.net OAuth (authorization code flow)."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.core.errors import ProviderError
from app.services.reconciliation import ExternalIdentity

logger = logging.getLogger(__name__)

PROVIDER_NAME = "battlenet"


class BattleNetClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        region: str = "us",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.region = region.lower()
        self.timeout = timeout
        self._transport = transport

    @property
    def oauth_base_url(self) -> str:
        if self.region == "cn":
            return "https://oauth.battlenet.com.cn"
        return f"https://{self.region}.battle.net"

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": "openid",
                "state": state,
            }
        )
        return f"{self.oauth_base_url}/oauth/authorize?{query}"

    def fetch_identity(self, code: str) -> ExternalIdentity:
        """Exchange ``code`` for a token and read the account behind it."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            try:
                token_response = client.post(
                    f"{self.oauth_base_url}/oauth/token",
                    data={
                        "grant_type": "authorization_code",
                        "code": code,
                        "redirect_uri": self.redirect_uri,
                    },
                    auth=(self.client_id, self.client_secret),
                )
                if token_response.status_code != 200:
                    logger.error(f"Token exchange failed: {token_response.text}")
                    raise ProviderError("Failed to exchange authorization code")

                access_token = _json_body(token_response).get("access_token")
                if not access_token:
                    raise ProviderError("Invalid token response")

                user_info_response = client.get(
                    f"{self.oauth_base_url}/oauth/userinfo",
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if user_info_response.status_code != 200:
                    logger.error(f"Failed to get user info: {user_info_response.text}")
                    raise ProviderError("Failed to get user info")
                user_info = _json_body(user_info_response)
            except httpx.HTTPError as exc:
                logger.error(f"Battle.net request failed: {exc}")
                raise ProviderError("Authentication provider unreachable") from exc

        account_id = user_info.get("id") or user_info.get("sub")
        if account_id is None:
            raise ProviderError("Provider did not return an account id")
        battletag = user_info.get("battletag") or str(account_id)
        return ExternalIdentity(external_id=str(account_id), display_name=battletag)


def _json_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError as exc:
        logger.error(f"Non-JSON reply from {response.request.url}: {response.text[:200]}")
        raise ProviderError("Malformed response from authentication provider") from exc
    if not isinstance(body, dict):
        raise ProviderError("Malformed response from authentication provider")
    return body


def get_battlenet_client() -> BattleNetClient:
    return BattleNetClient(
        client_id=settings.BNET_CLIENT_ID,
        client_secret=settings.BNET_CLIENT_SECRET,
        redirect_uri=settings.BNET_REDIRECT_URI,
        region=settings.BNET_REGION,
    )
