"""Human verification against an external CAPTCHA service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from download_gate.core.errors import ClientInputError, ConfigurationError, UpstreamError
from download_gate.core.settings import DEFAULT_RECAPTCHA_VERIFY_URL, GateConfig

logger = logging.getLogger(__name__)


class HumanVerificationGateway:
    """Checks CAPTCHA proofs, honouring the operator bypass switch.

    Exactly one network round-trip is made per verification, and only when
    the bypass is off and a proof token was supplied.
    """

    def __init__(
        self,
        secret: str | None,
        *,
        bypass: bool = False,
        client: httpx.AsyncClient | None = None,
        verify_url: str = DEFAULT_RECAPTCHA_VERIFY_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._secret = secret
        self.bypass = bypass
        self._client = client
        self.verify_url = verify_url
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(
        cls,
        config: GateConfig,
        client: httpx.AsyncClient | None = None,
    ) -> HumanVerificationGateway:
        return cls(
            config.recaptcha_secret,
            bypass=config.bypass_enabled,
            client=client,
            verify_url=config.recaptcha_verify_url,
            timeout_seconds=config.captcha_timeout_seconds,
        )

    async def verify_human(self, proof_token: str | None) -> bool:
        """Return True when the caller passed the human check.

        Raises:
            ClientInputError: No proof token and the bypass is off.
            ConfigurationError: No CAPTCHA secret and the bypass is off.
            UpstreamError: The verification service could not be reached or
                returned something other than JSON.
        """
        if self.bypass:
            return True
        if not proof_token:
            raise ClientInputError(
                "Missing captcha token",
                extra={"bypassEnabled": False},
            )
        if not self._secret:
            raise ConfigurationError("reCAPTCHA secret not configured")

        result = await self._post_verification(proof_token)
        # Anything but a literal boolean true counts as a failed check.
        return result.get("success") is True

    async def _post_verification(self, proof_token: str) -> dict[str, Any]:
        form = {"secret": self._secret or "", "response": proof_token}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.verify_url,
                    data=form,
                    timeout=self.timeout_seconds,
                )
            else:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_seconds)
                ) as client:
                    response = await client.post(self.verify_url, data=form)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Captcha verification request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Captcha verification returned non-JSON body (status {response.status_code})"
            ) from exc

        if not isinstance(body, dict):
            logger.warning("Captcha verification returned a non-object body")
            return {}
        if body.get("success") is not True:
            logger.info("Captcha verification rejected: %s", body.get("error-codes", []))
        return body
