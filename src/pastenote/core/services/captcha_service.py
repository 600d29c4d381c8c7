"""reCAPTCHA verification for note submissions."""

import asyncio
from typing import Optional

import aiohttp

from ...config import Settings, get_settings
from ..logging import get_logger

logger = get_logger("services.captcha")


class CaptchaService:
    """Checks a client's reCAPTCHA token against Google's siteverify API."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """True when the robot check passed (or is switched off)."""
        if self.settings.skip_captcha:
            return True
        if not token:
            logger.warning("captcha validation failed: empty token")
            return False

        data = {"secret": self.settings.recaptcha_secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        timeout = aiohttp.ClientTimeout(total=self.settings.recaptcha_timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.settings.recaptcha_verify_url, data=data) as resp:
                    payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"captcha response verification failed: {e}")
            return False
        except ValueError as e:
            logger.error(f"captcha response parse failed: {e}")
            return False

        success = bool(payload.get("success"))
        if not success:
            logger.warning(
                "captcha validation failed",
                extra={"error_codes": payload.get("error-codes", [])},
            )
        return success
