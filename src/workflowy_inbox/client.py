import json
import logging
from typing import Optional

import httpx

from workflowy_inbox.errors import AuthError, SubmissionError, GENERIC_SUBMIT_MESSAGE
from workflowy_inbox.utils import BulletPayload, Config, Credentials, SubmitResult

logger = logging.getLogger(__name__)

ME_PATH = "/api/me/"
CREATE_BULLET_PATH = "/api/bullets/create/"


# ========== Workflowy HTTP client ==========
class HttpClient:
    """
    Talks to the Workflowy REST api. One outbound request per call, no retries.
    Failures are raised as AuthError / SubmissionError, never returned.
    """

    def __init__(self, cfg: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg = cfg
        self._transport = transport

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
                base_url=self.cfg.base_url,
                timeout=httpx.Timeout(self.cfg.timeout),
                verify=self.cfg.verify_tls,
                transport=self._transport,
        )

    @staticmethod
    def _headers(api_key: str) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    async def _request(self, method: str, path: str, api_key: str, body: Optional[dict] = None) -> SubmitResult:
        try:
            async with self._build_client() as client:
                resp = await client.request(method, path, headers=self._headers(api_key), json=body)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            # 网络层异常, or a key / url that cannot go on the wire
            logger.debug("%s %s failed: %r", method, path, e)
            return SubmitResult(ok=False, status_code=None, text="", error=str(e) or repr(e))

        logger.debug("%s %s -> %s %s", method, path, resp.status_code, resp.text)
        return SubmitResult(ok=resp.is_success, status_code=resp.status_code, text=resp.text)

    async def validate_credentials(self, credentials: Credentials) -> None:
        result = await self._request("GET", ME_PATH, credentials.api_key)
        if not result.ok:
            logger.info("Api key rejected (status=%s)", result.status_code)
            raise AuthError()

    async def create_bullet(self, payload: BulletPayload, credentials: Credentials) -> None:
        result = await self._request("POST", CREATE_BULLET_PATH, credentials.api_key, payload.to_json())
        if not result.ok:
            logger.info("Bullet %s rejected (status=%s)", payload.id, result.status_code)
            raise SubmissionError(error_message_from(result))


def error_message_from(result: SubmitResult) -> str:
    """Pick the server's `error` field out of a failed response, else the generic message."""
    if result.status_code is None:
        return GENERIC_SUBMIT_MESSAGE
    try:
        data = json.loads(result.text)
    except ValueError:
        return GENERIC_SUBMIT_MESSAGE
    if isinstance(data, dict):
        message = data.get("error")
        if isinstance(message, str) and message:
            return message
    return GENERIC_SUBMIT_MESSAGE
