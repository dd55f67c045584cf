"""
Translation Provider Client

Stateless wrapper around the provider's content translation API:
1. submit() - POST a translation job, returns the provider job id
2. get_status() - GET the job status
3. get_result() - GET the translated fields per locale

No retry or state lives here. Transport failures surface as
ProviderUnavailable, non-2xx answers as ProviderRejected; callers decide
what to do with them.
"""
from typing import Any, Dict, Iterable, Optional

import requests
from loguru import logger

from post_translator.config import (
    PTC_API_TOKEN,
    PROVIDER_BASE_URL,
    PROVIDER_CONNECT_TIMEOUT,
    PROVIDER_READ_TIMEOUT,
)
from post_translator.enums.provider_status import ProviderStatus
from post_translator.exceptions import ProviderRejected, ProviderUnavailable


# Key of the untranslated entry the provider includes in every result
SOURCE_KEY = "source"

CONTENT_TRANSLATION_PATH = "/api/v1/content_translation"


class ProviderClient:
    """
    Translation provider API client.

    Attributes:
        base_url: Provider root URL
        timeout: (connect, read) timeout in seconds applied to every call
        session: requests.Session carrying the bearer credential
    """

    def __init__(
        self,
        token: str = PTC_API_TOKEN,
        base_url: str = PROVIDER_BASE_URL,
        connect_timeout: float = PROVIDER_CONNECT_TIMEOUT,
        read_timeout: float = PROVIDER_READ_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            token: Provider bearer token
            base_url: Provider root URL
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            session: Pre-built session (tests inject a mock here)

        Raises:
            ValueError: token is empty
        """
        if not token:
            raise ValueError("PTC_API_TOKEN 未配置")

        self.base_url = base_url.rstrip("/")
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    # ========================================================================
    # Provider operations
    # ========================================================================

    def submit(
        self,
        content: Dict[str, str],
        name: str,
        target_locales: Iterable[str],
        callback_url: Optional[str] = None,
    ) -> str:
        """
        Submit content for translation.

        Args:
            content: {"title": ..., "description": ...} in the source locale
            name: Job name shown in the provider dashboard
            target_locales: Locale codes to translate into
            callback_url: Webhook the provider calls on completion; omitted
                from the payload in polling-only mode

        Returns:
            str: Provider job id

        Raises:
            ProviderUnavailable: Network error or timeout
            ProviderRejected: Non-2xx response or response without an id
        """
        payload: Dict[str, Any] = {
            "data": {
                "title": content.get("title", ""),
                "description": content.get("description", ""),
            },
            "name": name,
            "target_languages": list(target_locales),
        }
        if callback_url:
            payload["callback_url"] = callback_url

        body = self._request("POST", CONTENT_TRANSLATION_PATH, json=payload)

        request_id = body.get("id")
        if request_id is None or str(request_id) == "":
            raise ProviderRejected("Provider response has no job id", body=body)

        logger.info(f"Submitted translation job {request_id} for {payload['target_languages']}")
        return str(request_id)

    def get_status(self, request_id: str) -> ProviderStatus:
        """
        Get the status of a translation job.

        Args:
            request_id: Provider job id

        Returns:
            ProviderStatus: Normalized job status
        """
        body = self._request("GET", f"{CONTENT_TRANSLATION_PATH}/{request_id}/status")
        status = ProviderStatus.from_provider(body.get("status"))
        logger.debug(f"Translation job {request_id} status: {body.get('status')!r} -> {status.value}")
        return status

    def get_result(self, request_id: str) -> Dict[str, Dict[str, str]]:
        """
        Fetch the translated fields of a finished job.

        Args:
            request_id: Provider job id

        Returns:
            dict: {locale: {"title": ..., "description": ...}}, including the
            "source" entry, which callers must drop before applying
        """
        return self._request("GET", f"{CONTENT_TRANSLATION_PATH}/{request_id}")

    # ========================================================================
    # HTTP helpers
    # ========================================================================

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"Provider {method} {path} failed: {e}")
            raise ProviderUnavailable(f"Provider unreachable: {e}") from e

        if not response.ok:
            error_body = self._parse_error_body(response)
            logger.warning(f"Provider {method} {path} rejected: HTTP {response.status_code} {error_body}")
            raise ProviderRejected(
                f"Provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=error_body,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderRejected(
                "Provider returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(body, dict):
            raise ProviderRejected(
                "Provider returned an unexpected JSON body",
                status_code=response.status_code,
                body=body,
            )
        return body

    @staticmethod
    def _parse_error_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text


def strip_source(raw_result: Dict[str, Any]) -> Dict[str, Any]:
    """Drop the provider's untranslated "source" entry from a result."""
    return {locale: data for locale, data in raw_result.items() if locale != SOURCE_KEY}
