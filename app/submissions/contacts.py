"""
Brevo Contacts API Client
=========================
Registers quiz respondents as contacts on the marketing lists.

Environment Variables:
- BREVO_API_KEY: API key (server side only, never sent to callers)
- BREVO_API_URL: API base URL (default https://api.brevo.com/v3)
- BREVO_LIST_IDS: comma separated list ids contacts are added to (default 5)
- BREVO_FIRST_NAME_ATTRIBUTE / BREVO_LAST_NAME_ATTRIBUTE: contact attribute keys

Usage:
    client = BrevoContactClient()
    await client.register("jane@example.com", "Jane", "Doe")

List membership is fixed here and never taken from the submitter.
"""

import os
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.brevo.com/v3"
DEFAULT_LIST_IDS = "5"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ContactRegistrationError(Exception):
    """Non-2xx answer or transport failure from the contacts API."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


def parse_list_ids(raw: str) -> List[int]:
    """'5, 7' -> [5, 7]. Raises ValueError on anything else."""
    ids = [int(part) for part in raw.split(",") if part.strip()]
    if not ids:
        raise ValueError("at least one contact list id is required")
    return ids


class BrevoContactClient:
    """Async client for POST /contacts."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        list_ids: Optional[List[int]] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or os.getenv("BREVO_API_KEY", "")
        self.base_url = (base_url or os.getenv("BREVO_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.list_ids = list_ids or parse_list_ids(os.getenv("BREVO_LIST_IDS", DEFAULT_LIST_IDS))
        self.first_name_attribute = os.getenv("BREVO_FIRST_NAME_ATTRIBUTE", "PRENOM")
        self.last_name_attribute = os.getenv("BREVO_LAST_NAME_ATTRIBUTE", "NOM")
        self.timeout = timeout
        self._transport = transport

        if not self.api_key:
            logger.warning("BREVO_API_KEY not configured")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "api-key": self.api_key,
            "content-type": "application/json",
        }

    def build_payload(self, email: str, first_name: str, last_name: str) -> Dict[str, Any]:
        return {
            "email": email,
            "attributes": {
                self.first_name_attribute: first_name,
                self.last_name_attribute: last_name,
            },
            "listIds": list(self.list_ids),
            "updateEnabled": True,
        }

    async def register(self, email: str, first_name: str, last_name: str) -> int:
        """
        Create or update the contact. Single attempt, no retry.

        Returns:
            HTTP status code (any 2xx, 204 included)

        Raises:
            ContactRegistrationError on non-2xx or transport failure
        """
        payload = self.build_payload(email, first_name, last_name)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/contacts",
                    headers=self._get_headers(),
                    json=payload,
                )
        except httpx.TimeoutException as e:
            raise ContactRegistrationError(f"Contacts API timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ContactRegistrationError(f"Contacts API request failed: {e}") from e

        if 200 <= response.status_code < 300:
            return response.status_code

        try:
            error_body = response.json() if response.content else {}
        except json.JSONDecodeError:
            error_body = {"raw": response.text}

        logger.error(f"Brevo error response ({response.status_code}): {error_body}")
        raise ContactRegistrationError(
            f"Contacts API returned HTTP {response.status_code}",
            status_code=response.status_code,
            response_body=error_body,
        )
