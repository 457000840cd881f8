"""
Brevo Contact Client Tests

Request shape, fixed list ids, 2xx handling and error mapping, using
httpx.MockTransport in place of the network.
"""

import asyncio
import json

import httpx
import pytest

from app.submissions.contacts import (
    BrevoContactClient,
    ContactRegistrationError,
    parse_list_ids,
)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def captured():
    return []


def make_client(captured, status_code=201, body=None, list_ids=None, raise_exc=None):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if raise_exc:
            raise raise_exc
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    return BrevoContactClient(
        api_key="test-key",
        base_url="https://brevo.test/v3",
        list_ids=list_ids,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BREVO_API_KEY", "BREVO_API_URL", "BREVO_LIST_IDS",
                 "BREVO_FIRST_NAME_ATTRIBUTE", "BREVO_LAST_NAME_ATTRIBUTE"):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# TESTS
# ============================================================================

class TestRegister:

    def test_request_shape(self, captured):
        client = make_client(captured, body={"id": 42})
        status = asyncio.run(client.register("a@b.com", "Jane", "Doe"))

        assert status == 201
        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == "https://brevo.test/v3/contacts"
        assert request.headers["api-key"] == "test-key"
        assert json.loads(request.content) == {
            "email": "a@b.com",
            "attributes": {"PRENOM": "Jane", "NOM": "Doe"},
            "listIds": [5],
            "updateEnabled": True,
        }

    def test_no_content_is_success(self, captured):
        client = make_client(captured, status_code=204)
        assert asyncio.run(client.register("a@b.com", "Jane", "Doe")) == 204

    def test_non_2xx_raises_with_body(self, captured):
        client = make_client(captured, status_code=400, body={"code": "invalid_parameter"})
        with pytest.raises(ContactRegistrationError) as exc:
            asyncio.run(client.register("a@b.com", "Jane", "Doe"))
        assert exc.value.status_code == 400
        assert exc.value.response_body == {"code": "invalid_parameter"}

    def test_server_error_without_body(self, captured):
        client = make_client(captured, status_code=500)
        with pytest.raises(ContactRegistrationError) as exc:
            asyncio.run(client.register("a@b.com", "Jane", "Doe"))
        assert exc.value.status_code == 500
        assert len(captured) == 1

    def test_transport_error(self, captured):
        client = make_client(captured, raise_exc=httpx.ConnectError("refused"))
        with pytest.raises(ContactRegistrationError) as exc:
            asyncio.run(client.register("a@b.com", "Jane", "Doe"))
        assert exc.value.status_code is None

    def test_timeout(self, captured):
        client = make_client(captured, raise_exc=httpx.ReadTimeout("slow"))
        with pytest.raises(ContactRegistrationError, match="timed out"):
            asyncio.run(client.register("a@b.com", "Jane", "Doe"))


class TestConfiguration:

    def test_list_ids_from_env(self, monkeypatch):
        monkeypatch.setenv("BREVO_LIST_IDS", "7, 9")
        client = BrevoContactClient(api_key="k")
        assert client.build_payload("a@b.com", "J", "D")["listIds"] == [7, 9]

    def test_default_list_id(self):
        assert BrevoContactClient(api_key="k").list_ids == [5]

    def test_attribute_keys_from_env(self, monkeypatch):
        monkeypatch.setenv("BREVO_FIRST_NAME_ATTRIBUTE", "FIRSTNAME")
        monkeypatch.setenv("BREVO_LAST_NAME_ATTRIBUTE", "LASTNAME")
        payload = BrevoContactClient(api_key="k").build_payload("a@b.com", "J", "D")
        assert payload["attributes"] == {"FIRSTNAME": "J", "LASTNAME": "D"}

    def test_not_configured_without_key(self):
        assert BrevoContactClient().is_configured is False

    @pytest.mark.parametrize("raw", ["", "five", " , "])
    def test_parse_list_ids_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_list_ids(raw)
