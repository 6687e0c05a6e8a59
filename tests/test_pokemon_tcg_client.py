from __future__ import annotations

import logging

import httpx
import pytest

from poke_cards.core.errors import (
    EmptyPayloadError,
    ErrorKind,
    ProviderRequestError,
    ThrottleExhaustedError,
)
from poke_cards.core.result import Err, Ok
from poke_cards.ingestion.providers.pokemon_tcg.client import PokemonTcgClient
from poke_cards.ingestion.providers.pokemon_tcg.query import CardQuery

CARD_FILTER = "(types:fire OR types:grass) hp:[90 TO *] rarity:rare"
BODY = '{"data": [], "page": 1, "pageSize": 5, "count": 0, "totalCount": 0}'


class RecordingTransport(httpx.MockTransport):
    def __init__(self, handler) -> None:
        super().__init__(handler)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def _scripted(statuses: list[int], body: str = BODY):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status = statuses[min(len(requests), len(statuses)) - 1]
        if status == 200:
            return httpx.Response(200, text=body)
        return httpx.Response(status)

    return RecordingTransport(handler), requests


def _client(transport: httpx.BaseTransport, sleeps: list[float]) -> PokemonTcgClient:
    return PokemonTcgClient(
        base_url="https://api.pokemontcg.io/v2",
        transport=transport,
        _sleep=sleeps.append,
        _monotonic=lambda: 0.0,
    )


def test_get_cards_json_sends_fixed_filter_and_headers() -> None:
    transport, requests = _scripted([200])
    sleeps: list[float] = []

    text = _client(transport, sleeps).get_cards_json(5)

    assert text == BODY
    assert sleeps == []
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v2/cards"
    assert request.url.params["q"] == CARD_FILTER
    assert request.url.params["page"] == "1"
    assert request.url.params["pageSize"] == "5"
    assert request.url.params["select"] == "id,name,types,hp,rarity"
    assert request.url.params["orderBy"] == "id"
    assert request.headers["User-Agent"] == "MyCoolPokemonCardsClient"
    assert request.headers["Accept"] == "application/json"
    assert "X-Api-Key" not in request.headers
    assert transport.closed


def test_api_key_header_is_sent_when_configured() -> None:
    transport, requests = _scripted([200])
    client = PokemonTcgClient(api_key="secret", transport=transport, _sleep=lambda s: None)

    client.get_cards_json(1)

    assert requests[0].headers["X-Api-Key"] == "secret"
    assert "secret" not in repr(client)


def test_throttled_then_success_sleeps_once() -> None:
    transport, requests = _scripted([429, 200])
    sleeps: list[float] = []

    text = _client(transport, sleeps).get_cards_json(5)

    assert text == BODY
    assert sleeps == [10.0]
    assert len(requests) == 2


def test_repeated_throttling_uses_linear_backoff_then_fails() -> None:
    transport, requests = _scripted([429])
    sleeps: list[float] = []

    with pytest.raises(ThrottleExhaustedError) as excinfo:
        _client(transport, sleeps).get_cards_json(5)

    assert sleeps == [10.0, 20.0, 30.0, 40.0, 50.0]
    assert len(requests) == 6
    assert excinfo.value.attempts == 6
    assert excinfo.value.kind is ErrorKind.THROTTLE_EXHAUSTED
    assert transport.closed


def test_non_throttle_failure_fails_fast(caplog: pytest.LogCaptureFixture) -> None:
    transport, requests = _scripted([500, 200])
    sleeps: list[float] = []

    with caplog.at_level(logging.ERROR), pytest.raises(ProviderRequestError) as excinfo:
        _client(transport, sleeps).get_cards_json(5)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Status code [500] Reason [Internal Server Error]" in errors[0].getMessage()

    assert sleeps == []
    assert len(requests) == 1
    assert excinfo.value.status_code == 500
    assert excinfo.value.reason == "Internal Server Error"
    assert excinfo.value.kind is ErrorKind.REQUEST_FAILED
    assert transport.closed


def test_failure_after_throttling_is_not_retried() -> None:
    transport, requests = _scripted([429, 503, 200])
    sleeps: list[float] = []

    with pytest.raises(ProviderRequestError) as excinfo:
        _client(transport, sleeps).get_cards_json(5)

    assert sleeps == [10.0]
    assert len(requests) == 2
    assert excinfo.value.status_code == 503


def test_empty_body_is_an_error() -> None:
    transport, _ = _scripted([200], body="")

    with pytest.raises(EmptyPayloadError):
        _client(transport, []).get_cards_json(5)

    assert transport.closed


def test_transport_failure_fails_fast() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    transport = RecordingTransport(handler)
    sleeps: list[float] = []

    with pytest.raises(ProviderRequestError) as excinfo:
        _client(transport, sleeps).get_cards_json(5)

    assert excinfo.value.status_code is None
    assert len(calls) == 1
    assert sleeps == []
    assert transport.closed


def test_fetch_cards_json_returns_result() -> None:
    ok_transport, _ = _scripted([200])
    ok = _client(ok_transport, []).fetch_cards_json(3)
    assert isinstance(ok, Ok)
    assert ok.unwrap() == BODY

    err_transport, _ = _scripted([404])
    err = _client(err_transport, []).fetch_cards_json(3)
    assert isinstance(err, Err)
    assert err.error.kind is ErrorKind.REQUEST_FAILED
    with pytest.raises(ProviderRequestError):
        err.unwrap()


def test_card_query_requires_positive_limit() -> None:
    with pytest.raises(ValueError):
        CardQuery(limit=0)
    with pytest.raises(ValueError):
        _client(_scripted([200])[0], []).get_cards_json(-1)


def test_card_query_defaults_match_fixed_filter() -> None:
    query = CardQuery(limit=3, card_types=("fire", "grass", "fire"))

    assert query.card_types == ("fire", "grass")
    assert query.search_expression() == CARD_FILTER
