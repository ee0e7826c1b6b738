from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any

import pytest

from pyhomeconnect._transport import HomeConnectTransport, SseParser, build_event, error_from_response
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.models.event import ApplianceEvent
from pyhomeconnect.models.values import EventType


def _feed(lines: list[str]) -> list[tuple[str, str]]:
    parser = SseParser()
    messages = []
    for line in lines:
        message = parser.feed(line)
        if message is not None:
            messages.append(message)
    return messages


class TestSseParser:
    def test_event_with_multiline_data(self) -> None:
        messages = _feed(["event: STATUS", 'data: {"items":', "data: []}", "id: HA", ""])
        assert messages == [("STATUS", '{"items":\n[]}')]

    def test_comments_and_blank_lines_are_ignored(self) -> None:
        messages = _feed([": keep-alive", "", "", "event:KEEP-ALIVE", "data:", ""])
        assert messages == [("KEEP-ALIVE", "")]

    def test_data_without_event_is_a_message(self) -> None:
        assert _feed(["data: x", ""]) == [("message", "x")]


class TestBuildEvent:
    def test_items_are_parsed(self) -> None:
        event = build_event(
            "NOTIFY",
            '{"items":[{"key":"BSH.Common.Option.RemainingProgramTime","value":3600,"unit":"seconds",'
            '"timestamp":1700000000,"uri":"/api/homeappliances/HA/programs/active/options/x"}],"haId":"HA"}',
        )
        assert event.event == EventType.NOTIFY
        assert event.items[0].value == 3600
        assert event.items[0].timestamp == 1700000000

    def test_empty_payload(self) -> None:
        event = build_event("CONNECTED", "")
        assert event.event == EventType.CONNECTED
        assert event.data is None

    def test_non_json_payload_is_ignored(self) -> None:
        event = build_event("PAIRED", "not json")
        assert event.items == []

    def test_item_without_key_is_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        event = build_event("STATUS", '{"items":[{"value":1}]}')
        assert event.event == EventType.STATUS
        assert event.items == []
        assert "Dropping malformed items for event STATUS" in caplog.text


class TestErrorFromResponse:
    def test_error_key_becomes_code(self) -> None:
        err = error_from_response(
            409,
            '{"error":{"key":"SDK.Error.NoProgramActive","description":"There is no program active"}}',
            "/api/homeappliances/HA/programs/active",
        )
        assert err.code == "SDK.Error.NoProgramActive"
        assert err.status_code == 409
        assert err.endpoint == "/api/homeappliances/HA/programs/active"
        assert "There is no program active" in str(err)

    @pytest.mark.parametrize("body", ["", "<html>Not Found</html>", '{"error": "flat"}'])
    def test_status_is_the_fallback_code(self, body: str) -> None:
        err = error_from_response(404, body, "/api/homeappliances/HA/commands")
        assert err.code == "404"
        assert err.status_code == 404


class _StreamResponse:
    status = 200

    def __init__(self, lines: list[bytes], error: Exception | None) -> None:
        self._lines = lines
        self._error = error

    @property
    def content(self) -> AsyncIterator[bytes]:
        return self._iter()

    async def _iter(self) -> AsyncIterator[bytes]:
        for line in self._lines:
            yield line
        if self._error is not None:
            raise self._error


class _StreamSession:
    """Answers every GET with the same canned event stream."""

    def __init__(self, lines: list[bytes], error: Exception | None = None) -> None:
        self._lines = lines
        self._error = error

    @contextlib.asynccontextmanager
    async def get(self, url: str, **kwargs: Any) -> AsyncIterator[_StreamResponse]:
        yield _StreamResponse(self._lines, self._error)


async def _first_session(transport: HomeConnectTransport) -> list[ApplianceEvent]:
    events: list[ApplianceEvent] = []
    async with contextlib.aclosing(transport.get_events("HA")) as stream:
        async for event in stream:
            events.append(event)
            if event.event == EventType.STOP:
                break
    return events


class TestEventStream:
    @pytest.mark.asyncio
    async def test_undecodable_bytes_do_not_end_the_stream(self, config: HomeConnectConfig) -> None:
        session = _StreamSession(
            [
                b"event: STATUS\n",
                b"data: \xff\xfe\n",
                b"\n",
                b"event: DISCONNECTED\n",
                b"data:\n",
                b"\n",
            ]
        )
        transport = HomeConnectTransport(config, session)  # type: ignore[arg-type]

        events = await _first_session(transport)

        assert [event.event for event in events] == [
            EventType.START,
            EventType.STATUS,
            EventType.DISCONNECTED,
            EventType.STOP,
        ]
        assert events[1].items == []
        assert events[-1].err is False

    @pytest.mark.asyncio
    async def test_over_long_line_is_a_failed_stream(self, config: HomeConnectConfig) -> None:
        session = _StreamSession([b"event: STATUS\n"], error=ValueError("Line is too long"))
        transport = HomeConnectTransport(config, session)  # type: ignore[arg-type]

        events = await _first_session(transport)

        assert [event.event for event in events] == [EventType.START, EventType.STOP]
        assert events[-1].err is True
