"""HTTP transport for the Home Connect REST API and appliance event stream."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol

import aiohttp
from pydantic import ValidationError

from pyhomeconnect._constants import API_MEDIA_TYPE, EVENT_STREAM_MEDIA_TYPE, KEEP_ALIVE_EVENT
from pyhomeconnect._redact import body_for_log, redact_headers
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.exceptions import HomeConnectTransportError
from pyhomeconnect.models.appliance import ApplianceInfo, Command, Program, ProgramList
from pyhomeconnect.models.event import ApplianceEvent
from pyhomeconnect.models.item import Item
from pyhomeconnect.models.values import EventType

_logger = logging.getLogger(__name__)

# The server sends KEEP-ALIVE every 55 seconds.
_EVENT_STREAM_READ_TIMEOUT = 2 * 60.0


class ApplianceApi(Protocol):
    """Structural interface of the cloud API consumed by the device engine.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (:class:`HomeConnectTransport`)
    concrete. Every coroutine may raise :class:`HomeConnectTransportError`.
    """

    def get_events(self, ha_id: str) -> AsyncIterator[ApplianceEvent]: ...

    async def get_appliance(self, ha_id: str) -> ApplianceInfo | None: ...

    async def get_status(self, ha_id: str) -> list[Item] | None: ...

    async def get_settings(self, ha_id: str) -> list[Item] | None: ...

    async def get_setting(self, ha_id: str, key: str) -> Item | None: ...

    async def set_setting(self, ha_id: str, key: str, value: Any) -> None: ...

    async def get_programs(self, ha_id: str) -> ProgramList | None: ...

    async def get_available_programs(self, ha_id: str) -> ProgramList | None: ...

    async def get_available_program(self, ha_id: str, program_key: str) -> Program | None: ...

    async def get_selected_program(self, ha_id: str) -> Program | None: ...

    async def set_selected_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None: ...

    async def get_active_program(self, ha_id: str) -> Program | None: ...

    async def set_active_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None: ...

    async def stop_active_program(self, ha_id: str) -> None: ...

    async def get_commands(self, ha_id: str) -> list[Command] | None: ...

    async def set_command(self, ha_id: str, command_key: str) -> None: ...

    async def set_active_program_option(self, ha_id: str, option_key: str, value: Any) -> None: ...

    def has_scope(self, scope: str) -> bool: ...


def error_from_response(status: int, text: str, endpoint: str) -> HomeConnectTransportError:
    """Classify an HTTP error response by its ``error.key``."""
    code = str(status)
    description = text[:200]
    try:
        payload = json.loads(text) if text.strip() else None
    except json.JSONDecodeError:
        payload = None
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        key = error.get("key")
        if isinstance(key, str) and key:
            code = key
        detail = error.get("description") or error.get("value")
        if isinstance(detail, str) and detail:
            description = detail
    return HomeConnectTransportError(
        f"HTTP {status} from {endpoint}: {code} {description}".rstrip(),
        code=code,
        status_code=status,
        endpoint=endpoint,
    )


class SseParser:
    """Incremental ``text/event-stream`` parser.

    Feed one decoded line at a time (without its line terminator); a
    completed ``(event, data)`` pair is returned at each blank line.
    """

    def __init__(self) -> None:
        self._event = ""
        self._data: list[str] = []

    def feed(self, line: str) -> tuple[str, str] | None:
        if not line:
            if not self._event and not self._data:
                return None
            message = (self._event or "message", "\n".join(self._data))
            self._event = ""
            self._data = []
            return message
        if line.startswith(":"):
            return None
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        return None


def build_event(kind: str, data: str) -> ApplianceEvent:
    """Convert a raw SSE message into an :class:`ApplianceEvent`."""
    payload: Any = None
    if data.strip():
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            _logger.debug("Ignoring non-JSON payload for event %s: %r", kind, data[:200])
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        try:
            return ApplianceEvent.model_validate({"event": kind, "data": {"items": payload["items"]}})
        except ValidationError as exc:
            _logger.warning("Dropping malformed items for event %s: %s", kind, exc)
    return ApplianceEvent(event=kind)


def _item_body(key: str, value: Any) -> dict[str, Any]:
    return {"data": {"key": key, "value": value}}


def _program_body(program_key: str, options: Sequence[Item]) -> dict[str, Any]:
    body: dict[str, Any] = {"key": program_key}
    if options:
        body["options"] = [{"key": option.key, "value": option.value} for option in options]
    return {"data": body}


class HomeConnectTransport:
    """aiohttp implementation of :class:`ApplianceApi`.

    The access token is taken from the configuration as-is; obtaining
    and refreshing it is outside this library.
    """

    def __init__(self, config: HomeConnectConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def has_scope(self, scope: str) -> bool:
        return scope in self._config.scopes

    def _headers(self, accept: str) -> dict[str, str]:
        return {
            "accept": accept,
            "accept-language": self._config.language,
            "authorization": f"Bearer {self._config.access_token}",
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Perform a REST call and return the ``data`` member of the reply."""
        url = f"{self._config.base_url}{endpoint}"
        headers = self._headers(API_MEDIA_TYPE)
        payload: str | None = None
        if body is not None:
            headers["content-type"] = API_MEDIA_TYPE
            payload = json.dumps(body, separators=(",", ":"))

        _logger.debug("%s %s headers=%s body=%s", method, url, redact_headers(headers), body_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                data=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
            ) as resp:
                status = resp.status
                text = await resp.text()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise HomeConnectTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if status >= 400:
            raise error_from_response(status, text, endpoint)

        if not text.strip():
            return None

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HomeConnectTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        data = decoded.get("data") if isinstance(decoded, dict) else None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _appliance_path(ha_id: str, suffix: str = "") -> str:
        return f"/api/homeappliances/{ha_id}{suffix}"

    # ------------------------------------------------------------------
    # Appliance state
    # ------------------------------------------------------------------

    async def get_appliance(self, ha_id: str) -> ApplianceInfo | None:
        data = await self._request("GET", self._appliance_path(ha_id))
        return ApplianceInfo.model_validate(data) if data is not None else None

    async def _get_items(self, ha_id: str, suffix: str, member: str) -> list[Item] | None:
        data = await self._request("GET", self._appliance_path(ha_id, suffix))
        if data is None:
            return None
        return [Item.model_validate(item) for item in data.get(member) or []]

    async def get_status(self, ha_id: str) -> list[Item] | None:
        return await self._get_items(ha_id, "/status", "status")

    async def get_settings(self, ha_id: str) -> list[Item] | None:
        return await self._get_items(ha_id, "/settings", "settings")

    async def get_setting(self, ha_id: str, key: str) -> Item | None:
        data = await self._request("GET", self._appliance_path(ha_id, f"/settings/{key}"))
        return Item.model_validate(data) if data is not None else None

    async def set_setting(self, ha_id: str, key: str, value: Any) -> None:
        await self._request("PUT", self._appliance_path(ha_id, f"/settings/{key}"), _item_body(key, value))

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    async def get_programs(self, ha_id: str) -> ProgramList | None:
        data = await self._request("GET", self._appliance_path(ha_id, "/programs"))
        return ProgramList.model_validate(data) if data is not None else None

    async def get_available_programs(self, ha_id: str) -> ProgramList | None:
        data = await self._request("GET", self._appliance_path(ha_id, "/programs/available"))
        return ProgramList.model_validate(data) if data is not None else None

    async def get_available_program(self, ha_id: str, program_key: str) -> Program | None:
        data = await self._request("GET", self._appliance_path(ha_id, f"/programs/available/{program_key}"))
        return Program.model_validate(data) if data is not None else None

    async def get_selected_program(self, ha_id: str) -> Program | None:
        data = await self._request("GET", self._appliance_path(ha_id, "/programs/selected"))
        return Program.model_validate(data) if data is not None else None

    async def set_selected_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None:
        await self._request(
            "PUT",
            self._appliance_path(ha_id, "/programs/selected"),
            _program_body(program_key, options),
        )

    async def get_active_program(self, ha_id: str) -> Program | None:
        data = await self._request("GET", self._appliance_path(ha_id, "/programs/active"))
        return Program.model_validate(data) if data is not None else None

    async def set_active_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None:
        await self._request(
            "PUT",
            self._appliance_path(ha_id, "/programs/active"),
            _program_body(program_key, options),
        )

    async def stop_active_program(self, ha_id: str) -> None:
        await self._request("DELETE", self._appliance_path(ha_id, "/programs/active"))

    async def set_active_program_option(self, ha_id: str, option_key: str, value: Any) -> None:
        await self._request(
            "PUT",
            self._appliance_path(ha_id, f"/programs/active/options/{option_key}"),
            _item_body(option_key, value),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def get_commands(self, ha_id: str) -> list[Command] | None:
        data = await self._request("GET", self._appliance_path(ha_id, "/commands"))
        if data is None:
            return None
        return [Command.model_validate(command) for command in data.get("commands") or []]

    async def set_command(self, ha_id: str, command_key: str) -> None:
        await self._request(
            "PUT",
            self._appliance_path(ha_id, f"/commands/{command_key}"),
            _item_body(command_key, True),
        )

    # ------------------------------------------------------------------
    # Event stream
    # ------------------------------------------------------------------

    async def get_events(self, ha_id: str) -> AsyncIterator[ApplianceEvent]:
        """Yield appliance events forever, reopening the stream when it closes.

        Every successful (re)connection is announced with ``START`` and
        every interruption with ``STOP`` (``err=True`` when it failed).
        """
        endpoint = self._appliance_path(ha_id, "/events")
        while True:
            err = False
            try:
                async for event in self._stream(endpoint):
                    yield event
            # ValueError: aiohttp rejects over-long lines.
            except (aiohttp.ClientError, TimeoutError, ValueError, HomeConnectTransportError) as exc:
                _logger.debug("Event stream %s interrupted: %s", endpoint, exc)
                err = True
            yield ApplianceEvent(event=EventType.STOP, err=err)
            await asyncio.sleep(self._config.event_stream_retry_delay)

    async def _stream(self, endpoint: str) -> AsyncIterator[ApplianceEvent]:
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("GET %s (event stream)", url)
        timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=self._config.request_timeout,
            sock_read=_EVENT_STREAM_READ_TIMEOUT,
        )
        async with self._http.get(url, headers=self._headers(EVENT_STREAM_MEDIA_TYPE), timeout=timeout) as resp:
            if resp.status >= 400:
                raise error_from_response(resp.status, await resp.text(), endpoint)
            yield ApplianceEvent(event=EventType.START)

            parser = SseParser()
            async for raw_line in resp.content:
                message = parser.feed(raw_line.decode("utf-8", errors="replace").rstrip("\r\n"))
                if message is None:
                    continue
                kind, data = message
                if kind == KEEP_ALIVE_EVENT:
                    continue
                yield build_event(kind, data)
