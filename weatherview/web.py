# ABOUTME: ASGI web entry point exposing the weather pipeline as a JSON endpoint.
# ABOUTME: GET /api/weather?city=<name> returns the merged current, hourly, and daily report.

import json
import logging
from urllib.parse import parse_qs

from weatherview.aggregator import resolve_weather
from weatherview.deps import WeatherDeps, create_deps
from weatherview.errors import ConfigurationError, WeatherUnavailableError

logger = logging.getLogger(__name__)

WEATHER_PATH = "/api/weather"
DEFAULT_CITY = "Philadelphia"

_JSON_HEADERS = [[b"content-type", b"application/json"]]


class WeatherApp:
    """Minimal ASGI app serving resolved weather reports.

    Dependencies are built on first use rather than at import, so a missing API key is
    reported on each request as a configuration error instead of preventing startup.
    """

    def __init__(self, deps_factory=create_deps, timeout: float | None = None):
        self._deps_factory = deps_factory
        self._deps: WeatherDeps | None = None
        self.timeout = timeout

    async def __call__(self, scope, receive, send):
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
        elif scope["type"] == "http":
            await self._handle_http(scope, send)

    async def _lifespan(self, receive, send):
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                if self._deps is not None:
                    await self._deps.http_client.aclose()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _handle_http(self, scope, send):
        if scope["path"] != WEATHER_PATH:
            await _send_json(send, 404, {"error": "Not found"})
            return
        if scope.get("method") != "GET":
            await _send_json(send, 405, {"error": "Method not allowed"})
            return

        params = parse_qs(scope.get("query_string", b"").decode(), keep_blank_values=True)
        city = params.get("city", [DEFAULT_CITY])[0].strip()
        if not city:
            await _send_json(send, 400, {"error": "Please enter a city name"})
            return

        try:
            report = await resolve_weather(self._get_deps(), city, timeout=self.timeout)
        except ConfigurationError as e:
            await _send_json(send, 500, {"error": str(e)})
            return
        except WeatherUnavailableError as e:
            await _send_json(send, 502, {"error": str(e)})
            return
        except Exception:
            logger.exception("Weather resolution failed for %r", city)
            await _send_json(send, 500, {"error": "Internal server error"})
            return

        await _send_body(send, 200, report.model_dump_json().encode())

    def _get_deps(self) -> WeatherDeps:
        if self._deps is None:
            self._deps = self._deps_factory()
        return self._deps


async def _send_json(send, status: int, payload: dict):
    await _send_body(send, status, json.dumps(payload).encode())


async def _send_body(send, status: int, body: bytes):
    await send({"type": "http.response.start", "status": status, "headers": _JSON_HEADERS})
    await send({"type": "http.response.body", "body": body})


app = WeatherApp()
