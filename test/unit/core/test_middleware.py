from collections import deque

import pytest
from fastapi.responses import JSONResponse
from starlette.requests import Request

from trackgen.core.middleware import RateLimitMiddleware

URL = "/api/v1/next-tracking-number"


def _request(ip: str, path: str = URL) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": path,
            "root_path": "",
            "query_string": b"",
            "headers": [],
            "client": (ip, 50000),
        }
    )


async def _ok(request):
    return JSONResponse({"ok": True})


@pytest.mark.asyncio
async def test_requests_over_limit_get_429():
    mw = RateLimitMiddleware(app=None, calls=2, period=60)

    codes = [(await mw.dispatch(_request("10.0.0.1"), _ok)).status_code for _ in range(3)]

    assert codes == [200, 200, 429]
    # Another client has its own window
    assert (await mw.dispatch(_request("10.0.0.2"), _ok)).status_code == 200


@pytest.mark.asyncio
async def test_exempt_paths_are_not_counted():
    mw = RateLimitMiddleware(app=None, calls=1, period=60)

    for _ in range(3):
        assert (await mw.dispatch(_request("10.0.0.1", "/api/v1/health"), _ok)).status_code == 200
    assert mw.clients == {}


@pytest.mark.asyncio
async def test_idle_clients_are_forgotten():
    mw = RateLimitMiddleware(app=None, calls=5, period=60)
    for i in range(100):
        await mw.dispatch(_request(f"10.0.0.{i}"), _ok)
    assert len(mw.clients) == 100

    # Age every window past the period
    for ip, window in mw.clients.items():
        mw.clients[ip] = deque(t - 61 for t in window)
    mw._last_sweep -= 61

    await mw.dispatch(_request("10.0.1.1"), _ok)

    assert list(mw.clients) == ["10.0.1.1"]


def test_sweep_keeps_active_windows():
    mw = RateLimitMiddleware(app=None, calls=5, period=60)
    mw.clients["10.0.0.1"].append(10.0)
    mw.clients["10.0.0.2"].append(90.0)
    mw.clients["10.0.0.3"]

    mw.sweep(100.0)

    assert list(mw.clients) == ["10.0.0.2"]
    assert mw._last_sweep == 100.0
