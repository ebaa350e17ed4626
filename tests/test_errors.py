from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from thethought.core.errors import (
    AuthorizationError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
    register_exception_handlers,
)


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom/{kind}")
    async def boom(kind: str):
        errors = {
            "validation": ValidationError("bad input"),
            "auth": AuthorizationError("nope"),
            "missing": NotFoundError("gone"),
            "unexpected": UnexpectedError("db exploded"),
        }
        if kind in errors:
            raise errors[kind]
        raise RuntimeError("internal detail")

    @app.get("/typed/{n}")
    async def typed(n: int):
        return {"n": n}

    return app


async def _get(path: str):
    transport = ASGITransport(app=_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


async def test_domain_errors_map_to_status():
    for kind, status, msg in (
        ("validation", 400, "bad input"),
        ("auth", 403, "nope"),
        ("missing", 404, "gone"),
    ):
        r = await _get(f"/boom/{kind}")
        assert r.status_code == status
        assert r.json() == {"error": msg}


async def test_unexpected_errors_hide_details():
    r = await _get("/boom/unexpected")
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}

    r = await _get("/boom/other")
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}


async def test_request_validation_is_400():
    r = await _get("/typed/abc")
    assert r.status_code == 400
    assert r.json()["error"].startswith("path.n")


async def test_unknown_route_keeps_error_shape():
    r = await _get("/nowhere")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
