"""FastAPI application exposing analysis snapshots and synthesized props."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional, TypeVar

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from ..logging import get_logger
from ..session import AnalysisSession
from ..stores import snapshot_to_dict

logger = get_logger("service")

T = TypeVar("T")


class HealthResponse(BaseModel):
    status: str


class DataResponse(BaseModel):
    cache: Optional[Dict[str, Any]] = None
    translations: Dict[str, Dict[str, str]] = {}


class ComponentResponse(BaseModel):
    component: Dict[str, Any]


class RefreshStats(BaseModel):
    components: int
    translationUsages: int


class RefreshResponse(BaseModel):
    success: bool
    cache: Dict[str, Any]
    stats: RefreshStats


def create_app(session_factory: Callable[[], AnalysisSession]) -> FastAPI:
    """Create the app around one long-lived session.

    Calls that touch the session are serialized through a lock, so a refresh
    requested mid-scan queues behind the running one instead of interleaving.
    """
    app = FastAPI(title="lexiview", version="1.0.0")
    session = session_factory()
    lock = asyncio.Lock()
    translations: Dict[str, Dict[str, str]] = {}
    loaded = {"translations": False}

    async def run_locked(func: Callable[[], T]) -> T:
        async with lock:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, func)

    async def get_session() -> AnalysisSession:
        if session.snapshot is None:
            await run_locked(session.load_or_analyze)
        if not loaded["translations"]:
            translations.update(await run_locked(session.load_translations))
            loaded["translations"] = True
        return session

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/data", response_model=DataResponse)
    async def data(current: AnalysisSession = Depends(get_session)) -> DataResponse:
        snapshot = current.snapshot
        return DataResponse(
            cache=snapshot_to_dict(snapshot) if snapshot is not None else None,
            translations=translations,
        )

    @app.get("/api/component", response_model=ComponentResponse)
    async def component(
        path: str = Query(..., min_length=1),
        current: AnalysisSession = Depends(get_session),
    ) -> ComponentResponse:
        info = current.component(path)
        if info is None:
            raise HTTPException(status_code=404, detail="Component not found")
        payload: Dict[str, Any] = {"path": info.path, "name": info.name}
        if info.props_interface:
            payload["propsInterface"] = info.props_interface
        payload["translationKeys"] = list(info.translation_keys)
        return ComponentResponse(component=payload)

    @app.get("/api/component-props")
    async def component_props(
        path: str = Query(..., min_length=1),
        current: AnalysisSession = Depends(get_session),
    ) -> Dict[str, Any]:
        payload = await run_locked(lambda: current.component_props(path))
        if payload is None:
            raise HTTPException(status_code=404, detail="Component not found")
        return payload

    @app.post("/api/refresh-cache", response_model=RefreshResponse)
    async def refresh_cache(current: AnalysisSession = Depends(get_session)) -> RefreshResponse:
        logger.info("Manual cache refresh requested")

        def _rebuild() -> Any:
            snapshot = current.analyze()
            current.save()
            return snapshot

        snapshot = await run_locked(_rebuild)
        translations.clear()
        translations.update(await run_locked(current.load_translations))
        return RefreshResponse(
            success=True,
            cache=snapshot_to_dict(snapshot),
            stats=RefreshStats(
                components=len(snapshot.components),
                translationUsages=len(snapshot.usages),
            ),
        )

    return app


def run_service(
    session: AnalysisSession, host: str = "127.0.0.1", port: int = 3456
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: session)
    logger.info("Serving %s at http://%s:%d", session.root, host, port)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
