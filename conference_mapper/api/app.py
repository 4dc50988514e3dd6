"""
FastAPI application exposing the conference mapper.

``create_app`` wires the resolver, the store, and the phone directory from
explicit settings; nothing is read from module-level state.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request, Response, status
from loguru import logger

from .. import __version__
from ..mapping import IdentifierGenerator, MappingResolver, MappingStore, SQLiteMappingStore
from ..settings import MapperSettings
from .phone_list import PhoneNumber, parse_phone_list
from .schemas import ConferenceRequest, ConferenceResponse

CORS_HEADER = ("access-control-allow-origin", "*")

router = APIRouter()


def _resolver(request: Request) -> MappingResolver:
    return request.app.state.resolver


@router.get(
    "/conferenceMapper",
    response_model=ConferenceResponse,
    response_model_exclude_none=True,
)
def get_conference(
    request: Request,
    response: Response,
    id: Optional[int] = Query(default=None, ge=0),
    conference: Optional[str] = Query(default=None),
) -> ConferenceResponse:
    """Create or fetch a mapping when ``conference`` is given, otherwise look up ``id``."""
    result = _resolver(request).resolve(id=id or 0, name=conference or "")
    response.headers[CORS_HEADER[0]] = CORS_HEADER[1]
    return ConferenceResponse.from_result(result)


@router.post(
    "/conferenceMapper",
    response_model=ConferenceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def post_conference(
    payload: ConferenceRequest,
    request: Request,
    response: Response,
) -> ConferenceResponse:
    """Same semantics as the GET route, with the parameters in a JSON body."""
    result = _resolver(request).resolve(id=payload.id, name=payload.conference)
    response.headers[CORS_HEADER[0]] = CORS_HEADER[1]
    return ConferenceResponse.from_result(result)


@router.get("/phoneNumberList", response_model=list[PhoneNumber])
def get_phone_numbers(request: Request) -> list[PhoneNumber]:
    return request.app.state.phone_numbers


def create_app(
    settings: MapperSettings,
    *,
    store: MappingStore | None = None,
    phone_numbers: list[PhoneNumber] | None = None,
) -> FastAPI:
    """
    Build the application.

    Parameters
    ----------
    settings:
        Validated runtime settings; ``id_length`` fixes the digit count.
    store:
        Mapping store to use. When omitted, a SQLite store is opened at
        ``settings.database`` when the lifespan starts and closed when it ends,
        so routes only work while the lifespan is running.
    phone_numbers:
        Dial-in directory. Defaults to ``settings.phone_list`` parsed as JSON.
    """
    numbers = phone_numbers if phone_numbers is not None else parse_phone_list(settings.phone_list)

    def build_resolver(mapping_store: MappingStore) -> MappingResolver:
        return MappingResolver(
            IdentifierGenerator(settings.id_length),
            mapping_store,
            collision_attempts=settings.collision_attempts,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_store = None
        if store is None:
            owned_store = SQLiteMappingStore(settings.database)
            app.state.resolver = build_resolver(owned_store)
        logger.info(
            "Conference mapper ready | ids={} digits | phone numbers={}",
            settings.id_length,
            len(numbers),
        )
        try:
            yield
        finally:
            if owned_store is not None:
                owned_store.close()
                logger.debug("Closed mapping store")

    app = FastAPI(
        title="Conference Mapper",
        description="Maps conference room JIDs to numeric dial-in ids.",
        version=__version__,
        lifespan=lifespan,
    )
    if store is not None:
        app.state.resolver = build_resolver(store)
    app.state.phone_numbers = numbers
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    app.include_router(router)
    return app
