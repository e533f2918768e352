"""
HTTP API - FastAPI application exposing lobbies, inputs and state streams.

Routes:
- GET  /api/health
- GET  /api/track
- POST /api/lobbies
- POST /api/lobbies/{id}/join
- POST /api/lobbies/{id}/add-ai
- POST /api/lobbies/{id}/input
- GET  /api/lobbies/{id}/stream   (server-sent events)
- GET  /api/lobbies/{id}
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from racelobby import __version__
from racelobby.broadcast.channel import BroadcastChannel
from racelobby.broadcast.snapshot import serialize_lobby
from racelobby.errors import InvalidInput, RaceLobbyError
from racelobby.server.config import ServerConfig
from racelobby.session.inputs import InputRegistry
from racelobby.session.registry import LobbyRegistry, RegistryConfig
from racelobby.session.retention import RetentionPolicy
from racelobby.simulation.physics import PhysicsEngine
from racelobby.simulation.scheduler import SchedulerConfig, TickScheduler
from racelobby.track.circuits import build_monza_track
from racelobby.track.track import Track

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------

class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateLobbyRequest(_Body):
    host_name: Optional[str] = Field(default=None, alias="hostName")
    ai_count: Any = Field(default=None, alias="aiCount")


class JoinRequest(_Body):
    name: Optional[str] = None


class AddAiRequest(_Body):
    name: Optional[str] = None


class InputRequest(_Body):
    player_id: Any = Field(default=None, alias="playerId")
    throttle: Any = 0.0
    brake: Any = 0.0
    drs: Any = False
    ers: Any = False


async def read_body(request: Request, model: Type[_Body]) -> _Body:
    """Parse a JSON request body into a model.

    Args:
        request: Incoming request
        model: Body model to validate against

    Returns:
        Validated body; an empty body gives the model defaults

    Raises:
        InvalidInput: If the body is not JSON or does not fit the model
    """
    raw = await request.body()
    if not raw.strip():
        return model()
    try:
        return model.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        logger.debug(f"Rejected body on {request.url.path}: {exc}")
        raise InvalidInput() from exc


# ------------------------------------------------------------
# Application factory
# ------------------------------------------------------------

def create_app(
    config: ServerConfig | None = None,
    track: Track | None = None,
    run_scheduler: bool = True,
) -> FastAPI:
    """Build the API application and its simulation services.

    Args:
        config: Server configuration. Reads the environment if None.
        track: Circuit to race on. Uses Monza if None.
        run_scheduler: Start the tick loop with the application

    Returns:
        FastAPI application; services are on ``app.state``
    """
    config = config or ServerConfig.from_env()
    track = track or build_monza_track()

    registry = LobbyRegistry(
        track,
        RegistryConfig(
            max_ai=config.max_ai,
            grid_spacing_m=config.grid_spacing_m,
            seed=config.color_seed,
            retention=RetentionPolicy(idle_timeout_s=config.idle_timeout_s),
        ),
    )
    inputs = InputRegistry(registry)
    channel = BroadcastChannel(queue_size=config.subscriber_queue_size, clock=registry.now)
    engine = PhysicsEngine()
    scheduler = TickScheduler(
        registry,
        engine,
        channel,
        SchedulerConfig(
            tick_interval_s=config.tick_interval_s,
            reap_every_cycles=config.reap_every_cycles,
        ),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_scheduler:
            scheduler.start()
        logger.info(f"Race lobby server ready on track {track.name} ({track.length:.0f} m)")
        try:
            yield
        finally:
            await scheduler.stop()
            for lobby in registry.lobbies():
                lobby.close_subscriptions()

    app = FastAPI(title="RaceLobby", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.track = track
    app.state.registry = registry
    app.state.inputs = inputs
    app.state.channel = channel
    app.state.engine = engine
    app.state.scheduler = scheduler

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # --------------------------------------------------------
    # Error translation
    # --------------------------------------------------------

    @app.exception_handler(RaceLobbyError)
    async def _lobby_error(request: Request, exc: RaceLobbyError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    # --------------------------------------------------------
    # Routes
    # --------------------------------------------------------

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    @app.get("/api/track")
    async def get_track():
        return track.get_state()

    @app.post("/api/lobbies")
    async def create_lobby(request: Request):
        payload = await read_body(request, CreateLobbyRequest)
        lobby, host_id = registry.create_lobby(payload.host_name, payload.ai_count)
        return {"lobbyId": lobby.lobby_id, "playerId": host_id}

    # The lobby is resolved before the body is parsed, so an unknown
    # lobby is a 404 whatever the body holds.

    @app.post("/api/lobbies/{lobby_id}/join")
    async def join_lobby(lobby_id: str, request: Request):
        registry.get(lobby_id)
        payload = await read_body(request, JoinRequest)
        player_id = registry.join(lobby_id, payload.name)
        return {"lobbyId": lobby_id, "playerId": player_id}

    @app.post("/api/lobbies/{lobby_id}/add-ai")
    async def add_ai(lobby_id: str, request: Request):
        registry.get(lobby_id)
        payload = await read_body(request, AddAiRequest)
        ai_id = registry.add_ai(lobby_id, payload.name)
        return {"ok": True, "aiId": ai_id}

    @app.post("/api/lobbies/{lobby_id}/input")
    async def submit_input(lobby_id: str, request: Request):
        registry.get(lobby_id)
        payload = await read_body(request, InputRequest)
        inputs.set_input(
            lobby_id,
            payload.player_id,
            throttle=payload.throttle,
            brake=payload.brake,
            drs=payload.drs,
            ers=payload.ers,
        )
        return {"ok": True}

    @app.get("/api/lobbies/{lobby_id}/stream")
    async def stream_lobby(lobby_id: str):
        lobby = registry.get(lobby_id)
        subscription = channel.subscribe(lobby)

        async def event_stream():
            try:
                async for message in subscription.messages():
                    yield message
            finally:
                channel.unsubscribe(lobby, subscription.handle)

        return StreamingResponse(
            event_stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.get("/api/lobbies/{lobby_id}")
    async def get_lobby(lobby_id: str):
        lobby = registry.get(lobby_id)
        with lobby.lock:
            return serialize_lobby(lobby)

    return app
