"""Sanic app exposing the OAuth handshake with Google and the migration endpoint."""
from __future__ import annotations

import functools
import logging
import sys
import typing as t
import urllib.parse
import uuid

import httpx
import pydantic
import sanic
from sanic import SanicException, response
from sanic.worker.loader import AppLoader

from spotify_to_youtube import youtube
from spotify_to_youtube.exceptions import AuthorizationError, MigrationError, ValidationError
from spotify_to_youtube.main import migrate
from spotify_to_youtube.registry import InMemoryRunRegistry, RunRegistry
from spotify_to_youtube.typings.core import MigrationFailure, MigrationRequest

if t.TYPE_CHECKING:
    from spotify_to_youtube.config import AppConfig

APP_NAME = "Spotify-To-YouTube"
STATE = str(uuid.uuid4())

logger = logging.getLogger(__name__)

LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "loggers": {
        "sanic.root": {"level": "ERROR", "handlers": ["console"]},
        "sanic.error": {
            "level": "ERROR",
            "handlers": ["error_console"],
            "propagate": True,
            "qualname": "sanic.error",
        },
        "sanic.access": {
            "level": "ERROR",
            "handlers": ["access_console"],
            "propagate": True,
            "qualname": "sanic.access",
        },
        "sanic.server": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": True,
            "qualname": "sanic.server",
        },
        "spotify_to_youtube": {
            "level": "INFO",
            "handlers": ["rich"],
            "propagate": False,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "generic",
            "stream": sys.stdout,
        },
        "error_console": {
            "class": "logging.StreamHandler",
            "formatter": "generic",
            "stream": sys.stderr,
        },
        "access_console": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": sys.stdout,
        },
        "rich": {
            "class": "rich.logging.RichHandler",
            "formatter": "rich",
            "markup": True,
            "rich_tracebacks": True,
        },
    },
    "formatters": {
        "generic": {
            "format": "%(asctime)s [%(process)s] [%(levelname)s] %(message)s",
            "datefmt": "[%Y-%m-%d %H:%M:%S %z]",
            "class": "logging.Formatter",
        },
        "access": {
            "format": "%(asctime)s - (%(name)s)[%(levelname)s][%(host)s]: %(request)s %(message)s %(status)s %(byte)s",
            "datefmt": "[%Y-%m-%d %H:%M:%S %z]",
            "class": "logging.Formatter",
        },
        "rich": {
            "format": "%(message)s",
            "datefmt": "[%X]",
            "class": "logging.Formatter",
        },
    },
}


def failure_response(failure: MigrationFailure) -> sanic.HTTPResponse:
    return response.json({"error": failure.category, "message": failure.message}, status=failure.status_code)


def error_response(error: MigrationError) -> sanic.HTTPResponse:
    return response.json({"error": error.category, "message": error.message}, status=error.status_code)


def attach_endpoints(app: sanic.Sanic, config: AppConfig) -> None:
    @app.route("/auth/youtube")  # type: ignore
    async def _authorize(_request: sanic.Request) -> sanic.HTTPResponse:
        if config.google_client_id:
            return response.redirect(youtube.authorization_url(config, state=STATE))

        error_body = {
            "error": "configuration",
            "message": "Server needs a Google client id in order to handle OAuth properly",
        }
        return response.json(body=error_body, status=500)

    @app.route("/oauth2callback")  # REGISTER THIS ROUTE AS REDIRECT URI IN THE GOOGLE CLOUD CONSOLE
    async def _youtube_callback(request: sanic.Request) -> sanic.HTTPResponse:
        error = request.args.get("error")
        code = request.args.get("code")

        if error:
            return response.json({"error": "authorization", "message": error}, status=400)
        if not code:
            return response.json({"error": "validation", "message": "Missing authorization code"}, status=400)

        callback_state = request.args.get("state")
        if callback_state != STATE:
            raise SanicException("State mismatch", status_code=401)

        try:
            tokens = await youtube.exchange_auth_code(app.ctx.client, config, code)
        except AuthorizationError as exc:
            return error_response(exc)

        if config.success_redirect_url:
            query = {"token": tokens.access_token}
            if tokens.refresh_token:
                query["refresh_token"] = tokens.refresh_token
            return response.redirect(f"{config.success_redirect_url}?{urllib.parse.urlencode(query)}")

        return response.json({"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token})

    @app.post("/migrate")
    async def _migrate(request: sanic.Request) -> sanic.HTTPResponse:
        body = request.json or {}
        if not isinstance(body, dict):
            return error_response(ValidationError("Expected a JSON object"))

        try:
            migration_request = MigrationRequest(**body)
        except pydantic.ValidationError as exc:
            return error_response(ValidationError(f"Invalid request body: {exc.errors()[0]['msg']}"))

        result = await migrate(
            migration_request,
            config=config,
            registry=app.ctx.registry,
            client=app.ctx.client,
        )

        if result.failure is not None:
            return failure_response(result.failure)

        return response.json(
            {
                "youtubePlaylistUrl": result.playlist_url,
                "playlistId": result.playlist_id,
                "created": result.is_new_playlist,
                "inserted": result.tracks_inserted,
                "skipped": result.tracks_skipped,
                "total": result.tracks_total,
            }
        )

    @app.exception(Exception)
    async def _error(_request: sanic.Request, exc: Exception) -> sanic.HTTPResponse:
        if isinstance(exc, SanicException):
            return response.json({"error": "http", "message": str(exc)}, status=exc.status_code)
        logger.error("Unhandled error while serving request", exc_info=exc)
        return response.json({"error": "internal", "message": "Couldn't migrate playlist"}, status=500)


def create_app(
    app_name: str,
    config: AppConfig,
    *,
    client: httpx.AsyncClient | None = None,
    registry: RunRegistry | None = None,
) -> sanic.Sanic:
    app = sanic.Sanic(app_name, log_config=LOG_CONFIG)
    app.ctx.config = config
    app.ctx.client = client
    app.ctx.registry = registry if registry is not None else InMemoryRunRegistry()

    @app.before_server_start
    async def _open_client(app: sanic.Sanic) -> None:
        if app.ctx.client is None:
            app.ctx.client = httpx.AsyncClient(timeout=config.http_timeout)

    @app.after_server_stop
    async def _close_client(app: sanic.Sanic) -> None:
        if app.ctx.client is not None:
            await app.ctx.client.aclose()

    attach_endpoints(app, config)
    return app


def run(config: AppConfig) -> None:
    loader = AppLoader(factory=functools.partial(create_app, APP_NAME, config))
    app = loader.load()
    app.prepare(host=config.host, port=config.port, motd=False, access_log=False)
    sanic.Sanic.serve(primary=app, app_loader=loader)
