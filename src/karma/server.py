"""HTTP endpoint for chat outgoing webhooks (Slack style).

The platform posts form fields ``token``, ``trigger_word`` and ``text``.
Replies are JSON ``{"text": "..."}``.
"""

from __future__ import annotations

import logging

from aiohttp import web

from karma.config import KarmaConfig
from karma.errors import BackendError, ParseError, RegistryError
from karma.registry import BackendRegistry, default_registry
from karma.service import KarmaService

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("karma_config", KarmaConfig)
SERVICE_KEY = web.AppKey("karma_service", KarmaService)


async def _read_form(request: web.Request) -> dict[str, str]:
    form: dict[str, str] = dict(request.query)
    form.update((k, v) for k, v in (await request.post()).items() if isinstance(v, str))
    return form


async def handle_command(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    service = request.app[SERVICE_KEY]
    form = await _read_form(request)

    token = form.get("token", "")
    if token != config.token:
        logger.warning("Invalid token %r", token)
        return web.Response(status=403)

    # Messages for other bots sharing the channel.
    if form.get("trigger_word", "") != config.trigger:
        return web.Response()

    text = form.get("text", "")
    try:
        result = await service.apply(text)
    except ParseError as e:
        logger.info("Cannot find the user: %s", e)
        return web.json_response({"text": str(e)})
    except RegistryError as e:
        logger.error("Cannot start the backend %r: %s", service.storage, e)
        return web.json_response({"text": "Karma storage is unavailable."}, status=503)
    except BackendError:
        logger.exception("Storage backend %r failed", service.storage)
        return web.json_response({"text": "Karma storage is unavailable."}, status=503)

    return web.json_response({"text": result.render()})


def create_app(config: KarmaConfig, registry: BackendRegistry | None = None) -> web.Application:
    """Build the aiohttp application for *config*.

    When *registry* is omitted the built-in backends are registered.
    """
    if registry is None:
        registry = default_registry()
    app = web.Application()
    app[CONFIG_KEY] = config
    app[SERVICE_KEY] = KarmaService(registry, config.storage, strict_amounts=config.strict_amounts)
    app.router.add_post("/", handle_command)
    app.router.add_get("/", handle_command)
    return app


def run(config: KarmaConfig, registry: BackendRegistry | None = None) -> None:
    """Serve until interrupted."""
    app = create_app(config, registry)
    logger.info("Serving karma on %s:%d (storage=%s)", config.host, config.port, config.storage)
    web.run_app(app, host=config.host, port=config.port, print=None)
