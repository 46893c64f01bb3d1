"""Logfire setup for the access core.

Services log through ``logfire`` directly:

    with logfire.span("access_gate.has_access", partition_id=str(partition_id)):
        ...
    logfire.info("Access denied", principal_id=str(principal.id))

Access denials are info events; authority store outages are warnings and
failed provisioning steps are errors. Session and invitation tokens are
scrubbed from every span and event.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from telloom.config import Settings

# Attribute names whose values must never leave the process
SCRUBBED_ATTRIBUTES = ["auth_token", "authorization", "invitation_token", "jwt"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the current environment.

    Telemetry is sent to Logfire cloud when OBSERVABILITY__SEND_TO_LOGFIRE
    says so, or else when OBSERVABILITY__LOGFIRE_TOKEN is set. Without
    either, output stays on the console.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    if observability.send_to_logfire is not None:
        send_to_logfire = observability.send_to_logfire
    else:
        send_to_logfire = bool(observability.logfire_token)

    logfire.configure(
        service_name="telloom-access",
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUBBED_ATTRIBUTES),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every API request except health checks.

    The active role header is recorded so routing decisions can be traced
    back to what the caller asked for.

    Args:
        app: FastAPI application instance
    """

    def _request_attributes(request, attributes):
        result = {**attributes}
        if hasattr(request, "url"):
            result["path"] = request.url.path
        active_role = request.headers.get("x-active-role")
        if active_role:
            result["active_role"] = active_role
        return result

    logfire.instrument_fastapi(
        app,
        request_attributes_mapper=_request_attributes,
        excluded_urls="/health",
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace authority store queries on an engine.

    Both the standard and the privileged engine are instrumented, so a
    bypass lookup shows up next to the standard lookup it replaced.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)
