"""
Routes voice-skill requests to the first handler that accepts them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from ..config import AppConfig
from ..services.next_bus import NextBusService, create_service
from .handlers import (
    AskBusWithTimeIntentHandler,
    AskNextBusIntentHandler,
    CancelAndStopIntentHandler,
    ErrorHandler,
    FallbackIntentHandler,
    HelpIntentHandler,
    IntentReflectorHandler,
    LaunchRequestHandler,
    RequestHandler,
    SessionEndedRequestHandler,
    SkillResponse,
    get_request_type,
)

logger = logging.getLogger(__name__)


class SkillDispatcher:
    """
    Ordered registry of request handlers with a catch-all error handler.

    Order matters: handlers are tried top to bottom and the first whose
    ``can_handle`` returns True produces the response.
    """

    def __init__(self, handlers: Sequence[RequestHandler], error_handler: ErrorHandler | None = None):
        self.handlers: List[RequestHandler] = list(handlers)
        self.error_handler = error_handler or ErrorHandler()

    def dispatch(self, envelope: Mapping[str, Any]) -> SkillResponse:
        try:
            for handler in self.handlers:
                if handler.can_handle(envelope):
                    logger.debug("Dispatching %s to %s", get_request_type(envelope), type(handler).__name__)
                    return handler.handle(envelope)
            raise LookupError(f"No handler accepts request type {get_request_type(envelope)!r}")
        except Exception as exc:
            return self.error_handler.handle(envelope, exc)

    def __call__(self, event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
        """Entry point shaped like a serverless function handler."""
        return self.dispatch(event).to_dict()


def build_dispatcher(service: NextBusService) -> SkillDispatcher:
    return SkillDispatcher(
        handlers=[
            LaunchRequestHandler(),
            AskNextBusIntentHandler(service),
            AskBusWithTimeIntentHandler(service),
            HelpIntentHandler(),
            CancelAndStopIntentHandler(),
            FallbackIntentHandler(),
            SessionEndedRequestHandler(),
            IntentReflectorHandler(),
        ],
    )


def create_handler(config: AppConfig | None = None) -> SkillDispatcher:
    """Build the skill entry point from configuration (defaults when omitted)."""
    return build_dispatcher(create_service(config or AppConfig.load()))
