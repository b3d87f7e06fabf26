"""
Voice-skill request handlers.

Requests arrive as plain dict envelopes shaped like the voice platform's
JSON: ``{"request": {"type": ..., "intent": {"name": ..., "slots": {...}}}}``.
Each handler decides with ``can_handle`` whether it owns a request; the
dispatcher tries them in order.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Protocol

from ..domain.exceptions import DataFormatError
from ..services.next_bus import NextBusService

logger = logging.getLogger(__name__)


ASK_NEXT_BUS_INTENT = "AskNextBusIntent"
ASK_BUS_WITH_TIME_INTENT = "AskBusWithTimeIntent"

LAUNCH_PROMPT = "はい、時刻をお知らせください"
HELP_MESSAGE = "時刻をお知らせいただいたら、それに近いバスの時間をお伝えします"
GOODBYE_MESSAGE = "ありがとうございました"
FALLBACK_MESSAGE = "すみません、理解できませんでした"
TIME_REPROMPT = "認識に失敗しました。再度、時刻をお知らせください。"
DAY_REPROMPT = "曜日を特定できませんでした。何曜日か教えてください。"
DATE_REPROMPT = "日付を認識できませんでした。再度、日付をお知らせください。"
NO_ANSWER_MESSAGE = "すみません、時刻表を読み込めなかったため、お答えできません。"
ERROR_MESSAGE = "Sorry, I had trouble doing what you asked. Please try again."


@dataclass(frozen=True)
class SkillResponse:
    """What the skill says back, and whether it keeps listening."""
    speech: str | None = None
    reprompt: str | None = None
    should_end_session: bool | None = None

    def to_dict(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {}
        if self.speech is not None:
            response["outputSpeech"] = {"type": "PlainText", "text": self.speech}
        if self.reprompt is not None:
            response["reprompt"] = {"outputSpeech": {"type": "PlainText", "text": self.reprompt}}
        if self.should_end_session is not None:
            response["shouldEndSession"] = self.should_end_session
        return {"version": "1.0", "response": response}


def ask(message: str) -> SkillResponse:
    """Speak ``message`` and keep the session open with it as reprompt."""
    return SkillResponse(speech=message, reprompt=message)


def get_request_type(envelope: Mapping[str, Any]) -> str | None:
    return envelope.get("request", {}).get("type")


def get_intent_name(envelope: Mapping[str, Any]) -> str | None:
    return envelope.get("request", {}).get("intent", {}).get("name")


def get_slot_value(envelope: Mapping[str, Any], slot_name: str) -> str | None:
    slots = envelope.get("request", {}).get("intent", {}).get("slots") or {}
    return (slots.get(slot_name) or {}).get("value")


def is_intent(envelope: Mapping[str, Any], *names: str) -> bool:
    return get_request_type(envelope) == "IntentRequest" and get_intent_name(envelope) in names


class RequestHandler(Protocol):
    def can_handle(self, envelope: Mapping[str, Any]) -> bool:
        """Return True if this handler owns the request."""

    def handle(self, envelope: Mapping[str, Any]) -> SkillResponse:
        """Produce the response for the request."""


class LaunchRequestHandler:
    def can_handle(self, envelope):
        return get_request_type(envelope) == "LaunchRequest"

    def handle(self, envelope):
        return ask(LAUNCH_PROMPT)


class AskNextBusIntentHandler:
    """Answers for the current time."""

    def __init__(self, service: NextBusService):
        self.service = service

    def can_handle(self, envelope):
        return is_intent(envelope, ASK_NEXT_BUS_INTENT)

    def handle(self, envelope):
        return ask(self.service.answer_now())


class AskBusWithTimeIntentHandler:
    """
    Answers for a spoken time, optionally on a spoken date or day of week.

    A slot that cannot be resolved is asked for again instead of guessed.
    """

    def __init__(self, service: NextBusService):
        self.service = service

    def can_handle(self, envelope):
        return is_intent(envelope, ASK_BUS_WITH_TIME_INTENT)

    def handle(self, envelope):
        time_slot = get_slot_value(envelope, "time")
        day_of_week_slot = get_slot_value(envelope, "dayofweek")
        reference = self.service.resolve_reference(
            time_slot,
            date_slot=get_slot_value(envelope, "date"),
            day_of_week_slot=day_of_week_slot,
        )
        if reference is None:
            # Re-prompt for whichever slot failed; the day of week outranks the date
            if self.service.resolve_reference(time_slot) is None:
                return ask(TIME_REPROMPT)
            if day_of_week_slot:
                return ask(DAY_REPROMPT)
            return ask(DATE_REPROMPT)

        return ask(self.service.answer_at(reference))


class HelpIntentHandler:
    def can_handle(self, envelope):
        return is_intent(envelope, "AMAZON.HelpIntent")

    def handle(self, envelope):
        return ask(HELP_MESSAGE)


class CancelAndStopIntentHandler:
    def can_handle(self, envelope):
        return is_intent(envelope, "AMAZON.CancelIntent", "AMAZON.StopIntent")

    def handle(self, envelope):
        return SkillResponse(speech=GOODBYE_MESSAGE, should_end_session=True)


class FallbackIntentHandler:
    def can_handle(self, envelope):
        return is_intent(envelope, "AMAZON.FallbackIntent")

    def handle(self, envelope):
        return ask(FALLBACK_MESSAGE)


class SessionEndedRequestHandler:
    def can_handle(self, envelope):
        return get_request_type(envelope) == "SessionEndedRequest"

    def handle(self, envelope):
        logger.info("Session ended: %s", json.dumps(envelope.get("request", {}), ensure_ascii=False))
        return SkillResponse()


class IntentReflectorHandler:
    """Echoes any intent no other handler claimed; useful while building the model."""

    def can_handle(self, envelope):
        return get_request_type(envelope) == "IntentRequest"

    def handle(self, envelope):
        return SkillResponse(speech=f"You just triggered {get_intent_name(envelope)}")


class ErrorHandler:
    """Turns exceptions raised by handlers into a spoken apology."""

    def handle(self, envelope: Mapping[str, Any], error: Exception) -> SkillResponse:
        if isinstance(error, DataFormatError):
            logger.error("Timetable unavailable: %s", error)
            return ask(NO_ANSWER_MESSAGE)

        logger.exception("Error handled for %s", get_request_type(envelope), exc_info=error)
        return ask(ERROR_MESSAGE)
