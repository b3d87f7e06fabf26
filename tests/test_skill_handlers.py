"""
Tests for voice-skill request dispatch.
"""

import pendulum
import pytest

from nextbus.config import AppConfig
from nextbus.services.next_bus import NextBusService
from nextbus.skill import create_handler
from nextbus.skill.dispatcher import SkillDispatcher, build_dispatcher
from nextbus.skill.handlers import (
    DATE_REPROMPT,
    DAY_REPROMPT,
    ERROR_MESSAGE,
    FALLBACK_MESSAGE,
    GOODBYE_MESSAGE,
    HELP_MESSAGE,
    LAUNCH_PROMPT,
    NO_ANSWER_MESSAGE,
    TIME_REPROMPT,
    LaunchRequestHandler,
)

TZ = "Asia/Tokyo"


def _request(request_type, intent=None, **slots):
    request = {"type": request_type}
    if intent:
        request["intent"] = {
            "name": intent,
            "slots": {name: {"name": name, "value": value} for name, value in slots.items()},
        }
    return {"version": "1.0", "request": request}


def _intent(intent, **slots):
    return _request("IntentRequest", intent, **slots)


@pytest.fixture
def dispatcher(store):
    service = NextBusService(
        timetable_store=store,
        clock=lambda: pendulum.parse("2024-11-27 08:10", tz=TZ),
    )
    return build_dispatcher(service)


class TestSkillDispatcher:
    """Tests for SkillDispatcher with the default handler chain."""

    def test_launch(self, dispatcher):
        response = dispatcher.dispatch(_request("LaunchRequest"))

        assert response.speech == LAUNCH_PROMPT
        assert response.reprompt == LAUNCH_PROMPT

    def test_next_bus_from_now(self, dispatcher):
        response = dispatcher.dispatch(_intent("AskNextBusIntent"))

        assert response.speech == "次の便は08時15分で、その次は08時30分です。"

    def test_bus_with_time_and_day(self, dispatcher):
        """Monday asked on a Wednesday answers from that Monday's weekday table."""
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", time="21:10", dayofweek="月曜"))

        assert response.speech == "次の便は21時30分で、その次はもうありません。"

    def test_bus_with_time_on_sunday(self, dispatcher):
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", time="10:00", dayofweek="日曜"))

        assert response.speech == "次の便は12時で、その次はもうありません。"

    def test_bus_with_time_and_date(self, dispatcher):
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", time="21:00", date="2024-11-23"))

        assert response.speech == "今日の便はもうありません。"

    def test_missing_time_reprompts(self, dispatcher):
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", dayofweek="月曜"))

        assert response.speech == TIME_REPROMPT
        assert response.reprompt == TIME_REPROMPT

    def test_ambiguous_day_reprompts(self, dispatcher):
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", time="08:10", dayofweek="週末"))

        assert response.speech == DAY_REPROMPT

    @pytest.mark.parametrize("date", ["2024-W48", "来月"])
    def test_unparsable_date_reprompts_for_date(self, dispatcher, date):
        """A good time with a bad date asks for the date, not the day of week."""
        response = dispatcher.dispatch(_intent("AskBusWithTimeIntent", time="08:10", date=date))

        assert response.speech == DATE_REPROMPT
        assert response.reprompt == DATE_REPROMPT

    def test_help(self, dispatcher):
        assert dispatcher.dispatch(_intent("AMAZON.HelpIntent")).speech == HELP_MESSAGE

    @pytest.mark.parametrize("intent", ["AMAZON.CancelIntent", "AMAZON.StopIntent"])
    def test_cancel_and_stop_end_session(self, dispatcher, intent):
        response = dispatcher.dispatch(_intent(intent))

        assert response.speech == GOODBYE_MESSAGE
        assert response.reprompt is None
        assert response.should_end_session is True

    def test_fallback(self, dispatcher):
        assert dispatcher.dispatch(_intent("AMAZON.FallbackIntent")).speech == FALLBACK_MESSAGE

    def test_session_ended_returns_empty_response(self, dispatcher):
        payload = dispatcher(_request("SessionEndedRequest"))

        assert payload == {"version": "1.0", "response": {}}

    def test_unclaimed_intent_is_reflected(self, dispatcher):
        response = dispatcher.dispatch(_intent("SomeOtherIntent"))

        assert response.speech == "You just triggered SomeOtherIntent"

    def test_unknown_request_type_goes_to_error_handler(self, dispatcher):
        response = dispatcher.dispatch(_request("CanFulfillIntentRequest"))

        assert response.speech == ERROR_MESSAGE

    def test_timetable_failure_means_no_answer(self, missing_store):
        dispatcher = build_dispatcher(NextBusService(timetable_store=missing_store))

        response = dispatcher.dispatch(_intent("AskNextBusIntent"))

        assert response.speech == NO_ANSWER_MESSAGE

    def test_custom_handler_chain(self):
        """Requests outside a custom chain fall through to the error handler."""
        dispatcher = SkillDispatcher(handlers=[LaunchRequestHandler()])

        assert dispatcher.dispatch(_request("LaunchRequest")).speech == LAUNCH_PROMPT
        assert dispatcher.dispatch(_intent("AMAZON.HelpIntent")).speech == ERROR_MESSAGE

    def test_callable_returns_response_envelope(self, dispatcher):
        payload = dispatcher(_intent("AMAZON.HelpIntent"), context=None)

        assert payload == {
            "version": "1.0",
            "response": {
                "outputSpeech": {"type": "PlainText", "text": HELP_MESSAGE},
                "reprompt": {"outputSpeech": {"type": "PlainText", "text": HELP_MESSAGE}},
            },
        }


def test_create_handler_from_default_config():
    """The packaged entry point answers from the bundled timetables."""
    handler = create_handler(AppConfig())

    payload = handler(_intent("AskBusWithTimeIntent", time="08:10", date="2024-11-25"))

    assert payload["response"]["outputSpeech"]["text"] == "次の便は08時15分で、その次は08時30分です。"
