"""Unit tests for the send action."""
from hypothesis import given
from hypothesis import strategies as st

from turnchat.completion_client import ApiError, TransportError
from turnchat.models import ChatModel, InputTurn, Message, Session, Settings
from turnchat.send import (
    CompletionOutcome,
    CompletionRequest,
    apply_outcome,
    build_messages,
    run_request,
)


class RecordingClient:
    """Stand-in for ``complete`` that records its arguments."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else ["ok"]
        self.error = error
        self.calls = []

    def __call__(self, api_key, model, messages, temperature, **kwargs):
        self.calls.append((api_key, model, messages, temperature, kwargs))
        if self.error is not None:
            raise self.error
        return self.result


def make_session(turns) -> Session:
    return Session(
        turns=turns,
        settings=Settings(model=ChatModel.GPT_4O_MINI, temperature=0.7, api_key="sk-test"),
        last_results=["previous"],
    )


class TestBuildMessages:
    """Tests for turn to message translation."""

    @given(
        st.lists(
            st.builds(
                InputTurn,
                role=st.sampled_from(["system", "user"]),
                label=st.text(max_size=5),
                content=st.text(max_size=20),
            ),
            min_size=1,
        )
    )
    def test_same_length_order_role_and_content(self, turns):
        """Property test: one message per turn, in order, label dropped."""
        messages = build_messages(turns)

        assert [(m.role, m.content) for m in messages] == [(t.role, t.content) for t in turns]

    def test_empty_turn_list(self):
        """Scenario: an empty list translates to an empty message list."""
        assert build_messages([]) == []


class TestSnapshot:
    """Tests for request snapshots."""

    def test_snapshot_copies_settings(self):
        """Test that the request captures the current settings."""
        session = make_session([InputTurn(role="system", label="x", content="hello")])

        request = CompletionRequest.snapshot(session)

        assert request.api_key == "sk-test"
        assert request.model == ChatModel.GPT_4O_MINI
        assert request.temperature == 0.7
        assert request.messages == (Message(role="system", content="hello"),)

    def test_snapshot_is_isolated_from_later_edits(self):
        """Test that edits after dispatch do not leak into the request."""
        session = make_session([InputTurn(content="before")])
        request = CompletionRequest.snapshot(session)

        session.turns[0].content = "after"
        session.settings.temperature = 1.5

        assert request.messages[0].content == "before"
        assert request.temperature == 0.7


class TestRunRequest:
    """Tests for dispatching through a client."""

    def test_passes_snapshot_to_client(self):
        """Test the arguments handed to the completion client."""
        client = RecordingClient(result=["hi"])
        request = CompletionRequest.snapshot(make_session([InputTurn(content="q")]))

        outcome = run_request(request, client, endpoint="https://example.test", timeout=3)

        api_key, model, messages, temperature, kwargs = client.calls[0]
        assert (api_key, model, temperature) == ("sk-test", ChatModel.GPT_4O_MINI, 0.7)
        assert messages == [Message(role="user", content="q")]
        assert kwargs == {"endpoint": "https://example.test", "timeout": 3}
        assert outcome.results == ["hi"]
        assert not outcome.is_error

    def test_empty_conversation_still_calls_client(self):
        """Scenario: no local short-circuit for an empty turn list."""
        client = RecordingClient(result=[])
        request = CompletionRequest.snapshot(make_session([]))

        run_request(request, client)

        assert client.calls[0][2] == []

    def test_api_error_becomes_single_result(self):
        """Test that a client error collapses to one error string."""
        client = RecordingClient(error=ApiError('{"error": {"message": "bad key"}}'))
        request = CompletionRequest.snapshot(make_session([InputTurn()]))

        outcome = run_request(request, client)

        assert outcome.is_error
        assert outcome.results == ['{"error": {"message": "bad key"}}']

    def test_transport_error_becomes_single_result(self):
        """Test that network failures do not escape the send action."""
        client = RecordingClient(error=TransportError("Request failed: offline"))
        request = CompletionRequest.snapshot(make_session([InputTurn()]))

        assert run_request(request, client).results == ["Request failed: offline"]


class TestApplyOutcome:
    """Tests for writing outcomes back into the session."""

    def test_success_replaces_results(self):
        """Test that completions replace the whole previous list."""
        session = make_session([InputTurn()])
        session.last_results = ["a", "b", "c"]

        apply_outcome(session, CompletionOutcome(completions=("x",)))

        assert session.last_results == ["x"]

    def test_error_replaces_results(self):
        """Test that an error becomes a single-element list."""
        session = make_session([InputTurn()])

        apply_outcome(session, CompletionOutcome(error="not json"))

        assert session.last_results == ["not json"]

    def test_last_applied_outcome_wins(self):
        """Test last-write-wins when several requests resolve."""
        session = make_session([InputTurn()])
        first = CompletionOutcome(completions=("first",))
        second = CompletionOutcome(error="second failed")

        apply_outcome(session, second)
        apply_outcome(session, first)

        assert session.last_results == ["first"]

    def test_results_list_is_not_shared_with_outcome(self):
        """Test that mutating the session does not alter the outcome."""
        session = make_session([InputTurn()])
        outcome = CompletionOutcome(completions=("x",))

        apply_outcome(session, outcome)
        session.last_results.append("y")

        assert outcome.results == ["x"]
