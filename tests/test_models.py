"""Unit tests for the data model."""
import pytest

from turnchat.models import ChatModel, InputTurn, Session, Settings, Template


class TestChatModel:
    """Tests for the model enumeration."""

    def test_default_is_first(self):
        """Test that the default model is the first listed."""
        assert ChatModel.default() is ChatModel.GPT_35_TURBO

    def test_identifiers_and_labels(self):
        """Test a few identifier/label pairs."""
        assert ChatModel.GPT_4O.identifier == "gpt-4o"
        assert ChatModel.GPT_4O_MINI.label == "GPT-4O-Mini"
        assert ChatModel.O1_PREVIEW.identifier == "o1-preview"

    def test_from_identifier(self):
        """Test lookup by remote identifier."""
        assert ChatModel.from_identifier("gpt-4-turbo") is ChatModel.GPT_4_TURBO

    def test_unknown_identifier_raises(self):
        """Test that unknown identifiers are rejected."""
        with pytest.raises(ValueError):
            ChatModel.from_identifier("gpt-5")

    def test_selectable_hides_o1(self):
        """Test that the o1 models are not offered in the selector."""
        selectable = ChatModel.selectable()

        assert ChatModel.O1_PREVIEW not in selectable
        assert ChatModel.O1_MINI not in selectable
        assert selectable[0] is ChatModel.GPT_35_TURBO
        assert len(selectable) == 5


class TestSettings:
    """Tests for settings validation."""

    @pytest.mark.parametrize("value", [0.0, 1.0, 2.0])
    def test_accepts_boundaries(self, value):
        """Test that the closed interval is accepted."""
        assert Settings(temperature=value).temperature == value

    @pytest.mark.parametrize("value", [-0.01, 2.01])
    def test_rejects_out_of_range(self, value):
        """Test that out-of-range temperatures are rejected."""
        with pytest.raises(ValueError):
            Settings(temperature=value)


class TestSession:
    """Tests for session helpers."""

    def test_new_session_has_one_empty_turn(self):
        """Test the default input list."""
        assert Session().turns == [InputTurn(role="user", label="", content="")]

    def test_add_turn_appends_default(self):
        """Test that a new turn is an empty user turn."""
        session = Session(turns=[])

        turn = session.add_turn()

        assert session.turns == [turn]
        assert turn.role == "user"

    def test_template_save_and_load_copy(self):
        """Test that templates are copies decoupled from the live turn."""
        session = Session(turns=[InputTurn(role="system", label="p", content="c")])

        template = session.save_template(session.turns[0])
        session.turns[0].content = "changed"
        loaded = session.load_template(template)

        assert template == Template(role="system", label="p", content="c")
        assert loaded == InputTurn(role="system", label="p", content="c")
        assert loaded is not session.turns[0]
        assert len(session.turns) == 2

    def test_reset_temperature(self):
        """Test that reset restores the default temperature."""
        session = Session()
        session.set_temperature(1.7)
        session.reset_temperature()

        assert session.settings.temperature == 1.0

    def test_set_temperature_rejects_out_of_range(self):
        """Test that the setter enforces the range."""
        with pytest.raises(ValueError):
            Session().set_temperature(3.0)

    def test_flags_do_not_affect_equality(self):
        """Test that UI flags are ignored when comparing turns."""
        assert InputTurn(content="x", delete=True) == InputTurn(content="x")
