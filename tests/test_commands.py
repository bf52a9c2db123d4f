import pytest

from commands import COMMANDS, InputKind, parse_input
from conversation import Role, Transcript, Turn


class TestParseInput:
    @pytest.mark.parametrize("line", ["", "   ", "\t\n"])
    def test_empty(self, line):
        assert parse_input(line).kind is InputKind.EMPTY

    @pytest.mark.parametrize("line", ["exit", "Exit", "/exit", "/EXIT", "  /exit "])
    def test_exit(self, line):
        assert parse_input(line).kind is InputKind.EXIT

    @pytest.mark.parametrize("line", ["/clear", "/Tools", "/help", "/save", "/load"])
    def test_known_commands(self, line):
        parsed = parse_input(line)
        assert parsed.kind is InputKind.COMMAND
        assert parsed.command is COMMANDS[line.lower()]

    def test_unknown_command_is_lowered(self):
        parsed = parse_input("/Frobnicate")
        assert parsed.kind is InputKind.UNKNOWN_COMMAND
        assert parsed.text == "/frobnicate"
        assert parsed.command is None

    def test_message_kept_verbatim(self):
        parsed = parse_input("  What is in README.md?  ")
        assert parsed.kind is InputKind.MESSAGE
        assert parsed.text == "  What is in README.md?  "

    def test_exit_inside_sentence_is_a_message(self):
        assert parse_input("how do I exit vim").kind is InputKind.MESSAGE

    def test_unimplemented_commands_flagged(self):
        assert not COMMANDS["/save"].implemented
        assert not COMMANDS["/load"].implemented
        assert COMMANDS["/clear"].implemented


class TestTranscript:
    def test_append_and_wire_form(self):
        t = Transcript()
        t.add_user("hi")
        t.add_assistant("hello")
        assert t.to_messages() == [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
        assert t.last == Turn(Role.ASSISTANT, "hello")

    def test_role_from_string(self):
        t = Transcript()
        assert t.append("user", "x").role is Role.USER
        with pytest.raises(ValueError):
            t.append("system", "x")

    def test_turns_is_a_snapshot(self):
        t = Transcript()
        t.add_user("a")
        snap = t.turns
        t.add_assistant("b")
        assert len(snap) == 1
        assert len(t) == 2

    def test_clear(self):
        t = Transcript()
        t.add_user("a")
        t.clear()
        assert len(t) == 0
        assert t.last is None
        assert t.to_messages() == []
