"""Tests for tools/registry.py and tools/tool_schema.py."""
import pytest

from errors import DuplicateToolError, ToolInputInvalid, ToolNotFound
from tools.registry import ToolDescriptor, ToolRegistry, build_default_registry, logged
from tools.tool_schema import InputSchema, SchemaProperty, describe, normalize_args


def _echo(args):
    return args.get("text", "")


ECHO = ToolDescriptor(
    name="echo",
    description="Echo text back",
    input_schema=InputSchema({"text": SchemaProperty("string", "what to echo")}, required=("text",)),
    function=_echo,
)


class TestToolRegistry:
    def test_register_and_lookup(self):
        reg = ToolRegistry()
        reg.register(ECHO)
        assert reg.lookup("echo") is ECHO
        assert reg.lookup("echo") is reg.lookup("echo")
        assert "echo" in reg
        assert len(reg) == 1

    def test_lookup_miss(self):
        assert ToolRegistry().lookup("nope") is None

    def test_duplicate_rejected(self):
        reg = ToolRegistry([ECHO])
        with pytest.raises(DuplicateToolError):
            reg.register(ECHO)
        assert len(reg) == 1

    def test_schemas_in_insertion_order(self):
        other = ToolDescriptor("alpha", "first alphabetically", InputSchema(), lambda a: "")
        reg = ToolRegistry([ECHO, other])
        assert [s["name"] for s in reg.all_schemas()] == ["echo", "alpha"]
        assert reg.all_schemas() == reg.all_schemas()

    def test_schema_wire_shape(self):
        assert ECHO.schema() == {
            "name": "echo",
            "description": "Echo text back",
            "input_schema": {
                "type": "object",
                "properties": {"text": {"type": "string", "description": "what to echo"}},
                "required": ["text"],
            },
        }

    def test_call(self):
        reg = ToolRegistry([ECHO])
        assert reg.call("echo", {"text": "hi", "extra": 1}) == "hi"

    def test_call_unknown(self):
        with pytest.raises(ToolNotFound) as exc:
            ToolRegistry().call("ghost", {})
        assert str(exc.value) == "Unknown tool: ghost"

    def test_call_validates(self):
        reg = ToolRegistry([ECHO])
        with pytest.raises(ToolInputInvalid):
            reg.call("echo", {})
        with pytest.raises(ToolInputInvalid):
            reg.call("echo", {"text": 5})

    def test_logged_keeps_behaviour(self):
        wrapped = logged(ECHO)
        assert wrapped.name == "echo"
        assert wrapped.function({"text": "x"}) == "x"
        assert getattr(wrapped.function, "__logged__", False)

    def test_default_registry(self, tmp_path):
        reg = build_default_registry(tmp_path)
        assert reg.names() == [
            "read_file", "list_files", "find_and_read_file", "create_file", "overwrite_file", "edit_file",
        ]
        for schema in reg.all_schemas():
            assert schema["input_schema"]["type"] == "object"
            assert set(schema["input_schema"]["required"]) <= set(schema["input_schema"]["properties"])


class TestNormalizeArgs:
    schema = InputSchema(
        {
            "path": SchemaProperty("string"),
            "flag": SchemaProperty("boolean"),
            "count": SchemaProperty("integer"),
            "ratio": SchemaProperty("number"),
        },
        required=("path",),
    )

    def test_passes_valid(self):
        args = {"path": "x", "flag": True, "count": 3, "ratio": 0.5}
        assert normalize_args("t", self.schema, args) == args

    def test_drops_undeclared_and_nulls(self):
        assert normalize_args("t", self.schema, {"path": "x", "flag": None, "junk": 1}) == {"path": "x"}

    def test_missing_required(self):
        with pytest.raises(ToolInputInvalid, match="missing required parameter"):
            normalize_args("t", self.schema, {"flag": True})

    def test_null_required_is_missing(self):
        with pytest.raises(ToolInputInvalid):
            normalize_args("t", self.schema, {"path": None})

    @pytest.mark.parametrize("key,value", [("flag", "yes"), ("count", True), ("count", 1.5), ("ratio", "1"), ("path", 1)])
    def test_wrong_type(self, key, value):
        args = {"path": "x", key: value}
        with pytest.raises(ToolInputInvalid, match=key):
            normalize_args("t", self.schema, args)

    def test_non_object_input(self):
        with pytest.raises(ToolInputInvalid):
            normalize_args("t", self.schema, ["path"])

    def test_none_input_treated_as_empty(self):
        assert normalize_args("t", InputSchema(), None) == {}

    def test_required_must_be_declared(self):
        with pytest.raises(ValueError):
            InputSchema({"a": SchemaProperty("string")}, required=("b",))

    def test_describe(self):
        assert describe(self.schema)[0] == "path (string, required)"
        assert describe(self.schema)[1] == "flag (boolean, optional)"
