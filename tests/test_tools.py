import os
import pytest
from unittest.mock import patch
from terminal_agent.models import AddTwoNumbersInput, WriteFileInput
from terminal_agent.tools import (
    TOOLS,
    InvalidToolInput,
    ToolDescriptor,
    ToolRegistry,
    add_two_numbers,
    default_registry,
    write_file,
)

# ---------------------------------------------------------------------------
# addTwoNumbers
# ---------------------------------------------------------------------------

def test_add_two_numbers_sums_comma_separated_pair():
    assert TOOLS.dispatch("addTwoNumbers", "10,20") == "30"

def test_add_two_numbers_tolerates_whitespace_and_decimals():
    assert TOOLS.dispatch("addTwoNumbers", " 1.5 , 2 ") == "3.5"
    assert TOOLS.dispatch("addTwoNumbers", "-4,4") == "0"

def test_add_two_numbers_accepts_json_array():
    assert TOOLS.dispatch("addTwoNumbers", [10, 20]) == "30"

@pytest.mark.parametrize("payload", ["abc,5", "5,", "1,2,3", "10", "nan,1", "inf,1", None, {"a": 1}])
def test_add_two_numbers_invalid_input_is_an_observation(payload):
    result = TOOLS.dispatch("addTwoNumbers", payload)
    assert result == "Error executing tool: Invalid number input."

def test_add_two_numbers_direct_call():
    args = AddTwoNumbersInput.model_validate("0.1,0.2")
    assert add_two_numbers(args) == repr(0.1 + 0.2)

# ---------------------------------------------------------------------------
# writeFile
# ---------------------------------------------------------------------------

def test_write_file_creates_directory_chain(tmp_path):
    target = tmp_path / "out" / "sub" / "file.txt"
    result = TOOLS.dispatch("writeFile", {"filePath": str(target), "fileContent": "hi"})

    assert result == f"Successfully wrote 2 bytes to {target}"
    assert target.read_text(encoding="utf-8") == "hi"

def test_write_file_overwrites_rather_than_appends(tmp_path):
    target = tmp_path / "out" / "file.txt"
    TOOLS.dispatch("writeFile", {"filePath": str(target), "fileContent": "first version"})
    result = TOOLS.dispatch("writeFile", {"filePath": str(target), "fileContent": "second"})

    assert "6 bytes" in result
    assert target.read_text(encoding="utf-8") == "second"

def test_write_file_relative_path_in_existing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "out").mkdir()
    result = TOOLS.dispatch("writeFile", {"filePath": "out/a.txt", "fileContent": ""})

    assert result == "Successfully wrote 0 bytes to out/a.txt"
    assert (tmp_path / "out" / "a.txt").read_text() == ""

def test_write_file_reports_utf8_byte_length(tmp_path):
    target = tmp_path / "unicode.txt"
    result = TOOLS.dispatch("writeFile", {"filePath": str(target), "fileContent": "é"})
    assert "2 bytes" in result

@pytest.mark.parametrize(
    "payload",
    [
        "not an object",
        {"filePath": "", "fileContent": "x"},
        {"filePath": "a.txt"},
        {"fileContent": "x"},
        {"filePath": "a.txt", "fileContent": 5},
        None,
    ],
)
def test_write_file_invalid_input_is_an_observation(payload):
    result = TOOLS.dispatch("writeFile", payload)
    assert result.startswith("Error executing tool: Invalid input for writeFile.")

def test_write_file_io_failure_is_an_observation(tmp_path):
    # A regular file where a directory is needed makes makedirs fail.
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    args = WriteFileInput(filePath=str(blocker / "child.txt"), fileContent="hi")

    result = write_file(args)
    assert result.startswith("Error writing file:")

def test_write_file_permission_denied_is_an_observation(tmp_path):
    args = WriteFileInput(filePath=str(tmp_path / "x.txt"), fileContent="hi")
    with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
        result = write_file(args)
    assert result == "Error writing file: Permission denied"

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_default_registry_exposes_exactly_two_tools():
    assert sorted(default_registry().names()) == ["addTwoNumbers", "writeFile"]

def test_lookup_unknown_tool_returns_none():
    assert TOOLS.lookup("deleteEverything") is None
    assert TOOLS.lookup(None) is None

def test_dispatch_unknown_tool():
    assert TOOLS.dispatch("deleteEverything", {}) == "Unknown tool: deleteEverything"

def test_dispatch_missing_tool_name():
    assert TOOLS.dispatch(None, "1,2") == "Unknown tool: None"

def test_register_custom_tool():
    registry = default_registry()
    registry.register(
        ToolDescriptor(
            name="echo",
            input_model=WriteFileInput,
            execute=lambda args: args.file_content,
        )
    )
    assert "echo" in registry
    assert registry.dispatch("echo", {"filePath": "p", "fileContent": "hello"}) == "hello"
    assert registry.dispatch("echo", "oops") == "Error executing tool: Invalid input."

def test_register_duplicate_name_rejected():
    registry = ToolRegistry()
    descriptor = ToolDescriptor(name="x", input_model=WriteFileInput, execute=lambda args: "")
    registry.register(descriptor)
    with pytest.raises(ValueError, match="already registered"):
        registry.register(descriptor)

def test_descriptor_decode_raises_invalid_tool_input():
    descriptor = TOOLS.lookup("addTwoNumbers")
    with pytest.raises(InvalidToolInput, match="Invalid number input"):
        descriptor.decode("abc,5")

def test_write_file_nul_in_path_is_an_observation(tmp_path):
    result = TOOLS.dispatch("writeFile", {"filePath": str(tmp_path / "a\x00b.txt"), "fileContent": "hi"})
    assert result.startswith("Error writing file:")

def test_write_file_unencodable_content_is_an_observation(tmp_path):
    target = tmp_path / "surrogate.txt"
    args = WriteFileInput.model_construct(file_path=str(target), file_content="bad \ud800")
    result = write_file(args)
    assert result.startswith("Error writing file:")
    assert not target.exists()

@pytest.mark.parametrize("name", [7, True, ["writeFile"], {"name": "writeFile"}])
def test_dispatch_non_string_tool_name(name):
    assert TOOLS.dispatch(name, "1,2") == f"Unknown tool: {name}"
