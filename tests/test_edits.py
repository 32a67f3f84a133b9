from lspwire.edits import (
    parse_code_actions,
    parse_command,
    parse_diagnostics_array,
    parse_text_document_edit,
    parse_workspace_edit,
)
from lspwire.protocol import (
    CodeAction,
    DiagnosticSeverity,
    Position,
    Range,
    TextEdit,
    WorkspaceEdit,
)

RANGE_JSON = {"start": {"line": 1, "character": 2}, "end": {"line": 3, "character": 4}}
RANGE = Range(Position(1, 2), Position(3, 4))


def test_text_document_edit():
    edit = parse_text_document_edit(
        {
            "textDocument": {"uri": "file:///tmp/a.jl", "version": 7},
            "edits": [{"range": RANGE_JSON, "newText": "abc"}],
        }
    )
    assert edit.text_document.uri == "file:///tmp/a.jl"
    assert edit.text_document.version == 7
    assert edit.edits == [TextEdit(range=RANGE, new_text="abc")]


def test_text_document_edit_missing_version():
    edit = parse_text_document_edit({"textDocument": {"uri": "file:///b"}})
    assert edit.text_document.version == -1
    assert edit.edits == []


def test_workspace_edit_non_object():
    assert parse_workspace_edit([1, 2]) == WorkspaceEdit()


def test_workspace_edit_changes_and_document_changes():
    edit = parse_workspace_edit(
        {
            "changes": {"file:///x": [{"range": RANGE_JSON, "newText": "y"}]},
            "documentChanges": [
                {"textDocument": {"uri": "file:///z", "version": 2}, "edits": []}
            ],
        }
    )
    assert edit.changes == {"file:///x": [TextEdit(range=RANGE, new_text="y")]}
    assert [d.text_document.uri for d in edit.document_changes] == ["file:///z"]


def test_parse_command():
    command = parse_command({"title": "Run", "command": "do.it", "arguments": [1, "a"]})
    assert command.title == "Run"
    assert command.command == "do.it"
    assert command.arguments == [1, "a"]


def test_parse_command_without_arguments():
    assert parse_command({"title": "t"}).arguments == []


def test_diagnostics_skip_missing_range():
    diags = parse_diagnostics_array([{"message": "nope"}, {"range": RANGE_JSON, "message": "ok"}])
    assert [d.message for d in diags] == ["ok"]
    assert diags[0].range == RANGE


def test_diagnostics_code_and_severity():
    diags = parse_diagnostics_array(
        [
            {"range": RANGE_JSON, "code": 42, "severity": 2, "source": "lint"},
            {"range": RANGE_JSON, "code": "E1", "severity": 9},
            {"range": RANGE_JSON},
        ]
    )
    assert diags[0].code == "42"
    assert diags[0].severity == DiagnosticSeverity.WARNING
    assert diags[0].source == "lint"
    assert diags[1].code == "E1"
    assert diags[1].severity == DiagnosticSeverity.UNKNOWN
    assert diags[2].severity == DiagnosticSeverity.UNKNOWN
    assert diags[2].code == ""


def test_diagnostics_related_information():
    diags = parse_diagnostics_array(
        [
            {
                "range": RANGE_JSON,
                "relatedInformation": [
                    "junk",
                    {"location": {"uri": "file:///r", "range": RANGE_JSON}, "message": "here"},
                ],
            }
        ]
    )
    related = diags[0].related_information
    assert len(related) == 1
    assert related[0].location.uri == "file:///r"
    assert related[0].location.range == RANGE
    assert related[0].message == "here"


def test_diagnostics_non_array():
    assert parse_diagnostics_array({"range": RANGE_JSON}) == []


def test_code_actions_command_entry():
    actions = parse_code_actions([{"title": "Fix", "command": "fix.all", "arguments": [3]}])
    assert len(actions) == 1
    assert actions[0].title == "Fix"
    assert actions[0].kind == ""
    assert actions[0].command.command == "fix.all"
    assert actions[0].command.arguments == [3]
    assert actions[0].edit == WorkspaceEdit()


def test_code_actions_code_action_entry():
    actions = parse_code_actions(
        [
            {
                "title": "Quick",
                "kind": "quickfix",
                "diagnostics": [{"range": RANGE_JSON, "message": "m"}],
                "edit": {"changes": {"file:///q": [{"range": RANGE_JSON, "newText": "n"}]}},
                "command": {"title": "inner", "command": "c"},
            }
        ]
    )
    action = actions[0]
    assert action.title == "Quick"
    assert action.kind == "quickfix"
    assert [d.message for d in action.diagnostics] == ["m"]
    assert action.edit.changes["file:///q"] == [TextEdit(range=RANGE, new_text="n")]
    assert action.command.command == "c"


def test_code_actions_non_array():
    assert parse_code_actions({"title": "x"}) == []
    assert parse_code_actions([{}]) == [CodeAction()]