import json

from lspwire.messages import (
    apply_workspace_edit_response,
    change_workspace_folders_params,
    changes_to_json,
    code_action_params,
    completion_resolve_params,
    diagnostic_to_json,
    execute_command_params,
    formatting_params,
    initialize_params,
    location_to_json,
    make_error,
    make_request,
    make_response,
    on_type_formatting_params,
    position_to_json,
    range_to_json,
    reference_params,
    rename_params,
    supported_semantic_token_types,
    text_document_identifier,
    text_document_item,
    text_document_params,
    text_document_position_params,
    text_document_positions_params,
    workspace_folders_to_json,
)
from lspwire.protocol import (
    ApplyWorkspaceEditResponse,
    ClientCapabilities,
    Command,
    CompletionItem,
    Diagnostic,
    DiagnosticRelatedInformation,
    DiagnosticSeverity,
    ErrorCode,
    ExtraServerConfig,
    FormattingOptions,
    Location,
    Position,
    Range,
    TextDocumentContentChangeEvent,
    TextEdit,
    WorkspaceFolder,
)

URI = "file:///tmp/proj/main.jl"


def _range(a, b, c, d):
    return Range(Position(a, b), Position(c, d))


def test_position_and_range():
    assert position_to_json(Position(3, 7)) == {"line": 3, "character": 7}
    rng = _range(1, 2, 3, 4)
    assert range_to_json(rng) == {
        "start": position_to_json(rng.start),
        "end": position_to_json(rng.end),
    }


def test_location_without_uri_is_none():
    assert location_to_json(Location()) is None
    loc = Location(URI, _range(0, 0, 0, 5))
    assert location_to_json(loc) == {"uri": URI, "range": range_to_json(loc.range)}


def test_diagnostic_minimal_omits_optional_fields():
    result = diagnostic_to_json(Diagnostic(range=_range(0, 0, 0, 1), message="bad"))
    assert set(result) == {"range", "message", "relatedInformation"}
    assert result["relatedInformation"] == []


def test_diagnostic_full():
    related_ok = DiagnosticRelatedInformation(Location(URI, _range(1, 0, 1, 2)), "here")
    related_bad = DiagnosticRelatedInformation(Location(), "nowhere")
    diag = Diagnostic(
        range=_range(0, 0, 0, 1),
        severity=DiagnosticSeverity.WARNING,
        code="E1",
        source="lint",
        message="bad",
        related_information=[related_ok, related_bad],
    )
    result = diagnostic_to_json(diag)
    assert result["severity"] == int(DiagnosticSeverity.WARNING)
    assert result["code"] == "E1"
    assert result["source"] == "lint"
    assert result["relatedInformation"] == [
        {"location": location_to_json(related_ok.location), "message": "here"}
    ]


def test_changes_to_json():
    change = TextDocumentContentChangeEvent(_range(2, 0, 2, 3), "abc")
    assert changes_to_json([change]) == [{"range": range_to_json(change.range), "text": "abc"}]


def test_identifier_version_only_when_non_negative():
    assert text_document_identifier(URI) == {"uri": URI}
    assert text_document_identifier(URI, 5) == {"uri": URI, "version": 5}
    assert text_document_params(URI, 0) == {"textDocument": {"uri": URI, "version": 0}}


def test_text_document_item():
    item = text_document_item(URI, "julia", "x = 1", 2)
    assert item == {"uri": URI, "version": 2, "text": "x = 1", "languageId": "julia"}


def test_position_params():
    params = text_document_position_params(URI, Position(4, 2))
    assert params["textDocument"] == {"uri": URI}
    assert params["position"] == position_to_json(Position(4, 2))
    multi = text_document_positions_params(URI, [Position(1, 1), Position(2, 2)])
    assert multi["positions"] == [position_to_json(Position(1, 1)), position_to_json(Position(2, 2))]


def test_reference_and_rename_params():
    refs = reference_params(URI, Position(1, 1), True)
    assert refs["context"] == {"includeDeclaration": True}
    ren = rename_params(URI, Position(1, 1), "other")
    assert ren["newName"] == "other"
    assert ren["position"] == refs["position"]


def test_formatting_params():
    options = FormattingOptions(tab_size=2, insert_spaces=False, extra={"trimTrailingWhitespace": True})
    whole = formatting_params(URI, None, options)
    assert "range" not in whole
    assert whole["options"] == {"trimTrailingWhitespace": True, "tabSize": 2, "insertSpaces": False}
    ranged = formatting_params(URI, _range(0, 0, 1, 0), options)
    assert ranged["range"] == range_to_json(_range(0, 0, 1, 0))
    assert options.extra == {"trimTrailingWhitespace": True}


def test_on_type_formatting_params():
    params = on_type_formatting_params(URI, Position(0, 3), "}", FormattingOptions())
    assert params["ch"] == "}"
    assert params["options"]["tabSize"] == FormattingOptions().tab_size


def test_code_action_params():
    diag = Diagnostic(range=_range(0, 0, 0, 1), message="m")
    params = code_action_params(URI, _range(0, 0, 0, 1), [], [diag])
    assert "only" not in params["context"]
    assert params["context"]["diagnostics"] == [diagnostic_to_json(diag)]
    with_kinds = code_action_params(URI, _range(0, 0, 0, 1), ["quickfix"], [])
    assert with_kinds["context"]["only"] == ["quickfix"]


def test_execute_command_params():
    as_text = execute_command_params(Command("T", "do.it", json.dumps([1, "a"])))
    assert as_text == {"command": "do.it", "arguments": [1, "a"]}
    as_list = execute_command_params(Command("T", "do.it", [{"k": 1}]))
    assert as_list["arguments"] == [{"k": 1}]
    scalar = execute_command_params(Command("T", "do.it", "42"))
    assert scalar["arguments"] == {}


def test_completion_resolve_params():
    item = CompletionItem(
        label="shown",
        original_label="orig",
        kind=3,
        detail="d",
        sort_text="s",
        insert_text="i",
        text_edit=TextEdit(_range(0, 0, 0, 2), "new"),
        data={"id": 9},
    )
    params = completion_resolve_params(item)
    assert params["label"] == "orig"
    assert params["kind"] == 3
    assert params["data"] == {"id": 9}
    assert params["textEdit"] == {"newText": "new", "range": range_to_json(item.text_edit.range)}
    assert completion_resolve_params(CompletionItem())["data"] == []


def test_workspace_messages():
    folder = WorkspaceFolder(URI, "proj")
    assert workspace_folders_to_json([folder]) == [{"uri": URI, "name": "proj"}]
    params = change_workspace_folders_params([folder], [])
    assert params == {"event": {"added": [{"uri": URI, "name": "proj"}], "removed": []}}
    response = apply_workspace_edit_response(ApplyWorkspaceEditResponse(True, "why"))
    assert response == {"applied": True, "failureReason": "why"}


def test_envelopes():
    assert make_request("shutdown") == {"method": "shutdown", "params": {}}
    assert make_response() == {"result": None}
    error = make_error(ErrorCode.METHOD_NOT_FOUND, "foo/bar")
    assert error == {"error": {"code": -32601, "message": "foo/bar"}}


def test_semantic_token_types():
    types = supported_semantic_token_types()
    assert types[0] == "namespace"
    assert types[-1] == "operator"
    assert len(set(types)) == len(types)
    types.append("extra")
    assert "extra" not in supported_semantic_token_types()


def test_initialize_params_without_folders():
    config = ExtraServerConfig(caps=ClientCapabilities(snippet_support=True))
    params = initialize_params("file:///tmp/proj", {"opt": 1}, config, 1234)
    assert params["processId"] == 1234
    assert params["rootUri"] == "file:///tmp/proj"
    assert params["rootPath"] == "/tmp/proj"
    assert params["initializationOptions"] == {"opt": 1}
    assert "workspaceFolders" not in params
    assert "workspace" not in params["capabilities"]
    completion = params["capabilities"]["textDocument"]["completion"]["completionItem"]
    assert completion["snippetSupport"] is True


def test_initialize_params_with_folders_and_no_root():
    config = ExtraServerConfig(folders=[])
    params = initialize_params(None, None, config, 1)
    assert params["rootUri"] is None
    assert params["rootPath"] is None
    assert params["workspaceFolders"] == []
    assert params["capabilities"]["workspace"] == {"workspaceFolders": True}