from lspwire.notifications import (
    parse_apply_workspace_edit_params,
    parse_inlay_hints,
    parse_publish_diagnostics,
    parse_semantic_tokens_delta,
    parse_show_message,
    parse_work_done_progress,
    parse_workspace_symbols,
)
from lspwire.protocol import (
    MessageType,
    Position,
    Range,
    SemanticTokensDelta,
    TextEdit,
    WorkDoneProgressKind,
)

RANGE_JSON = {"start": {"line": 1, "character": 2}, "end": {"line": 3, "character": 4}}
RANGE = Range(Position(1, 2), Position(3, 4))


def _pos(line, character):
    return {"line": line, "character": character}


def test_semantic_tokens_full():
    delta = parse_semantic_tokens_delta({"resultId": "r1", "data": [0, 1, "x", 2, True, 3]})
    assert delta.result_id == "r1"
    assert delta.data == [0, 1, 2, 3]
    assert delta.edits == []


def test_semantic_tokens_edits():
    delta = parse_semantic_tokens_delta(
        {"edits": [{"start": 5, "deleteCount": 2, "data": [9, 8]}, "junk", {"data": []}]}
    )
    assert len(delta.edits) == 2
    assert (delta.edits[0].start, delta.edits[0].delete_count) == (5, 2)
    assert delta.edits[0].data == [9, 8]
    assert (delta.edits[1].start, delta.edits[1].delete_count) == (-1, -1)


def test_semantic_tokens_non_object():
    assert parse_semantic_tokens_delta([1, 2]) == SemanticTokensDelta()


def test_inlay_hints_merge_and_sort():
    hints = parse_inlay_hints(
        [
            {"label": "b", "position": _pos(2, 0)},
            {"label": [{"value": "c"}, {"value": "d"}], "position": _pos(2, 0)},
            {"label": "", "position": _pos(0, 0)},
            {"label": "a", "position": _pos(1, 5), "paddingLeft": True},
        ]
    )
    assert [h.position for h in hints] == [Position(1, 5), Position(2, 0)]
    assert hints[0].label == "a"
    assert hints[0].padding_left is True
    assert hints[0].padding_right is False
    assert hints[1].label == "b" + "c" + "d"


def test_inlay_hints_positions_sorted_invariant():
    data = [{"label": str(i), "position": _pos(9 - i, i)} for i in range(5)]
    hints = parse_inlay_hints(data)
    positions = [h.position for h in hints]
    assert positions == sorted(positions)
    assert len(hints) == 5


def test_inlay_hints_non_array():
    assert parse_inlay_hints({"label": "x"}) == []


def test_publish_diagnostics():
    params = parse_publish_diagnostics(
        {"uri": "file:///d.jl", "diagnostics": [{"range": RANGE_JSON, "message": "bad"}]}
    )
    assert params.uri == "file:///d.jl"
    assert [d.message for d in params.diagnostics] == ["bad"]
    assert params.diagnostics[0].range == RANGE


def test_apply_workspace_edit_params():
    params = parse_apply_workspace_edit_params(
        {"label": "Rename", "edit": {"changes": {"file:///e": [{"range": RANGE_JSON, "newText": "z"}]}}}
    )
    assert params.label == "Rename"
    assert params.edit.changes == {"file:///e": [TextEdit(range=RANGE, new_text="z")]}


def test_show_message():
    assert parse_show_message({"type": 1, "message": "boom"}).type == MessageType.ERROR
    default = parse_show_message({"message": "hi"})
    assert default.type == MessageType.LOG
    assert default.message == "hi"


def test_work_done_progress_clamps_percentage():
    params = parse_work_done_progress(
        {"token": "tok", "value": {"kind": "report", "percentage": 150, "title": "Index"}}
    )
    assert params.token == "tok"
    assert params.value.kind is WorkDoneProgressKind.REPORT
    assert params.value.percentage == 100
    assert params.value.title == "Index"


def test_work_done_progress_end_forces_full():
    params = parse_work_done_progress({"value": {"kind": "end", "percentage": 40}})
    assert params.value.kind is WorkDoneProgressKind.END
    assert params.value.percentage == 100


def test_work_done_progress_without_percentage():
    params = parse_work_done_progress({"value": {"kind": "begin", "cancellable": True}})
    assert params.value.percentage is None
    assert params.value.cancellable is True


def test_workspace_symbols_sorted_by_score():
    symbols = parse_workspace_symbols(
        [
            {"name": "low", "score": 0.5, "location": {"uri": "file:///l", "range": RANGE_JSON}},
            {"name": "high", "score": 2, "containerName": "Mod", "kind": 12},
            "junk",
        ]
    )
    assert [s.name for s in symbols][:2] == ["Mod::high", "low"]
    assert symbols[0].kind == 12
    assert symbols[1].url == "file:///l"
    assert symbols[1].range == RANGE
    scores = [s.score for s in symbols]
    assert scores == sorted(scores, reverse=True)


def test_workspace_symbols_range_override():
    symbols = parse_workspace_symbols(
        [{"name": "f", "range": RANGE_JSON, "location": {"uri": "file:///u"}}]
    )
    assert symbols[0].range == RANGE
    assert symbols[0].url == "file:///u"
    assert symbols[0].name == "f"