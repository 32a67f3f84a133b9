"""Parsers for notifications, server requests and token/hint/symbol replies."""

from __future__ import annotations

from typing import Any

from lspwire.edits import parse_diagnostics_array, parse_workspace_edit
from lspwire.jsonvalue import get_array, get_bool, get_int, get_object, get_string, get_value
from lspwire.protocol import (
    ApplyWorkspaceEditParams,
    InlayHint,
    MessageType,
    PublishDiagnosticsParams,
    SemanticTokensDelta,
    SemanticTokensEdit,
    ShowMessageParams,
    SymbolInformation,
    WorkDoneProgressKind,
    WorkDoneProgressParams,
    WorkDoneProgressValue,
)
from lspwire.results import parse_location, parse_position, parse_range

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _ints(values: list) -> list[int]:
    return [
        v
        for v in values
        if isinstance(v, int) and not isinstance(v, bool) and _INT_MIN <= v <= _INT_MAX
    ]


def parse_semantic_tokens_delta(result: Any) -> SemanticTokensDelta:
    """Tokens of a full, range or delta reply; non-integer data is dropped."""
    if not isinstance(result, dict):
        return SemanticTokensDelta()
    edits = [
        SemanticTokensEdit(
            start=get_int(edit, "start"),
            delete_count=get_int(edit, "deleteCount"),
            data=_ints(get_array(edit, "data")),
        )
        for edit in get_array(result, "edits")
        if isinstance(edit, dict)
    ]
    return SemanticTokensDelta(
        result_id=get_string(result, "resultId"),
        edits=edits,
        data=_ints(get_array(result, "data")),
    )


def _hint_label(hint: Any) -> str:
    label = get_value(hint, "label")
    if isinstance(label, list):
        return "".join(get_string(part, "value") for part in label)
    if isinstance(label, str):
        return label
    return ""


def parse_inlay_hints(result: Any) -> list[InlayHint]:
    """Hints ordered by position; consecutive hints at one position are merged."""
    if not isinstance(result, list):
        return []
    hints: list[InlayHint] = []
    for item in result:
        label = _hint_label(item)
        if not label:
            continue
        hint = InlayHint(
            position=parse_position(get_object(item, "position")),
            padding_left=get_bool(item, "paddingLeft"),
            padding_right=get_bool(item, "paddingRight"),
            label=label,
        )
        if hints and hints[-1].position == hint.position:
            hints[-1].label += hint.label
        else:
            hints.append(hint)
    hints.sort(key=lambda h: h.position)
    return hints


def parse_publish_diagnostics(params: Any) -> PublishDiagnosticsParams:
    result = PublishDiagnosticsParams(uri=get_string(params, "uri"))
    if isinstance(params, dict) and "diagnostics" in params:
        result.diagnostics = parse_diagnostics_array(params["diagnostics"])
    return result


def parse_apply_workspace_edit_params(params: Any) -> ApplyWorkspaceEditParams:
    return ApplyWorkspaceEditParams(
        label=get_string(params, "label"),
        edit=parse_workspace_edit(get_object(params, "edit")),
    )


def parse_show_message(params: Any) -> ShowMessageParams:
    return ShowMessageParams(
        type=MessageType(get_int(params, "type", int(MessageType.LOG))),
        message=get_string(params, "message"),
    )


def _parse_progress_value(data: Any) -> WorkDoneProgressValue:
    value = WorkDoneProgressValue()
    if not isinstance(data, dict):
        return value
    kind = get_string(data, "kind")
    if kind in {k.value for k in WorkDoneProgressKind}:
        value.kind = WorkDoneProgressKind(kind)
    value.title = get_string(data, "title")
    value.message = get_string(data, "message")
    value.cancellable = get_bool(data, "cancellable")
    percentage = get_int(data, "percentage", -1)
    if percentage >= 0:
        percentage = min(percentage, 100)
        if value.kind is WorkDoneProgressKind.END:
            percentage = 100
        value.percentage = percentage
    return value


def parse_work_done_progress(params: Any) -> WorkDoneProgressParams:
    """A ``$/progress`` notification; percentages are capped at 100."""
    result = WorkDoneProgressParams(token=get_string(params, "token"))
    if isinstance(params, dict) and "value" in params:
        result.value = _parse_progress_value(params["value"])
    return result


def _parse_workspace_symbol(data: Any) -> SymbolInformation:
    if not isinstance(data, dict):
        return SymbolInformation()
    location = parse_location(get_object(data, "location"))
    if "range" in data:
        location.range = parse_range(get_object(data, "range"))
    container = get_string(data, "containerName")
    if container:
        container += "::"
    symbol = SymbolInformation(
        name=container + get_string(data, "name"),
        kind=get_int(data, "kind"),
        range=location.range,
        url=location.uri,
        tags=get_int(data, "tags"),
    )
    score = data.get("score")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        symbol.score = float(score)
    return symbol


def parse_workspace_symbols(result: Any) -> list[SymbolInformation]:
    """Workspace symbols, highest score first."""
    if not isinstance(result, list):
        return []
    symbols = [_parse_workspace_symbol(item) for item in result]
    symbols.sort(key=lambda s: s.score, reverse=True)
    return symbols