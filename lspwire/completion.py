"""Parsers for completion and signature help replies."""

from __future__ import annotations

from typing import Any

from lspwire.jsonvalue import get_array, get_int, get_object, get_string, stringify
from lspwire.protocol import (
    CompletionItem,
    MarkupContent,
    ParameterInformation,
    SignatureHelp,
    SignatureInformation,
    TextEdit,
)
from lspwire.results import parse_markup_content, parse_range, parse_text_edits


def parse_completion_item(data: Any) -> CompletionItem:
    label = get_string(data, "label")
    detail = get_string(data, "detail")
    documentation = MarkupContent()
    if isinstance(data, dict) and "documentation" in data:
        documentation = parse_markup_content(data["documentation"])

    sort_text = get_string(data, "sortText") or label
    insert_text = get_string(data, "insertText")
    text_edit = TextEdit()
    edit_data = get_object(data, "textEdit")
    if isinstance(data, dict) and isinstance(data.get("textEdit"), dict):
        new_text = get_string(edit_data, "newText")
        # newText only stands in for a missing insertText; some servers
        # expect it to be used together with its range
        insert_text = insert_text or new_text
        text_edit = TextEdit(range=parse_range(get_object(edit_data, "range")), new_text=new_text)
    if not insert_text:
        insert_text = label

    raw_data = None
    if isinstance(data, dict) and "data" in data:
        raw_data = stringify(data["data"])

    return CompletionItem(
        label=label,
        original_label=label,
        kind=get_int(data, "kind", 1),
        detail=detail,
        documentation=documentation,
        sort_text=sort_text,
        insert_text=insert_text,
        additional_text_edits=parse_text_edits(get_array(data, "additionalTextEdits")),
        text_edit=text_edit,
        data=raw_data,
    )


def parse_completion_items(result: Any) -> list[CompletionItem]:
    """Items of a CompletionItem[] or CompletionList reply."""
    items = result if isinstance(result, list) else get_array(result, "items")
    return [parse_completion_item(item) for item in items]


def parse_completion_resolve(result: Any) -> CompletionItem:
    if not isinstance(result, dict):
        return CompletionItem()
    return parse_completion_item(result)


def _parse_parameter(par: Any, label: str) -> ParameterInformation:
    begin = end = -1
    value = par.get("label") if isinstance(par, dict) else None
    if isinstance(value, list):
        if len(value) == 2:
            begin, end = value
            if begin > len(label):
                begin = -1
            if end > len(label):
                end = -1
    elif isinstance(value, str) and value:
        begin = label.find(value)
        if begin >= 0:
            end = begin + len(value)
    return ParameterInformation(start=begin, end=end)


def parse_signature_information(data: Any) -> SignatureInformation:
    info = SignatureInformation(label=get_string(data, "label"))
    if isinstance(data, dict) and "documentation" in data:
        info.documentation = parse_markup_content(data["documentation"])
    info.parameters = [_parse_parameter(p, info.label) for p in get_array(data, "parameters")]
    return info


def parse_signature_help(result: Any) -> SignatureHelp:
    """Signature help with active indices clamped to what was received."""
    if not isinstance(result, dict):
        return SignatureHelp()
    signatures = [parse_signature_information(s) for s in get_array(result, "signatures")]
    active_signature = min(max(get_int(result, "activeSignature", 0), 0), len(signatures))
    active_parameter = max(get_int(result, "activeParameter", 0), 0)
    if active_signature < len(signatures):
        active_parameter = min(
            active_parameter, len(signatures[active_signature].parameters)
        )
    return SignatureHelp(
        signatures=signatures,
        active_signature=active_signature,
        active_parameter=active_parameter,
    )