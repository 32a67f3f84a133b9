"""Parsers for edits, commands, diagnostics and code actions sent by a server."""

from __future__ import annotations

from typing import Any

from lspwire.jsonvalue import get_array, get_int, get_object, get_string, get_value
from lspwire.protocol import (
    CodeAction,
    Command,
    Diagnostic,
    DiagnosticRelatedInformation,
    DiagnosticSeverity,
    TextDocumentEdit,
    VersionedTextDocumentIdentifier,
    WorkspaceEdit,
)
from lspwire.results import parse_location, parse_range, parse_text_edits


def _parse_versioned_identifier(data: Any) -> VersionedTextDocumentIdentifier:
    if not isinstance(data, dict):
        return VersionedTextDocumentIdentifier()
    return VersionedTextDocumentIdentifier(
        uri=get_string(data, "uri"),
        version=get_int(data, "version", -1),
    )


def parse_text_document_edit(data: Any) -> TextDocumentEdit:
    return TextDocumentEdit(
        text_document=_parse_versioned_identifier(get_object(data, "textDocument")),
        edits=parse_text_edits(get_array(data, "edits")),
    )


def parse_workspace_edit(result: Any) -> WorkspaceEdit:
    """Per-uri ``changes`` and ``documentChanges``; resource operations are ignored."""
    if not isinstance(result, dict):
        return WorkspaceEdit()
    changes = {
        uri: parse_text_edits(edits) for uri, edits in get_object(result, "changes").items()
    }
    document_changes = [
        parse_text_document_edit(edit) for edit in get_array(result, "documentChanges")
    ]
    return WorkspaceEdit(changes=changes, document_changes=document_changes)


def parse_command(data: Any) -> Command:
    return Command(
        title=get_string(data, "title"),
        command=get_string(data, "command"),
        arguments=list(get_array(data, "arguments")),
    )


def _parse_code(value: Any) -> str:
    # the code may be sent as a string or as an integer
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def _parse_related(data: Any) -> list[DiagnosticRelatedInformation]:
    return [
        DiagnosticRelatedInformation(
            location=parse_location(get_object(related, "location")),
            message=get_string(related, "message"),
        )
        for related in data
        if isinstance(related, dict)
    ]


def parse_diagnostics_array(result: Any) -> list[Diagnostic]:
    """Diagnostics of a JSON array; entries without a range are skipped."""
    if not isinstance(result, list):
        return []
    diagnostics = []
    for item in result:
        if not isinstance(item, dict) or "range" not in item:
            continue
        diagnostics.append(
            Diagnostic(
                range=parse_range(item["range"]),
                severity=DiagnosticSeverity(get_int(item, "severity")),
                code=_parse_code(get_value(item, "code")),
                source=get_string(item, "source"),
                message=get_string(item, "message"),
                related_information=_parse_related(get_array(item, "relatedInformation")),
            )
        )
    return diagnostics


def parse_code_actions(result: Any) -> list[CodeAction]:
    """Code actions from a reply mixing Command and CodeAction entries."""
    if not isinstance(result, list):
        return []
    actions = []
    for action in result:
        if isinstance(get_value(action, "command"), str):
            command = parse_command(action)
            actions.append(CodeAction(title=command.title, command=command))
            continue
        actions.append(
            CodeAction(
                title=get_string(action, "title"),
                kind=get_string(action, "kind"),
                diagnostics=parse_diagnostics_array(get_array(action, "diagnostics")),
                edit=parse_workspace_edit(get_object(action, "edit")),
                command=parse_command(get_object(action, "command")),
            )
        )
    return actions