"""Builders for the JSON payloads sent to a language server."""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional
from urllib.parse import unquote, urlsplit

from lspwire.protocol import (
    ApplyWorkspaceEditResponse,
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
    WorkspaceFolder,
)

_SEMANTIC_TOKEN_TYPES = (
    "namespace",
    "type",
    "class",
    "enum",
    "interface",
    "struct",
    "typeParameter",
    "parameter",
    "variable",
    "property",
    "enumMember",
    "event",
    "function",
    "method",
    "macro",
    "keyword",
    "modifier",
    "comment",
    "string",
    "number",
    "regexp",
    "operator",
)


def position_to_json(pos: Position) -> dict:
    return {"line": pos.line, "character": pos.column}


def range_to_json(rng: Range) -> dict:
    return {"start": position_to_json(rng.start), "end": position_to_json(rng.end)}


def location_to_json(location: Location) -> Optional[dict]:
    """Encode a location, or return None if it has no uri."""
    if not location.uri:
        return None
    return {"uri": location.uri, "range": range_to_json(location.range)}


def _related_to_json(related: DiagnosticRelatedInformation) -> Optional[dict]:
    location = location_to_json(related.location)
    if location is None:
        return None
    return {"location": location, "message": related.message}


def diagnostic_to_json(diagnostic: Diagnostic) -> dict:
    result: dict[str, Any] = {
        "range": range_to_json(diagnostic.range),
        "message": diagnostic.message,
    }
    if diagnostic.code:
        result["code"] = diagnostic.code
    if diagnostic.severity != DiagnosticSeverity.UNKNOWN:
        result["severity"] = int(diagnostic.severity)
    if diagnostic.source:
        result["source"] = diagnostic.source
    related = (_related_to_json(r) for r in diagnostic.related_information)
    result["relatedInformation"] = [r for r in related if r is not None]
    return result


def changes_to_json(changes: Iterable[TextDocumentContentChangeEvent]) -> list:
    return [{"range": range_to_json(c.range), "text": c.text} for c in changes]


def text_document_identifier(uri: str, version: int = -1) -> dict:
    identifier: dict[str, Any] = {"uri": uri}
    if version >= 0:
        identifier["version"] = version
    return identifier


def text_document_item(uri: str, lang: str, text: str, version: int) -> dict:
    item = text_document_identifier(uri, version)
    item["text"] = text
    item["languageId"] = lang
    return item


def text_document_params(uri: str, version: int = -1) -> dict:
    return {"textDocument": text_document_identifier(uri, version)}


def text_document_position_params(uri: str, pos: Position) -> dict:
    params = text_document_params(uri)
    params["position"] = position_to_json(pos)
    return params


def text_document_positions_params(uri: str, positions: Iterable[Position]) -> dict:
    params = text_document_params(uri)
    params["positions"] = [position_to_json(p) for p in positions]
    return params


def reference_params(uri: str, pos: Position, include_declaration: bool) -> dict:
    params = text_document_position_params(uri, pos)
    params["context"] = {"includeDeclaration": include_declaration}
    return params


def _formatting_options(options: FormattingOptions) -> dict:
    result = dict(options.extra)
    result["tabSize"] = options.tab_size
    result["insertSpaces"] = options.insert_spaces
    return result


def formatting_params(uri: str, rng: Optional[Range], options: FormattingOptions) -> dict:
    """Parameters for whole-document (``rng`` None) or range formatting."""
    params = text_document_params(uri)
    if rng is not None:
        params["range"] = range_to_json(rng)
    params["options"] = _formatting_options(options)
    return params


def on_type_formatting_params(
    uri: str, pos: Position, last_char: str, options: FormattingOptions
) -> dict:
    params = text_document_position_params(uri, pos)
    params["ch"] = last_char
    params["options"] = _formatting_options(options)
    return params


def rename_params(uri: str, pos: Position, new_name: str) -> dict:
    params = text_document_position_params(uri, pos)
    params["newName"] = new_name
    return params


def code_action_params(
    uri: str, rng: Range, kinds: Iterable[str], diagnostics: Iterable[Diagnostic]
) -> dict:
    params = text_document_params(uri)
    params["range"] = range_to_json(rng)
    context: dict[str, Any] = {"diagnostics": [diagnostic_to_json(d) for d in diagnostics]}
    kinds = list(kinds)
    if kinds:
        context["only"] = kinds
    params["context"] = context
    return params


def _decode_container(value: Any, fallback: Any) -> Any:
    """Return ``value`` as a JSON array or object, decoding text if needed."""
    if isinstance(value, (str, bytes, bytearray)):
        try:
            value = json.loads(value)
        except ValueError:
            return fallback
    if isinstance(value, (list, dict)):
        return value
    return fallback


def execute_command_params(command: Command) -> dict:
    return {
        "command": command.command,
        "arguments": _decode_container(command.arguments, {}),
    }


def completion_resolve_params(item: CompletionItem) -> dict:
    return {
        "data": _decode_container(item.data, []),
        "detail": item.detail,
        "insertText": item.insert_text,
        "sortText": item.sort_text,
        "textEdit": {
            "newText": item.text_edit.new_text,
            "range": range_to_json(item.text_edit.range),
        },
        "label": item.original_label,
        "kind": int(item.kind),
    }


def apply_workspace_edit_response(response: ApplyWorkspaceEditResponse) -> dict:
    return {"applied": response.applied, "failureReason": response.failure_reason}


def workspace_folders_to_json(folders: Iterable[WorkspaceFolder]) -> list:
    return [{"uri": f.uri, "name": f.name} for f in folders]


def change_workspace_folders_params(
    added: Iterable[WorkspaceFolder], removed: Iterable[WorkspaceFolder]
) -> dict:
    return {
        "event": {
            "added": workspace_folders_to_json(added),
            "removed": workspace_folders_to_json(removed),
        }
    }


def make_request(method: str, params: Optional[dict] = None) -> dict:
    return {"method": method, "params": {} if params is None else params}


def make_response(result: Any = None) -> dict:
    return {"result": result}


def make_error(code: ErrorCode | int, message: str) -> dict:
    return {"error": {"code": int(code), "message": message}}


def supported_semantic_token_types() -> list[str]:
    return list(_SEMANTIC_TOKEN_TYPES)


def _local_path(uri: str) -> str:
    parts = urlsplit(uri)
    if parts.scheme != "file":
        return ""
    return unquote(parts.path)


def initialize_params(
    root: Optional[str], init: Any, config: ExtraServerConfig, pid: int
) -> dict:
    """Parameters of the ``initialize`` request announcing client capabilities."""
    code_action = {
        "codeActionLiteralSupport": {
            "codeActionKind": {"valueSet": ["quickfix", "refactor", "source"]}
        }
    }
    semantic_tokens = {
        "requests": {"range": True, "full": {"delta": True}},
        "tokenTypes": supported_semantic_token_types(),
        "tokenModifiers": [],
        "formats": ["relative"],
    }
    capabilities: dict[str, Any] = {
        "textDocument": {
            "documentSymbol": {"hierarchicalDocumentSymbolSupport": True},
            "publishDiagnostics": {"relatedInformation": True},
            "codeAction": code_action,
            "semanticTokens": semantic_tokens,
            "synchronization": {"didSave": True},
            "selectionRange": {"dynamicRegistration": False},
            "hover": {"contentFormat": ["markdown", "plaintext"]},
            "completion": {
                "completionItem": {
                    "snippetSupport": config.caps.snippet_support,
                    "resolveSupport": {
                        "properties": ["additionalTextEdits", "documentation"]
                    },
                }
            },
            "inlayHint": {"dynamicRegistration": False},
        },
        "window": {
            "workDoneProgress": True,
            "showMessage": {
                "messageActionItem": {"additionalPropertiesSupport": True}
            },
        },
    }
    if config.folders is not None:
        capabilities["workspace"] = {"workspaceFolders": True}
    params: dict[str, Any] = {
        "processId": pid,
        "rootPath": _local_path(root) if root else None,
        "rootUri": root if root else None,
        "capabilities": capabilities,
        "initializationOptions": init,
    }
    if config.folders is not None:
        params["workspaceFolders"] = workspace_folders_to_json(config.folders)
    return params