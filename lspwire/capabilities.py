"""Reading the capabilities a server announces in its initialize reply."""

from __future__ import annotations

from typing import Any, Iterable

from lspwire.jsonvalue import get_array, get_bool, get_int, get_object, get_string
from lspwire.protocol import (
    CompletionOptions,
    DocumentOnTypeFormattingOptions,
    DocumentSyncKind,
    SaveOptions,
    SemanticTokensOptions,
    ServerCapabilities,
    SignatureHelpOptions,
    TextDocumentSyncOptions,
    TriggerCharactersOverride,
    WorkspaceFoldersServerCapabilities,
)


def parse_trigger_characters(data: Any) -> list[str]:
    """First character of every non-empty string in a JSON array."""
    if not isinstance(data, list):
        return []
    return [item[0] for item in data if isinstance(item, str) and item]


def _parse_completion(data: dict) -> CompletionOptions:
    return CompletionOptions(
        provider=True,
        resolve_provider=get_bool(data, "resolveProvider"),
        trigger_characters=parse_trigger_characters(get_array(data, "triggerCharacters")),
    )


def _parse_signature_help(data: dict) -> SignatureHelpOptions:
    return SignatureHelpOptions(
        provider=True,
        trigger_characters=parse_trigger_characters(get_array(data, "triggerCharacters")),
    )


def _parse_on_type_formatting(data: dict) -> DocumentOnTypeFormattingOptions:
    triggers = parse_trigger_characters(get_array(data, "moreTriggerCharacter"))
    first = get_string(data, "firstTriggerCharacter")
    if first:
        triggers.insert(0, first[0])
    return DocumentOnTypeFormattingOptions(provider=True, trigger_characters=triggers)


def _parse_workspace_folders(data: dict) -> WorkspaceFoldersServerCapabilities:
    result = WorkspaceFoldersServerCapabilities(supported=get_bool(data, "supported"))
    if "changeNotifications" in data:
        value = data["changeNotifications"]
        if isinstance(value, str):
            result.change_notifications = len(value) > 0
        elif value is True:
            result.change_notifications = True
    return result


def _parse_semantic_tokens(data: dict) -> SemanticTokensOptions:
    result = SemanticTokensOptions()
    if "full" in data:
        full = data["full"]
        if isinstance(full, dict):
            result.full_delta = get_bool(full, "delta")
        else:
            result.full = full is True
    result.range = get_bool(data, "range")
    if "legend" in data:
        types = get_array(data["legend"], "tokenTypes")
        result.token_types = [t for t in types if isinstance(t, str)]
    return result


def _parse_sync(data: dict) -> TextDocumentSyncOptions:
    sync = data.get("textDocumentSync")
    if isinstance(sync, dict):
        options = TextDocumentSyncOptions(
            change=DocumentSyncKind(get_int(sync, "change", int(DocumentSyncKind.NONE)))
        )
        if "save" in sync:
            options.save = SaveOptions(include_text=get_bool(sync["save"], "includeText"))
        return options
    if isinstance(sync, int) and not isinstance(sync, bool):
        return TextDocumentSyncOptions(change=DocumentSyncKind(sync))
    return TextDocumentSyncOptions(change=DocumentSyncKind.NONE)


def parse_server_capabilities(data: Any) -> ServerCapabilities:
    """Build capabilities from the ``capabilities`` object of an initialize reply.

    Plain providers count as supported whenever their key is present,
    whether the value is a boolean or an options object.
    """
    if not isinstance(data, dict):
        data = {}
    workspace = get_object(data, "workspace")
    return ServerCapabilities(
        text_document_sync=_parse_sync(data),
        hover_provider="hoverProvider" in data,
        completion_provider=_parse_completion(get_object(data, "completionProvider")),
        signature_help_provider=_parse_signature_help(
            get_object(data, "signatureHelpProvider")
        ),
        definition_provider="definitionProvider" in data,
        declaration_provider="declarationProvider" in data,
        type_definition_provider="typeDefinitionProvider" in data,
        references_provider="referencesProvider" in data,
        implementation_provider="implementationProvider" in data,
        document_symbol_provider="documentSymbolProvider" in data,
        document_highlight_provider="documentHighlightProvider" in data,
        document_formatting_provider="documentFormattingProvider" in data,
        document_range_formatting_provider="documentRangeFormattingProvider" in data,
        document_on_type_formatting_provider=_parse_on_type_formatting(
            get_object(data, "documentOnTypeFormattingProvider")
        ),
        rename_provider="renameProvider" in data,
        code_action_provider="codeActionProvider" in data,
        semantic_token_provider=_parse_semantic_tokens(
            get_object(data, "semanticTokensProvider")
        ),
        workspace_folders=_parse_workspace_folders(get_object(workspace, "workspaceFolders")),
        selection_range_provider="selectionRangeProvider" in data,
        inlay_hint_provider="inlayHintProvider" in data,
    )


def apply_trigger_override(
    characters: Iterable[str], override: TriggerCharactersOverride
) -> list[str]:
    """Drop excluded characters, then append the included ones."""
    excluded = set(override.exclude)
    return [c for c in characters if c not in excluded] + list(override.include)