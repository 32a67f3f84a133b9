"""Data types exchanged with a language server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Optional


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based line/column position in a text document."""

    line: int = 0
    column: int = 0

    def is_valid(self) -> bool:
        return self.line >= 0 and self.column >= 0


_INVALID_POSITION = Position(-1, -1)


@dataclass(frozen=True)
class Range:
    """A span between two positions; start never lies after end."""

    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)

    def __post_init__(self) -> None:
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def invalid(cls) -> Range:
        return cls(_INVALID_POSITION, _INVALID_POSITION)

    def is_valid(self) -> bool:
        return self.start.is_valid() and self.end.is_valid()

    def contains(self, other: Range) -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass
class Location:
    uri: str = ""
    range: Range = field(default_factory=Range)


class DocumentSyncKind(IntEnum):
    NONE = 0
    FULL = 1
    INCREMENTAL = 2

    @classmethod
    def _missing_(cls, value: object) -> DocumentSyncKind:
        return cls.NONE


class DiagnosticSeverity(IntEnum):
    UNKNOWN = 0
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4

    @classmethod
    def _missing_(cls, value: object) -> DiagnosticSeverity:
        return cls.UNKNOWN


class MarkupKind(Enum):
    NONE = ""
    PLAIN_TEXT = "plaintext"
    MARKDOWN = "markdown"


class MessageType(IntEnum):
    ERROR = 1
    WARNING = 2
    INFO = 3
    LOG = 4

    @classmethod
    def _missing_(cls, value: object) -> MessageType:
        return cls.LOG


class WorkDoneProgressKind(Enum):
    BEGIN = "begin"
    REPORT = "report"
    END = "end"


class ErrorCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_NOT_INITIALIZED = -32002
    UNKNOWN_ERROR_CODE = -32001
    REQUEST_CANCELLED = -32800
    CONTENT_MODIFIED = -32801


class DocumentHighlightKind(IntEnum):
    TEXT = 1
    READ = 2
    WRITE = 3

    @classmethod
    def _missing_(cls, value: object) -> DocumentHighlightKind:
        return cls.TEXT


@dataclass
class MarkupContent:
    value: str = ""
    kind: MarkupKind = MarkupKind.NONE


@dataclass
class TextEdit:
    range: Range = field(default_factory=Range)
    new_text: str = ""


@dataclass
class TextDocumentContentChangeEvent:
    range: Range = field(default_factory=Range)
    text: str = ""


@dataclass
class DiagnosticRelatedInformation:
    location: Location = field(default_factory=Location)
    message: str = ""


@dataclass
class Diagnostic:
    range: Range = field(default_factory=Range)
    severity: DiagnosticSeverity = DiagnosticSeverity.UNKNOWN
    code: str = ""
    source: str = ""
    message: str = ""
    related_information: list[DiagnosticRelatedInformation] = field(default_factory=list)


@dataclass
class FormattingOptions:
    tab_size: int = 4
    insert_spaces: bool = True
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Command:
    title: str = ""
    command: str = ""
    arguments: Any = field(default_factory=list)


@dataclass
class WorkspaceFolder:
    uri: str = ""
    name: str = ""


@dataclass
class CompletionItem:
    label: str = ""
    original_label: str = ""
    kind: int = 1
    detail: str = ""
    documentation: MarkupContent = field(default_factory=MarkupContent)
    sort_text: str = ""
    insert_text: str = ""
    additional_text_edits: list[TextEdit] = field(default_factory=list)
    text_edit: TextEdit = field(default_factory=TextEdit)
    data: Any = None


@dataclass
class ParameterInformation:
    start: int = -1
    end: int = -1


@dataclass
class SignatureInformation:
    label: str = ""
    documentation: MarkupContent = field(default_factory=MarkupContent)
    parameters: list[ParameterInformation] = field(default_factory=list)


@dataclass
class SignatureHelp:
    signatures: list[SignatureInformation] = field(default_factory=list)
    active_signature: int = 0
    active_parameter: int = 0


@dataclass
class Hover:
    contents: list[MarkupContent] = field(default_factory=list)
    range: Range = field(default_factory=Range)


@dataclass
class DocumentHighlight:
    range: Range = field(default_factory=Range)
    kind: DocumentHighlightKind = DocumentHighlightKind.TEXT


@dataclass
class SymbolInformation:
    name: str = ""
    kind: int = 0
    range: Range = field(default_factory=Range)
    detail: str = ""
    url: str = ""
    score: float = 0.0
    tags: int = 0
    children: list[SymbolInformation] = field(default_factory=list)


@dataclass
class SelectionRange:
    range: Range = field(default_factory=Range)
    parent: Optional[SelectionRange] = None


@dataclass
class VersionedTextDocumentIdentifier:
    uri: str = ""
    version: int = -1


@dataclass
class TextDocumentEdit:
    text_document: VersionedTextDocumentIdentifier = field(
        default_factory=VersionedTextDocumentIdentifier
    )
    edits: list[TextEdit] = field(default_factory=list)


@dataclass
class WorkspaceEdit:
    changes: dict[str, list[TextEdit]] = field(default_factory=dict)
    document_changes: list[TextDocumentEdit] = field(default_factory=list)


@dataclass
class CodeAction:
    title: str = ""
    kind: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    edit: WorkspaceEdit = field(default_factory=WorkspaceEdit)
    command: Command = field(default_factory=Command)


@dataclass
class SemanticTokensEdit:
    start: int = 0
    delete_count: int = 0
    data: list[int] = field(default_factory=list)


@dataclass
class SemanticTokensDelta:
    result_id: str = ""
    edits: list[SemanticTokensEdit] = field(default_factory=list)
    data: list[int] = field(default_factory=list)


@dataclass
class InlayHint:
    position: Position = field(default_factory=Position)
    padding_left: bool = False
    padding_right: bool = False
    label: str = ""


@dataclass
class PublishDiagnosticsParams:
    uri: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class ApplyWorkspaceEditParams:
    label: str = ""
    edit: WorkspaceEdit = field(default_factory=WorkspaceEdit)


@dataclass
class ApplyWorkspaceEditResponse:
    applied: bool = False
    failure_reason: str = ""


@dataclass
class ShowMessageParams:
    type: MessageType = MessageType.LOG
    message: str = ""


@dataclass
class WorkDoneProgressValue:
    kind: WorkDoneProgressKind = WorkDoneProgressKind.BEGIN
    title: str = ""
    message: str = ""
    cancellable: bool = False
    percentage: Optional[int] = None


@dataclass
class WorkDoneProgressParams:
    token: str = ""
    value: WorkDoneProgressValue = field(default_factory=WorkDoneProgressValue)


@dataclass
class ResponseError:
    code: int = 0
    message: str = ""
    data: Any = None


@dataclass
class ExpandedMacro:
    name: str = ""
    expansion: str = ""


@dataclass
class MessageRequestAction:
    title: str = ""
    choose: Callable[[], None] = field(default=lambda: None)


@dataclass
class CompletionOptions:
    provider: bool = False
    resolve_provider: bool = False
    trigger_characters: list[str] = field(default_factory=list)


@dataclass
class SignatureHelpOptions:
    provider: bool = False
    trigger_characters: list[str] = field(default_factory=list)


@dataclass
class DocumentOnTypeFormattingOptions:
    provider: bool = False
    trigger_characters: list[str] = field(default_factory=list)


@dataclass
class WorkspaceFoldersServerCapabilities:
    supported: bool = False
    change_notifications: bool = False


@dataclass
class SemanticTokensOptions:
    full: bool = False
    full_delta: bool = False
    range: bool = False
    token_types: list[str] = field(default_factory=list)


@dataclass
class SaveOptions:
    include_text: bool = False


@dataclass
class TextDocumentSyncOptions:
    change: DocumentSyncKind = DocumentSyncKind.NONE
    save: Optional[SaveOptions] = None


@dataclass
class ServerCapabilities:
    text_document_sync: TextDocumentSyncOptions = field(default_factory=TextDocumentSyncOptions)
    hover_provider: bool = False
    completion_provider: CompletionOptions = field(default_factory=CompletionOptions)
    signature_help_provider: SignatureHelpOptions = field(default_factory=SignatureHelpOptions)
    definition_provider: bool = False
    declaration_provider: bool = False
    type_definition_provider: bool = False
    references_provider: bool = False
    implementation_provider: bool = False
    document_symbol_provider: bool = False
    document_highlight_provider: bool = False
    document_formatting_provider: bool = False
    document_range_formatting_provider: bool = False
    document_on_type_formatting_provider: DocumentOnTypeFormattingOptions = field(
        default_factory=DocumentOnTypeFormattingOptions
    )
    rename_provider: bool = False
    code_action_provider: bool = False
    semantic_token_provider: SemanticTokensOptions = field(default_factory=SemanticTokensOptions)
    workspace_folders: WorkspaceFoldersServerCapabilities = field(
        default_factory=WorkspaceFoldersServerCapabilities
    )
    selection_range_provider: bool = False
    inlay_hint_provider: bool = False


@dataclass
class ClientCapabilities:
    snippet_support: bool = False


@dataclass
class TriggerCharactersOverride:
    """Characters to drop from, and then add to, server-announced triggers."""

    exclude: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)


@dataclass
class ExtraServerConfig:
    """Additional tweaks applied when starting a server."""

    folders: Optional[list[WorkspaceFolder]] = None
    caps: ClientCapabilities = field(default_factory=ClientCapabilities)
    completion: TriggerCharactersOverride = field(default_factory=TriggerCharactersOverride)
    signature: TriggerCharactersOverride = field(default_factory=TriggerCharactersOverride)