"""A client for one language server connection, driven by the bytes it exchanges."""

from __future__ import annotations

import json
import logging
import os
import weakref
from collections import deque
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Protocol

from lspwire.capabilities import apply_trigger_override, parse_server_capabilities
from lspwire.completion import (
    parse_completion_items,
    parse_completion_resolve,
    parse_signature_help,
)
from lspwire.edits import parse_code_actions, parse_workspace_edit
from lspwire.framing import MessageReader, StderrLineBuffer, encode_message
from lspwire.jsonvalue import get_array, get_int, get_object, get_string
from lspwire.messages import (
    apply_workspace_edit_response,
    change_workspace_folders_params,
    changes_to_json,
    code_action_params,
    completion_resolve_params,
    execute_command_params,
    formatting_params,
    initialize_params,
    make_error,
    make_request,
    make_response,
    on_type_formatting_params,
    range_to_json,
    reference_params,
    rename_params,
    text_document_item,
    text_document_params,
    text_document_position_params,
    text_document_positions_params,
)
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
    ApplyWorkspaceEditResponse,
    Command,
    CompletionItem,
    Diagnostic,
    ErrorCode,
    ExtraServerConfig,
    FormattingOptions,
    MessageRequestAction,
    MessageType,
    Position,
    Range,
    ServerCapabilities,
    ShowMessageParams,
    TextDocumentContentChangeEvent,
    WorkspaceFolder,
)
from lspwire.results import (
    parse_document_highlights,
    parse_document_locations,
    parse_document_symbols,
    parse_expanded_macro,
    parse_hover,
    parse_response_error,
    parse_selection_ranges,
    parse_switch_source_header,
)

log = logging.getLogger(__name__)

MAX_PENDING_SERVER_REQUESTS = 5

Handler = Callable[[Any], None]


class Transport(Protocol):
    def write(self, data: bytes) -> Any: ...


class Signal:
    """A list of callbacks invoked in connection order."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        self._callbacks.append(callback)
        return callback

    def emit(self, *args: Any) -> None:
        for callback in list(self._callbacks):
            callback(*args)


class ServerState(Enum):
    NONE = "none"
    STARTED = "started"
    RUNNING = "running"
    SHUTDOWN = "shutdown"


class RequestHandle:
    """Refers to a request in flight; cancelling it drops the pending reply."""

    def __init__(self, server: Optional[LanguageServerClient] = None, request_id: int = -1) -> None:
        self._server = weakref.ref(server) if server is not None else None
        self.request_id = request_id

    def cancel(self) -> RequestHandle:
        server = self._server() if self._server is not None else None
        if server is not None:
            server.cancel(self.request_id)
        return self


def _wrap(handler: Optional[Callable[[Any], None]], parser: Callable[[Any], Any]) -> Optional[Handler]:
    if handler is None:
        return None
    return lambda value: handler(parser(value))


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=4, ensure_ascii=False)


def _id_from_string(text: str) -> int:
    try:
        return int(text.strip(), 10)
    except ValueError:
        return 0


class LanguageServerClient:
    """Speaks the language server protocol over a caller-supplied transport.

    The transport receives framed outgoing bytes through ``write``; the
    caller passes the server's output to :meth:`feed` and :meth:`feed_stderr`
    and reports the end of the connection through :meth:`connection_lost`.
    """

    def __init__(
        self,
        cmdline: Iterable[str],
        root: Optional[str] = None,
        lang_id: str = "",
        init: Any = None,
        config: Optional[ExtraServerConfig] = None,
    ) -> None:
        self.cmdline = list(cmdline)
        self.root = root
        self.lang_id = lang_id
        self._init = init
        self._config = config if config is not None else ExtraServerConfig()
        self._transport: Optional[Transport] = None
        self._capabilities = ServerCapabilities()
        self._state = ServerState.NONE
        self._last_id = 0
        self._reader = MessageReader()
        self._stderr = StderrLineBuffer()
        self._handlers: dict[int, tuple[Handler, Optional[Handler]]] = {}
        self._server_requests: deque[Any] = deque()

        self.state_changed = Signal()
        self.show_message = Signal()
        self.log_message = Signal()
        self.publish_diagnostics = Signal()
        self.work_done_progress = Signal()
        self.apply_edit = Signal()
        self.workspace_folders = Signal()
        self.show_message_request = Signal()

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def capabilities(self) -> ServerCapabilities:
        return self._capabilities

    @property
    def running(self) -> bool:
        return self._transport is not None

    def _set_state(self, state: ServerState) -> None:
        if self._state != state:
            self._state = state
            self.state_changed.emit(self)

    # lifecycle

    def start(self, transport: Transport) -> bool:
        """Attach ``transport`` and send the initialize request."""
        if self._state != ServerState.NONE:
            return True
        log.info("starting %s with root %s", self.cmdline, self.root)
        self._transport = transport
        self._set_state(ServerState.STARTED)
        params = initialize_params(self.root, self._init, self._config, os.getpid())
        self._write(make_request("initialize", params), self._on_initialize_reply)
        return True

    def _on_initialize_reply(self, value: Any) -> None:
        caps = parse_server_capabilities(get_object(value, "capabilities"))
        caps.completion_provider.trigger_characters = apply_trigger_override(
            caps.completion_provider.trigger_characters, self._config.completion
        )
        caps.signature_help_provider.trigger_characters = apply_trigger_override(
            caps.signature_help_provider.trigger_characters, self._config.signature
        )
        self._capabilities = caps
        self._write(make_request("initialized"))
        self._set_state(ServerState.RUNNING)

    def _shutdown(self) -> None:
        if self._state == ServerState.RUNNING:
            log.info("shutting down %s", self.cmdline)
            self._handlers.clear()
            self._send(make_request("shutdown"))
            self._send(make_request("exit"))
            self._set_state(ServerState.SHUTDOWN)

    def stop(self) -> None:
        """Send shutdown and exit, close the transport and drop the connection."""
        if not self.running:
            return
        self._shutdown()
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()
        self.connection_lost()

    def connection_lost(self) -> None:
        self._transport = None
        self._set_state(ServerState.NONE)

    # writing

    def _write(
        self,
        message: dict,
        handler: Optional[Handler] = None,
        error_handler: Optional[Handler] = None,
        msg_id: Any = None,
    ) -> RequestHandle:
        handle = RequestHandle(self)
        if self._transport is None:
            return handle
        outgoing = dict(message)
        if handler is not None:
            self._last_id += 1
            outgoing["id"] = self._last_id
            handle.request_id = self._last_id
            self._handlers[self._last_id] = (handler, error_handler)
        elif msg_id is not None:
            outgoing["id"] = msg_id
        log.info("calling %s", message.get("method"))
        self._transport.write(encode_message(outgoing))
        return handle

    def _send(
        self,
        message: dict,
        handler: Optional[Handler] = None,
        error_handler: Optional[Handler] = None,
    ) -> RequestHandle:
        if self._state == ServerState.RUNNING:
            return self._write(message, handler, error_handler)
        log.warning("send for non-running server")
        return RequestHandle()

    def cancel(self, request_id: int) -> int:
        if self._handlers.pop(request_id, None) is not None:
            self._write(make_request("$/cancelRequest", {"id": request_id}))
        return -1

    # reading

    def feed(self, data: bytes) -> None:
        """Process output received from the server."""
        for message in self._reader.feed(data):
            self._dispatch(message)

    def feed_stderr(self, data: bytes) -> None:
        """Collect error output; complete lines are emitted as log messages."""
        lines = self._stderr.feed(data)
        if lines:
            self.log_message.emit(ShowMessageParams(type=MessageType.LOG, message=lines))

    def _dispatch(self, message: dict) -> None:
        if "id" not in message:
            self._process_notification(message)
            return
        raw_id = message["id"]
        msg_id = -1
        if isinstance(raw_id, str):
            msg_id = _id_from_string(raw_id)
        elif isinstance(raw_id, int) and not isinstance(raw_id, bool):
            msg_id = raw_id
        if "method" in message:
            self._process_request(message)
            return
        entry = self._handlers.pop(msg_id, None)
        if entry is None:
            log.debug("unexpected reply id %s", msg_id)
            return
        handler, error_handler = entry
        if "error" in message and error_handler is not None:
            error_handler(message["error"])
        else:
            handler(message.get("result"))

    def _process_notification(self, message: dict) -> None:
        method = message.get("method")
        if method is None:
            return
        if "params" not in message:
            log.warning("ignoring notification %s without params", method)
            return
        params = message["params"]
        is_object = isinstance(params, dict)
        if is_object and method == "textDocument/publishDiagnostics":
            self.publish_diagnostics.emit(parse_publish_diagnostics(params))
        elif is_object and method == "window/showMessage":
            self.show_message.emit(parse_show_message(params))
        elif is_object and method == "window/logMessage":
            self.log_message.emit(parse_show_message(params))
        elif is_object and method == "$/progress":
            self.work_done_progress.emit(parse_work_done_progress(params))
        else:
            log.warning("discarding notification %s, params is object: %s", method, is_object)

    def _prepare_response(self, msg_id: Any) -> Callable[[Any], None]:
        self._server_requests.append(msg_id)
        if len(self._server_requests) > MAX_PENDING_SERVER_REQUESTS:
            self._server_requests.popleft()
        owner = weakref.ref(self)

        def respond(result: Any) -> None:
            client = owner()
            if client is None:
                return
            if msg_id in client._server_requests:
                client._server_requests.remove(msg_id)
                client._write(make_response(result), msg_id=msg_id)
            else:
                log.warning("discarding response %s", msg_id)

        return respond

    def _process_request(self, message: dict) -> None:
        method = get_string(message, "method")
        if isinstance(message.get("id"), str):
            msg_id: Any = message["id"]
        else:
            msg_id = get_int(message, "id", -1)
        params = get_object(message, "params")

        if method == "workspace/applyEdit":
            responder = self._prepare_response(msg_id)

            def reply_edit(response: ApplyWorkspaceEditResponse) -> None:
                responder(apply_workspace_edit_response(response))

            self.apply_edit.emit(parse_apply_workspace_edit_params(params), reply_edit)
        elif method == "workspace/workspaceFolders":
            responder = self._prepare_response(msg_id)

            def reply_folders(folders: Iterable[WorkspaceFolder]) -> None:
                responder([{"uri": f.uri, "name": f.name} for f in folders])

            self.workspace_folders.emit(reply_folders)
        elif method in (
            "window/workDoneProgress/create",
            "client/registerCapability",
            "workspace/semanticTokens/refresh",
        ):
            self._prepare_response(msg_id)(None)
        elif method == "window/showMessageRequest":
            responder = self._prepare_response(msg_id)
            actions = [
                MessageRequestAction(
                    title=get_string(action, "title"),
                    choose=lambda chosen=(action if isinstance(action, dict) else {}): responder(chosen),
                )
                for action in get_array(params, "actions")
            ]

            def choose_nothing() -> None:
                responder({})

            self.show_message_request.emit(parse_show_message(params), actions, choose_nothing)
        else:
            self._write(make_error(ErrorCode.METHOD_NOT_FOUND, method), msg_id=msg_id)
            log.warning("discarding request %s", method)

    # requests

    def _position_request(self, method: str, uri: str, pos: Position, handler: Optional[Handler]) -> RequestHandle:
        return self._send(make_request(method, text_document_position_params(uri, pos)), handler)

    def document_symbols(self, uri: str, handler, error_handler=None) -> RequestHandle:
        return self._send(
            make_request("textDocument/documentSymbol", text_document_params(uri)),
            _wrap(handler, parse_document_symbols),
            _wrap(error_handler, parse_response_error),
        )

    def document_definition(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("textDocument/definition", uri, pos, _wrap(handler, parse_document_locations))

    def document_declaration(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("textDocument/declaration", uri, pos, _wrap(handler, parse_document_locations))

    def document_type_definition(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request(
            "textDocument/typeDefinition", uri, pos, _wrap(handler, parse_document_locations)
        )

    def document_implementation(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request(
            "textDocument/implementation", uri, pos, _wrap(handler, parse_document_locations)
        )

    def document_hover(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("textDocument/hover", uri, pos, _wrap(handler, parse_hover))

    def document_highlight(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request(
            "textDocument/documentHighlight", uri, pos, _wrap(handler, parse_document_highlights)
        )

    def document_references(self, uri: str, pos: Position, include_declaration: bool, handler) -> RequestHandle:
        return self._send(
            make_request("textDocument/references", reference_params(uri, pos, include_declaration)),
            _wrap(handler, parse_document_locations),
        )

    def document_completion(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("textDocument/completion", uri, pos, _wrap(handler, parse_completion_items))

    def document_completion_resolve(self, item: CompletionItem, handler) -> RequestHandle:
        return self._send(
            make_request("completionItem/resolve", completion_resolve_params(item)),
            _wrap(handler, parse_completion_resolve),
        )

    def signature_help(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("textDocument/signatureHelp", uri, pos, _wrap(handler, parse_signature_help))

    def selection_range(self, uri: str, positions: Iterable[Position], handler) -> RequestHandle:
        return self._send(
            make_request("textDocument/selectionRange", text_document_positions_params(uri, positions)),
            _wrap(handler, parse_selection_ranges),
        )

    def clangd_switch_source_header(self, uri: str, handler) -> RequestHandle:
        return self._send(
            make_request("textDocument/switchSourceHeader", {"uri": uri}),
            _wrap(handler, parse_switch_source_header),
        )

    def clangd_memory_usage(self, handler) -> RequestHandle:
        return self._send(make_request("$/memoryUsage", {}), _wrap(handler, _pretty))

    def rust_analyzer_expand_macro(self, uri: str, pos: Position, handler) -> RequestHandle:
        return self._position_request("rust-analyzer/expandMacro", uri, pos, _wrap(handler, parse_expanded_macro))

    def document_formatting(self, uri: str, options: FormattingOptions, handler) -> RequestHandle:
        from lspwire.results import parse_text_edits

        return self._send(
            make_request("textDocument/formatting", formatting_params(uri, None, options)),
            _wrap(handler, parse_text_edits),
        )

    def document_range_formatting(self, uri: str, rng: Range, options: FormattingOptions, handler) -> RequestHandle:
        from lspwire.results import parse_text_edits

        return self._send(
            make_request("textDocument/rangeFormatting", formatting_params(uri, rng, options)),
            _wrap(handler, parse_text_edits),
        )

    def document_on_type_formatting(
        self, uri: str, pos: Position, last_char: str, options: FormattingOptions, handler
    ) -> RequestHandle:
        from lspwire.results import parse_text_edits

        return self._send(
            make_request("textDocument/onTypeFormatting", on_type_formatting_params(uri, pos, last_char, options)),
            _wrap(handler, parse_text_edits),
        )

    def document_rename(self, uri: str, pos: Position, new_name: str, handler) -> RequestHandle:
        return self._send(
            make_request("textDocument/rename", rename_params(uri, pos, new_name)),
            _wrap(handler, parse_workspace_edit),
        )

    def document_code_action(
        self, uri: str, rng: Range, kinds: Iterable[str], diagnostics: Iterable[Diagnostic], handler
    ) -> RequestHandle:
        return self._send(
            make_request("textDocument/codeAction", code_action_params(uri, rng, kinds, diagnostics)),
            _wrap(handler, parse_code_actions),
        )

    def _semantic_tokens(self, uri: str, delta: bool, request_id: str, rng: Range, handler) -> RequestHandle:
        params = text_document_params(uri)
        wrapped = _wrap(handler, parse_semantic_tokens_delta)
        if delta and request_id:
            params["previousResultId"] = request_id
            return self._send(make_request("textDocument/semanticTokens/full/delta", params), wrapped)
        if rng.is_valid():
            params["range"] = range_to_json(rng)
            return self._send(make_request("textDocument/semanticTokens/range", params), wrapped)
        return self._send(make_request("textDocument/semanticTokens/full", params), wrapped)

    def document_semantic_tokens_full(self, uri: str, request_id: str, handler) -> RequestHandle:
        return self._semantic_tokens(uri, False, request_id, Range.invalid(), handler)

    def document_semantic_tokens_full_delta(self, uri: str, request_id: str, handler) -> RequestHandle:
        return self._semantic_tokens(uri, True, request_id, Range.invalid(), handler)

    def document_semantic_tokens_range(self, uri: str, rng: Range, handler) -> RequestHandle:
        return self._semantic_tokens(uri, False, "", rng, handler)

    def document_inlay_hint(self, uri: str, rng: Range, handler) -> RequestHandle:
        params = text_document_params(uri)
        params["range"] = range_to_json(rng)
        return self._send(make_request("textDocument/inlayHint", params), _wrap(handler, parse_inlay_hints))

    def execute_command(self, command: Command) -> None:
        # a request whose result is of no interest
        self._send(make_request("workspace/executeCommand", execute_command_params(command)), lambda _: None)

    # document synchronisation

    def did_open(self, uri: str, version: int, lang_id: str, text: str) -> None:
        params = {"textDocument": text_document_item(uri, lang_id, text, version)}
        self._send(make_request("textDocument/didOpen", params))

    def did_change(
        self,
        uri: str,
        version: int,
        text: str,
        changes: Iterable[TextDocumentContentChangeEvent] = (),
    ) -> None:
        """Send either the full ``text`` or incremental ``changes``, not both."""
        changes = list(changes)
        if text and changes:
            raise ValueError("pass either full text or incremental changes, not both")
        params = text_document_params(uri, version)
        params["contentChanges"] = [{"text": text}] if text else changes_to_json(changes)
        self._send(make_request("textDocument/didChange", params))

    def did_save(self, uri: str, text: Optional[str] = None) -> None:
        params = text_document_params(uri)
        if text is not None:
            params["text"] = text
        self._send(make_request("textDocument/didSave", params))

    def did_close(self, uri: str) -> None:
        self._send(make_request("textDocument/didClose", text_document_params(uri)))

    def did_change_configuration(self, settings: Any) -> None:
        self._send(make_request("workspace/didChangeConfiguration", {"settings": settings}))

    def did_change_workspace_folders(
        self, added: Iterable[WorkspaceFolder], removed: Iterable[WorkspaceFolder]
    ) -> None:
        self._send(
            make_request("workspace/didChangeWorkspaceFolders", change_workspace_folders_params(added, removed))
        )

    def workspace_symbol(self, query: str, handler) -> None:
        self._send(make_request("workspace/symbol", {"query": query}), _wrap(handler, parse_workspace_symbols))