# lspwire

`lspwire` implements the client side of the Language Server Protocol. It is
meant for editors and tools that talk to a language server. It uses only the
standard library.

The package never starts a server process and never reads from one. You
supply a transport, which is any object with a `write(bytes)` method. The
client writes framed messages to it. Your code passes the bytes the server
sends back to the client.

## Modules

- `lspwire.protocol`: dataclasses and enums for LSP values. Among them are
  `Position`, `Range`, `Location`, `Diagnostic`, `CompletionItem`,
  `SignatureHelp`, `Hover`, `SymbolInformation`, `WorkspaceEdit`,
  `CodeAction`, `SemanticTokensDelta`, `InlayHint`, `ServerCapabilities` and
  `ExtraServerConfig`.
- `lspwire.jsonvalue`: lenient accessors for decoded JSON (`get_value`,
  `get_string`, `get_int`, `get_bool`, `get_object`, `get_array`) and
  `stringify`, which produces compact JSON text.
- `lspwire.messages`: builders for request parameters and JSON-RPC
  envelopes. Examples are `text_document_position_params`,
  `code_action_params`, `formatting_params`, `initialize_params`,
  `make_request`, `make_response` and `make_error`.
- `lspwire.capabilities`: `parse_server_capabilities` reads the
  `capabilities` object of an initialize reply. `apply_trigger_override`
  removes trigger characters from a list and adds others.
- `lspwire.results`, `lspwire.completion`, `lspwire.edits`,
  `lspwire.notifications`: convert replies and notifications into the
  dataclasses above. This covers locations, hover, highlights, document and
  workspace symbols, selection ranges, completion, signature help, text and
  workspace edits, code actions, diagnostics, semantic tokens, inlay hints,
  show/log messages and `$/progress`.
- `lspwire.framing`: `Content-Length` framing.
  - `encode_message` adds `"jsonrpc": "2.0"` and frames one message.
  - `MessageReader.feed` takes raw bytes and returns every complete message
    decoded so far. It skips invalid headers and payloads.
  - `StderrLineBuffer.feed` returns error output one complete line at a time.
- `lspwire.server`: `LanguageServerClient` ties the modules together. It
  handles the initialize handshake, request ids and reply handlers,
  cancellation (`$/cancelRequest`), notifications, requests from the server,
  and shutdown.

## Example

```python
from lspwire.framing import encode_message
from lspwire.protocol import Position
from lspwire.server import LanguageServerClient, ServerState


class Recorder:
    def __init__(self):
        self.sent = []

    def write(self, data):
        self.sent.append(data)


transport = Recorder()
client = LanguageServerClient(["some-language-server"], root="file:///work/project")
client.start(transport)          # writes the "initialize" request (id 1)

# Pass the server's output to the client; here it is the initialize reply.
client.feed(encode_message({"id": 1, "result": {"capabilities": {"hoverProvider": True}}}))
assert client.state is ServerState.RUNNING
assert client.capabilities.hover_provider

client.did_open("file:///work/project/main.jl", 0, "julia", "x = 1\n")
handle = client.document_hover(
    "file:///work/project/main.jl", Position(0, 0),
    lambda hover: print(hover.contents),
)
```

Requests and document notifications are sent only while the client is in the
`RUNNING` state. Anything sent earlier is dropped, and the call returns a
`RequestHandle` with no request id. `RequestHandle.cancel()` removes the
pending reply handler and notifies the server.

The client reports events through `Signal` objects. Register a callback with
`connect`. The signals are:

- `state_changed(client)`
- `show_message(params)`
- `log_message(params)`: also emitted for complete stderr lines passed to
  `feed_stderr`
- `publish_diagnostics(params)`
- `work_done_progress(params)`
- `apply_edit(params, reply)`: call `reply` with an
  `ApplyWorkspaceEditResponse`
- `workspace_folders(reply)`: call `reply` with a list of `WorkspaceFolder`
- `show_message_request(params, actions, choose_nothing)`: each action has a
  `choose` callable

The client answers some server requests on its own with an empty result:
`window/workDoneProgress/create`, `client/registerCapability` and
`workspace/semanticTokens/refresh`. It answers unknown methods with a
`MethodNotFound` error. It keeps at most five server requests open for a
reply.

`stop()` sends `shutdown` and `exit` if the server is running. It then calls
the transport's `close()` if the transport has one, and returns the client to
the `NONE` state. `connection_lost()` does the same without sending anything.

## What it does not do

- It does not launch, wait for, terminate or kill server processes.
- It has no event loop and no I/O. Reading the server's output is your job.
- It has no configuration handling that picks a server for a document, and it
  does not track open documents.

## Tests

```
pip install -e .[test]
pytest
```