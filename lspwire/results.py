"""Parsers for the results of navigation and document queries."""

from __future__ import annotations

from typing import Any, Optional

from lspwire.jsonvalue import (
    get_array,
    get_int,
    get_object,
    get_string,
    get_value,
    stringify,
)
from lspwire.protocol import (
    DocumentHighlight,
    DocumentHighlightKind,
    ExpandedMacro,
    Hover,
    Location,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    ResponseError,
    SelectionRange,
    SymbolInformation,
    TextEdit,
)


def parse_position(data: Any) -> Position:
    """Position from ``line``/``character``; missing members become -1."""
    return Position(get_int(data, "line"), get_int(data, "character"))


def parse_range(data: Any) -> Range:
    return Range(
        parse_position(get_object(data, "start")),
        parse_position(get_object(data, "end")),
    )


def parse_location(data: Any) -> Location:
    uri = get_string(data, "uri")
    rng = Range()
    if isinstance(data, dict) and "range" in data:
        rng = parse_range(data["range"])
    return Location(uri=uri, range=rng)


def parse_location_link(data: Any) -> Location:
    uri = get_string(data, "targetUri")
    rng = Range()
    if isinstance(data, dict) and "targetRange" in data:
        rng = parse_range(data["targetRange"])
    return Location(uri=uri, range=rng)


def parse_document_locations(result: Any) -> list[Location]:
    """Locations from a Location, a Location[] or a LocationLink[] reply."""
    if isinstance(result, list):
        locations = []
        for item in result:
            location = parse_location(item)
            # some servers answer with LocationLink[] instead
            if not location.uri:
                location = parse_location_link(item)
            locations.append(location)
        return locations
    if isinstance(result, dict):
        return [parse_location(result)]
    return []


def parse_markup_content(data: Any) -> MarkupContent:
    if isinstance(data, dict):
        content = MarkupContent(value=get_string(data, "value"))
        kind = get_string(data, "kind")
        if kind == "plaintext":
            content.kind = MarkupKind.PLAIN_TEXT
        elif kind == "markdown":
            content.kind = MarkupKind.MARKDOWN
        return content
    if isinstance(data, str):
        return MarkupContent(value=data, kind=MarkupKind.PLAIN_TEXT)
    return MarkupContent()


def parse_text_edits(result: Any) -> list[TextEdit]:
    if not isinstance(result, list):
        return []
    return [
        TextEdit(
            range=parse_range(get_object(edit, "range")),
            new_text=get_string(edit, "newText"),
        )
        for edit in result
    ]


def parse_hover(result: Any) -> Hover:
    if not isinstance(result, dict):
        return Hover()
    hover = Hover(range=parse_range(get_object(result, "range")))
    if "contents" in result:
        contents = result["contents"]
        # the deprecated MarkedString[] form is still used by some servers
        if isinstance(contents, list):
            hover.contents = [parse_markup_content(c) for c in contents]
        else:
            hover.contents = [parse_markup_content(contents)]
    return hover


def _parse_document_highlight(data: Any) -> DocumentHighlight:
    return DocumentHighlight(
        range=parse_range(get_object(data, "range")),
        kind=DocumentHighlightKind(get_int(data, "kind", int(DocumentHighlightKind.TEXT))),
    )


def parse_document_highlights(result: Any) -> list[DocumentHighlight]:
    if isinstance(result, list):
        return [_parse_document_highlight(item) for item in result]
    if isinstance(result, dict):
        return [_parse_document_highlight(result)]
    return []


def parse_document_symbols(result: Any) -> list[SymbolInformation]:
    """Symbols from either a hierarchical DocumentSymbol[] or a flat SymbolInformation[].

    In the flat form a container is expected before its children; where a
    container name occurs several times, the most recent one whose range
    contains the child is preferred, else the most recent one.
    """
    if not isinstance(result, list):
        return []
    top: list[SymbolInformation] = []
    index: dict[str, list[SymbolInformation]] = {}

    def find_parent(container: str, rng: Range) -> Optional[SymbolInformation]:
        candidates = index.get(container)
        if not candidates:
            return None
        for candidate in reversed(candidates):
            if candidate.range.contains(rng):
                return candidate
        return candidates[-1]

    def parse_symbol(symbol: Any, parent: Optional[SymbolInformation]) -> None:
        if isinstance(symbol, dict) and "range" in symbol:
            rng = parse_range(symbol["range"])
        else:
            rng = parse_range(get_object(get_object(symbol, "location"), "range"))

        if parent is None:
            parent = find_parent(get_string(symbol, "containerName"), rng)
        siblings = parent.children if parent is not None else top

        if not (rng.start.is_valid() and rng.end.is_valid()):
            return
        info = SymbolInformation(
            name=get_string(symbol, "name"),
            kind=get_int(symbol, "kind"),
            range=rng,
            detail=get_string(symbol, "detail"),
        )
        siblings.append(info)
        index.setdefault(info.name, []).append(info)
        for child in get_array(symbol, "children"):
            parse_symbol(child, info)

    for item in result:
        parse_symbol(item, None)
    return top


def _parse_selection_range(data: Any) -> SelectionRange:
    head = current = SelectionRange()
    while isinstance(data, dict):
        current.range = parse_range(get_object(data, "range"))
        parent = data.get("parent")
        if not isinstance(parent, dict):
            current.parent = None
            break
        data = parent
        current.parent = SelectionRange()
        current = current.parent
    return head


def parse_selection_ranges(result: Any) -> list[SelectionRange]:
    if not isinstance(result, list):
        return []
    return [_parse_selection_range(item) for item in result]


def parse_switch_source_header(result: Any) -> str:
    return result if isinstance(result, str) else ""


def parse_expanded_macro(result: Any) -> ExpandedMacro:
    return ExpandedMacro(
        name=get_string(result, "name"),
        expansion=get_string(result, "expansion"),
    )


def parse_response_error(data: Any) -> ResponseError:
    """Error of a failed reply; ``data`` is kept as compact JSON text."""
    if not isinstance(data, dict):
        return ResponseError()
    error = ResponseError(code=get_int(data, "code"), message=get_string(data, "message"))
    if "data" in data:
        error.data = stringify(get_value(data, "data"))
    return error