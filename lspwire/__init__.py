"""Language Server Protocol client: data types, message building, reply parsing, framing and a transport-driven client."""

__version__ = "0.1.0"