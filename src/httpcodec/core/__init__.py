"""
Transport side of the codec: the connection handle a request is read from
and its response written to.
"""

from .connection import Connection, ConnectionState

__all__ = ["Connection", "ConnectionState"]
