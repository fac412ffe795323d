"""
a2ui-bridge: client-side processor for the A2UI declarative UI protocol.

Feed it the JSON messages a producer streams, read back immutable surface
snapshots, and send user actions back.
"""

from .core import (
    MessageParseError,
    ProtocolError,
    Settings,
    configure_logging,
    get_logger,
    get_settings,
)
from .handlers import StreamHandler
from .processor import (
    ActionDispatcher,
    ComponentNode,
    DataModel,
    MessageProcessor,
    SurfaceSnapshot,
    TreeNode,
    dispatch,
    resolve,
)
from .protocol import (
    Action,
    BeginRendering,
    DataModelUpdate,
    DeleteSurface,
    LiteralValue,
    PathValue,
    SurfaceUpdate,
    UserAction,
    parse_message,
)
from .rendering import ComponentMapping, render_tree
from .streaming import MessageStream, astream_messages, stream_messages

__version__ = "0.1.0"

__all__ = [
    # Processing
    "MessageProcessor",
    "SurfaceSnapshot",
    "ComponentNode",
    "TreeNode",
    "DataModel",
    "resolve",
    # Actions
    "Action",
    "UserAction",
    "ActionDispatcher",
    "dispatch",
    # Messages
    "BeginRendering",
    "SurfaceUpdate",
    "DataModelUpdate",
    "DeleteSurface",
    "LiteralValue",
    "PathValue",
    "parse_message",
    # Streaming
    "MessageStream",
    "StreamHandler",
    "stream_messages",
    "astream_messages",
    # Rendering
    "ComponentMapping",
    "render_tree",
    # Infrastructure
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "ProtocolError",
    "MessageParseError",
]
