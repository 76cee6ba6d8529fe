"""apt method for fetching packages from Google Artifact Registry."""

from .constants import METHOD_VERSION
from .message import Message
from .method import AptMethod
from .reader import MessageReader
from .writer import MessageWriter

__version__ = METHOD_VERSION

__all__ = ["AptMethod", "Message", "MessageReader", "MessageWriter", "__version__"]
