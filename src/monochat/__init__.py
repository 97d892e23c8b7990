"""monochat - 치지직 / 숲 채팅을 하나의 Message 스트림으로"""

from .chzzk_worker import ChzzkChatWorker, connect_chzzk
from .exceptions import BootstrapError, MonoChatError, ProtocolError, TransportError
from .message import Message
from .message_stream import MessageStream
from .soop_worker import SoopChatWorker, connect_soop

__all__ = [
    "Message",
    "MessageStream",
    "ChzzkChatWorker",
    "SoopChatWorker",
    "connect_chzzk",
    "connect_soop",
    "MonoChatError",
    "BootstrapError",
    "TransportError",
    "ProtocolError",
]
