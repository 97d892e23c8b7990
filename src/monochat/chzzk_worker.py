"""치지직 채팅 워커

Connecting → Authenticating → Streaming → Terminated
  - 부트스트랩(API 2회) 후 채팅 서버에 연결하고 첫 프레임으로 Auth(READ) 전송
  - 수신 프레임의 채팅 이벤트를 Message로 펼쳐서 전달
  - 30초마다 Ping, Pong을 연달아 전송. 하나라도 실패하면 종료
"""

import asyncio
import logging

import websockets

from . import api, chzzk_codec
from .chat_worker import ChatWorker
from .config import CHZZK_CHAT_SERVER, CHZZK_KEEPALIVE_INTERVAL
from .message_stream import MessageStream

logger = logging.getLogger(__name__)


class ChzzkChatWorker(ChatWorker):
    platform = 'chzzk'
    keepalive_interval = CHZZK_KEEPALIVE_INTERVAL

    def __init__(self, url, keepalive_interval=None):
        super().__init__(url, keepalive_interval)
        self.session = None

    @property
    def channel_name(self):
        return self.session.channel_id if self.session else None

    def _encode(self, command):
        return chzzk_codec.encode_command(command, self.session.channel_id)

    async def connect_chat(self):
        """채팅 서버에 연결

        API 호출(requests 동기)은 asyncio.to_thread()로 감싸서
        이벤트 루프를 블록하지 않도록 한다.
        """
        self.session = await asyncio.to_thread(api.fetch_chzzk_session, self.url)
        await self.open_websocket(CHZZK_CHAT_SERVER)
        await self.send_handshake(self._encode(chzzk_codec.auth(self.session.access_token)), 'auth command')
        logger.info('[chzzk] %s 채팅 연결 완료', self.session.channel_id)

    async def handle_frame(self, frame):
        if not isinstance(frame, str):
            return []
        if chzzk_codec.is_server_ping(frame):
            await self.ws.send(self._encode(chzzk_codec.PONG))
            return []
        return chzzk_codec.decode_chat_messages(frame)

    async def keepalive(self):
        while True:
            await asyncio.sleep(self.keepalive_interval)
            try:
                await self.ws.send(self._encode(chzzk_codec.PING))
                await self.ws.send(self._encode(chzzk_codec.PONG))
            except websockets.ConnectionClosed:
                logger.info('[chzzk] keepalive 전송 실패')
                return


async def connect_chzzk(url, keepalive_interval=None) -> MessageStream:
    """치지직 채팅 스트림 열기

    url: https://api.chzzk.naver.com/manage/v1/chats/sources/<uuid>
         또는 https://api.chzzk.naver.com/polling/v3.1/channels/<uuid>/live-status
    """
    return await ChzzkChatWorker(url, keepalive_interval).start()
