"""숲 채팅 워커

Connecting → Handshaking → AckDiscard → Streaming → Terminated
  - aqua API로 채팅 서버 주소/방 번호/비밀번호를 얻고 "chat" 서브프로토콜로 연결
  - 로그인 → 입장 패킷 전송 후 응답 프레임 하나를 버림
  - 생존 플래그가 살아있는 동안 6초마다 keepalive 전송
  - 방송 상태 변경(0x07) 수신 시 플래그가 내려가고 다음 keepalive 시점에 종료
"""

import asyncio
import logging

import websockets

from . import api, soop_codec
from .chat_worker import ChatWorker
from .config import SOOP_KEEPALIVE_INTERVAL, SOOP_SUBPROTOCOL
from .message_stream import MessageStream

logger = logging.getLogger(__name__)


class SoopChatWorker(ChatWorker):
    platform = 'soop'
    keepalive_interval = SOOP_KEEPALIVE_INTERVAL

    def __init__(self, url, keepalive_interval=None):
        super().__init__(url, keepalive_interval)
        self.session = None
        self.liveness = soop_codec.Liveness()

    @property
    def is_alive(self) -> bool:
        return self.liveness.alive

    @property
    def channel_name(self):
        return str(self.session.chat_no) if self.session else None

    async def connect_chat(self):
        self.session = await asyncio.to_thread(api.fetch_soop_session, self.url)
        await self.open_websocket(self.session.chat_url, subprotocols=[SOOP_SUBPROTOCOL])
        await self.send_handshake(soop_codec.write_login(), 'login packet')
        await self.send_handshake(
            soop_codec.write_joinch(self.session.chat_no, self.session.password), 'join packet')

        # 입장 응답이라고 가정하고 한 프레임 버림 (타입/내용 확인 안 함)
        try:
            await self.ws.recv()
        except websockets.ConnectionClosed:
            logger.info('[soop] 입장 응답 전에 연결 끊김')

        logger.info('[soop] %s 채팅 연결 완료', self.session.chat_no)

    async def handle_frame(self, frame):
        message = soop_codec.handle_message(frame, self.liveness)
        if message is None:
            return []
        return [message]

    async def keepalive(self):
        while self.liveness:
            await asyncio.sleep(self.keepalive_interval)
            if not self.liveness:
                break
            try:
                await self.ws.send(soop_codec.write_keepalive())
            except websockets.ConnectionClosed:
                logger.info('[soop] keepalive 전송 실패')
                return
        logger.info('[soop] 방송 상태 변경으로 keepalive 중지')


async def connect_soop(url, keepalive_interval=None) -> MessageStream:
    """숲 채팅 스트림 열기

    url: https://aqua.sooplive.co.kr/component.php?szKey=<key>
    """
    return await SoopChatWorker(url, keepalive_interval).start()
