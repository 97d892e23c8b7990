"""WebSocket 채팅 수신 워커 공통부 (async)

플랫폼별 워커(ChzzkChatWorker, SoopChatWorker)는 이 클래스를 상속해서
connect_chat / handle_frame / keepalive 세 가지만 구현한다.

run()은 세 작업을 동시에 돌리고 먼저 끝나는 쪽이 스트림을 끝낸다.
  - 수신 루프: 프레임 디코딩 → Message 전달 (소켓이 닫히면 종료)
  - keepalive: 주기적 제어 패킷 전송 (전송 실패나 생존 플래그 해제 시 종료)
  - 중지 신호: stop() 호출
나머지 작업은 취소되고 소켓은 닫힌다. 재연결은 하지 않는다.
"""

import asyncio
import logging

import websockets

from .exceptions import ProtocolError, TransportError
from .message_stream import MessageStream

logger = logging.getLogger(__name__)


class ChatWorker:
    platform = None
    keepalive_interval = None

    def __init__(self, url, keepalive_interval=None):
        self.url = url
        if keepalive_interval is not None:
            self.keepalive_interval = keepalive_interval
        self.ws = None
        self.running = False
        self._stop_event = asyncio.Event()

    @property
    def channel_name(self):
        raise NotImplementedError

    async def connect_chat(self):
        """세션 부트스트랩 + 소켓 연결 + 핸드셰이크. 실패 시 BootstrapError / TransportError"""
        raise NotImplementedError

    async def handle_frame(self, frame):
        """수신 프레임 하나 → Message 리스트. 깨진 프레임은 ProtocolError"""
        raise NotImplementedError

    async def keepalive(self):
        raise NotImplementedError

    async def start(self) -> MessageStream:
        await self.connect_chat()
        return MessageStream(self)

    async def open_websocket(self, url, **kwargs):
        try:
            self.ws = await websockets.connect(url, **kwargs)
        except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
            raise TransportError(f'failed to connect to {url}: {e}') from e

    async def send_handshake(self, data, what):
        try:
            await self.ws.send(data)
        except websockets.ConnectionClosed as e:
            await self.ws.close()
            raise TransportError(f'failed to send {what}') from e

    async def _receive(self, on_message):
        try:
            async for frame in self.ws:
                try:
                    messages = await self.handle_frame(frame)
                except ProtocolError:
                    logger.debug('[%s] 프레임 디코딩 실패, 건너뜀', self.platform, exc_info=True)
                    continue
                for message in messages:
                    on_message(message)
        except websockets.ConnectionClosed:
            logger.info('[%s] 연결 끊김', self.platform)

    async def run(self, on_message):
        """메인 루프 — MessageStream이 백그라운드 태스크로 실행"""
        self.running = True
        tasks = {
            asyncio.create_task(self._receive(on_message), name='receive'),
            asyncio.create_task(self.keepalive(), name='keepalive'),
            asyncio.create_task(self._stop_event.wait(), name='stop'),
        }
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.warning('[%s] %s 작업 오류', self.platform, task.get_name(),
                                   exc_info=task.exception())
                else:
                    logger.info('[%s] %s 작업 종료로 스트림 종료', self.platform, task.get_name())
        finally:
            self.running = False
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await self.ws.close()

    def stop(self):
        self._stop_event.set()
