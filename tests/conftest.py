import asyncio
import os
import sys

import pytest
from websockets.exceptions import ConnectionClosedOK

# src/ 모듈 import 경로 추가
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


class FakeWebSocket:
    """websockets 연결 흉내

    미리 넣어둔 프레임을 순서대로 돌려주고, 다 떨어지면
    close_after=True면 바로 닫히고, 아니면 feed()나 close()가 올 때까지 대기한다.
    """

    def __init__(self, frames=(), close_after=False):
        self.frames = list(frames)
        self.close_after = close_after
        self.fail_send = False
        self.sent = []
        self.closed = False
        self._wakeup = asyncio.Event()

    def feed(self, frame):
        self.frames.append(frame)
        self._wakeup.set()

    async def send(self, data):
        if self.closed or self.fail_send:
            raise ConnectionClosedOK(None, None)
        self.sent.append(data)

    async def recv(self):
        while not self.frames:
            if self.closed or self.close_after:
                raise ConnectionClosedOK(None, None)
            self._wakeup.clear()
            await self._wakeup.wait()
        return self.frames.pop(0)

    async def close(self):
        self.closed = True
        self._wakeup.set()

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return await self.recv()
        except ConnectionClosedOK:
            raise StopAsyncIteration


@pytest.fixture
def fake_ws_class():
    return FakeWebSocket
