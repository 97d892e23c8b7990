"""소비자 쪽 메시지 스트림

워커(run)가 백그라운드 태스크로 돌면서 디코딩된 Message를 큐에 넣고,
소비자는 next_message() / try_next_message() / async for 로 꺼낸다.

- 큐는 무제한이다. 얼마나 쌓아둘지는 소비자 책임.
- 워커가 끝나면 종료 표식이 큐 맨 뒤에 들어간다. 소비자가 그것을 꺼낸 시점부터 is_closed가 True.
- cancel()은 여러 번 불러도 안전하며, 호출 이후에는 어떤 Message도 전달되지 않는다.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)

_END = object()


class MessageStream:
    """사용법:
        stream = await connect_chzzk(url)
        async for message in stream:
            print(message)
        await stream.close()
    """

    def __init__(self, worker):
        self._worker = worker
        self._queue = asyncio.Queue()
        self._cancelled = False
        self._ended = False
        self._exhausted = False
        self._task = asyncio.create_task(worker.run(self._push))
        self._task.add_done_callback(self._on_worker_done)

    @property
    def worker(self):
        return self._worker

    def _push(self, message):
        if self._cancelled:
            return
        self._queue.put_nowait(message)

    def _on_worker_done(self, task):
        if not task.cancelled() and task.exception() is not None:
            logger.warning('채팅 워커 비정상 종료', exc_info=task.exception())
        self._ended = True
        self._queue.put_nowait(_END)

    def _take(self, item):
        if item is _END:
            # 다른 대기자도 종료를 볼 수 있도록 표식은 되돌려 놓는다
            self._queue.put_nowait(_END)
            self._exhausted = True
            return None
        return item

    @property
    def is_closed(self) -> bool:
        return self._cancelled or self._exhausted

    @property
    def buffered_count(self) -> int:
        size = self._queue.qsize()
        if self._ended and size:
            size -= 1
        return size

    def try_next_message(self):
        """대기 없이 꺼내기. 당장 없거나 종료됐으면 None (구분은 is_closed로)"""
        if self.is_closed:
            return None
        try:
            item = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        return self._take(item)

    async def next_message(self, timeout: float | None = None):
        """다음 메시지 대기. 타임아웃이나 스트림 종료 시 None"""
        if self.is_closed:
            return None
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        item = self._take(item)
        if self._cancelled:
            return None
        return item

    def cancel(self):
        if self._cancelled:
            return
        self._cancelled = True
        dropped = 0
        while not self._queue.empty():
            if self._queue.get_nowait() is not _END:
                dropped += 1
        if dropped:
            logger.debug('취소로 버려진 메시지 %d건', dropped)
        self._worker.stop()

    async def close(self):
        self.cancel()
        await asyncio.wait({self._task})

    def __aiter__(self):
        return self

    async def __anext__(self):
        message = await self.next_message()
        if message is None:
            raise StopAsyncIteration
        return message

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
