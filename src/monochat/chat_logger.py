"""채팅 로그 기록

log/{platform}/{channel}/YYYY-MM-DD.log 에 한 줄씩 남긴다.
기록할 때마다 날짜를 확인해서, 바뀌었으면 새 파일 핸들러로 갈아끼운다.
"""

import datetime
import logging
import os

from .config import LOG_DIR
from .message import Message


class ChatLogger:
    def __init__(self, log_dir: str = LOG_DIR):
        self.log_dir = log_dir
        self._logger = logging.getLogger('monochat_chat_log')
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._channel_dir = None
        self._handler = None

    def setup(self, platform: str, channel_name: str):
        """연결 성공 시 호출"""
        self._channel_dir = os.path.join(self.log_dir, platform, channel_name)
        os.makedirs(self._channel_dir, exist_ok=True)
        self._handler_for(datetime.date.today())

    def _handler_for(self, day: datetime.date):
        path = os.path.join(self._channel_dir, f'{day.isoformat()}.log')
        if self._handler and self._handler.baseFilename == os.path.abspath(path):
            return
        self._detach()
        self._handler = logging.FileHandler(path, encoding='utf-8')
        self._handler.setFormatter(logging.Formatter('%(message)s'))
        self._logger.addHandler(self._handler)

    def _detach(self):
        if self._handler:
            self._logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    @property
    def log_path(self):
        return self._handler.baseFilename if self._handler else None

    def log(self, message: Message):
        if not self._channel_dir:
            return
        now = datetime.datetime.now()
        self._handler_for(now.date())

        line = f'[{now:%H:%M:%S}][{"후원" if message.has_donation else "채팅"}] {message.sender}: {message.content or ""}'
        if message.has_donation:
            line += f' ({message.donated})'
        self._logger.info(line)

    def close(self):
        self._detach()
        self._channel_dir = None
