"""ChatLogger 테스트"""

import datetime
import os

from monochat.chat_logger import ChatLogger
from monochat.message import Message


class TestChatLogger:

    def setup_method(self):
        self.chat_logger = None

    def teardown_method(self):
        if self.chat_logger:
            self.chat_logger.close()

    def read_log(self):
        with open(self.chat_logger.log_path, encoding='utf-8') as f:
            return f.read().splitlines()

    def test_log_path(self, tmp_path):
        self.chat_logger = ChatLogger(str(tmp_path))
        self.chat_logger.setup('chzzk', 'N2G4yj')

        expected = os.path.join(str(tmp_path), 'chzzk', 'N2G4yj', f'{datetime.date.today().isoformat()}.log')
        assert self.chat_logger.log_path == expected

    def test_chat_and_donation_lines(self, tmp_path):
        self.chat_logger = ChatLogger(str(tmp_path))
        self.chat_logger.setup('soop', '1234')

        self.chat_logger.log(Message('테스터', '안녕하세요'))
        self.chat_logger.log(Message('fan', None, 10))

        chat_line, donation_line = self.read_log()
        assert chat_line.endswith('[채팅] 테스터: 안녕하세요')
        assert donation_line.endswith('[후원] fan:  (10)')

    def test_log_before_setup_ignored(self, tmp_path):
        self.chat_logger = ChatLogger(str(tmp_path))
        self.chat_logger.log(Message('a', 'b'))
        assert os.listdir(str(tmp_path)) == []

    def test_close_resets(self, tmp_path):
        self.chat_logger = ChatLogger(str(tmp_path))
        self.chat_logger.setup('chzzk', 'cid')
        self.chat_logger.close()
        assert self.chat_logger.log_path is None


def test_rolls_over_to_new_day(tmp_path):
    chat_logger = ChatLogger(str(tmp_path))
    chat_logger.setup('chzzk', 'cid')
    first = chat_logger.log_path

    chat_logger._handler_for(datetime.date(2000, 1, 2))
    try:
        assert chat_logger.log_path != first
        assert chat_logger.log_path.endswith('2000-01-02.log')
    finally:
        chat_logger.close()
