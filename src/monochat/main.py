"""monochat 콘솔 뷰어

사용법:
    python -m monochat chzzk https://chzzk.naver.com/live/<uid>
    python -m monochat soop "https://aqua.sooplive.co.kr/component.php?szKey=<key>"

스트림이 끝나거나 Ctrl+C를 누를 때까지 "보낸사람 : 내용 (후원액)"을 출력한다.
"""

import argparse
import asyncio
import logging

from .api import chzzk_live_status_url
from .chat_logger import ChatLogger
from .chzzk_worker import connect_chzzk
from .exceptions import MonoChatError
from .soop_worker import connect_soop

logger = logging.getLogger(__name__)

CONNECTORS = {
    'chzzk': connect_chzzk,
    'soop': connect_soop,
}


def build_parser():
    parser = argparse.ArgumentParser(prog='monochat', description='치지직 / 숲 채팅 콘솔 뷰어')
    parser.add_argument('platform', choices=sorted(CONNECTORS))
    parser.add_argument('url', help='치지직: 채널 UID 또는 URL, 숲: aqua 컴포넌트 URL')
    parser.add_argument('--log-dir', default=None, help='채팅 로그를 기록할 디렉토리')
    parser.add_argument('--timeout', type=float, default=1.0, help='메시지 대기 주기 (초)')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


async def watch(platform, url, log_dir=None, timeout=1.0, output=print):
    """스트림을 열고 끝날 때까지 메시지 출력. 출력한 메시지 수 반환"""
    if platform == 'chzzk':
        url = chzzk_live_status_url(url)

    stream = await CONNECTORS[platform](url)
    logger.info('%s 연결됨, 메시지 수신 중...', platform)

    chat_logger = None
    if log_dir:
        chat_logger = ChatLogger(log_dir)
        chat_logger.setup(platform, stream.worker.channel_name)

    count = 0
    try:
        while not stream.is_closed:
            message = await stream.next_message(timeout)
            if message is None:
                continue
            output(message)
            count += 1
            if chat_logger:
                chat_logger.log(message)
    finally:
        await stream.close()
        if chat_logger:
            chat_logger.close()
        logger.info('스트림 종료 (메시지 %d건)', count)
    return count


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    try:
        asyncio.run(watch(args.platform, args.url, args.log_dir, args.timeout))
    except MonoChatError as e:
        logger.error('연결 실패: %s', e)
        return 1
    except KeyboardInterrupt:
        logger.info('중지')
    return 0
