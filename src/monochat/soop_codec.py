"""숲 채팅 패킷 인코딩/디코딩

패킷 = 헤더 14바이트 + 본문
  \\x1B\\x09 | 타입 4자리 | 본문 길이 6자리 | "00" | 본문
본문은 \\x0C로 구분된 필드의 나열이고, 스키마 없이 타입별 위치로만 해석한다.
"""

import logging

from .cmd_type import SOOP_PACKET_TYPE
from .exceptions import ProtocolError
from .message import Message

logger = logging.getLogger(__name__)

HEADER_LEN = 2 + 4 + 6 + 2
SEPARATOR = '\x0C'


def write_packet(packet_type: int, body: str) -> str:
    return '\x1B\x09{:04}{:06}{:02}{}'.format(packet_type, len(body.encode('utf-8')), 0, body)


def write_keepalive() -> str:
    return write_packet(SOOP_PACKET_TYPE['keepalive'], '\x0C')


def write_login() -> str:
    return write_packet(SOOP_PACKET_TYPE['login'], '\x0C\x0C\x0C16\x0C')


def write_joinch(chatno: int, pwd: str) -> str:
    return write_packet(
        SOOP_PACKET_TYPE['joinch'],
        f'\x0C{chatno}\x0C\x0C0\x0C\x0Clog\x11\x12pwd\x11{pwd}\x12\x0C',
    )


def parse_packet(packet) -> tuple[int, str]:
    """패킷 → (타입, 본문)

    헤더의 본문 길이 필드는 검증하지 않는다.
    """
    if isinstance(packet, (bytes, bytearray)):
        try:
            packet = packet.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ProtocolError('packet is not valid utf-8') from e

    if len(packet) < HEADER_LEN:
        raise ProtocolError('packet too short')

    packet_type = packet[2:6]
    if not (packet_type.isascii() and packet_type.isdigit()):
        raise ProtocolError(f'failed to parse packet type: {packet_type!r}')
    return int(packet_type), packet[HEADER_LEN:]


def _field(fields: list[str], index: int, packet_name: str) -> str:
    if index >= len(fields):
        raise ProtocolError(f'invalid {packet_name} packet')
    return fields[index]


def handle_chatmesg(body: str) -> Message:
    # 메시지는 1번, 닉네임은 메시지로부터 4칸 뒤
    fields = body.split(SEPARATOR)
    message = _field(fields, 1, 'chatmesg')
    name = _field(fields, 1 + 4, 'chatmesg')
    if not name:
        raise ProtocolError('chatmesg packet has empty sender')
    return Message(sender=name, content=message, donated=None)


def handle_sendballoon(body: str) -> Message:
    # 보낸 사람은 2번, 개수는 그 다음 칸
    fields = body.split(SEPARATOR)
    user = _field(fields, 2, 'sendballoon')
    amount = _field(fields, 2 + 1, 'sendballoon')
    if not user:
        raise ProtocolError('sendballoon packet has empty sender')
    if not (amount.isascii() and amount.isdigit()):
        raise ProtocolError(f'failed to parse amount: {amount!r}')
    try:
        donated = int(amount)
    except ValueError as e:
        # int 변환 자릿수 제한 초과
        raise ProtocolError(f'failed to parse amount: {amount[:20]!r}...') from e
    return Message(sender=user, content=None, donated=donated)


class Liveness:
    """연결 생존 플래그

    디코딩 루프가 내리고 keepalive 태스크가 읽는다. 둘 다 같은 이벤트 루프에서 돌기 때문에
    별도 잠금 없이 속성 접근만으로 충분하다.
    """

    def __init__(self):
        self.alive = True

    def kill(self):
        self.alive = False

    def __bool__(self):
        return self.alive


def handle_message(frame, liveness: Liveness) -> Message | None:
    """수신 프레임 하나 처리

    채팅/별풍선이면 Message, 건너뛸 프레임이면 None, 깨진 프레임이면 ProtocolError.
    """
    packet_type, body = parse_packet(frame)

    if packet_type == SOOP_PACKET_TYPE['chatmesg']:
        return handle_chatmesg(body)
    if packet_type == SOOP_PACKET_TYPE['sendballoon']:
        return handle_sendballoon(body)
    if packet_type == SOOP_PACKET_TYPE['setbjstat']:
        logger.info('방송 상태 변경 수신, 연결 종료 예정')
        liveness.kill()
        return None

    logger.debug('처리하지 않는 패킷 타입: %04d', packet_type)
    return None
