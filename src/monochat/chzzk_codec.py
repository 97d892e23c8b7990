"""치지직 채팅 명령 인코딩/디코딩

송신: {svcid, cid, cmd, ver, bdy} 봉투. bdy는 본문을 JSON 문자열로 한 번 더 직렬화해서 넣는다.
수신: 봉투에서 bdy를 꺼내 (문자열이면 다시) 파싱 → 채팅 이벤트 리스트.
      각 이벤트의 profile / extras도 JSON 문자열이라 이중 파싱이 필요하다.
"""

import json
import logging
from dataclasses import dataclass, field

from .cmd_type import CHZZK_CHAT_CMD, CHZZK_COMMAND_VERSION
from .exceptions import ProtocolError
from .message import Message

logger = logging.getLogger(__name__)

SERVICE_ID = 'game'
ANONYMOUS_NICKNAME = '익명의 후원자'


def _dumps(obj) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(',', ':'))


@dataclass(frozen=True)
class Command:
    """송신 명령 (Auth / Ping / Pong)"""
    cmd: int
    bdy: dict = field(default_factory=dict)
    ver: int = CHZZK_COMMAND_VERSION


def auth(access_token: str) -> Command:
    return Command(CHZZK_CHAT_CMD['connect'], {'accTkn': access_token, 'auth': 'READ'})


PING = Command(CHZZK_CHAT_CMD['ping'])
PONG = Command(CHZZK_CHAT_CMD['pong'])


def encode_command(command: Command, channel_id: str) -> str:
    return _dumps({
        'svcid': SERVICE_ID,
        'cid': channel_id,
        'cmd': command.cmd,
        'ver': command.ver,
        'bdy': _dumps(command.bdy),
    })


def _loads(raw, what: str):
    if not isinstance(raw, (str, bytes, bytearray)):
        raise ProtocolError(f'{what} is not a json string: {type(raw).__name__}')
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise ProtocolError(f'failed to parse {what}: {e}') from e


def decode_envelope(frame):
    """수신 프레임 → bdy"""
    envelope = _loads(frame, 'envelope')
    if not isinstance(envelope, dict) or 'bdy' not in envelope:
        raise ProtocolError('envelope has no bdy')
    body = envelope['bdy']
    if isinstance(body, str):
        body = _loads(body, 'bdy')
    return body


def is_server_ping(frame) -> bool:
    if not isinstance(frame, str):
        return False
    try:
        envelope = json.loads(frame)
    except (ValueError, RecursionError):
        return False
    return isinstance(envelope, dict) and envelope.get('cmd') == CHZZK_CHAT_CMD['ping']


def decode_chat_event(event: dict) -> Message:
    if not isinstance(event, dict):
        raise ProtocolError('chat event is not an object')

    if event.get('uid') == 'anonymous' and not event.get('profile'):
        nickname = ANONYMOUS_NICKNAME
    else:
        profile = _loads(event.get('profile'), 'profile')
        nickname = profile.get('nickname') if isinstance(profile, dict) else None
        if not isinstance(nickname, str) or not nickname:
            raise ProtocolError('profile has no nickname')

    content = event.get('msg')
    if not isinstance(content, str):
        raise ProtocolError('chat event has no msg')

    donated = None
    if event.get('extras') is not None:
        extras = _loads(event['extras'], 'extras')
        if not isinstance(extras, dict):
            raise ProtocolError('extras is not an object')
        donated = extras.get('payAmount')
        if donated is not None and (
                isinstance(donated, bool) or not isinstance(donated, int) or donated < 0):
            raise ProtocolError(f'invalid payAmount: {donated!r}')

    return Message(sender=nickname, content=content, donated=donated)


def decode_chat_messages(frame) -> list[Message]:
    """채팅/후원 프레임 → Message 리스트

    봉투 자체가 깨졌으면 ProtocolError. 개별 이벤트가 깨진 경우는 해당 이벤트만 버린다.
    """
    events = decode_envelope(frame)
    if not isinstance(events, list):
        raise ProtocolError('bdy is not a list of chat events')

    messages = []
    for event in events:
        try:
            messages.append(decode_chat_event(event))
        except ProtocolError:
            logger.debug('채팅 이벤트 디코딩 실패, 건너뜀', exc_info=True)
    return messages
