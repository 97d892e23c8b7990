"""치지직 / 숲 세션 부트스트랩 API 호출

requests 기반 동기 함수들. 워커에서는 asyncio.to_thread()로 감싸서 호출한다.
실패는 모두 BootstrapError로 변환되며, 기본값으로 대체하지 않는다.
"""
import logging
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

import requests

from .config import (
    CHZZK_ACCESS_TOKEN_URL, CHZZK_LIVE_STATUS_URL,
    SOOP_AQUA_API_URL, SOOP_CHAT_SERVER, HTTP_TIMEOUT,
)
from .exceptions import BootstrapError

HEADERS = {'User-Agent': ''}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChzzkSession:
    channel_id: str
    access_token: str  # 이번 연결에서만 사용


@dataclass(frozen=True)
class SoopSession:
    chat_domain: str
    chat_port: str
    chat_no: int
    password: str  # 비밀번호 없는 방이면 빈 문자열

    @property
    def chat_url(self) -> str:
        return SOOP_CHAT_SERVER.format(domain=self.chat_domain, port=self.chat_port)


def chzzk_live_status_url(url_or_id: str) -> str:
    """채널 UID(32자 hex) 또는 방송 페이지 URL → live-status API URL

    이미 api.chzzk.naver.com 주소라면 그대로 반환한다.
    """
    url_or_id = url_or_id.strip()
    if urlsplit(url_or_id).netloc == 'api.chzzk.naver.com':
        return url_or_id
    match = re.search(r'[a-f0-9]{32}', url_or_id)
    if not match:
        raise BootstrapError(f'invalid chzzk channel: {url_or_id!r}')
    return CHZZK_LIVE_STATUS_URL.format(channel_id=match.group(0))


def _chzzk_get(url: str, params: dict | None = None) -> dict:
    """치지직 공통 응답 {code, message, content}에서 content 추출"""
    try:
        response = requests.get(url, params=params, headers=HEADERS, timeout=HTTP_TIMEOUT)
    except requests.RequestException as e:
        raise BootstrapError(f'chzzk api request failed: {e}') from e

    try:
        data = response.json()
    except ValueError as e:
        raise BootstrapError(f'chzzk api returned invalid json (HTTP {response.status_code})') from e

    if not isinstance(data, dict):
        raise BootstrapError('chzzk api returned unexpected response')

    code = data.get('code')
    if code != 200:
        message = data.get('message')
        if message:
            raise BootstrapError(f'chzzk api error: {code} ({message})')
        raise BootstrapError(f'chzzk api error: {code}')

    content = data.get('content')
    if not isinstance(content, dict):
        raise BootstrapError('chzzk api response has no content')
    return content


def fetch_chatChannelId(url: str) -> str:
    content = _chzzk_get(url)
    chat_channel_id = content.get('chatChannelId')
    if not chat_channel_id:
        raise BootstrapError('chatChannelId is missing (channel may be offline)')
    return chat_channel_id


def fetch_accessToken(chatChannelId: str) -> str:
    content = _chzzk_get(CHZZK_ACCESS_TOKEN_URL, params={
        'channelId': chatChannelId,
        'chatType': 'STREAMING',
    })
    access_token = content.get('accessToken')
    if not access_token:
        raise BootstrapError('accessToken is missing')
    return access_token


def fetch_chzzk_session(url: str) -> ChzzkSession:
    """채팅 채널 ID → 액세스 토큰 순서로 두 번 호출

    url은 다음 중 하나:
      https://api.chzzk.naver.com/manage/v1/chats/sources/<uuid>
      https://api.chzzk.naver.com/polling/v3.1/channels/<uuid>/live-status
    """
    chat_channel_id = fetch_chatChannelId(url)
    access_token = fetch_accessToken(chat_channel_id)
    logger.debug('치지직 세션 획득: channelId=%s', chat_channel_id)
    return ChzzkSession(chat_channel_id, access_token)


def _soop_field(channel: dict, key: str) -> str:
    value = channel.get(key)
    if value is None:
        raise BootstrapError(f'aqua api response is missing {key}')
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise BootstrapError(f'aqua api response has invalid {key}: {value!r}')
    return str(value)


def fetch_soop_session(aqua_url: str) -> SoopSession:
    """aqua 컴포넌트 URL의 쿼리를 그대로 aqua_api에 POST

    예: https://aqua.sooplive.co.kr/component.php?szKey=<key>
    """
    try:
        parts = urlsplit(aqua_url)
    except (TypeError, ValueError) as e:
        raise BootstrapError('invalid url') from e
    if not parts.scheme or not parts.netloc:
        raise BootstrapError(f'invalid url: {aqua_url!r}')
    if not parts.query:
        raise BootstrapError('invalid aqua url: query string is missing')

    try:
        response = requests.post(
            SOOP_AQUA_API_URL,
            data=parts.query,
            headers=dict(HEADERS, **{'Content-Type': 'application/x-www-form-urlencoded'}),
            timeout=HTTP_TIMEOUT,
        )
    except requests.RequestException as e:
        raise BootstrapError(f'failed to send aqua api request: {e}') from e

    try:
        data = response.json()
    except ValueError as e:
        raise BootstrapError(f'failed to parse aqua api response (HTTP {response.status_code})') from e

    channel = data.get('CHANNEL') if isinstance(data, dict) else None
    if not isinstance(channel, dict):
        raise BootstrapError('aqua api response has no CHANNEL')

    chat_domain = _soop_field(channel, 'CHDOMAIN')
    chat_port = _soop_field(channel, 'CHPT')
    chat_no = _soop_field(channel, 'CHATNO')
    password = _soop_field(channel, 'PWD')

    if not chat_domain:
        raise BootstrapError('aqua api response has empty CHDOMAIN')
    if not (chat_port.isascii() and chat_port.isdigit()):
        raise BootstrapError(f'aqua api response has invalid CHPT: {chat_port!r}')
    if not (chat_no.isascii() and chat_no.isdigit()):
        raise BootstrapError(f'aqua api response has invalid CHATNO: {chat_no!r}')
    try:
        chat_no = int(chat_no)
    except ValueError as e:
        raise BootstrapError('aqua api response has invalid CHATNO: too many digits') from e

    logger.debug('숲 세션 획득: %s:%s chatno=%s', chat_domain, chat_port, chat_no)
    return SoopSession(chat_domain, chat_port, chat_no, password)
