"""
접속 주소 및 상수 정의
"""
import os


def get_base_dir():
    """
    로그 등 사용자 데이터 기본 디렉토리 반환
    - MONOCHAT_HOME 환경변수가 있으면 그 경로
    - 없으면 현재 작업 디렉토리
    """
    return os.environ.get('MONOCHAT_HOME') or os.getcwd()


BASE_DIR = get_base_dir()

# 채팅 로그 경로 (log/{platform}/{channel}/YYYY-MM-DD.log)
LOG_DIR = os.path.join(BASE_DIR, 'log')

# 치지직
CHZZK_CHAT_SERVER = 'wss://kr-ss1.chat.naver.com/chat'
CHZZK_ACCESS_TOKEN_URL = 'https://comm-api.game.naver.com/nng_main/v1/chats/access-token'
CHZZK_LIVE_STATUS_URL = 'https://api.chzzk.naver.com/polling/v3.1/channels/{channel_id}/live-status'
CHZZK_KEEPALIVE_INTERVAL = 30  # 초

# 숲 (구 아프리카TV)
SOOP_AQUA_API_URL = 'https://live.sooplive.co.kr/api/aqua_api.php'
SOOP_CHAT_SERVER = 'ws://{domain}:{port}/Websocket'
SOOP_SUBPROTOCOL = 'chat'
SOOP_KEEPALIVE_INTERVAL = 6  # 초

# HTTP 요청 타임아웃 (초)
HTTP_TIMEOUT = 10
