# Chzzk command codes from https://github.com/kimcore/chzzk/blob/main/src/chat/types.ts

CHZZK_CHAT_CMD = {
    'ping'    : 0,
    'pong'    : 10000,
    'connect' : 100,
}

CHZZK_COMMAND_VERSION = 3

# Soop 패킷 타입 (헤더에는 10진수 4자리로 기록됨: 0x12 -> "0018")
SOOP_PACKET_TYPE = {
    'keepalive'   : 0x00,
    'login'       : 0x01,
    'joinch'      : 0x02,
    'chatmesg'    : 0x05,
    'setbjstat'   : 0x07,  # 방송 상태 변경 (방송 종료 등)
    'sendballoon' : 0x12,  # 별풍선 후원
}

''' Chzzk 수신 프레임 예시 (bdy는 채팅 이벤트 리스트)
{
    "svcid": "game",
    "ver": "1",
    "bdy": [
        {
            "uid": "0f0cc02bad11d7dabee2d55f6d0313f6",
            "profile": "{\"userIdHash\":\"0f0cc02bad11d7dabee2d55f6d0313f6\",\"nickname\":\"뮌스터\",...}",
            "msg": "가오는",
            "extras": "{\"osType\":\"AOS\",\"chatType\":\"STREAMING\",\"payAmount\":1000,...}",
            "msgTime": 1769585095674
        }
    ],
    "cmd": 93101,
    "cid": "N2G4yj"
}

Soop 수신 패킷 예시 (CHATMESG, \x0C = 필드 구분자)
"\x1B\t000500004500" + "\x0C안녕하세요\x0Cuser_id\x0C0\x0C1\x0Cnickname\x0C..."
'''
