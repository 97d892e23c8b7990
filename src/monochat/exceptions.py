"""monochat 예외 정의

- BootstrapError: 스트림 생성 전 실패 (URL, HTTP, API 응답 코드). 호출자가 반드시 처리해야 하는 유일한 오류.
- TransportError: 웹소켓 연결/핸드셰이크 실패. 스트리밍 시작 이후의 소켓 오류는 스트림 종료로만 나타난다.
- ProtocolError: 프레임 단위 디코딩 실패. 워커 내부에서 잡아서 버리고 debug 로그만 남긴다.
"""


class MonoChatError(Exception):
    pass


class BootstrapError(MonoChatError):
    pass


class TransportError(MonoChatError):
    pass


class ProtocolError(MonoChatError):
    pass
