"""플랫폼 공통 메시지 모델"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """치지직/숲 공통 채팅·후원 이벤트

    content와 donated 중 적어도 하나는 의미 있는 값이지만, 모델 차원에서 강제하지 않는다.
    - 일반 채팅: content만 존재
    - 숲 별풍선: donated만 존재
    - 치지직 후원: 둘 다 존재 (후원 메시지 + 금액)
    """
    sender: str
    content: str | None = None
    donated: int | None = None

    @property
    def has_content(self) -> bool:
        return self.content is not None

    @property
    def has_donation(self) -> bool:
        return self.donated is not None

    def __str__(self):
        if self.donated is None:
            return f'{self.sender} : {self.content or ""}'
        return f'{self.sender} : {self.content or ""} ({self.donated})'
