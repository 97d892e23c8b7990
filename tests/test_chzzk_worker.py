"""치지직 워커 end-to-end 테스트 (가짜 웹소켓)"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from monochat import chzzk_codec
from monochat.api import ChzzkSession
from monochat.chzzk_worker import ChzzkChatWorker, connect_chzzk
from monochat.exceptions import BootstrapError, TransportError

URL = 'https://api.chzzk.naver.com/polling/v3.1/channels/17aa057a8248b53affe30512a91481f5/live-status'


def chat_frame(*texts, pay_amount=None):
    events = []
    for text in texts:
        event = {'uid': 'u', 'profile': json.dumps({'nickname': 'nick'}), 'msg': text}
        if pay_amount is not None:
            event['extras'] = json.dumps({'payAmount': pay_amount})
        events.append(event)
    return json.dumps({'svcid': 'game', 'cmd': 93101, 'bdy': json.dumps(events)})


@pytest.fixture
def session(monkeypatch):
    monkeypatch.setattr('monochat.api.fetch_chzzk_session', lambda url: ChzzkSession('cid', 'tok'))


@pytest.fixture
def connect(monkeypatch):
    """websockets.connect를 가짜 소켓을 돌려주는 AsyncMock으로 교체"""
    def install(ws):
        mock = AsyncMock(return_value=ws)
        monkeypatch.setattr('monochat.chat_worker.websockets.connect', mock)
        return mock
    return install


def encoded(command):
    return chzzk_codec.encode_command(command, 'cid')


@pytest.mark.asyncio
class TestChzzkChatWorker:

    async def test_messages_in_order_and_malformed_dropped(self, session, connect, fake_ws_class):
        ws = fake_ws_class([
            chat_frame('a', 'b'),
            'not json',
            b'\x00binary',
            chat_frame('c', pay_amount=1000),
        ], close_after=True)
        mock_connect = connect(ws)

        stream = await connect_chzzk(URL)
        received = [m async for m in stream]

        assert [(m.sender, m.content, m.donated) for m in received] == [
            ('nick', 'a', None), ('nick', 'b', None), ('nick', 'c', 1000),
        ]
        assert mock_connect.call_args.args[0] == 'wss://kr-ss1.chat.naver.com/chat'
        assert ws.sent[0] == encoded(chzzk_codec.auth('tok'))
        assert ws.closed

    async def test_cancel_mid_stream(self, session, connect, fake_ws_class):
        ws = fake_ws_class([chat_frame('a')])
        connect(ws)

        stream = await connect_chzzk(URL)
        first = await stream.next_message(timeout=1)
        assert first.content == 'a'

        stream.cancel()
        ws.feed(chat_frame('b'))
        assert await stream.next_message(timeout=0.05) is None
        assert stream.is_closed

        await stream.close()
        assert ws.closed
        assert stream.try_next_message() is None

    async def test_keepalive_sends_ping_then_pong(self, session, connect, fake_ws_class):
        ws = fake_ws_class()
        connect(ws)

        stream = await connect_chzzk(URL, keepalive_interval=0.01)
        await asyncio.sleep(0.05)

        assert ws.sent[1] == encoded(chzzk_codec.PING)
        assert ws.sent[2] == encoded(chzzk_codec.PONG)
        await stream.close()

    async def test_keepalive_failure_ends_stream(self, session, connect, fake_ws_class):
        ws = fake_ws_class()
        connect(ws)

        stream = await connect_chzzk(URL, keepalive_interval=0.01)
        ws.fail_send = True

        assert await stream.next_message(timeout=1) is None
        assert stream.is_closed
        assert ws.closed

    async def test_server_ping_answered_with_pong(self, session, connect, fake_ws_class):
        ws = fake_ws_class(['{"ver":"2","cmd":0}'], close_after=True)
        connect(ws)

        stream = await connect_chzzk(URL)
        assert [m async for m in stream] == []
        assert ws.sent[1] == encoded(chzzk_codec.PONG)

    async def test_auth_send_failure(self, session, connect, fake_ws_class):
        ws = fake_ws_class()
        ws.fail_send = True
        connect(ws)

        with pytest.raises(TransportError):
            await connect_chzzk(URL)
        assert ws.closed

    async def test_connect_failure(self, session, monkeypatch):
        monkeypatch.setattr('monochat.chat_worker.websockets.connect',
                            AsyncMock(side_effect=OSError('refused')))
        with pytest.raises(TransportError):
            await connect_chzzk(URL)

    async def test_bootstrap_failure_before_connect(self, connect, fake_ws_class):
        mock_connect = connect(fake_ws_class())
        response = MagicMock()
        response.json.return_value = {'code': 403, 'message': 'forbidden', 'content': None}

        with patch('monochat.api.requests.get', return_value=response):
            with pytest.raises(BootstrapError, match='403'):
                await connect_chzzk(URL)
        mock_connect.assert_not_called()

    async def test_channel_name(self, session, connect, fake_ws_class):
        connect(fake_ws_class(close_after=True))
        worker = ChzzkChatWorker(URL)
        assert worker.channel_name is None

        stream = await worker.start()
        assert stream.worker.channel_name == 'cid'
        await stream.close()


@pytest.mark.asyncio
async def test_deeply_nested_frame_skipped(session, connect, fake_ws_class):
    ws = fake_ws_class(['[' * 100000 + ']' * 100000, chat_frame('after')], close_after=True)
    connect(ws)

    stream = await connect_chzzk(URL)
    assert [m.content async for m in stream] == ['after']
