import asyncio
import json
import os
import threading
import unittest
from unittest import mock

import websockets
from websockets.exceptions import ConnectionClosedOK

from drawnumber.core import DrawNumberApp
from drawnumber.model.draw_number import DrawResult
from drawnumber.web.ws_server import WebSocketView

from tests.utils import FixedRandom, RecordingView


class OfflineWebSocketView(WebSocketView):
    """WebSocketView without its server thread."""

    def start(self):
        pass


class FakeConnection:
    def __init__(self, closed=False):
        self.sent = []
        self.closed = closed
        self.received = threading.Event()

    async def send(self, text):
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(json.loads(text))
        self.received.set()


class TestHandleMessage(unittest.TestCase):
    def setUp(self):
        self.view = OfflineWebSocketView()
        self.recorder = RecordingView()
        self.app = DrawNumberApp([self.view, self.recorder], rng=FixedRandom(50))

    def tearDown(self):
        self.app.quit()

    def test_json_attempt(self):
        reply = self.view.handle_message('{"cmd": "attempt", "value": 60}')
        self.assertEqual(reply["status"], "ok")
        self.assertEqual(reply["title"], "attempt")
        self.assertEqual(reply["data"]["result"], "YOURS_HIGH")

    def test_plain_number(self):
        reply = self.view.handle_message("50")
        self.assertEqual(reply["data"], DrawResult.YOU_WON.as_dict())
        self.assertEqual(self.recorder.of_kind("result"), [("result", DrawResult.YOU_WON)])

    def test_bytes_message(self):
        reply = self.view.handle_message(b'{"cmd": "attempt", "value": "40"}')
        self.assertEqual(reply["data"]["result"], "YOURS_LOW")

    def test_reset(self):
        self.view.handle_message("10")
        for message in ("reset", '"reset"', '{"cmd": "new"}'):
            reply = self.view.handle_message(message)
            self.assertEqual((reply["status"], reply["title"]), ("ok", "reset"))
        self.assertEqual(self.app.status()["remaining_attempts"], 10)

    def test_not_a_number(self):
        for message in ("abc", "4.5", '{"cmd": "attempt"}'):
            reply = self.view.handle_message(message)
            self.assertEqual(reply["status"], "error")
            self.assertEqual(reply["data"], {"message": "You must enter a number"})

    def test_out_of_range(self):
        reply = self.view.handle_message('{"cmd": "attempt", "value": 500}')
        self.assertEqual(reply["status"], "error")
        self.assertEqual(self.recorder.of_kind("number_incorrect"), [("number_incorrect",)])

    def test_quit_not_available(self):
        reply = self.view.handle_message('{"cmd": "quit"}')
        self.assertEqual((reply["status"], reply["title"]), ("error", "quit"))
        self.assertFalse(self.app.finished)

    def test_unknown(self):
        reply = self.view.handle_message("null")
        self.assertEqual((reply["status"], reply["title"]), ("error", "unknown"))


class TestBroadcast(unittest.TestCase):
    def test_send_all_drops_closed_clients(self):
        view = OfflineWebSocketView()
        alive, gone = FakeConnection(), FakeConnection(closed=True)
        view._clients.update({alive, gone})
        asyncio.run(view._send_all(json.dumps({"status": "ok", "title": "result", "data": None})))
        self.assertEqual(alive.sent, [{"status": "ok", "title": "result", "data": None}])
        self.assertEqual(view.client_count, 1)

    def test_without_loop_is_noop(self):
        view = OfflineWebSocketView()
        view.result(DrawResult.YOU_WON)
        view.display_error("ignored")

    def test_observer_calls_reach_clients(self):
        view = OfflineWebSocketView()
        client = FakeConnection()
        view._clients.add(client)
        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, daemon=True)
        thread.start()
        view._loop = loop
        try:
            view.result(DrawResult.YOURS_LOW)
            self.assertTrue(client.received.wait(timeout=5))
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join(timeout=5)
            loop.close()
        self.assertEqual(
            client.sent,
            [{"status": "ok", "title": "result", "data": DrawResult.YOURS_LOW.as_dict()}],
        )


class TestWebSocketServer(unittest.TestCase):
    """Real client against the background websockets server."""

    def test_guess_over_websocket(self):
        view = WebSocketView("127.0.0.1", 0)
        app = DrawNumberApp([view], rng=FixedRandom(50))

        async def play():
            async with websockets.connect(f"ws://127.0.0.1:{view.bound_port}") as ws:
                await ws.send("50")
                return [json.loads(await asyncio.wait_for(ws.recv(), 5)) for _ in range(2)]

        try:
            self.assertTrue(view.running)
            with mock.patch.dict(os.environ, {"no_proxy": "*", "NO_PROXY": "*"}):
                messages = asyncio.run(play())
        finally:
            app.quit()
        by_title = {message["title"]: message for message in messages}
        self.assertEqual(set(by_title), {"attempt", "result"})
        self.assertEqual(by_title["attempt"]["data"], DrawResult.YOU_WON.as_dict())
        self.assertEqual(by_title["result"]["data"], DrawResult.YOU_WON.as_dict())
        view._thread.join(timeout=5)
        self.assertFalse(view.running)


if __name__ == "__main__":
    unittest.main()
