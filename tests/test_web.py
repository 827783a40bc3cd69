import json
import unittest
from unittest import mock

import httpx

from config import AppConfig
from engine.prompts import MOVE_FUNCTION_NAME
from models.openai_provider import OpenAIProvider
from web.app import SESSIONS, app


def completion_body(move, comment):
    arguments = json.dumps({"move": move, "comment": comment})
    message = {
        "role": "assistant",
        "content": None,
        "tool_calls": [{
            "id": "call_1",
            "type": "function",
            "function": {"name": MOVE_FUNCTION_NAME, "arguments": arguments},
        }],
    }
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [{"index": 0, "finish_reason": "stop", "logprobs": None, "message": message}],
    }


class TestWebApi(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.object(AppConfig, "BOT_STRATEGY", "heuristic")
        patcher.start()
        self.addCleanup(patcher.stop)
        SESSIONS.clear()
        app.config["TESTING"] = True
        self.client = app.test_client()

    def test_state_starts_empty(self) -> None:
        data = self.client.get("/api/state").get_json()
        self.assertEqual(data["board"], [None] * 9)
        self.assertEqual(data["state"], "awaiting_human")
        self.assertEqual(data["chat"], ["Your move!"])
        self.assertFalse(data["thinking"])

    def test_play_gets_bot_reply(self) -> None:
        data = self.client.post("/api/play", json={"cell": 4}).get_json()
        self.assertEqual(data["result"]["status"], "ok")
        board = data["state"]["board"]
        self.assertEqual(board[4], "X")
        self.assertEqual(board[0], "O")
        self.assertEqual(data["state"]["state"], "awaiting_human")
        self.assertEqual(len(SESSIONS), 1)

    def test_occupied_cell_is_a_no_op(self) -> None:
        self.client.post("/api/play", json={"cell": 4})
        before = self.client.get("/api/state").get_json()
        data = self.client.post("/api/play", json={"cell": 4}).get_json()
        self.assertEqual(data["result"]["status"], "invalid")
        self.assertEqual(data["state"]["board"], before["board"])
        self.assertEqual(data["state"]["chat"], before["chat"])

    def test_bad_payloads(self) -> None:
        self.assertEqual(self.client.post("/api/play", json={"cell": "4"}).status_code, 400)
        self.assertEqual(self.client.post("/api/side", json={"player": "Z"}).status_code, 400)
        self.assertEqual(self.client.post("/api/strategy", json={"strategy": "minimax"}).status_code, 400)

    def test_side_change_lets_bot_open(self) -> None:
        data = self.client.post("/api/side", json={"player": "O"}).get_json()
        self.assertEqual(data["human"], "O")
        self.assertEqual(data["board"][0], "X")
        self.assertEqual(data["chat"][0], "I start as X!")

    def test_strategy_and_reset(self) -> None:
        data = self.client.post("/api/strategy", json={"strategy": "remote"}).get_json()
        self.assertEqual(data["strategy"], "remote")
        self.client.post("/api/strategy", json={"strategy": "heuristic"})
        self.client.post("/api/play", json={"cell": 0})
        data = self.client.post("/api/reset").get_json()
        self.assertEqual(data["board"], [None] * 9)
        self.assertEqual(data["chat"], ["Your move!"])


class TestWebApiRemoteBot(unittest.TestCase):
    def setUp(self) -> None:
        self.moves = [8, 6]
        self.requests = []
        transport = httpx.MockTransport(self.handle)
        provider = OpenAIProvider(model="test-model", api_key="test-key", transport=transport)

        for patcher in (
            mock.patch.object(AppConfig, "BOT_STRATEGY", "remote"),
            mock.patch("engine.session.load_decision_engine", return_value=provider),
        ):
            patcher.start()
            self.addCleanup(patcher.stop)
        SESSIONS.clear()
        app.config["TESTING"] = True
        self.client = app.test_client()

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        move = self.moves[len(self.requests) - 1]
        return httpx.Response(200, json=completion_body(move, f"remote {move}"))

    def test_consecutive_remote_turns_use_the_remote_reply(self) -> None:
        first = self.client.post("/api/play", json={"cell": 4}).get_json()
        self.assertEqual(first["bot"]["status"], "ok")
        self.assertEqual(first["state"]["board"][8], "O")

        second = self.client.post("/api/play", json={"cell": 0}).get_json()
        self.assertEqual(second["bot"]["status"], "ok")
        self.assertEqual(second["bot"]["comment"], "remote 6")
        self.assertEqual(second["state"]["board"][6], "O")
        self.assertEqual(second["state"]["chat"], ["Your move!", "remote 8", "remote 6"])
        self.assertEqual(len(self.requests), 2)
        self.assertFalse(second["state"]["thinking"])


if __name__ == "__main__":
    unittest.main()
