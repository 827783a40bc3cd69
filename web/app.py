from __future__ import annotations
from flask import Flask, request, session as flask_session, jsonify
import uuid

import sys
import os

current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
sys.path.insert(0, parent_dir)

from config import AppConfig
from engine.session import GameSession, TurnPhase

app = Flask(__name__)
app.secret_key = AppConfig.SECRET_KEY

# In-memory store, one game per browser session
SESSIONS = {}


def _current_game() -> GameSession:
    sid = flask_session.get("sid")
    if not sid or sid not in SESSIONS:
        sid = uuid.uuid4().hex
        flask_session["sid"] = sid
        SESSIONS[sid] = GameSession()
    return SESSIONS[sid]


async def _let_bot_move(game: GameSession):
    if game.state is TurnPhase.AWAITING_BOT:
        return await game.step()
    return None


@app.route("/api/state", methods=["GET"])
def state():
    return jsonify(_current_game().snapshot())


@app.route("/api/play", methods=["POST"])
async def play():
    data = request.get_json(silent=True) or {}
    cell = data.get("cell")
    if isinstance(cell, bool) or not isinstance(cell, int):
        return jsonify({"error": "cell must be an integer 0-8"}), 400
    game = _current_game()
    result = game.apply_human_action(cell)
    bot = None
    if result["status"] == "ok":
        bot = await _let_bot_move(game)
    return jsonify({"result": result, "bot": bot, "state": game.snapshot()})


@app.route("/api/side", methods=["POST"])
async def side():
    data = request.get_json(silent=True) or {}
    game = _current_game()
    try:
        game.choose_side(data.get("player", ""))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    await _let_bot_move(game)
    return jsonify(game.snapshot())


@app.route("/api/strategy", methods=["POST"])
def strategy():
    data = request.get_json(silent=True) or {}
    game = _current_game()
    try:
        game.choose_strategy(data.get("strategy", ""))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(game.snapshot())


@app.route("/api/reset", methods=["POST"])
async def reset():
    game = _current_game()
    game.reset()
    await _let_bot_move(game)
    return jsonify(game.snapshot())


if __name__ == "__main__":
    app.run(debug=True)
