"""WebSocket host for the falling-card typing game.

Each connection owns exactly one single-player game and a frame loop that
ticks it with monotonic deltas and streams snapshots back.

Protocol (JSON messages over WebSocket):
- client -> server: {"action": "new", "width": 600, "height": 800, "seed": 1, "mode": "both", "speed": 1.0,
                     "deck": [["Diolch", "Thank you / Thanks"], ...]}   (every field optional)
- client -> server: {"action": "answer", "text": "good morning"}
- client -> server: {"action": "pause"} / {"action": "resume"} / {"action": "restart"}
- client -> server: {"action": "state"}
- client -> server: {"action": "missed"}

Server pushes {"event": "frame", "state": {...}} to the connection FPS times per second.

In-memory only. Settings come from DROPCARD_HOST, DROPCARD_PORT, DROPCARD_FPS and LOG_LEVEL.
"""

import asyncio
import json
import logging
import os
import secrets
from typing import Any, Dict, Optional

import websockets

HOST = os.getenv("DROPCARD_HOST", "0.0.0.0")
PORT = int(os.getenv("DROPCARD_PORT", "6789"))
FPS = float(os.getenv("DROPCARD_FPS", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 800

# basic logging for debugging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format='%(asctime)s %(levelname)s %(message)s')

from dropcard.cards_data import pairs_from_rows
from dropcard.errors import ConstructionError
from dropcard.game_state import GameState


class Session:
    def __init__(self, ws: Any, game: GameState) -> None:
        self.ws = ws
        self.game = game
        self.last_time: Optional[float] = None
        self.task: Optional[asyncio.Task] = None

    def advance(self, now: float) -> float:
        """Tick the game with the time elapsed since the previous frame.

        The first frame has no previous timestamp and ticks with 0.
        """
        dt = 0.0 if self.last_time is None else now - self.last_time
        self.last_time = now
        self.game.tick(dt)
        return dt

    def start(self) -> None:
        if FPS > 0:
            self.task = asyncio.get_running_loop().create_task(frame_loop(self))

    def stop(self) -> None:
        if self.task is not None:
            self.task.cancel()
            self.task = None


SESSIONS: Dict[Any, Session] = {}


async def frame_loop(session: Session) -> None:
    loop = asyncio.get_running_loop()
    interval = 1.0 / FPS
    while True:
        try:
            session.advance(loop.time())
            await session.ws.send(json.dumps({"event": "frame", "state": session.game.snapshot()}))
        except websockets.ConnectionClosed:
            logging.debug('frame_loop: connection closed for game %s', session.game.get_id())
            return
        except Exception:
            logging.exception('frame_loop: stopping game %s for %s', session.game.get_id(), getattr(session.ws, 'remote_address', None))
            return
        await asyncio.sleep(interval)


def new_game(msg: dict) -> GameState:
    deck = msg.get("deck")
    if deck is not None:
        if not isinstance(deck, list):
            raise ConstructionError("deck must be a list of [front, back] rows")
        deck = pairs_from_rows(deck)
    seed = msg.get("seed")
    if seed is None:
        seed = secrets.randbits(32)
    return GameState(
        msg.get("width", DEFAULT_WIDTH),
        msg.get("height", DEFAULT_HEIGHT),
        seed,
        mode=msg.get("mode", "normal"),
        speed_multiplier=msg.get("speed", 1.0),
        deck=deck,
    )


async def send(ws, payload: dict) -> None:
    try:
        await ws.send(json.dumps(payload))
    except Exception:
        logging.exception('Failed to send %s to %s', payload.get("event", "reply"), getattr(ws, 'remote_address', None))


async def handle_message(ws, raw: str) -> None:
    try:
        msg = json.loads(raw)
    except Exception:
        await send(ws, {"error": "invalid json"})
        return
    if not isinstance(msg, dict):
        await send(ws, {"error": "message must be an object"})
        return

    logging.debug('handle_message: from=%s msg=%s', getattr(ws, 'remote_address', None), msg)
    action = msg.get("action")

    if action == "new":
        try:
            game = new_game(msg)
        except ConstructionError as e:
            await send(ws, {"error": str(e)})
            return
        old = SESSIONS.pop(ws, None)
        if old is not None:
            old.stop()
        session = Session(ws, game)
        SESSIONS[ws] = session
        session.start()
        logging.info('Game %s created for %s (mode=%s)', game.get_id(), getattr(ws, 'remote_address', None), game.mode.value)
        await send(ws, {"event": "created", "state": game.snapshot()})
        return

    session = SESSIONS.get(ws)
    if session is None:
        await send(ws, {"error": "no game; send action 'new' first"})
        return
    game = session.game

    if action == "answer":
        text = msg.get("text")
        correct = game.submit_answer(text) if isinstance(text, str) else False
        await send(ws, {"event": "answer", "correct": correct, "state": game.snapshot()})
        return

    if action in ("pause", "resume", "restart"):
        getattr(game, action)()
        if action == "restart":
            # next frame starts a fresh delta
            session.last_time = None
        await send(ws, {"event": action, "state": game.snapshot()})
        return

    if action == "state":
        await send(ws, {"state": game.snapshot()})
        return

    if action == "missed":
        await send(ws, {"missed": game.export_missed_cards()})
        return

    await send(ws, {"error": "unknown action"})


async def handler(ws) -> None:
    logging.info('New connection: %s', getattr(ws, 'remote_address', None))
    try:
        async for message in ws:
            await handle_message(ws, message)
    except Exception:
        logging.exception('Connection handler error for %s', getattr(ws, 'remote_address', None))
    finally:
        session = SESSIONS.pop(ws, None)
        if session is not None:
            session.stop()
            logging.info('Game %s closed for %s', session.game.get_id(), getattr(ws, 'remote_address', None))


async def _main() -> None:
    print(f"Starting WebSocket server on ws://{HOST}:{PORT}")
    async with websockets.serve(handler, HOST, PORT):
        # run forever until cancelled
        await asyncio.Future()


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
