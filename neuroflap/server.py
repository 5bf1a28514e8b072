"""
neuroflap: Server

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

FastAPI + WebSocket. Create a run, tick it by hand or let it auto-run,
change the speed, flap manually, and watch the stats stream in.
"""

import asyncio
import json
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from typing import Optional

from .config import Config, SPEED_RATES
from .game import Game
from .narrator import Narrator


# ─── State ──────────────────────────────────────────────

game: Optional[Game] = None
narrator = Narrator()
ws_clients: set[WebSocket] = set()
auto_running = False
auto_task = None
_game_lock = asyncio.Lock()


# ─── App ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    global auto_running
    auto_running = False

app = FastAPI(title="neuroflap", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

dashboard_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'dashboard')
if os.path.exists(dashboard_dir):
    app.mount("/dashboard", StaticFiles(directory=dashboard_dir), name="dashboard")


@app.get("/health")
async def health():
    return {"status": "ok", "engine": "neuroflap"}


@app.get("/")
async def root():
    index = os.path.join(dashboard_dir, "index.html")
    if os.path.exists(index):
        return FileResponse(index)
    return {"status": "neuroflap API", "version": "1.0"}


# ─── Models ─────────────────────────────────────────────

class CreateRequest(BaseModel):
    mode: str = Field(default="smart", pattern="^(smart|manual)$")
    population: int = Field(default=50, ge=1, le=1000)
    seed: Optional[int] = None
    selection_rate: float = Field(default=0.04, ge=0.0, le=1.0)
    mutation_rate: float = Field(default=0.03, ge=0.0, le=1.0)
    mutation_change: float = Field(default=0.03, ge=0.0, le=2.0)

class TickRequest(BaseModel):
    ticks: int = Field(default=1, ge=1, le=100_000)

class SpeedRequest(BaseModel):
    rate: int = 1


# ─── Helpers ────────────────────────────────────────────

def _advance(ticks: int) -> dict:
    """Run ticks on the current game and build the broadcast payload."""
    ended = game.run(ticks)
    events = game.pop_events()
    if game.smart:
        narrator.track_agents([a.to_dict() for a in game.population.agents])
    narration = narrator.narrate(events, game.stats())
    return {
        "type": "tick",
        "data": game.get_state(),
        "events": [e for e in events if e['type'] != 'death'][:10],
        "ended": ended,
        "narration": narration,
    }


# ─── Simulation Control ────────────────────────────────

@app.post("/sim/create")
async def create_sim(req: CreateRequest):
    global game, narrator, auto_running
    auto_running = False
    config = Config(
        population_size=req.population,
        selection_rate=req.selection_rate,
        mutation_rate=req.mutation_rate,
        mutation_change=req.mutation_change,
        seed=req.seed,
    )
    game = Game(smart=req.mode == "smart", config=config)
    narrator = Narrator()
    if game.smart:
        narrator.track_agents([a.to_dict() for a in game.population.agents])
    await broadcast({"type": "created", "data": game.get_state(), "config": config.to_dict()})
    agents = len(game.population.agents) if game.smart else 1
    return {"status": "created", "mode": game.mode, "agents": agents}


@app.post("/sim/tick")
async def run_ticks(req: TickRequest):
    if not game:
        return {"error": "No simulation. POST /sim/create first."}
    async with _game_lock:
        payload = _advance(req.ticks)
    await broadcast(payload)
    return {"ticks": game.ticks, "ended": payload["ended"],
            "stats": game.stats(), "narration": payload["narration"]}


@app.post("/sim/speed")
async def set_speed(req: SpeedRequest):
    if not game:
        return {"error": "No simulation."}
    if req.rate not in SPEED_RATES:
        return {"error": f"rate must be one of {list(SPEED_RATES)}"}
    game.set_speed(req.rate)
    return {"speed": game.speed, "tick_interval": game.tick_interval}


@app.post("/sim/jump")
async def jump():
    if not game:
        return {"error": "No simulation."}
    if game.smart:
        return {"error": "Birds fly themselves in smart mode."}
    async with _game_lock:
        game.jump()
    return {"jumped": True, "bird": game.bird.to_dict()}


@app.post("/sim/auto")
async def toggle_auto():
    """Toggle auto-running: one tick per tick_interval."""
    global auto_running, auto_task

    if auto_running:
        auto_running = False
        if auto_task:
            auto_task.cancel()
            try:
                await auto_task
            except asyncio.CancelledError:
                pass
            auto_task = None
        return {"auto": False}

    if not game:
        return {"error": "No simulation."}

    auto_running = True

    async def auto_loop():
        global auto_running
        try:
            while auto_running and game:
                async with _game_lock:
                    payload = _advance(1)
                await broadcast(payload)
                await asyncio.sleep(game.tick_interval)
        except asyncio.CancelledError:
            pass
        finally:
            auto_running = False

    auto_task = asyncio.create_task(auto_loop())
    return {"auto": True}


# ─── Query ──────────────────────────────────────────────

@app.get("/sim/state")
async def get_state():
    if not game:
        return {"error": "No simulation."}
    return game.get_state()


@app.get("/sim/stats")
async def get_stats():
    if not game:
        return {"error": "No simulation."}
    return {"mode": game.mode, "ticks": game.ticks, "speed": game.speed, **game.stats()}


@app.get("/sim/leaderboard")
async def get_leaderboard(limit: int = 10):
    if not game:
        return {"error": "No simulation."}
    if not game.smart:
        return {"leaderboard": [game.bird.to_dict()]}
    board = game.population.get_leaderboard(limit)
    for entry in board:
        entry['name'] = narrator.get_name(entry['id'])
    return {"leaderboard": board}


@app.get("/sim/history")
async def get_history():
    if not game:
        return {"error": "No simulation."}
    if not game.smart:
        return {"history": []}
    return {"history": game.population.history}


# ─── WebSocket ──────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    ws_clients.add(ws)
    try:
        if game:
            await ws.send_json({"type": "init", "data": game.get_state()})
        while True:
            data = await ws.receive_text()
            if len(data) > 10_000:
                continue
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if msg.get("type") == "get_state" and game:
                await ws.send_json({"type": "state", "data": game.get_state()})
            elif msg.get("type") == "jump" and game and not game.smart:
                async with _game_lock:
                    game.jump()
    except WebSocketDisconnect:
        ws_clients.discard(ws)
    except Exception:
        ws_clients.discard(ws)


async def broadcast(message: dict):
    """Send to all connected WebSocket clients."""
    dead = set()
    for ws in ws_clients:
        try:
            await ws.send_json(message)
        except Exception:
            dead.add(ws)
    ws_clients.difference_update(dead)


# ─── Run ────────────────────────────────────────────────

def start(host: str = "0.0.0.0", port: int = 8000):
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    start()
