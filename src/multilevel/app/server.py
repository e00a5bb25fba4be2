from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass, replace
from typing import Dict, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..config import AppConfig, SimulationParameters, load_parameters, validate_app_config, validate_parameters
from ..errors import ConfigurationError
from ..sim.core.run import RunState, SimulationRun
from ..sim.types.record import GenerationRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedRecord:
    generation: int
    payload: str


class SimulationController:
    """Paces a :class:`SimulationRun` and fans records out to websocket clients."""

    def __init__(self, config: AppConfig):
        self.config = validate_app_config(config)
        self.run = SimulationRun(config.parameters, seed=config.seed)
        self.clients: Set[WebSocket] = set()
        self._client_last_sent: Dict[WebSocket, int] = {}
        self._record_queue: deque[QueuedRecord] = deque()
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.run.state is RunState.RUNNING

    async def configure(self, params: SimulationParameters) -> None:
        params = validate_parameters(params)
        async with self._lock:
            if self.run.state is RunState.RUNNING:
                self.run.stop()
            self.config = replace(self.config, parameters=params)
            self.run = SimulationRun(params, seed=self.config.seed)
        await self._clear_queue()

    async def start(self) -> None:
        """Begin a fresh run; a run already in progress keeps going."""
        async with self._lock:
            if self.run.state is RunState.RUNNING:
                record = None
            else:
                if self.run.state is not RunState.IDLE:
                    self.run.reset()
                    await self._clear_queue()
                record = self.run.start()
        if record is not None:
            await self._broadcast_record(record)
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._loop())

    async def shutdown(self) -> None:
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None

    async def stop(self) -> None:
        async with self._lock:
            if self.run.state is RunState.RUNNING:
                self.run.stop()

    async def reset(self) -> None:
        async with self._lock:
            if self.run.state is RunState.RUNNING:
                self.run.stop()
            self.run.reset()
        await self._clear_queue()

    async def advance(self) -> GenerationRecord | None:
        async with self._lock:
            if self.run.state is not RunState.RUNNING:
                return None
            record = self.run.step()
        await self._broadcast_record(record)
        return record

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.generation_interval)
            await self.advance()

    async def _clear_queue(self) -> None:
        async with self._queue_lock:
            self._record_queue.clear()
        for client in self._client_last_sent:
            self._client_last_sent[client] = -1

    async def acknowledge(self, generation: int) -> None:
        async with self._queue_lock:
            while self._record_queue and self._record_queue[0].generation <= generation:
                self._record_queue.popleft()

    def _serialize_record(self, record: GenerationRecord) -> QueuedRecord:
        payload = {
            "type": "generation",
            "generation": record.generation,
            "payload": {
                "record": asdict(record),
                "state": self.run.state.value,
                "conclusion": self.run.conclusion,
            },
        }
        return QueuedRecord(generation=record.generation, payload=json.dumps(payload))

    async def _send_pending_records(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._record_queue if item.generation > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.generation
        self._client_last_sent[client] = last_sent

    async def _broadcast_record(self, record: GenerationRecord) -> None:
        queued = self._serialize_record(record)
        async with self._queue_lock:
            self._record_queue.append(queued)
        stale: Set[WebSocket] = set()
        for client in self.clients:
            try:
                await self._send_pending_records(client)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)


app = FastAPI(title="Multilevel Selection Simulation")
controller = SimulationController(AppConfig())


@app.on_event("shutdown")
async def _shutdown() -> None:
    await controller.shutdown()


@app.get("/api/status")
async def status() -> JSONResponse:
    snapshot = controller.run.snapshot()
    return JSONResponse(asdict(snapshot))


@app.get("/api/history")
async def history() -> JSONResponse:
    return JSONResponse([asdict(record) for record in controller.run.history])


@app.get("/api/conclusion")
async def conclusion() -> JSONResponse:
    return JSONResponse({"state": controller.run.state.value, "conclusion": controller.run.conclusion})


@app.post("/api/control/configure")
async def configure_simulation(payload: dict) -> JSONResponse:
    try:
        params = load_parameters(payload)
        await controller.configure(params)
    except ConfigurationError as exc:
        return JSONResponse({"errors": exc.errors}, status_code=422)
    return JSONResponse({"parameters": asdict(controller.run.parameters)})


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": controller.running, "generation": controller.run.generation})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": controller.running, "generation": controller.run.generation})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "generation": controller.run.generation})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    await controller._send_pending_records(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict) and payload.get("type") == "ack":
                generation = payload.get("generation")
                if isinstance(generation, int):
                    await controller.acknowledge(generation)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)


__all__ = ["app", "controller"]
