"""
Tick scheduler - Global fixed-period simulation loop.

Provides:
- One cycle per period over every lobby, in registration order
- Tick counting, physics advance and broadcast per lobby
- Idle lobby reaping
- asyncio task lifecycle (start/stop)
"""

import asyncio
import logging
from dataclasses import dataclass

from racelobby.broadcast.channel import BroadcastChannel
from racelobby.session.lobby import Lobby
from racelobby.session.registry import LobbyRegistry
from racelobby.simulation.physics import PhysicsEngine

logger = logging.getLogger(__name__)


@dataclass
class SchedulerConfig:
    """Scheduler configuration."""
    tick_interval_s: float = 0.1     # 10 Hz

    # Reap idle lobbies every N cycles
    reap_every_cycles: int = 50


class TickScheduler:
    """Drives every lobby on one shared clock.

    Each cycle, for every lobby: increment the tick, advance the
    physics, broadcast the new state. A lobby is locked for the whole
    of its tick, so request handlers land either before or after it.

    Usage:
        scheduler = TickScheduler(registry, engine, channel)
        scheduler.start()      # inside a running event loop
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        registry: LobbyRegistry,
        engine: PhysicsEngine,
        channel: BroadcastChannel,
        config: SchedulerConfig | None = None,
    ):
        """Initialize scheduler.

        Args:
            registry: Lobbies to drive
            engine: Physics engine
            channel: Broadcast channel
            config: Scheduler configuration. Uses defaults if None.
        """
        self.registry = registry
        self.engine = engine
        self.channel = channel
        self.config = config or SchedulerConfig()

        self._task: asyncio.Task | None = None
        self._cycles: int = 0

    @property
    def is_running(self) -> bool:
        """Check if the loop task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def cycles(self) -> int:
        """Completed cycles."""
        return self._cycles

    def tick_lobby(self, lobby: Lobby) -> int:
        """Run one tick of one lobby.

        Args:
            lobby: Lobby to tick

        Returns:
            Number of subscribers the new state was pushed to
        """
        with lobby.lock:
            lobby.tick += 1
            self.engine.advance(lobby, self.config.tick_interval_s)
            return self.channel.broadcast(lobby)

    def run_cycle(self) -> int:
        """Run one scheduler cycle over every lobby.

        Returns:
            Number of lobbies ticked
        """
        if self.config.reap_every_cycles > 0 and self._cycles % self.config.reap_every_cycles == 0:
            self.registry.reap()

        ticked = 0
        for lobby in self.registry.lobbies():
            try:
                self.tick_lobby(lobby)
            except Exception:
                logger.exception(f"Tick failed for lobby {lobby.lobby_id}")
                continue
            ticked += 1

        self._cycles += 1
        return ticked

    async def run(self) -> None:
        """Run cycles forever on a fixed period."""
        loop = asyncio.get_running_loop()
        interval = self.config.tick_interval_s
        next_tick = loop.time() + interval

        logger.info(f"Tick scheduler running every {interval * 1000:.0f} ms")
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            self.run_cycle()

            next_tick += interval
            # Skip missed cycles instead of bursting to catch up
            if next_tick < loop.time():
                next_tick = loop.time() + interval

    def start(self) -> asyncio.Task:
        """Start the loop as a task on the running event loop."""
        if not self.is_running:
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Cancel the loop task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Tick scheduler stopped after {self._cycles} cycles")
