import json
import logging
from collections import deque
from salon.platform.ports.event_bus import EventBusPort

log = logging.getLogger("bus.noop")

class NoopEventBus(EventBusPort):
    """Logs events instead of shipping them; keeps the most recent ones for inspection."""

    def __init__(self, keep: int = 100):
        self.published: deque[tuple[str, str, dict]] = deque(maxlen=keep)

    async def publish(self, topic: str, key: str, value: dict, headers: dict | None = None) -> None:
        self.published.append((topic, key, value))
        log.info(f"[NOOP BUS] topic={topic} key={key} event={value.get('event_type')} value={json.dumps(value, default=str)}")

    async def close(self) -> None:
        self.published.clear()
