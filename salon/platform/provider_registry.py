from salon.core.config import settings
from salon.platform.ports.event_bus import EventBusPort
from salon.platform.adapters.bus_noop import NoopEventBus
from salon.platform.adapters.bus_redis import RedisEventBus

class ProviderRegistry:
    _event_bus: EventBusPort | None = None

    @classmethod
    def event_bus(cls) -> EventBusPort:
        if cls._event_bus is None:
            prov = (settings.EVENT_BUS_PROVIDER or "noop").lower()
            if prov == "redis":
                cls._event_bus = RedisEventBus()
            elif prov == "noop":
                cls._event_bus = NoopEventBus()
            else:
                raise RuntimeError(f"Unknown EVENT_BUS_PROVIDER '{prov}' (expected noop | redis)")
        return cls._event_bus

    @classmethod
    async def shutdown(cls) -> None:
        if cls._event_bus is not None:
            await cls._event_bus.close()
            cls._event_bus = None

registry = ProviderRegistry()
