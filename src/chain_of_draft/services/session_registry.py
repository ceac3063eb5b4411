import logging
import threading
from typing import Dict

from ..settings import Settings, get_settings
from .redis import RedisSessionStore
from .session_manager import SessionManager
from .session_store import InMemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

REASONING_CHAIN = "reasoning_chain"
API_BLUEPRINT = "api_blueprint"
ARCHITECTURE_DECISION = "architecture_decision"
CODE_REVIEW = "code_review"
IMPLEMENTATION_STRATEGY = "implementation_strategy"

DOCUMENT_KINDS = (
    REASONING_CHAIN,
    API_BLUEPRINT,
    ARCHITECTURE_DECISION,
    CODE_REVIEW,
    IMPLEMENTATION_STRATEGY,
)


def _build_store(settings: Settings, kind: str) -> SessionStore:
    """Return the configured storage backend for one document kind."""
    if settings.session_backend == "redis":
        if not settings.redis_url or not settings.redis_url.strip():
            raise ValueError("session_backend is 'redis' but REDIS_URL is not set")
        return RedisSessionStore(
            settings.redis_url.strip(),
            key_prefix=f"{settings.session_key_prefix}{kind}:",
            ttl_seconds=settings.session_max_age_seconds,
        )
    return InMemorySessionStore()


class SessionRegistry:
    """One SessionManager per document kind, all sharing the same policy."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._managers: Dict[str, SessionManager] = {
            kind: SessionManager(
                _build_store(settings, kind),
                max_session_age=settings.session_max_age_seconds,
                max_session_size=settings.session_max_size_bytes,
                cleanup_interval=settings.session_cleanup_interval_seconds,
            )
            for kind in DOCUMENT_KINDS
        }
        logger.info("Session registry initialized (%s backend)", settings.session_backend)

    def manager(self, kind: str) -> SessionManager:
        try:
            return self._managers[kind]
        except KeyError:
            raise KeyError(f"Unknown document kind: {kind}") from None

    @property
    def reasoning_chain(self) -> SessionManager:
        return self._managers[REASONING_CHAIN]

    @property
    def api_blueprint(self) -> SessionManager:
        return self._managers[API_BLUEPRINT]

    @property
    def architecture_decision(self) -> SessionManager:
        return self._managers[ARCHITECTURE_DECISION]

    @property
    def code_review(self) -> SessionManager:
        return self._managers[CODE_REVIEW]

    @property
    def implementation_strategy(self) -> SessionManager:
        return self._managers[IMPLEMENTATION_STRATEGY]

    def cleanup(self) -> None:
        """Stop every manager's eviction loop."""
        for manager in self._managers.values():
            manager.destroy()
        logger.info("All session managers cleaned up")

    async def aclose(self) -> None:
        """Stop eviction loops and release storage connections."""
        self.cleanup()
        for manager in self._managers.values():
            await manager.store.close()


_registry_instance: SessionRegistry | None = None
_registry_lock = threading.Lock()


def get_session_registry() -> SessionRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry_instance
    if _registry_instance is None:
        with _registry_lock:
            if _registry_instance is None:
                _registry_instance = SessionRegistry()
    return _registry_instance


def close_session_registry() -> None:
    """Tear down the process-wide registry. Idempotent."""
    global _registry_instance
    with _registry_lock:
        if _registry_instance is not None:
            _registry_instance.cleanup()
            _registry_instance = None


async def aclose_session_registry() -> None:
    """Tear down the registry and close its storage connections. Idempotent."""
    global _registry_instance
    with _registry_lock:
        registry, _registry_instance = _registry_instance, None
    if registry is not None:
        await registry.aclose()
