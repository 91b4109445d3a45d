import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Backend:
    """One analysis endpoint in the rotation."""

    provider: str
    model: str
    input_capacity: int


DEFAULT_BACKENDS: tuple[Backend, ...] = (
    Backend("groq", "llama-3.3-70b-versatile", 100_000),
    Backend("groq", "llama-3.1-8b-instant", 100_000),
    Backend("groq", "openai/gpt-oss-20b", 65_000),
    Backend("groq", "moonshotai/kimi-k2-instruct-0905", 200_000),
    Backend("mistral", "mistral-small-latest", 30_000),
    Backend("codestral", "codestral-latest", 32_000),
    Backend("groq", "meta-llama/llama-4-maverick-17b-128e-instruct", 100_000),
)


class BackendRotation:
    """Deterministic round-robin selection over a fixed backend list."""

    def __init__(
        self,
        backends: tuple[Backend, ...] | list[Backend] = DEFAULT_BACKENDS,
        counter_bound: int = 1000,
    ) -> None:
        if not backends:
            raise ValueError("Backend rotation requires at least one backend")
        if counter_bound <= 0:
            raise ValueError("counter_bound must be positive")
        self._backends = tuple(backends)
        self._counter_bound = counter_bound
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def backends(self) -> tuple[Backend, ...]:
        return self._backends

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def providers(self) -> set[str]:
        return {b.provider for b in self._backends}

    def next(self) -> Backend:
        """Return the backend for this dispatch and advance the counter."""
        with self._lock:
            backend = self._backends[self._counter % len(self._backends)]
            self._counter = (self._counter + 1) % self._counter_bound
        return backend

    def peek(self) -> Backend:
        with self._lock:
            return self._backends[self._counter % len(self._backends)]
