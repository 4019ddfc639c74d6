"""
Single entry point for palette generation.

Two backends satisfy the same contract: the portable reference
implementation, always available, and the numba-compiled kernel, which is
loaded once per process in a background thread. Until the kernel is ready
every call runs on the portable path without waiting. Any failure of the
accelerated path, whether at load time, by timeout, or during a call, is
logged and switches the process to the portable path for good.

Environment:
  COLOR_JOURNEY_BACKEND          "auto" (default) or "portable"
  COLOR_JOURNEY_BACKEND_TIMEOUT  seconds allowed for the load, default 60
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Callable, Mapping, Optional, Protocol, Union

from .models import ColorJourneyConfig, GenerateResult
from .reference import PortableBackend

log = logging.getLogger(__name__)

BACKEND_ENV = "COLOR_JOURNEY_BACKEND"
TIMEOUT_ENV = "COLOR_JOURNEY_BACKEND_TIMEOUT"
DEFAULT_LOAD_TIMEOUT = 60.0


class Backend(Protocol):
    name: str

    def generate(self, config: ColorJourneyConfig) -> GenerateResult: ...


def load_accelerated() -> Backend:
    """Import numba, build the kernel backend and compile it."""
    from .accelerated import AcceleratedBackend

    backend = AcceleratedBackend()
    backend.warm_up()
    return backend


class BackendProbe:
    """
    Memoized, bounded, one-shot load of an optional backend.

    ``start()`` is idempotent. The result is final: once the load has
    succeeded, failed, timed out or been disabled, it never runs again.
    """

    def __init__(
        self,
        loader: Callable[[], Backend] = load_accelerated,
        timeout: float = DEFAULT_LOAD_TIMEOUT,
    ) -> None:
        self._loader = loader
        self._timeout = float(timeout)
        self._lock = threading.Lock()
        self._started = False
        self._loading = False
        self._backend: Optional[Backend] = None
        self._timer: Optional[threading.Timer] = None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def ready(self) -> bool:
        return self._backend is not None

    @property
    def loading(self) -> bool:
        return self._loading

    def current(self) -> Optional[Backend]:
        return self._backend

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._started = True
            self._loading = True
        log.info("Loading accelerated backend (timeout %.0fs)", self._timeout)
        self._timer = threading.Timer(self._timeout, self._on_timeout)
        self._timer.daemon = True
        self._timer.start()
        threading.Thread(
            target=self._run, name="color-journey-backend", daemon=True
        ).start()

    def disable(self, reason: str) -> None:
        """Permanently fall back to the portable path."""
        with self._lock:
            was_ready = self._backend is not None
            self._started = True
            self._loading = False
            self._backend = None
        if self._timer is not None:
            self._timer.cancel()
        if was_ready:
            log.warning("Accelerated backend disabled: %s", reason)
        else:
            log.info("Accelerated backend not used: %s", reason)

    # ---- internals ----

    def _run(self) -> None:
        try:
            backend = self._loader()
        except Exception as exc:
            with self._lock:
                self._loading = False
            if self._timer is not None:
                self._timer.cancel()
            log.warning("Accelerated backend unavailable, using portable: %s", exc)
            return
        with self._lock:
            if not self._loading:
                # timed out or disabled while loading
                log.info("Accelerated backend finished loading too late; ignored")
                return
            self._loading = False
            self._backend = backend
        if self._timer is not None:
            self._timer.cancel()
        log.info("Accelerated backend ready")

    def _on_timeout(self) -> None:
        with self._lock:
            if not self._loading:
                return
            self._loading = False
        log.warning(
            "Accelerated backend load exceeded %.0fs, using portable", self._timeout
        )


def _probe_from_env() -> BackendProbe:
    try:
        timeout = float(os.environ.get(TIMEOUT_ENV, DEFAULT_LOAD_TIMEOUT))
    except ValueError:
        log.warning("Ignoring invalid %s", TIMEOUT_ENV)
        timeout = DEFAULT_LOAD_TIMEOUT
    return BackendProbe(timeout=timeout)


_portable = PortableBackend()
_probe = _probe_from_env()


def start_backend_load() -> None:
    """Begin loading the accelerated backend if that has not happened yet."""
    if _probe.started:
        return
    if os.environ.get(BACKEND_ENV, "auto").strip().lower() == "portable":
        _probe.disable(f"{BACKEND_ENV}=portable")
        return
    _probe.start()


def is_backend_ready() -> bool:
    return _probe.ready


def is_backend_loading() -> bool:
    return _probe.loading


def active_backend_name() -> str:
    backend = _probe.current()
    return backend.name if backend is not None else _portable.name


def generate(config: Union[ColorJourneyConfig, Mapping[str, Any]]) -> GenerateResult:
    """
    Generate a palette. Accepts a ``ColorJourneyConfig`` or its JSON shape.

    Never raises because of the accelerated backend; malformed anchors decode
    as black and an empty anchor list yields an empty palette.
    """
    if not isinstance(config, ColorJourneyConfig):
        config = ColorJourneyConfig.from_dict(config)
    start_backend_load()
    backend = _probe.current()
    if backend is not None:
        try:
            return backend.generate(config)
        except Exception:
            log.exception("Accelerated backend failed")
            _probe.disable("execution failure")
    return _portable.generate(config)


__all__ = [
    "Backend",
    "BackendProbe",
    "active_backend_name",
    "generate",
    "is_backend_loading",
    "is_backend_ready",
    "load_accelerated",
    "start_backend_load",
]
