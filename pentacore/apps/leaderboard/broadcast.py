# pentacore/apps/leaderboard/broadcast.py
"""
Canal de eventos de puntuación (publish/subscribe en proceso).

Lo crea ``LeaderboardConfig.ready()`` una vez por proceso. Los servicios de
judging publican después del commit; los suscriptores (leaderboard en vivo,
pantallas) reciben el ``ScoreEvent``. Un suscriptor que falla se registra
en el log y no corta la difusión al resto.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Tuple

from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreEvent:
    competition_id: int
    discipline: str
    athlete_ids: Tuple[int, ...]
    timestamp: datetime = field(default_factory=timezone.now)


Listener = Callable[[ScoreEvent], None]


class ScoreEventChannel:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra ``listener``; devuelve la función para desuscribirlo."""
        with self._lock:
            if self._closed:
                raise RuntimeError("El canal de puntuaciones está cerrado")
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ScoreEvent) -> int:
        """Entrega ``event`` a todos los suscriptores; devuelve cuántos lo recibieron."""
        with self._lock:
            if self._closed:
                logger.warning("Evento descartado, canal cerrado: %s", event)
                return 0
            listeners = list(self._listeners)

        delivered = 0
        for listener in listeners:
            try:
                listener(event)
                delivered += 1
            except Exception:
                logger.exception("Suscriptor %r falló con %s", listener, event)
        return delivered

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._listeners.clear()


def get_channel() -> ScoreEventChannel:
    """Canal del proceso (creado en ``LeaderboardConfig.ready``)."""
    from django.apps import apps

    return apps.get_app_config("leaderboard").channel
