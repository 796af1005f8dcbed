"""
Limitation des tentatives de connexion par nom d'utilisateur.

Après LOGIN_MAX_ATTEMPTS échecs consécutifs dans une fenêtre de LOGIN_WINDOW_SECONDS,
toute nouvelle tentative est refusée jusqu'à la fin de la fenêtre. Une connexion réussie
remet le compteur à zéro. L'expiration est évaluée à la vérification suivante, sans tâche
de fond.

Limite connue : le compteur vit en mémoire du processus. Il est perdu au redémarrage et
n'est pas partagé entre plusieurs instances ou workers.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ticketing.config import settings
from ticketing.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


@dataclass
class _Attempts:
    count: int
    first_failure_at: float


class LoginAttemptLimiter:
    """Compteur d'échecs en mémoire, protégé par un verrou (serveur multi-thread)."""

    def __init__(
        self,
        max_attempts: int = 3,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: Dict[str, _Attempts] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        """Lève RateLimitedError si la clé est bloquée ; purge l'entrée si la fenêtre est écoulée."""
        with self._lock:
            retry_after = self._retry_after(key)
        if retry_after is not None:
            logger.warning("Connexion bloquée pour '%s' (%ss restantes)", key, retry_after)
            raise RateLimitedError(retry_after)

    def record_failure(self, key: str) -> int:
        """
        Enregistre un échec et retourne le nombre d'essais restants.
        Lève RateLimitedError quand le seuil est atteint.
        """
        with self._lock:
            now = self._clock()
            entry = self._attempts.get(key)
            if entry is None or now - entry.first_failure_at >= self.window_seconds:
                entry = _Attempts(count=0, first_failure_at=now)
                self._attempts[key] = entry
            entry.count += 1
            remaining = self.max_attempts - entry.count

        if remaining <= 0:
            logger.warning("Seuil d'échecs atteint pour '%s'", key)
            raise RateLimitedError(self.window_seconds)
        return remaining

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def _retry_after(self, key: str) -> Optional[int]:
        entry = self._attempts.get(key)
        if entry is None:
            return None
        elapsed = self._clock() - entry.first_failure_at
        if elapsed >= self.window_seconds:
            del self._attempts[key]
            return None
        if entry.count < self.max_attempts:
            return None
        return max(1, math.ceil(self.window_seconds - elapsed))


login_limiter = LoginAttemptLimiter(
    max_attempts=settings.LOGIN_MAX_ATTEMPTS,
    window_seconds=settings.LOGIN_WINDOW_SECONDS,
)
