"""
Tests unitaires du limiteur de tentatives de connexion (horloge simulée).
"""

import pytest

from ticketing.exceptions import RateLimitedError
from ticketing.services.login_limiter import LoginAttemptLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return LoginAttemptLimiter(max_attempts=3, window_seconds=60, clock=clock)


def test_essais_restants_decroissants(limiter):
    assert limiter.record_failure("rizal_es") == 2
    assert limiter.record_failure("rizal_es") == 1


def test_troisieme_echec_bloque(limiter):
    limiter.record_failure("rizal_es")
    limiter.record_failure("rizal_es")
    with pytest.raises(RateLimitedError) as exc:
        limiter.record_failure("rizal_es")
    assert exc.value.retry_after == 60


def test_tentative_refusee_pendant_la_fenetre(limiter, clock):
    for _ in range(2):
        limiter.record_failure("rizal_es")
    with pytest.raises(RateLimitedError):
        limiter.record_failure("rizal_es")

    clock.advance(20)
    with pytest.raises(RateLimitedError) as exc:
        limiter.check("rizal_es")
    assert exc.value.retry_after == 40


def test_deblocage_apres_la_fenetre(limiter, clock):
    for _ in range(2):
        limiter.record_failure("rizal_es")
    with pytest.raises(RateLimitedError):
        limiter.record_failure("rizal_es")

    clock.advance(60)
    limiter.check("rizal_es")
    assert limiter.record_failure("rizal_es") == 2


def test_fenetre_expiree_repart_de_zero(limiter, clock):
    limiter.record_failure("rizal_es")
    limiter.record_failure("rizal_es")
    clock.advance(61)
    assert limiter.record_failure("rizal_es") == 2


def test_succes_remet_a_zero(limiter):
    limiter.record_failure("rizal_es")
    limiter.record_failure("rizal_es")
    limiter.reset("rizal_es")
    assert limiter.record_failure("rizal_es") == 2


def test_compteurs_independants_par_utilisateur(limiter):
    limiter.record_failure("rizal_es")
    limiter.record_failure("rizal_es")
    limiter.check("bonifacio_hs")
    assert limiter.record_failure("bonifacio_hs") == 2


def test_check_sans_echec_ne_bloque_pas(limiter):
    limiter.check("inconnu")
