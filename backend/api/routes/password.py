from __future__ import annotations

import logging
import math

from fastapi import APIRouter, HTTPException

from config import get_settings
from devtoolshub.entropy import StrengthAnalysis, analyze_strength
from devtoolshub.passwords import (
    GeneratedPassword,
    PassphraseConfig,
    RandomPasswordConfig,
    generate_multiple,
    generate_passphrase,
    generate_random_password,
)
from devtoolshub.wordlist import WordlistError, load_wordlist
from schemas.api import (
    GeneratedPasswordResponse,
    PassphraseRequest,
    PasswordBatchResponse,
    RandomPasswordRequest,
    StrengthRequest,
    StrengthResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def _strength_response(analysis: StrengthAnalysis) -> StrengthResponse:
    uncrackable = math.isinf(analysis.crack_time_seconds)
    return StrengthResponse(
        entropy=analysis.entropy,
        level=analysis.strength.level.value,
        label=analysis.strength.label,
        percentage=analysis.strength.percentage,
        crack_time_seconds=None if uncrackable else analysis.crack_time_seconds,
        crack_time=analysis.crack_time,
        uncrackable=uncrackable,
    )


def _password_response(password: GeneratedPassword) -> GeneratedPasswordResponse:
    analysis = analyze_strength(
        password.mode.value,
        password.pool_size,
        password.effective_length,
        locale=settings.display_locale,
    )
    return GeneratedPasswordResponse(
        value=password.value,
        mode=password.mode.value,
        pool_size=password.pool_size,
        effective_length=password.effective_length,
        strength=_strength_response(analysis),
    )


@router.post("/random", response_model=PasswordBatchResponse)
async def random_passwords(body: RandomPasswordRequest):
    """Generate a batch of random passwords with their strength."""
    config = RandomPasswordConfig(
        length=body.length,
        uppercase=body.uppercase,
        lowercase=body.lowercase,
        digits=body.digits,
        symbols=body.symbols,
        readable_mode=body.readable_mode,
        exclude_chars=body.exclude_chars,
    )
    results = generate_multiple(body.count, lambda: generate_random_password(config))

    # All calls share one config, so they fail together or not at all
    if not results[0].ok:
        raise HTTPException(status_code=422, detail=results[0].error)
    return PasswordBatchResponse(passwords=[_password_response(r.password) for r in results])


@router.post("/passphrase", response_model=PasswordBatchResponse)
async def passphrases(body: PassphraseRequest):
    try:
        words = load_wordlist(settings.passphrase_wordlist, settings.passphrase_wordlist_path or None)
    except WordlistError:
        logger.exception("Passphrase wordlist could not be loaded")
        raise HTTPException(status_code=500, detail="Passphrase wordlist unavailable")

    config = PassphraseConfig(
        word_count=body.word_count,
        separator=body.separator,
        capitalize=body.capitalize,
    )
    results = generate_multiple(body.count, lambda: generate_passphrase(config, words))
    return PasswordBatchResponse(passwords=[_password_response(p) for p in results])


@router.post("/strength", response_model=StrengthResponse)
async def strength(body: StrengthRequest):
    analysis = analyze_strength(
        body.mode,
        body.pool_size,
        body.effective_length,
        locale=settings.display_locale,
    )
    return _strength_response(analysis)
