"""Probable-prime generation for the service's RSA key pairs.

Follows the FIPS 186-5 recipe for IFC key pairs built from probable primes: random odd candidates with the top two
bits set, a cheap trial division against a cached table of small primes, then Miller-Rabin with a round count chosen
from the candidate size (Appendix C.1).

Typical usage example:

    (n, e), (_, d, p, q) = generate_key_pair(4096)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets
import time

from rsaservice.errors import KeyGenerationError

logger = logging.getLogger(__name__)

MINIMUM_KEY_SIZE: int = 2048
_SIEVE_LIMIT: int = 10000
_MINIMUM_PRIME_SEPARATION: int = 100
_small_primes: list[int] = []
_small_primes_cap: int = 0


def small_primes(limit: int = _SIEVE_LIMIT) -> list[int]:
    """Return every prime up to `limit`, sieving only when the cached table is too short.

    Args:
        limit: Upper bound for the table. Must be >= 0.

    Returns:
        Ascending list of primes. May reach beyond `limit` if a larger table was already cached.
    """
    if limit < 0:
        raise ValueError("limit must be >= 0")
    global _small_primes
    global _small_primes_cap
    if limit > _small_primes_cap or not _small_primes:
        _small_primes = _sieve(limit)
        _small_primes_cap = limit
    return _small_primes


def _sieve(limit: int) -> list[int]:
    """Odd-only Sieve of Eratosthenes."""
    if limit < 2:
        return []
    half = (limit - 1) // 2
    marks = [True] * half
    for i in range(int(limit**0.5) // 2):
        if marks[i]:
            step = 2 * i + 3
            for j in range((step * step - 3) // 2, half, step):
                marks[j] = False
    return [2] + [2 * i + 3 for i, keep in enumerate(marks) if keep]


def _trial_division(candidate: int) -> bool:
    """False if `candidate` has a small prime factor, True if it survives."""
    for prime in small_primes():
        if prime * prime > candidate:
            return True
        if candidate % prime == 0:
            return False
    return True


def _rounds_for(bits: int) -> int:
    if bits <= 512:
        return 40
    if bits <= 1024:
        return 56
    if bits <= 1536:
        return 64
    if bits <= 2048:
        return 70
    return 74


def _miller_rabin(w: int, rounds: int) -> bool:
    """Miller-Rabin as written in FIPS 186-5 B.3.1, with random bases in [2, w-2]."""
    if w <= 3:
        return w in (2, 3)
    if w % 2 == 0:
        return False
    wm1 = w - 1
    a = (wm1 & -wm1).bit_length() - 1
    m = wm1 >> a
    for _ in range(rounds):
        z = pow(secrets.randbelow(w - 3) + 2, m, w)
        if z in (1, wm1):
            continue
        for _ in range(a - 1):
            z = pow(z, 2, w)
            if z == wm1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def is_probable_prime(candidate: int, rounds: int | None = None) -> bool:
    """Composite primality test: trial division first, then Miller-Rabin.

    Args:
        candidate: The number to test.
        rounds: Miller-Rabin rounds. Defaults to the FIPS 186-5 count for the candidate size.

    Returns:
        True if `candidate` is probably prime.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate):
        return False
    return _miller_rabin(candidate, rounds if rounds is not None else _rounds_for(candidate.bit_length()))


def _probable_prime(bits: int, pub: int, other: int | None = None) -> int:
    """Draw candidates until one is prime, coprime to `pub - 1` and far enough from `other`.

    Raises:
        KeyGenerationError: If the candidate budget runs out, which points at a broken random source.
    """
    budget = bits * 5 * (1 if other is None else 2)
    top = (1 << bits - 1) | (1 << bits - 2)
    for _ in range(budget):
        candidate = secrets.randbits(bits) | top | 1
        if other is not None and abs(other - candidate) <= 1 << (bits - _MINIMUM_PRIME_SEPARATION):
            continue
        if math.gcd(candidate - 1, pub) == 1 and is_probable_prime(candidate):
            return candidate
    raise KeyGenerationError(f"No {bits}-bit prime found after {budget} candidates. Check the system random source.")


def generate_primes(size: int, pub: int = 65537) -> tuple[int, int]:
    """Generate two distinct primes suitable for a `size`-bit modulus.

    Args:
        size: Modulus size in bits. Even and at least 2048.
        pub: Public exponent. Odd and in the open interval (2**16, 2**256).

    Returns:
        The pair (p, q).

    Raises:
        ValueError: If `size` or `pub` is unacceptable.
        KeyGenerationError: If the random source fails.
    """
    if size < MINIMUM_KEY_SIZE:
        raise ValueError(f"Size must be at least {MINIMUM_KEY_SIZE}.")
    if size % 2:
        raise ValueError("Size must be an even number.")
    if pub % 2 == 0 or not 2**16 < pub < 2**256:
        raise ValueError("Public exponent does not meet requirements.")
    try:
        p = _probable_prime(size // 2, pub)
        q = _probable_prime(size // 2, pub, p)
    except OSError as exc:
        raise KeyGenerationError("Random source unavailable.") from exc
    return p, q


def generate_key_pair(size: int, pub: int = 65537) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generate a complete RSA key pair.

    The private exponent is the inverse of `pub` modulo lcm(p - 1, q - 1).

    Args:
        size: Modulus size in bits.
        pub: Public exponent.

    Returns:
        ((modulus, public exponent), (modulus, private exponent, p, q))
    """
    started = time.monotonic()
    logger.info("Generating %d-bit RSA key pair", size)
    p, q = generate_primes(size, pub)
    n = p * q
    if n.bit_length() != size:
        raise KeyGenerationError(f"Modulus came out at {n.bit_length()} bits instead of {size}.")
    d = pow(pub, -1, math.lcm(p - 1, q - 1))
    logger.info("Generated %d-bit RSA key pair in %.2fs", size, time.monotonic() - started)
    return (n, pub), (n, d, p, q)
