#!/usr/bin/env python3
"""Some utilities (mostly arithmetic)

Everything that touches big integers goes through `gmpy2` here, so that the
cryptosystems and protocols only ever manipulate plain Python integers.
"""
import random
import asyncio
import hashlib

import gmpy2


class UnknownTermError(ValueError):
    """Raised when a term is not part of the fixed vocabulary"""


class DomainSizeError(ValueError):
    """Raised when a vector of ciphertexts does not have the expected size"""


def powmod(x, y, m):
    """Computes `x^y mod m`

    The method `powmod()` from `gmpy2` is faster than Python's builtin
    `powmod()`. However, it does add some overhead which should be skipped for
    `x = 1`.

    Arguments:
        x (int): base of the exponentiation
        y (int): exponent, must be non-negative
        m (int): modulus, must be positive

    Returns:
        int: the result of `x^y mod m`, in `[0, m)`

    Raises:
        ValueError: when `y` is negative or `m` is not positive
    """
    if y < 0:
        raise ValueError('exponent must be >= 0')
    if m <= 0:
        raise ValueError('modulus must be > 0')
    elif m == 1:
        return 0
    x %= m
    if x == 1:
        return 1
    return int(gmpy2.powmod(x, y, m))


def invert(x, m):
    """Computes the invert of `x` modulo `m`

    This is a wrapper for `invert() from `gmpy2`.

    Arguments:
        x (int): element to be inverted
        m (int): modulus

    Returns:
        int: y such that `x × y = 1 mod m`
    """
    return int(gmpy2.invert(x, m))


def gcd(a, b):
    """Greatest common divisor of `a` and `b`"""
    return int(gmpy2.gcd(a, b))


def gcdext(a, b):
    """Extended Euclidean algorithm

    This is a wrapper for `gcdext()` from `gmpy2`; as in GMP, the
    coefficients are normalized so that `|s| < |b| / (2g)` and
    `|t| < |a| / (2g)` (except for the degenerate cases documented by GMP).

    Arguments:
        a (int): first operand
        b (int): second operand

    Returns:
        tuple: `(g, s, t)` such that `a × s + b × t = g = gcd(a, b)`
    """
    g, s, t = gmpy2.gcdext(a, b)
    return int(g), int(s), int(t)


def is_prime(x):
    """Tests whether `x` is probably prime

    This is a wrapper for `is_prime() from `gmpy2`.

    Arguments:
        x (int): the candidate prime

    Returns:
        bool: `True` if `x` is probably prime else `False`
    """
    return bool(gmpy2.is_prime(x))


def genprime(n_bits):
    """Generate a probable prime number of n_bits

    This method is based on `next_prime()` from `gmpy2`.

    Arguments:
        n_bits (int): the size of the prime to be generated, in bits

    Returns:
        int: a probable prime `x` from `[2^(n_bits-1), 2^n_bits]`
    """
    n = random.SystemRandom().randrange(2**(n_bits-1), 2**n_bits) | 1
    return int(gmpy2.next_prime(n))


async def genprimes_async(n_bits, count, executor=None):
    """Generate several probable primes without blocking the event loop

    Each prime search is submitted independently to `executor`, so that the
    searches run concurrently. Cancelling the returned coroutine cancels the
    searches that have not started yet.

    Arguments:
        n_bits (int): the size of each prime, in bits
        count (int): the number of primes to generate
        executor (concurrent.futures.Executor, optional): where to run the
            searches; the default executor of the event loop is used when not
            provided

    Returns:
        list: `count` probable primes (int) of `n_bits` bits
    """
    loop = asyncio.get_running_loop()
    searches = [
        loop.run_in_executor(executor, genprime, n_bits)
        for _ in range(count)
    ]
    return list(await asyncio.gather(*searches))


def randbelow(bound):
    """Cryptographically secure uniform integer from `[0, bound)`"""
    return random.SystemRandom().randrange(bound)


def reduce(value, modulus):
    """Canonical representative of `value` modulo `modulus`, in `[0, modulus)`"""
    return value % modulus


def prod(elements_iterable, modulus=None):
    """Computes the product of the given elements

    Arguments:
        elements_iterable (iterable): values (int) to be multiplied together
        modulus (int): if provided, the result will be given modulo this value

    Returns:
        int: the product of the elements from elements_iterable; 1 when there
        are no elements

        If modulus is not None, then the result is reduced modulo the provided
        value.
    """
    product = 1
    for element in elements_iterable:
        product *= element
        if modulus is not None:
            product %= modulus
    return product


def keyed_hash(key, term):
    """Deterministic keyed digest of a term

    The key is fed to SHA-256 first (its decimal representation for an
    integer, its UTF-8 encoding for a string, as-is for bytes), followed by
    the UTF-8 encoding of the term.

    Arguments:
        key (int, str or bytes): the secret key
        term (str): the term to hash

    Returns:
        int: the digest, read as a big-endian unsigned integer
    """
    if not isinstance(key, bytes):
        key = str(key).encode()
    h = hashlib.sha256()
    h.update(key)
    h.update(term.encode())
    return int.from_bytes(h.digest(), 'big')
