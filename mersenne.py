#!/usr/bin/env python3
"""Mersenne primes usable as moduli for secret sharing

Primes of the form `2^e - 1` make cheap, well-known public moduli for
`shamir.ShamirPolynomial`; the secret must be smaller than the modulus.
"""

# exponents e such that 2^e - 1 is prime
MERSENNE_EXPONENTS = (
    2, 3, 5, 7, 13, 17, 19, 31, 61, 89, 107, 127, 521, 607, 1279,
)


def mersenne_prime(exponent):
    """Return the Mersenne prime `2^exponent - 1`

    Arguments:
        exponent (int): one of `MERSENNE_EXPONENTS`

    Returns:
        int: `2^exponent - 1`

    Raises:
        ValueError: when `2^exponent - 1` is not a known Mersenne prime
    """
    if exponent not in MERSENNE_EXPONENTS:
        raise ValueError('2^{} - 1 is not a known Mersenne prime'.format(exponent))
    return 2**exponent - 1
