#!/usr/bin/env python3
"""Shamir (k, n) threshold secret sharing

The secret is the constant term of a random polynomial of degree `k - 1` over
the field of integers modulo a prime; a share is the evaluation of this
polynomial at a non-zero point. Any `k` shares determine the polynomial, and
thus the secret, by Lagrange interpolation; fewer shares are independent of
the secret.

    prime = mersenne.mersenne_prime(127)
    poly = ShamirPolynomial.make(12345, 3, prime)
    parts = [(i, poly.share(i)) for i in range(1, 11)]
    assert ShamirPolynomial.recover(parts[2:5], prime) == 12345

The prime modulus is public and must be known to recover the secret; the
`mersenne` module provides convenient values.
"""
import util


class ShamirPolynomial:
    """Polynomial used to create shares of a secret

    Attributes:
        poly (list): the coefficients (int), constant term first; the
            constant term is the secret, so this object must be kept as
            securely as the secret itself
        prime (int): the prime modulus
    """
    def __init__(self, poly, prime):
        """Constructor

        Used directly to recreate a polynomial previously created with
        `make()` (e.g. to issue new shares).

        Arguments:
            poly (list): the coefficients (int), constant term first
            prime (int): the prime modulus
        """
        self.poly = poly
        self.prime = prime

    @classmethod
    def make(cls, secret, threshold, prime):
        """Create a new polynomial for sharing a secret

        Arguments:
            secret (int): the value to share, in `[0, prime)`
            threshold (int): the minimal number of shares needed to recover
                the secret (at least 2)
            prime (int): the prime modulus; larger values are more secure,
                but shares are bigger

        Returns:
            ShamirPolynomial: the polynomial `secret + r_1·x + ... +
                r_{k-1}·x^{k-1}` with random coefficients `r_i`
        """
        poly = [secret] + [util.randbelow(prime) for _ in range(threshold - 1)]
        return cls(poly, prime)

    def share(self, i):
        """Create the share of index `i`

        Arguments:
            i (int): the index of the share, in `[1, prime)`; the index must
                be kept along with the share for recovery

        Returns:
            int: the evaluation of the polynomial at `i`

        Raises:
            ValueError: when `i` is not positive (the evaluation at 0 is the
                secret itself)
        """
        if i <= 0:
            raise ValueError('share index must be 1 or greater, got {}'.format(i))
        # Horner's method
        a = 0
        for c in reversed(self.poly):
            a = (a * i + c) % self.prime
        return a

    @staticmethod
    def recover(parts, prime):
        """Recover the secret from shares

        The caller must provide at least as many shares as the threshold
        used in `make()`, with distinct indices; otherwise, the result is
        an arbitrary integer (this is not checked).

        Arguments:
            parts (list): pairs `(index, share)` of integers
            prime (int): the prime modulus used to create the shares

        Returns:
            int: the secret, in `[0, prime)`
        """
        xs = [x for x, _ in parts]
        ys = [y for _, y in parts]
        return ShamirPolynomial.lagrange_interpolate(0, xs, ys, prime)

    @staticmethod
    def lagrange_interpolate(x, xs, ys, prime):
        """Evaluate at `x` the polynomial going through the given points

        The divisions are deferred: every term is brought to the common
        denominator, so that a single modular division happens at the end.

        Arguments:
            x (int): where to evaluate the polynomial
            xs (list): the abscissas (int) of the known points, all distinct
            ys (list): the corresponding ordinates (int)
            prime (int): the prime modulus

        Returns:
            int: the value of the polynomial at `x`, in `[0, prime)`
        """
        nums = []
        dens = []
        for i, cur in enumerate(xs):
            others = xs[:i] + xs[i+1:]
            nums.append(util.prod(x - o for o in others))
            dens.append(util.prod(cur - o for o in others))
        den = util.prod(dens)
        num = sum(
            ShamirPolynomial.divmod(nums[i] * den * ys[i] % prime, dens[i], prime)
            for i in range(len(xs))
        )
        return ShamirPolynomial.divmod(num, den, prime) % prime

    @staticmethod
    def divmod(num, den, prime):
        """Compute `num / den` modulo `prime`, without reducing the result

        Arguments:
            num (int): the numerator
            den (int): the denominator, not a multiple of `prime`
            prime (int): the prime modulus

        Returns:
            int: `num × inv` where `inv` is the Bézout coefficient of `den`
                modulo `prime`; the result is congruent to `num / den` but
                not necessarily in `[0, prime)`
        """
        if den < 0:
            num = -num
            den = -den
        _, inv, _ = util.gcdext(den, prime)
        return num * inv
