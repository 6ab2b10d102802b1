#!/usr/bin/env python3
"""Implementation of the Goldwasser-Micali cryptosystem

The Goldwasser-Micali cryptosystem encrypts a single bit per ciphertext: an
encryption of 0 is a quadratic residue modulo `N`, an encryption of 1 is a
non-residue. Multiplying two ciphertexts yields an encryption of the XOR of
the two bits.

The main entry point of this module is
`generate_goldwasser_micali_keypair()`.
"""
import util


def legendre(a, p):
    """Legendre symbol of `a` modulo the odd prime `p`

    Arguments:
        a (int): the integer to test
        p (int): an odd prime

    Returns:
        int: 0 if `p` divides `a`, 1 if `a` is a quadratic residue modulo `p`
            and -1 otherwise
    """
    a %= p
    if a == 0:
        return 0
    return 1 if util.powmod(a, (p-1) >> 1, p) == 1 else -1


def jacobi(a, n):
    """Jacobi symbol of `a` modulo the odd positive integer `n`

    Arguments:
        a (int): the integer to test
        n (int): an odd positive integer (not necessarily prime)

    Returns:
        int: the Jacobi symbol (a/n), in {-1, 0, 1}
    """
    a %= n
    t = 1
    while a != 0:
        while a % 2 == 0:
            a >>= 1
            if n % 8 in (3, 5):
                t = -t
        # quadratic reciprocity
        a, n = n, a
        if a % 4 == 3 and n % 4 == 3:
            t = -t
        a %= n
    return t if n == 1 else 0


def non_residue(p, q):
    """Find an integer which is a non-residue modulo both `p` and `q`

    The search keeps drawing random candidates until one fits; about one
    candidate in four does.

    Arguments:
        p (int): first odd prime
        q (int): second odd prime

    Returns:
        int: `x` such that `legendre(x, p) == legendre(x, q) == -1`
    """
    a = 0
    while legendre(a, p) != -1 or legendre(a, q) != -1:
        a = 1 + util.randbelow(p - 1)
    return a


def goldwasser_micali_keypair_from_primes(p, q):
    """Build a pair of keys for the Goldwasser-Micali cryptosystem

    Arguments:
        p (int): first prime factor of `N`
        q (int): second prime factor of `N`

    Returns:
        tuple: `pk` (`GoldwasserMicaliPublicKey`) and `sk`
            (`GoldwasserMicaliSecretKey`)
    """
    sk = GoldwasserMicaliSecretKey(non_residue(p, q), p * q, p, q)
    return sk.public_key, sk


def generate_goldwasser_micali_keypair(prime_bits=1024):
    """Generate a pair of keys for the Goldwasser-Micali cryptosystem

    Arguments:
        prime_bits (int, optional): the number of bits of each prime factor
            of `N`

    Returns:
        tuple: `pk` (`GoldwasserMicaliPublicKey`) and `sk`
            (`GoldwasserMicaliSecretKey`)
    """
    p = util.genprime(prime_bits)
    q = util.genprime(prime_bits)
    return goldwasser_micali_keypair_from_primes(p, q)


async def generate_goldwasser_micali_keypair_async(prime_bits=1024, executor=None):
    """Asynchronous version of `generate_goldwasser_micali_keypair()`

    Arguments:
        prime_bits (int, optional): the number of bits of each prime factor
        executor (concurrent.futures.Executor, optional): where to run the
            prime searches

    Returns:
        tuple: `pk` (`GoldwasserMicaliPublicKey`) and `sk`
            (`GoldwasserMicaliSecretKey`)
    """
    p, q = await util.genprimes_async(prime_bits, 2, executor)
    return goldwasser_micali_keypair_from_primes(p, q)


class GoldwasserMicaliPublicKey:
    """Public key for the Goldwasser-Micali cryptosystem

    Attributes:
        x (int): a non-residue modulo both factors of `N`
        N (int): product of two primes
    """
    def __init__(self, x, N):
        self.x = x
        self.N = N


class GoldwasserMicaliSecretKey(GoldwasserMicaliPublicKey):
    """Secret key for the Goldwasser-Micali cryptosystem

    Attributes:
        p (int): first prime factor of `N`
        q (int): second prime factor of `N`
        public_key (GoldwasserMicaliPublicKey): the corresponding public key
    """
    def __init__(self, x, N, p, q):
        super().__init__(x, N)
        self.p = p
        self.q = q
        self.public_key = GoldwasserMicaliPublicKey(x, N)


class GoldwasserMicaliCiphertext:
    """Encryption of a single bit

    Attributes:
        raw_value (int): an element of Z_N
    """
    def __init__(self, raw_value):
        self.raw_value = raw_value

    def __repr__(self):
        return 'GoldwasserMicaliCiphertext({})'.format(self.raw_value)


def encrypt(pk, bit):
    """Encrypt a bit

    Arguments:
        pk (GoldwasserMicaliPublicKey): the public key
        bit (int): 0 or 1

    Returns:
        GoldwasserMicaliCiphertext: `y² · x^bit mod N` for a random `y`
            coprime with `N`
    """
    y = util.randbelow(pk.N)
    while util.gcd(y, pk.N) != 1:
        y = util.randbelow(pk.N)
    raw_value = util.powmod(y, 2, pk.N) * util.powmod(pk.x, bit, pk.N) % pk.N
    return GoldwasserMicaliCiphertext(raw_value)


def decrypt(sk, ciphertext):
    """Decrypt a ciphertext

    Arguments:
        sk (GoldwasserMicaliSecretKey): the secret key
        ciphertext (GoldwasserMicaliCiphertext): the encrypted bit

    Returns:
        int: 0 if the ciphertext is a quadratic residue modulo both `p` and
            `q`, 1 otherwise
    """
    c = ciphertext.raw_value
    if legendre(c, sk.p) == 1 and legendre(c, sk.q) == 1:
        return 0
    return 1


def xor(pk, lhs, rhs):
    """Homomorphically XOR two encrypted bits

    Arguments:
        pk (GoldwasserMicaliPublicKey): the public key
        lhs (GoldwasserMicaliCiphertext): left operand
        rhs (GoldwasserMicaliCiphertext): right operand

    Returns:
        GoldwasserMicaliCiphertext: an encryption of the XOR of the two bits
    """
    return GoldwasserMicaliCiphertext(lhs.raw_value * rhs.raw_value % pk.N)
