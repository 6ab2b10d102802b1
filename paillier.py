#!/usr/bin/env python3
"""Implementation of the Paillier cryptosystem

The Paillier cryptosystem is a public key encryption system with the property
of being partially homomorphic for addition (i.e. we can combine the
ciphertexts of two messages to obtain a ciphertext of the sum of these two
messages).

The keys only hold parameters; all the operations are functions of this
module taking the relevant key explicitly:

    pk, sk = generate_paillier_keypair(1024)
    x = encrypt(pk, 17)
    y = add(pk, x, Plaintext(3))
    assert decrypt(sk, mul(pk, y, 3)) == 60

The main entry points of this module are `generate_paillier_keypair()` and
`generate_paillier_keypair_async()`.
"""
import util


def paillier_keypair_from_primes(p, q):
    """Build a pair of keys for the Paillier cryptosystem from two primes

    Arguments:
        p (int): first prime factor of `n`
        q (int): second prime factor of `n`, of the same size as `p`

    Returns:
        tuple: pair of two elements, usually named respectively `pk`
            (`PaillierPublicKey`), and `sk` (`PaillierSecretKey`)
    """
    n = p * q
    lambda_ = (p-1) * (q-1)
    mu = util.invert(lambda_, n)
    pk = PaillierPublicKey(n, n + 1)
    sk = PaillierSecretKey(pk, lambda_, mu)
    return pk, sk


def generate_paillier_keypair(prime_bits=1024):
    """Generate a pair of keys for the Paillier cryptosystem

    Arguments:
        prime_bits (int, optional): the number of bits of each of the two
            primes whose product is `n`; the security corresponds to the
            difficulty of factoring `n` (as in RSA), so `n` should have at
            least 2048 bits

    Returns:
        tuple: pair of two elements, usually named respectively `pk`
            (`PaillierPublicKey`), and `sk` (`PaillierSecretKey`)

        The public key (`pk`) allows to encrypt messages (integers modulo
        `n`); the secret key (`sk`) allows to decrypt ciphertexts generated
        using that public key (but not using another).
    """
    p = util.genprime(prime_bits)
    q = util.genprime(prime_bits)
    return paillier_keypair_from_primes(p, q)


async def generate_paillier_keypair_async(prime_bits=1024, executor=None):
    """Generate a pair of keys for the Paillier cryptosystem asynchronously

    Same as `generate_paillier_keypair()`, but the two prime searches run
    concurrently in `executor` instead of blocking the caller.

    Arguments:
        prime_bits (int, optional): the number of bits of each prime
        executor (concurrent.futures.Executor, optional): where to run the
            prime searches (default executor of the event loop otherwise)

    Returns:
        tuple: `pk` (`PaillierPublicKey`) and `sk` (`PaillierSecretKey`)
    """
    p, q = await util.genprimes_async(prime_bits, 2, executor)
    return paillier_keypair_from_primes(p, q)


class PaillierPublicKey:
    """Public key for the Paillier cryptosystem

    Attributes:
        n (int): parameter `n` from the Paillier cryptosystem, product of two
            primes of the same size
        g (int): parameter `g` from the Paillier cryptsystem; in
            `paillier_keypair_from_primes()`, `g` is set to `1 + n`
        nsquare (int): cached value of `n × n`, the modulus of ciphertexts
    """

    def __init__(self, n, g):
        """Constructor

        Arguments:
            n (int): parameter from the Paillier cryptosystem
            g (int): parameter from the Paillier cryptosystem
        """
        self.n = n
        self.g = g
        self.nsquare = n * n


class PaillierSecretKey:
    """Secret key for the Paillier cryptsystem

    The secret key must never leave the party which generated it.

    Attributes:
        public_key (PaillierPublicKey): the corresponding public key
        lambda_ (int): `(p-1)(q-1)` where `p` and `q` are the factors of `n`
        mu (int): inverse of `lambda_` modulo `n`
    """
    def __init__(self, public_key, lambda_, mu):
        """Constructor

        Arguments:
            public_key (PaillierPublicKey): the corresponding public key
            lambda_ (int): parameter from the Paillier cryptosystem
            mu (int): parameter from the Paillier cryptosystem
        """
        self.public_key = public_key
        self.lambda_ = lambda_
        self.mu = mu

    @property
    def n(self):
        return self.public_key.n

    @property
    def g(self):
        return self.public_key.g

    @property
    def nsquare(self):
        return self.public_key.nsquare


class PaillierCiphertext:
    """Ciphertext from the Paillier cryptosystem

    Wrapping the raw integer avoids mixing up encrypted and clear values.

    Attributes:
        raw_value (int): an element of Z_n², that should equals to `g^m r^n`
            where `n` and `g` are the attributes of the public key, `m` is the
            message which was encrypted and `r` is a random element of Z_n
    """
    def __init__(self, raw_value):
        self.raw_value = raw_value

    def __repr__(self):
        return 'PaillierCiphertext({})'.format(self.raw_value)

    def __eq__(self, other):
        return isinstance(other, PaillierCiphertext) and \
            self.raw_value == other.raw_value

    def __hash__(self):
        return hash(self.raw_value)

    def as_ciphertext(self, pk):
        """Operand of a homomorphic addition (already encrypted)"""
        return self


class Plaintext:
    """Clear operand of a homomorphic addition

    `add()` accepts either a `Plaintext` or a `PaillierCiphertext` as its
    second operand; both expose `as_ciphertext()`.

    Attributes:
        value (int): the clear value
    """
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return 'Plaintext({})'.format(self.value)

    def __eq__(self, other):
        return isinstance(other, Plaintext) and self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def as_ciphertext(self, pk):
        """Operand of a homomorphic addition (fresh encryption of the value)

        Raises `ValueError` when the value is outside `[0, n)`, as `encrypt()`.
        """
        return encrypt(pk, self.value)


def _raw_power_of_g(pk, m):
    """Computes `g^m mod n²`

    If g is of the form (1+n), then (1+n)^m = 1 + m·n mod n², which avoids
    the exponentiation.
    """
    if pk.g == pk.n + 1:
        return (1 + pk.n * m) % pk.nsquare
    return util.powmod(pk.g, m, pk.nsquare)


def encrypt(pk, m):
    """Encrypt a message m into a ciphertext

    The randomization factor `r` is drawn uniformly from `[1, n)`, without
    checking that it is coprime with `n` (which only fails with negligible
    probability). Thus, two encryptions of the same message differ with
    overwhelming probability.

    Arguments:
        pk (PaillierPublicKey): the public key
        m (int): the message to be encrypted, in `[0, n)`

    Returns:
        PaillierCiphertext: a ciphertext for the given integer `m` it can
            be decrypted using the secret key corresponding to this public
            key

    Raises:
        ValueError: if `m` is negative or not smaller than `n`
    """
    if not 0 <= m < pk.n:
        raise ValueError('plaintext {} out of range [0, n)'.format(m))
    n2 = pk.nsquare
    r = 1 + util.randbelow(pk.n - 1)
    raw_value = _raw_power_of_g(pk, m) * util.powmod(r, pk.n, n2) % n2
    return PaillierCiphertext(raw_value)


def decrypt(sk, ciphertext):
    """Decrypt a ciphertext

    Decrypting a ciphertext that was not produced under the public key
    matching `sk` is a logic error: the result is an arbitrary integer and no
    exception is raised.

    Arguments:
        sk (PaillierSecretKey): the secret key
        ciphertext (PaillierCiphertext): the ciphertext to be decrypted

    Returns:
        int: the message represented in the ciphertext, in `[0, n)`

        If homomorphic operations have been performed, then the result of
        these operations on the original messages (modulo `n`) is returned.
    """
    # c^λ = 1 + m·λ·n mod n²
    u = util.powmod(ciphertext.raw_value, sk.lambda_, sk.nsquare)
    return (u // sk.n) * sk.mu % sk.n


def add(pk, x, y):
    """Homomorphically add two values together

    Arguments:
        pk (PaillierPublicKey): the public key
        x (PaillierCiphertext): left operand
        y (PaillierCiphertext or Plaintext): right operand; a plaintext is
            encrypted before being combined

    Returns:
        PaillierCiphertext: decrypting this ciphertext should yield the sum
            modulo `n` of the value obtained by decrypting `x` and of the value
            of `y`
    """
    y = y.as_ciphertext(pk)
    return PaillierCiphertext(x.raw_value * y.raw_value % pk.nsquare)


def mul(pk, x, k):
    """Homomorphically multiply a Paillier ciphertext by an integer

    Note that it is not possible to perform this operation between two
    Paillier ciphertexts: the Paillier cryptosystem is only partially
    homomorphic.

    Arguments:
        pk (PaillierPublicKey): the public key
        x (PaillierCiphertext): the encrypted operand
        k (int): the clear operand; reduced modulo `n`

    Returns:
        PaillierCiphertext: decrypting this ciphertext should yield the
            product modulo `n` of the value obtained by decrypting `x` with
            the integer `k`
    """
    k = util.reduce(k, pk.n)
    return PaillierCiphertext(util.powmod(x.raw_value, k, pk.nsquare))
