#!/usr/bin/env python3
import random
import asyncio
import itertools
import unittest
import concurrent.futures

import util
import shamir
import paillier
import mersenne
import diffiehellman
import goldwassermicali as gm
from bitvector import BitVector
from ruanpsi import RuanPSI
from partitionedpsi import PartitionedPSI, PartitionedPSIEncryptum
from partitionedbitvector import PartitionedBitVector

_PRIME_BITS = 128

_P127 = 170141183460469231731687303715884105727

_VOCABULARY = [
    'Abnormality of humoral immunity',
    'Abnormality of intrinsic muscle of tongue',
    'Abnormality of levator labii superioris alaeque nasi muscle',
    'Abnormality of levator labii superioris',
    'Abnormality of macular pigmentation',
    'Abnormality of male external genitalia',
    'Abnormality of mouth size',
    'Abnormality of muscle of facial expression',
    'Abnormality of muscle size',
    'Abnormality of nasal musculature',
    'Abnormality of neutrophil morphology',
    'Abnormality of ophthalmic artery',
    'Abnormality of pattern reversal visual evoked potentials',
    'Abnormality of peripheral somatosensory evoked potentials',
    'Abnormality of pineal physiology',
    'Abnormality of prenatal development or birth',
    'Abnormality of radial epiphyses',
    'Abnormality of renin-angiotensin system',
    'Abnormality of styloglossus muscle',
    'Abnormality of the Achilles tendon',
    'Abnormality of the anterior commissure',
    'Abnormality of the back musculature',
    'Abnormality of the choanae',
    'Abnormality of the clivus',
    'Abnormality of the epiphyses of the proximal phalanges of the hand',
    'Abnormality of the epiphysis of the 1st metatarsal',
    'Abnormality of the epiphysis of the distal phalanx of the 4th toe',
    'Abnormality of the epiphysis of the distal phalanx of the hallux',
    'Abnormality of the epiphysis of the middle phalanx of the 4th toe',
    'Abnormality of the epiphysis of the proximal phalanx of the 2nd finger',
    'Abnormality of the epiphysis of the proximal phalanx of the 4th finger',
]


class TestUtil(unittest.TestCase):
    def test_powmod(self):
        self.assertEqual(util.powmod(3, 4, 7), 81 % 7)
        self.assertEqual(util.powmod(-3, 3, 7), -27 % 7)
        self.assertEqual(util.powmod(10, 0, 7), 1)
        self.assertEqual(util.powmod(12, 5, 1), 0)
        self.assertEqual(util.powmod(1, 1000, 7), 1)

        # range violations
        self.assertRaises(ValueError, util.powmod, 3, -1, 7)
        self.assertRaises(ValueError, util.powmod, 3, 2, 0)
        self.assertRaises(ValueError, util.powmod, 3, 2, -7)

    def test_arithmetic(self):
        self.assertEqual(util.invert(3, 7), 5)
        self.assertEqual(util.gcd(12, 18), 6)
        g, s, t = util.gcdext(240, 46)
        self.assertEqual(g, 2)
        self.assertEqual(240*s + 46*t, 2)
        self.assertEqual(util.reduce(-3, 7), 4)
        self.assertEqual(util.prod([2, 3, 4]), 24)
        self.assertEqual(util.prod([2, 3, 4], 5), 4)
        self.assertEqual(util.prod([]), 1)

    def test_genprime(self):
        p = util.genprime(_PRIME_BITS)
        self.assertTrue(util.is_prime(p))
        self.assertGreaterEqual(p.bit_length(), _PRIME_BITS)

        primes = asyncio.run(util.genprimes_async(_PRIME_BITS, 3))
        self.assertEqual(len(primes), 3)
        self.assertTrue(all(util.is_prime(p) for p in primes))

    def test_keyed_hash(self):
        h = util.keyed_hash(12345, 'foo')
        self.assertEqual(h, util.keyed_hash('12345', 'foo'))
        self.assertEqual(h, util.keyed_hash(b'12345', 'foo'))
        self.assertNotEqual(h, util.keyed_hash(12346, 'foo'))
        self.assertEqual(
            h, 0x7cf9c6e78a164d5e00072bf245c2d36d0c575eba6a7120fc1ad0f75fec3b58d0
        )


class TestPaillier(unittest.TestCase):
    def test_keygen(self):
        p = util.genprime(_PRIME_BITS)
        q = util.genprime(_PRIME_BITS)
        pk, sk = paillier.paillier_keypair_from_primes(p, q)

        self.assertEqual(pk.n, p * q)
        self.assertEqual(pk.g, pk.n + 1)
        self.assertEqual(pk.nsquare, pk.n**2)
        self.assertEqual(sk.lambda_, (p-1) * (q-1))
        self.assertEqual(sk.lambda_ * sk.mu % pk.n, 1)
        self.assertIs(sk.public_key, pk)
        self.assertEqual(sk.n, pk.n)

    def test_keygen_async(self):
        pk, sk = asyncio.run(paillier.generate_paillier_keypair_async(_PRIME_BITS))
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, 42)), 42)

        with concurrent.futures.ThreadPoolExecutor(2) as executor:
            pk, sk = asyncio.run(
                paillier.generate_paillier_keypair_async(_PRIME_BITS, executor)
            )
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, 42)), 42)

    def test_encrypt(self):
        pk, sk = paillier.generate_paillier_keypair(_PRIME_BITS)

        # check the ciphertexts are actually randomized
        c = paillier.encrypt(pk, 12)
        d = paillier.encrypt(pk, 12)
        self.assertNotEqual(c, d)

        # check the ciphertexts are in ℤ_n²
        self.assertGreater(c.raw_value, 0)
        self.assertLess(c.raw_value, pk.nsquare)

    def test_decrypt(self):
        pk, sk = paillier.generate_paillier_keypair(_PRIME_BITS)
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, 0)), 0)
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, 1)), 1)
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, 13)), 13)
        self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, pk.n - 1)), pk.n - 1)

        # plaintexts must be in [0, n)
        self.assertRaises(ValueError, paillier.encrypt, pk, -1)
        self.assertRaises(ValueError, paillier.encrypt, pk, pk.n)
        self.assertRaises(ValueError, paillier.encrypt, pk, pk.n + 5)

        for _ in range(20):
            m = random.randrange(pk.n)
            self.assertEqual(paillier.decrypt(sk, paillier.encrypt(pk, m)), m)

    def test_additive(self):
        pk, sk = paillier.generate_paillier_keypair(_PRIME_BITS)
        a = paillier.encrypt(pk, 23)
        b = paillier.encrypt(pk, 7)

        # additions
        self.assertEqual(paillier.decrypt(sk, paillier.add(pk, a, b)), 30)
        self.assertEqual(paillier.decrypt(sk, paillier.add(pk, a, paillier.Plaintext(7))), 30)
        self.assertRaises(ValueError, paillier.add, pk, a, paillier.Plaintext(-23))
        self.assertRaises(ValueError, paillier.add, pk, a, paillier.Plaintext(pk.n))

        # multiplication
        self.assertEqual(paillier.decrypt(sk, paillier.mul(pk, a, 7)), 161)
        self.assertEqual(paillier.decrypt(sk, paillier.mul(pk, a, 0)), 0)
        self.assertEqual(paillier.decrypt(sk, paillier.mul(pk, a, -1)), pk.n - 23)

        # wrap around
        c = paillier.add(pk, paillier.encrypt(pk, pk.n - 1), paillier.Plaintext(2))
        self.assertEqual(paillier.decrypt(sk, c), 1)

        for _ in range(10):
            x, y, k = (random.randrange(pk.n) for _ in range(3))
            cx, cy = paillier.encrypt(pk, x), paillier.encrypt(pk, y)
            self.assertEqual(paillier.decrypt(sk, paillier.add(pk, cx, cy)), (x + y) % pk.n)
            self.assertEqual(paillier.decrypt(sk, paillier.mul(pk, cx, k)), x * k % pk.n)

    def test_operands(self):
        pk, sk = paillier.generate_paillier_keypair(_PRIME_BITS)
        c = paillier.encrypt(pk, 5)
        self.assertIs(c.as_ciphertext(pk), c)
        self.assertEqual(paillier.decrypt(sk, paillier.Plaintext(5).as_ciphertext(pk)), 5)
        self.assertRaises(ValueError, paillier.Plaintext(-1).as_ciphertext, pk)
        self.assertEqual(paillier.Plaintext(5), paillier.Plaintext(5))
        self.assertNotEqual(paillier.Plaintext(5), paillier.PaillierCiphertext(5))


class TestGoldwasserMicali(unittest.TestCase):
    def test_jacobi(self):
        self.assertEqual(gm.jacobi(1, 17), 1)
        self.assertEqual(gm.jacobi(2, 17), 1)
        self.assertEqual(gm.jacobi(3, 17), -1)
        self.assertEqual(gm.jacobi(4, 17), 1)
        self.assertEqual(gm.jacobi(5, 17), -1)
        self.assertEqual(gm.jacobi(6, 17), -1)
        self.assertEqual(gm.jacobi(17, 17), 0)

        # composite modulus
        self.assertEqual(gm.jacobi(2, 15), 1)
        self.assertEqual(gm.jacobi(7, 15), -1)
        self.assertEqual(gm.jacobi(5, 15), 0)

        # coincides with the Legendre symbol for primes
        for a in range(1, 100):
            self.assertEqual(gm.jacobi(a, 101), gm.legendre(a, 101))

    def test_legendre(self):
        self.assertEqual(gm.legendre(1, 17), 1)
        self.assertEqual(gm.legendre(2, 17), 1)
        self.assertEqual(gm.legendre(3, 17), -1)
        self.assertEqual(gm.legendre(4, 17), 1)
        self.assertEqual(gm.legendre(5, 17), -1)
        self.assertEqual(gm.legendre(6, 17), -1)
        self.assertEqual(gm.legendre(17, 17), 0)

    def test_non_residue(self):
        x = gm.non_residue(314159, 2718281)
        self.assertEqual(gm.legendre(x, 314159), -1)
        self.assertEqual(gm.legendre(x, 2718281), -1)

    def check_xor_table(self, pk, sk):
        c0a, c0b = gm.encrypt(pk, 0), gm.encrypt(pk, 0)
        c1a, c1b = gm.encrypt(pk, 1), gm.encrypt(pk, 1)
        self.assertEqual(gm.decrypt(sk, gm.xor(pk, c0a, c0b)), 0)
        self.assertEqual(gm.decrypt(sk, gm.xor(pk, c0a, c1a)), 1)
        self.assertEqual(gm.decrypt(sk, gm.xor(pk, c1b, c0b)), 1)
        self.assertEqual(gm.decrypt(sk, gm.xor(pk, c1a, c1b)), 0)

    def test_fixed_key(self):
        sk = gm.GoldwasserMicaliSecretKey(400005, 853972440679, 314159, 2718281)
        pk = sk.public_key
        for _ in range(10):
            self.check_xor_table(pk, sk)

    def test_decrypt(self):
        pk, sk = gm.generate_goldwasser_micali_keypair(_PRIME_BITS)
        self.assertEqual(pk.N, sk.p * sk.q)
        for _ in range(10):
            self.assertEqual(gm.decrypt(sk, gm.encrypt(pk, 0)), 0)
            self.assertEqual(gm.decrypt(sk, gm.encrypt(pk, 1)), 1)

    def test_xor(self):
        pk, sk = asyncio.run(gm.generate_goldwasser_micali_keypair_async(_PRIME_BITS))
        self.check_xor_table(pk, sk)


class TestShamir(unittest.TestCase):
    def test_divmod(self):
        self.assertEqual(
            shamir.ShamirPolynomial.divmod(43162192916902356880153528760047544077, 2, _P127),
            -3671833291815424753689207168691991666526832052578664379221806029902856542451,
        )
        self.assertEqual(
            shamir.ShamirPolynomial.divmod(21864025477267021657371061012497927669, -1, _P127),
            -21864025477267021657371061012497927669,
        )
        self.assertEqual(
            shamir.ShamirPolynomial.divmod(565858037631686434588593264948301389, 2, _P127),
            -48137878096636932061709116006483852075584800564874710473212594243494326707,
        )

    def test_lagrange(self):
        xs = [1, 2, 3]
        ys = [
            132896678868000543584246051743406269364,
            40713293742011722794807570844596199126,
            63732211542972001095059164735338001974,
        ]
        self.assertEqual(shamir.ShamirPolynomial.lagrange_interpolate(0, xs, ys, _P127), 1234)

        xs = [4, 5, 6]
        ys = [
            31812248810412146753313529699747572181,
            115094589004801391501257969453709015474,
            143438048665670503607205180281338226126,
        ]
        self.assertEqual(shamir.ShamirPolynomial.lagrange_interpolate(0, xs, ys, _P127), 1234)

    def test_static_poly(self):
        prime = mersenne.mersenne_prime(127)
        poly = [
            1234,
            133048951677418510430394477312234177594,
            77473121818638445183579743178772154970,
        ]
        S = shamir.ShamirPolynomial(poly, prime)
        k_1 = S.share(1)
        self.assertEqual(k_1, 40380890035587723882286916775122228071)
        k_2 = S.share(2)
        self.assertEqual(k_2, 65566840247983106400046016191904659121)
        k_3 = S.share(3)
        self.assertEqual(k_3, 75557850637186147553277298250347294384)
        self.assertEqual(shamir.ShamirPolynomial.recover([(1, k_1), (2, k_2), (3, k_3)], prime), 1234)

    def test_threshold(self):
        prime = mersenne.mersenne_prime(127)
        S = shamir.ShamirPolynomial.make(1234, 3, prime)
        self.assertEqual(len(S.poly), 3)
        self.assertEqual(S.poly[0], 1234)
        self.assertTrue(all(0 <= c < prime for c in S.poly))

        parts = [(i, S.share(i)) for i in range(1, 8)]
        for subset in itertools.combinations(parts, 3):
            self.assertEqual(shamir.ShamirPolynomial.recover(list(subset), prime), 1234)

        # more shares than needed
        self.assertEqual(shamir.ShamirPolynomial.recover(parts, prime), 1234)

        # order does not matter
        self.assertEqual(shamir.ShamirPolynomial.recover(parts[::-1][:3], prime), 1234)

    def test_construction(self):
        for exponent in [127, 521]:
            prime = mersenne.mersenne_prime(exponent)
            S = shamir.ShamirPolynomial.make(12345, 2, prime)
            parts = [(1, S.share(1)), (2, S.share(2))]
            self.assertEqual(shamir.ShamirPolynomial.recover(parts, prime), 12345)

    def test_share_zero(self):
        S = shamir.ShamirPolynomial.make(1234, 3, _P127)
        self.assertRaises(ValueError, S.share, 0)
        self.assertRaises(ValueError, S.share, -1)


class TestMersenne(unittest.TestCase):
    def test_table(self):
        for exponent in mersenne.MERSENNE_EXPONENTS:
            p = mersenne.mersenne_prime(exponent)
            self.assertEqual(p, 2**exponent - 1)
            self.assertTrue(util.is_prime(p))
        self.assertEqual(mersenne.mersenne_prime(127), _P127)

    def test_unknown(self):
        self.assertRaises(ValueError, mersenne.mersenne_prime, 11)
        self.assertRaises(ValueError, mersenne.mersenne_prime, 4)


class TestBitVector(unittest.TestCase):
    def test_set_get(self):
        v = BitVector(70)
        self.assertEqual(len(v), 70)
        self.assertFalse(v.any())
        for i in [0, 5, 31, 32, 69]:
            v.set(i)
        self.assertTrue(v.get(31))
        self.assertTrue(v.get(32))
        self.assertFalse(v.get(33))
        self.assertEqual(list(v.each1()), [0, 5, 31, 32, 69])

        v.set(31, False)
        self.assertFalse(v.get(31))
        self.assertEqual(list(v.each1()), [0, 5, 32, 69])

        # each1() can be restarted
        self.assertEqual(list(v.each1()), list(v.each1()))

    def test_int(self):
        v = BitVector.from_int(5, 3)
        self.assertEqual(list(v.each1()), [0, 2])
        self.assertEqual(int(v), 5)

        value = (1 << 64) | (1 << 33) | 1
        v = BitVector.from_int(value, 65)
        self.assertEqual(list(v.each1()), [0, 33, 64])
        self.assertEqual(int(v), value)

        self.assertEqual(list(BitVector().each1()), [])


class TestDiffieHellman(unittest.TestCase):
    def test_wrap(self):
        pk = diffiehellman.generate_diffie_hellman_parameters(_PRIME_BITS)
        self.assertTrue(util.is_prime(pk.p))
        self.assertEqual(pk.g, 2)
        a = random.randrange(pk.p)
        b = random.randrange(pk.p)
        self.assertEqual(
            util.powmod(diffiehellman.wrap(pk, a), b, pk.p),
            util.powmod(diffiehellman.wrap(pk, b), a, pk.p),
        )

    def test_async(self):
        pk = asyncio.run(diffiehellman.generate_diffie_hellman_parameters_async(_PRIME_BITS))
        self.assertTrue(util.is_prime(pk.p))
        self.assertEqual(diffiehellman.wrap(pk, 10), 1024 % pk.p)


class TestPartitionedBitVector(unittest.TestCase):
    def test_small(self):
        P = PartitionedBitVector(12345, 2, ['foo', 'bar', 'baz', 'qux', 'quux'])
        self.assertEqual(P.lengths, [2, 3])
        partitions, lengths, values = P.encode(['foo', 'qux', 'quux'])
        self.assertEqual(partitions, [0, 1])
        self.assertEqual(lengths[1], 3)
        self.assertEqual(values[1], 5)

    def test_bigger(self):
        P = PartitionedBitVector(12345, 5, _VOCABULARY)
        self.assertEqual(sum(P.lengths), len(_VOCABULARY))
        partitions, lengths, values = P.encode(['Abnormality of styloglossus muscle'])
        self.assertEqual(partitions, [0])
        self.assertEqual(lengths, [6])
        self.assertEqual(values, [32])

    def test_deterministic(self):
        P = PartitionedBitVector(12345, 5, _VOCABULARY)
        Q = PartitionedBitVector(12345, 5, list(reversed(_VOCABULARY)))
        self.assertEqual(P.index, Q.index)
        self.assertEqual(P.encode(_VOCABULARY[::3]), Q.encode(_VOCABULARY[::3]))

        # addresses are unique
        self.assertEqual(len(set(P.index.values())), len(_VOCABULARY))

        # another key gives another partitioning
        R = PartitionedBitVector(54321, 5, _VOCABULARY)
        self.assertNotEqual(P.index, R.index)

    def test_encode(self):
        P = PartitionedBitVector(12345, 5, _VOCABULARY)
        self.assertEqual(P.encode([]), ([], [], []))
        partitions, lengths, values = P.encode(_VOCABULARY)
        self.assertEqual(partitions, [i for i in range(5) if P.lengths[i]])
        self.assertEqual(values, [(1 << n) - 1 for n in lengths])

    def test_unknown_term(self):
        P = PartitionedBitVector(12345, 2, ['foo', 'bar'])
        self.assertRaises(util.UnknownTermError, P.encode, ['foo', 'baz'])
        self.assertRaises(ValueError, P.encode, ['baz'])


class CardinalityFixture:
    def test_empty(self):
        self.assertEqual(self.run_cardinality([], set(), set()), 0)
        self.assertEqual(self.run_cardinality(['foo', 'bar'], set(), set()), 0)

    def test_small(self):
        vocabulary = ['foo', 'bar', 'baz', 'qux']
        self.assertEqual(self.run_cardinality(vocabulary, set(), set()), 0)
        self.assertEqual(self.run_cardinality(vocabulary, {'foo'}, set()), 0)
        self.assertEqual(self.run_cardinality(vocabulary, set(), {'foo'}), 0)
        self.assertEqual(self.run_cardinality(vocabulary, {'foo'}, {'foo'}), 1)
        self.assertEqual(self.run_cardinality(vocabulary, {'foo', 'baz', 'qux'}, {'foo', 'qux'}), 2)
        self.assertEqual(self.run_cardinality(vocabulary, {'foo', 'qux'}, {'foo', 'baz', 'qux'}), 2)

    def test_larger(self):
        rng = random.Random(0)
        mine = {term for term in _VOCABULARY if rng.random() < 0.5}
        theirs = {term for term in _VOCABULARY if rng.random() < 0.25}
        self.assertEqual(
            self.run_cardinality(_VOCABULARY, mine, theirs),
            len(mine & theirs),
        )


class TestRuanPSI(unittest.TestCase, CardinalityFixture):
    @classmethod
    def setUpClass(cls):
        cls.pk, cls.sk = paillier.generate_paillier_keypair(_PRIME_BITS)

    def run_cardinality(self, vocabulary, mine, theirs):
        R = RuanPSI(vocabulary)
        c = R.prepare(self.pk, mine)
        self.assertEqual(len(c), len(R.terms))
        r = R.cardinality(self.pk, theirs, c)
        return paillier.decrypt(self.sk, r)

    def test_sorted(self):
        R = RuanPSI(['foo', 'bar', 'baz', 'foo'])
        self.assertEqual(R.terms, ['bar', 'baz', 'foo'])
        self.assertEqual(R.index, {'bar': 0, 'baz': 1, 'foo': 2})

    def test_intersect(self):
        R = RuanPSI(['foo', 'bar', 'baz', 'qux'])
        c = R.prepare(self.pk, {'foo', 'baz', 'qux'})
        masked = R.intersect(self.pk, {'foo', 'bar', 'qux'}, c)
        bits = [paillier.decrypt(self.sk, x) for x in masked]
        self.assertEqual(dict(zip(R.terms, bits)), {'bar': 0, 'baz': 0, 'foo': 1, 'qux': 1})

    def test_errors(self):
        R = RuanPSI(['foo', 'bar', 'baz', 'qux'])
        self.assertRaises(util.UnknownTermError, R.prepare, self.pk, {'quux'})
        c = R.prepare(self.pk, {'foo'})
        self.assertRaises(util.UnknownTermError, R.cardinality, self.pk, {'quux'}, c)
        self.assertRaises(util.DomainSizeError, R.cardinality, self.pk, {'foo'}, c[:-1])
        self.assertRaises(util.DomainSizeError, R.intersect, self.pk, {'foo'}, c + c)


class TestPartitionedPSI(unittest.TestCase, CardinalityFixture):
    @classmethod
    def setUpClass(cls):
        cls.pk, cls.sk = paillier.generate_paillier_keypair(_PRIME_BITS)

    def run_cardinality(self, vocabulary, mine, theirs):
        P = PartitionedPSI(12345, 3, vocabulary)
        encryptum = P.encode(self.pk, mine)
        r = P.cardinality(self.pk, encryptum, theirs)
        return paillier.decrypt(self.sk, r)

    def test_encode(self):
        P = PartitionedPSI(12345, 2, ['foo', 'bar', 'baz', 'qux', 'quux'])
        encryptum = P.encode(self.pk, ['foo', 'qux', 'quux'])
        self.assertEqual(encryptum.partitions, [0, 1])
        self.assertEqual(encryptum.lengths, [2, 3])
        bits = [paillier.decrypt(self.sk, c) for c in encryptum.vectors[1]]
        self.assertEqual(bits, [1, 0, 1])

        # only non-empty partitions are sent
        encryptum = P.encode(self.pk, ['baz'])
        self.assertEqual(encryptum.partitions, [1])
        self.assertEqual(P.encode(self.pk, []).partitions, [])

    def test_agreement(self):
        rng = random.Random(1)
        ruan = RuanPSI(_VOCABULARY)
        for n_partitions in [1, 4, 7, 50]:
            P = PartitionedPSI('secret', n_partitions, _VOCABULARY)
            mine = {term for term in _VOCABULARY if rng.random() < 0.3}
            theirs = {term for term in _VOCABULARY if rng.random() < 0.3}
            dense = ruan.cardinality(self.pk, theirs, ruan.prepare(self.pk, mine))
            sparse = P.cardinality(self.pk, P.encode(self.pk, mine), theirs)
            self.assertEqual(paillier.decrypt(self.sk, sparse), paillier.decrypt(self.sk, dense))
            self.assertEqual(paillier.decrypt(self.sk, sparse), len(mine & theirs))

    def test_cardinality_all(self):
        rng = random.Random(2)
        P = PartitionedPSI(12345, 5, _VOCABULARY)
        references = {
            'set-{}'.format(k): {term for term in _VOCABULARY if rng.random() < 0.3}
            for k in range(4)
        }
        references['empty'] = set()
        for label, terms in references.items():
            P.add_set(label, terms)

        mine = {term for term in _VOCABULARY if rng.random() < 0.5}
        results = P.cardinality_all(self.pk, P.encode(self.pk, mine))
        self.assertNotIn('empty', results)
        for label, terms in references.items():
            if label in results:
                count = paillier.decrypt(self.sk, results[label])
            else:
                count = 0
            self.assertEqual(count, len(mine & terms))

        self.assertEqual(P.cardinality_all(self.pk, PartitionedPSIEncryptum()), {})

    def test_errors(self):
        P = PartitionedPSI(12345, 2, ['foo', 'bar', 'baz', 'qux', 'quux'])
        self.assertRaises(util.UnknownTermError, P.encode, self.pk, ['corge'])
        self.assertRaises(util.UnknownTermError, P.add_set, 'x', ['corge'])

        encryptum = P.encode(self.pk, ['foo', 'qux'])
        self.assertRaises(util.UnknownTermError, P.cardinality, self.pk, encryptum, ['corge'])

        truncated = PartitionedPSIEncryptum(
            encryptum.partitions,
            [vector[:-1] for vector in encryptum.vectors],
        )
        self.assertRaises(util.DomainSizeError, P.cardinality, self.pk, truncated, ['foo'])
        P.add_set('x', ['foo'])
        self.assertRaises(util.DomainSizeError, P.cardinality_all, self.pk, truncated)

    def test_partition_ids(self):
        terms = ['foo', 'bar', 'baz', 'qux', 'quux']
        P = PartitionedPSI(12345, 2, terms)
        P.add_set('x', terms)
        vectors = [
            [paillier.encrypt(self.pk, 1) for _ in range(length)]
            for length in P.partition.lengths
        ]

        # ids outside [0, N)
        for p in (-1, 2):
            encryptum = PartitionedPSIEncryptum([p], [vectors[p % 2]])
            self.assertRaises(util.DomainSizeError, P.cardinality, self.pk, encryptum, terms)
            self.assertRaises(util.DomainSizeError, P.cardinality_all, self.pk, encryptum)
            self.assertRaises(util.DomainSizeError, P.check_size, p, vectors[p % 2])

        # unsorted or repeated ids
        for partitions in ([1, 0], [0, 0]):
            encryptum = PartitionedPSIEncryptum(partitions, [vectors[p] for p in partitions])
            self.assertRaises(util.DomainSizeError, P.cardinality, self.pk, encryptum, terms)
            self.assertRaises(util.DomainSizeError, P.cardinality_all, self.pk, encryptum)

        # one vector per id
        encryptum = PartitionedPSIEncryptum([0, 1], vectors[:1])
        self.assertRaises(util.DomainSizeError, P.cardinality_all, self.pk, encryptum)

        # the well-formed version is accepted
        encryptum = PartitionedPSIEncryptum([0, 1], vectors)
        self.assertEqual(paillier.decrypt(self.sk, P.cardinality(self.pk, encryptum, terms)), 5)
        self.assertEqual(paillier.decrypt(self.sk, P.cardinality_all(self.pk, encryptum)['x']), 5)


if __name__ == '__main__':
    unittest.main()
