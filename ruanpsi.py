#!/usr/bin/env python3
"""Private set intersection over a dense encrypted indicator vector

Both parties agree on a vocabulary. The key owner sends one Paillier
ciphertext per vocabulary term, encrypting 1 if the term is in its set and 0
otherwise. The counterparty keeps the ciphertexts of the terms it holds
(multiplying the others by 0) and sums them; only the key owner can decrypt
the result, which is the size of the intersection.

    psi = RuanPSI(vocabulary)
    ciphertexts = psi.prepare(pk, mine)               # key owner
    result = psi.cardinality(pk, theirs, ciphertexts)  # counterparty
    assert paillier.decrypt(sk, result) == len(mine & theirs)
"""
import util
import paillier


class RuanPSI:
    """Dense PSI protocol over a fixed vocabulary

    Attributes:
        terms (list): the vocabulary (str), sorted
        index (dict): maps each term to its position in `terms`
    """
    def __init__(self, vocabulary):
        """Constructor

        Arguments:
            vocabulary (iterable): the terms (str) both parties may hold
        """
        self.terms = sorted(set(vocabulary))
        self.index = {term: i for i, term in enumerate(self.terms)}

    def check_terms(self, terms):
        """Raise `UnknownTermError` if any term is not in the vocabulary"""
        for term in terms:
            if term not in self.index:
                raise util.UnknownTermError('term {} not in vocabulary'.format(term))

    def check_size(self, ciphertexts):
        """Raise `DomainSizeError` if there is not one ciphertext per term"""
        if len(ciphertexts) != len(self.terms):
            raise util.DomainSizeError(
                'other set has a domain of size {} which is different to this '
                'set with domain of size {}'.format(len(ciphertexts), len(self.terms))
            )

    def prepare(self, pk, terms):
        """Encrypt the indicator vector of a set

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the caller
            terms (set): the terms (str) of the caller

        Returns:
            list: one `paillier.PaillierCiphertext` per vocabulary term, in
            the order of `self.terms`
        """
        terms = set(terms)
        self.check_terms(terms)
        return [paillier.encrypt(pk, int(term in terms)) for term in self.terms]

    def intersect(self, pk, terms, other):
        """Mask the other party's indicator vector with a set

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the other party
            terms (set): the terms (str) of the caller
            other (list): the ciphertexts from `prepare()` of the other party

        Returns:
            list: one `paillier.PaillierCiphertext` per vocabulary term,
            encrypting 1 for the terms in both sets and 0 otherwise
        """
        terms = set(terms)
        self.check_terms(terms)
        self.check_size(other)
        return [
            paillier.mul(pk, c, int(term in terms))
            for term, c in zip(self.terms, other)
        ]

    def cardinality(self, pk, terms, other):
        """Encrypted size of the intersection

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the other party
            terms (set): the terms (str) of the caller
            other (list): the ciphertexts from `prepare()` of the other party

        Returns:
            paillier.PaillierCiphertext: an encryption of the number of terms
            held by both parties
        """
        result = paillier.encrypt(pk, 0)
        for c in self.intersect(pk, terms, other):
            result = paillier.add(pk, result, c)
        return result
