#!/usr/bin/env python3
"""Keyed partitioning of a fixed vocabulary

A `PartitionedBitVector` spreads the terms of a vocabulary over `N`
partitions with a keyed hash, and gives each term a stable address
`(partition, offset)`. A set of terms is then encoded as one bitmask per
non-empty partition, which bounds the number of ciphertexts a PSI protocol
has to exchange for sparse sets over large vocabularies.
"""
import util
from bitvector import BitVector


class PartitionedBitVector:
    """Partitioned index of a vocabulary

    The addresses only depend on the key and on the vocabulary: two parties
    sharing both obtain the same index.

    Attributes:
        key (int, str or bytes): the secret partition key
        N (int): the number of partitions
        lengths (list): the number of terms (int) in each partition
        index (dict): maps each term (str) to its `(partition, offset)`
    """
    def __init__(self, key, N, vocabulary):
        """Constructor

        Arguments:
            key (int, str or bytes): the secret partition key
            N (int): the number of partitions
            vocabulary (iterable): the terms (str)
        """
        self.key = key
        self.N = N
        pairs = [(self.hash(term), term) for term in vocabulary]
        # offsets follow the textual order of "<decimal hash>,<term>", which
        # keeps encodings compatible with existing peers
        pairs.sort(key=lambda pair: '{},{}'.format(*pair))
        self.lengths = [0] * N
        self.index = {}
        for h, term in pairs:
            i = h % N
            self.index[term] = (i, self.lengths[i])
            self.lengths[i] += 1

    def hash(self, term):
        """Keyed digest of a term, as an integer"""
        return util.keyed_hash(self.key, term)

    def address(self, term):
        """Return the `(partition, offset)` of a term

        Raises:
            UnknownTermError: when the term is not in the vocabulary
        """
        try:
            return self.index[term]
        except KeyError:
            raise util.UnknownTermError('term not in vocabulary: {}'.format(term)) from None

    def encode(self, terms):
        """Encode a set of terms as bitmasks over the partitions

        Arguments:
            terms (iterable): the terms (str), all from the vocabulary

        Returns:
            tuple: three lists of the same length, `partitions`, `lengths` and
            `values`; `partitions` holds the ids (int) of the partitions
            containing at least one of the terms, in ascending order;
            `lengths` the total number of terms in each of these partitions;
            and `values` the bitmask (int) of the offsets of the given terms

        Raises:
            UnknownTermError: when a term is not in the vocabulary
        """
        vectors = [BitVector(length) for length in self.lengths]
        for term in terms:
            i, j = self.address(term)
            vectors[i].set(j)

        partitions, lengths, values = [], [], []
        for i, vector in enumerate(vectors):
            if not vector.any():
                continue
            partitions.append(i)
            lengths.append(self.lengths[i])
            values.append(int(vector))
        return partitions, lengths, values
