#!/usr/bin/env python3
"""Private set intersection over a partitioned vocabulary

For large vocabularies, sending one ciphertext per term (see `ruanpsi`) is
too costly. Here, the vocabulary is split in partitions with a keyed hash
(see `partitionedbitvector`), and a party only sends ciphertexts for the
partitions holding at least one of its terms. The counterparty then merges
the partition lists to sum the ciphertexts of the shared terms.

A `PartitionedPSI` can also index several labeled reference sets with
`add_set()`, and compute the encrypted intersection size of a query with all
of them in a single pass with `cardinality_all()`.
"""
import util
import paillier
from bitvector import BitVector
from partitionedbitvector import PartitionedBitVector


class PartitionedPSIEncryptum:
    """Sparse encryption of a set of terms

    Attributes:
        partitions (list): the ids (int) of the non-empty partitions, in
            strictly increasing order
        vectors (list): for each of these partitions, the list of
            `paillier.PaillierCiphertext` encrypting the bit of each offset
    """
    def __init__(self, partitions=None, vectors=None):
        self.partitions = [] if partitions is None else partitions
        self.vectors = [] if vectors is None else vectors

    @property
    def lengths(self):
        return [len(vector) for vector in self.vectors]


class PartitionedPSI:
    """Partitioned PSI protocol

    Attributes:
        partition (PartitionedBitVector): the partitioned index of the
            vocabulary
        index (list): for each partition, for each offset, the labels (str)
            of the reference sets holding the corresponding term
    """
    def __init__(self, partition_key, n_partitions, vocabulary):
        """Constructor

        Arguments:
            partition_key (int, str or bytes): the secret partition key,
                shared by both parties
            n_partitions (int): the number of partitions
            vocabulary (iterable): the terms (str) both parties may hold
        """
        self.partition = PartitionedBitVector(partition_key, n_partitions, vocabulary)
        self.index = [
            [[] for _ in range(length)]
            for length in self.partition.lengths
        ]

    def check_size(self, partition, vector):
        """Raise `DomainSizeError` unless `vector` covers the whole partition"""
        if not 0 <= partition < self.partition.N:
            raise util.DomainSizeError(
                'partition {} out of range [0, {})'.format(partition, self.partition.N)
            )
        expected = self.partition.lengths[partition]
        if len(vector) != expected:
            raise util.DomainSizeError(
                'partition {} has {} ciphertexts instead of {}'.format(
                    partition, len(vector), expected)
            )

    def check_order(self, other):
        """Raise `DomainSizeError` unless the partitions of `other` are sorted

        The ids must be strictly increasing, within `[0, N)`, with one vector
        per id.
        """
        if len(other.partitions) != len(other.vectors):
            raise util.DomainSizeError(
                '{} partition ids for {} vectors'.format(
                    len(other.partitions), len(other.vectors))
            )
        for a, b in zip(other.partitions, other.partitions[1:]):
            if a >= b:
                raise util.DomainSizeError(
                    'partition ids not strictly increasing ({} then {})'.format(a, b)
                )
        for partition in other.partitions[:1] + other.partitions[-1:]:
            if not 0 <= partition < self.partition.N:
                raise util.DomainSizeError(
                    'partition {} out of range [0, {})'.format(partition, self.partition.N)
                )

    def encode(self, pk, terms):
        """Encrypt a set of terms

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the caller
            terms (iterable): the terms (str) of the caller

        Returns:
            PartitionedPSIEncryptum: one ciphertext per offset of every
            partition holding at least one of the terms
        """
        encryptum = PartitionedPSIEncryptum()
        for p, n, w in zip(*self.partition.encode(terms)):
            encryptum.partitions.append(p)
            encryptum.vectors.append([
                paillier.encrypt(pk, (w >> j) & 1)
                for j in range(n)
            ])
        return encryptum

    def cardinality(self, pk, other, terms):
        """Encrypted size of the intersection with the other party's set

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the other party
            other (PartitionedPSIEncryptum): the output of `encode()` from the
                other party; its partition ids must be strictly increasing
            terms (iterable): the terms (str) of the caller

        Returns:
            paillier.PaillierCiphertext: an encryption of the number of terms
            held by both parties

        Raises:
            DomainSizeError: if the partitions of `other` are unsorted or do
                not match the partitioning
        """
        self.check_order(other)
        partitions, lengths, values = self.partition.encode(terms)
        result = paillier.encrypt(pk, 0)
        # both partition lists are sorted
        i = j = 0
        while i < len(partitions) and j < len(other.partitions):
            if partitions[i] < other.partitions[j]:
                i += 1
                continue
            if partitions[i] > other.partitions[j]:
                j += 1
                continue
            vector = other.vectors[j]
            self.check_size(partitions[i], vector)
            for offset in BitVector.from_int(values[i], lengths[i]).each1():
                result = paillier.add(pk, result, vector[offset])
            i += 1
            j += 1
        return result

    def add_set(self, label, terms):
        """Register a labeled reference set

        All the sets must be added before calling `cardinality_all()`.

        Arguments:
            label (str): the name of the set
            terms (iterable): the terms (str) of the set
        """
        for p, n, w in zip(*self.partition.encode(terms)):
            for offset in BitVector.from_int(w, n).each1():
                self.index[p][offset].append(label)

    def cardinality_all(self, pk, other):
        """Encrypted intersection sizes with every reference set

        Arguments:
            pk (paillier.PaillierPublicKey): the public key of the other party
            other (PartitionedPSIEncryptum): the output of `encode()` from the
                other party

        Returns:
            dict: maps the label (str) of each reference set sharing at least
            one partition with `other` to an encryption
            (paillier.PaillierCiphertext) of the size of the intersection

        Raises:
            DomainSizeError: if the partitions of `other` are unsorted or do
                not match the partitioning
        """
        self.check_order(other)
        result = {}
        for p, vector in zip(other.partitions, other.vectors):
            self.check_size(p, vector)
            for offset, labels in enumerate(self.index[p]):
                for label in labels:
                    if label not in result:
                        result[label] = paillier.encrypt(pk, 0)
                    result[label] = paillier.add(pk, result[label], vector[offset])
        return result
