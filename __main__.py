#!/usr/bin/env python3
"""Benchmark and self-check of the PSI protocols

Draws random sets over a synthetic vocabulary, runs both the dense and the
partitioned protocol, and checks the decrypted cardinalities against the
clear intersection.
"""
import json
import random
import asyncio
import argparse
import datetime

import paillier
from ruanpsi import RuanPSI
from partitionedpsi import PartitionedPSI

# debug_level = 0: quiet
# debug_level = 1: normal output
# debug_level = 2: some intermediate values
debug_level = 1


def debug(level, *args):
    if level <= debug_level:
        print(*args)


def timed(name, func, *args):
    start = datetime.datetime.now()
    result = func(*args)
    elapsed = datetime.datetime.now() - start
    debug(1, '{} finished in {}'.format(name, elapsed))
    return result


def run_test(seed, pk, sk, args):
    random.seed(seed)

    vocabulary = ['term-{}'.format(i) for i in range(args.vocabulary)]
    mine = {term for term in vocabulary if random.random() < args.density}
    references = {
        'set-{}'.format(k): {term for term in vocabulary if random.random() < args.density}
        for k in range(max(args.sets, 1))
    }
    theirs = references['set-0']
    expected = len(mine & theirs)
    debug(2, '|mine| = {}, |theirs| = {}, |mine ∩ theirs| = {}'.format(
        len(mine), len(theirs), expected))

    # dense protocol
    ruan = RuanPSI(vocabulary)
    ciphertexts = timed('RuanPSI.prepare', ruan.prepare, pk, mine)
    result = timed('RuanPSI.cardinality', ruan.cardinality, pk, theirs, ciphertexts)
    dense = paillier.decrypt(sk, result)
    debug(1, 'RuanPSI cardinality is', dense)
    assert dense == expected

    # partitioned protocol
    partitioned = PartitionedPSI(args.partition_key, args.partitions, vocabulary)
    for label, terms in references.items():
        partitioned.add_set(label, terms)
    encryptum = timed('PartitionedPSI.encode', partitioned.encode, pk, mine)
    debug(2, '{} partitions sent out of {}'.format(
        len(encryptum.partitions), args.partitions))
    result = timed('PartitionedPSI.cardinality', partitioned.cardinality, pk, encryptum, theirs)
    sparse = paillier.decrypt(sk, result)
    debug(1, 'PartitionedPSI cardinality is', sparse)
    assert sparse == expected

    results = timed('PartitionedPSI.cardinality_all', partitioned.cardinality_all, pk, encryptum)
    for label, terms in references.items():
        count = paillier.decrypt(sk, results[label]) if label in results else 0
        debug(2, '{}: {}'.format(label, count))
        assert count == len(mine & terms)


def load_keypair(args):
    # load cached keys or generate new ones
    try:
        with open(args.key_cache) as f:
            data = json.load(f)
        if data['bits'] != args.bits:
            raise ValueError
    except (FileNotFoundError, ValueError, KeyError):
        # generate the keys
        pk, sk = asyncio.run(paillier.generate_paillier_keypair_async(args.bits))
        # cache them
        with open(args.key_cache, 'w') as f:
            json.dump({
                'bits': args.bits, 'n': pk.n, 'g': pk.g,
                'lambda': sk.lambda_, 'mu': sk.mu,
            }, f)
        debug(1, 'Key generated')
    else:
        pk = paillier.PaillierPublicKey(data['n'], data['g'])
        sk = paillier.PaillierSecretKey(pk, data['lambda'], data['mu'])
        debug(1, 'Keys loaded')
    return pk, sk


def main():
    parser = argparse.ArgumentParser()
    parser.description = 'Private set intersection with Paillier encryption'
    parser.add_argument('--debug', '-d', default=1, type=int)
    parser.add_argument('--bits', '-b', default=1024, type=int,
                        help='size of each prime of the Paillier key')
    parser.add_argument('--key-cache', default='key.cache')
    parser.add_argument('--vocabulary', '-n', default=1000, type=int)
    parser.add_argument('--density', default=0.05, type=float)
    parser.add_argument('--partitions', '-p', default=64, type=int)
    parser.add_argument('--partition-key', default='12345')
    parser.add_argument('--sets', default=4, type=int)
    parser.add_argument('--simulations', default=1, type=int)
    parser.add_argument('seed', default=0, type=int, nargs='?')
    args = parser.parse_args()

    global debug_level
    debug_level = args.debug

    pk, sk = load_keypair(args)

    max_simulations = args.simulations if args.simulations >= 0 else float('inf')
    seed = args.seed
    simulated = 0
    while simulated < max_simulations:
        debug(1, 'Seed: {}'.format(seed))
        run_test(seed, pk, sk, args)
        seed += 1
        simulated += 1


if __name__ == '__main__':
    main()
