#!/usr/bin/env python3
"""Diffie-Hellman public parameters

Each party picks a secret exponent `x` and publishes `wrap(pk, x)`; raising
the other party's published value to one's own exponent yields the shared
value `g^(xy) mod p`.
"""
import util


class DiffieHellmanPublicKey:
    """Public parameters of a Diffie-Hellman exchange

    Attributes:
        p (int): prime modulus
        g (int): generator
    """
    def __init__(self, p, g=2):
        self.p = p
        self.g = g


def generate_diffie_hellman_parameters(n_bits=2048):
    """Generate Diffie-Hellman parameters with a random `n_bits` prime"""
    return DiffieHellmanPublicKey(util.genprime(n_bits))


async def generate_diffie_hellman_parameters_async(n_bits=2048, executor=None):
    """Asynchronous version of `generate_diffie_hellman_parameters()`"""
    p, = await util.genprimes_async(n_bits, 1, executor)
    return DiffieHellmanPublicKey(p)


def wrap(pk, x):
    """Computes `g^x mod p`"""
    return util.powmod(pk.g, x, pk.p)
