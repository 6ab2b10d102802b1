#!/usr/bin/env python3
"""Dense bit vector stored in 32-bit words"""

_WORD_BITS = 32
_WORD_MASK = (1 << _WORD_BITS) - 1


class BitVector:
    """Fixed-size vector of bits

    Attributes:
        size (int): the number of bits
        words (list): the bits, packed in 32-bit words (int), least
            significant bit first
    """
    def __init__(self, size=0):
        self.size = size
        self.words = [0] * ((size + _WORD_BITS - 1) // _WORD_BITS)

    @classmethod
    def from_int(cls, value, size):
        """Build a bit vector whose bit `i` is bit `i` of `value`

        Arguments:
            value (int): non-negative integer, smaller than `2^size`
            size (int): the number of bits

        Returns:
            BitVector: the corresponding bit vector
        """
        self = cls(size)
        for w in range(len(self.words)):
            self.words[w] = (value >> (w * _WORD_BITS)) & _WORD_MASK
        return self

    def __len__(self):
        return self.size

    def __int__(self):
        value = 0
        for word in reversed(self.words):
            value = (value << _WORD_BITS) | word
        return value

    def __repr__(self):
        return 'BitVector.from_int({}, {})'.format(int(self), self.size)

    def get(self, i):
        w, b = divmod(i, _WORD_BITS)
        return (self.words[w] >> b) & 1 == 1

    def set(self, i, bit=True):
        w, b = divmod(i, _WORD_BITS)
        if bit:
            self.words[w] |= 1 << b
        else:
            self.words[w] &= ~(1 << b) & _WORD_MASK

    def any(self):
        """Whether at least one bit is set"""
        return any(self.words)

    def each1(self):
        """Iterate over the positions of the set bits, in ascending order"""
        for w, word in enumerate(self.words):
            b = 0
            while word:
                if word & 1:
                    yield w * _WORD_BITS + b
                word >>= 1
                b += 1
