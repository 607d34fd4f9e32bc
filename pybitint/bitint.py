#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging

import numpy as np

import pybitint.base
from pybitint.base import NATIVE_BITS


class BitInteger:
    '''
    Arbitrary-width unsigned integer stored as an explicit, most-significant-first
    sequence of bits. Binary operations align their operands at the least-significant
    bit, so the two widths may differ.

    The named methods (and_, or_, xor, add, sub, mul, negate) mutate the receiver in
    place and return it. The operator dunders (&, |, ^, +, -, *, unary -) clone the
    left operand first and leave both operands unchanged.
    '''

    __slots__ = 'bits', 'width'

    def __init__(self, num):
        '''
        Initialize from a non-negative integer, or clone an existing BitInteger.
        :param num: Whole number that converts exactly with the top-level int() call, or a
        BitInteger to copy. Zero is a single false bit. Positive values get a leading
        zero guard bit whenever their top bit would otherwise be set.
        '''
        if isinstance(num, BitInteger):
            self._adopt(num.bits.copy())
            return

        int_num = _whole(num)
        if int_num < 0:
            raise ValueError(f"Value {int_num} is negative, BitInteger is unsigned")
        if int_num == 0:
            self._adopt(pybitint.base.empty_bits(1))
            return

        self._adopt(pybitint.base.calc_int_bits(int_num))
        self._guard()

    @classmethod
    def _from_array(cls, bits):
        self = object.__new__(cls)
        self._adopt(bits)
        return self

    @classmethod
    def from_bits(cls, bits):
        '''
        Build from an MSB-first iterable of 0/1 values, or a string of '0' and '1'
        characters with an optional '0b' prefix. The width is the number of bits given.
        '''
        if isinstance(bits, str):
            bits = bits[2:] if bits.startswith('0b') else bits
        values = [_int01(bit) for bit in bits]
        if not values:
            raise ValueError("BitInteger needs at least one bit")
        return cls._from_array(np.array(values, dtype=bool))._guard()

    @classmethod
    def filled(cls, width, fill=False):
        '''
        A BitInteger of a certain width with every bit set to the fill value. This is a
        raw bit pattern, a true-fill gets no guard bit.
        '''
        width = _check_count(width)
        if width == 0:
            raise ValueError(f"Width {width} must be positive")
        return cls._from_array(pybitint.base.empty_bits(width, fill))

    def _adopt(self, bits):
        # storage and width only ever change together
        self.bits = bits
        self.width = len(bits)

    def _guard(self):
        # a set top bit would read as a sign bit in negate
        if self.bits[0]:
            self.grow(1)
        return self

    def clone(self):
        return BitInteger(self)

    __copy__ = clone

    def __deepcopy__(self, memo):
        return self.clone()

    # =========================================================
    # Conversion
    # =========================================================
    def to_int(self, native_bits=NATIVE_BITS):
        '''
        Integer value of the bits. Raises OverflowError if the value does not fit a
        native unsigned integer of native_bits bits, pass None for no limit.
        '''
        return pybitint.base.check_native(pybitint.base.calc_bits_int(self.bits), native_bits)

    def __int__(self):
        return self.to_int(native_bits=None)

    __index__ = __int__

    def __bool__(self):
        return bool(self.bits.any())

    def __len__(self):
        return self.width

    def __str__(self):
        return '0b' + ''.join('1' if bit else '0' for bit in self.bits.tolist())

    def __repr__(self):
        return f"BitInteger({self}, width={self.width})"

    # =========================================================
    # Resizing
    # =========================================================
    def grow(self, num_bits, fill=False):
        '''
        Prepend num_bits bits of the fill value. False-fill preserves the value,
        true-fill sign-extends a two's-complement negative.
        '''
        num_bits = _check_count(num_bits)
        logging.debug(f"Growing {self.width:d} bits by {num_bits:d}, fill {int(fill)}.")
        self._adopt(pybitint.base.extend_bits(self.bits, num_bits, fill))
        return self

    def shrink(self, num_bits):
        '''
        Drop the leading num_bits bits. Does not check that the dropped bits are
        redundant, that is up to the caller.
        '''
        num_bits = _check_count(num_bits)
        if num_bits >= self.width:
            raise ValueError(f"Can not shrink {self.width:d} bits by {num_bits:d}")
        logging.debug(f"Shrinking {self.width:d} bits by {num_bits:d}.")
        self._adopt(self.bits[num_bits:].copy())
        return self

    # =========================================================
    # Bitwise operations
    # =========================================================
    def _overlap(self, o):
        return min(self.width, o.width)

    def and_(self, o):
        '''
        AND in place. Receiver bits beyond the other operand's width are cleared,
        as if the narrower operand were zero-extended.
        '''
        overlap = self._overlap(o)
        self.bits[self.width - overlap:] &= o.bits[o.width - overlap:]
        self.bits[:self.width - overlap] = False
        return self

    def or_(self, o):
        overlap = self._overlap(o)
        self.bits[self.width - overlap:] |= o.bits[o.width - overlap:]
        return self

    def xor(self, o):
        overlap = self._overlap(o)
        self.bits[self.width - overlap:] ^= o.bits[o.width - overlap:]
        return self

    # =========================================================
    # Arithmetic
    # =========================================================
    def add(self, o):
        '''
        Add in place with a ripple-carry adder. Both operands are zero-extended to
        the wider width, and a carry out of the top bit grows the result by one bit.
        A set top bit then gets a leading zero guard bit.
        '''
        width = max(self.width, o.width)
        o_bits = pybitint.base.align_bits(o.bits, width)
        if width > self.width:
            self.grow(width - self.width)

        sum_bits, carry = pybitint.base.ripple_add(self.bits, o_bits)
        self._adopt(sum_bits)
        if carry:
            self.grow(1, fill=True)
        return self._guard()

    def negate(self):
        '''
        Two's-complement negation in place, kept at minimal width: at most one leading
        zero is kept before inverting, and a leading zero left after adding one is
        dropped when the bit after it is also zero. Zero stays zero, as a single
        false bit.
        '''
        num_zeros = pybitint.base.count_leading_zeros(self.bits)
        if num_zeros == self.width:
            self._adopt(pybitint.base.empty_bits(1))
            return self
        if num_zeros > 1:
            self.shrink(num_zeros - 1)

        one_bits = pybitint.base.align_bits(pybitint.base.calc_int_bits(1), self.width)
        # nonzero input, so inverting leaves a zero bit and adding one never carries out
        sum_bits, _ = pybitint.base.ripple_add(~self.bits, one_bits)
        self._adopt(sum_bits)

        if self.width > 1 and not self.bits[0] and not self.bits[1]:
            self.shrink(1)
        return self

    def sub(self, o):
        '''
        Unsigned subtraction in place, clamped at zero. Adds the two's complement of
        the other operand and checks the carry out of the top bit: without one the
        true difference is negative and the result is zero.
        '''
        # read the subtrahend as unsigned before negating it
        neg = o.clone()._guard().negate()
        if not neg:
            return self

        width = max(self.width, neg.width)
        neg_bits = pybitint.base.align_bits(neg.bits, width, fill=True)
        a_bits = pybitint.base.align_bits(self.bits, width)

        sum_bits, carry = pybitint.base.ripple_add(a_bits, neg_bits)
        if not carry:
            logging.debug("Clamping %d - %d to zero.", self, o)
            sum_bits[:] = False
        self._adopt(sum_bits)
        return self._guard()

    def mul(self, o, native_bits=NATIVE_BITS):
        '''
        Multiply in place through native integers. Raises OverflowError, leaving the
        receiver unchanged, if an operand or the product does not fit native_bits bits.
        '''
        product = self.to_int(native_bits) * o.to_int(native_bits)
        pybitint.base.check_native(product, native_bits)
        logging.debug(f"Native product {product:d}.")
        self._adopt(BitInteger(product).bits)
        return self

    def mul_shift_add(self, o):
        '''
        Multiply in place at the bit level: for each set bit of the other operand, add
        the receiver's bits shifted left by that bit's position.
        '''
        o_bits = o.bits.tolist()
        acc = BitInteger(0)
        for shift, bit in enumerate(reversed(o_bits)):
            if bit:
                shifted = np.concatenate((self.bits, pybitint.base.empty_bits(shift)))
                acc.add(BitInteger._from_array(shifted))
        self._adopt(acc.bits)
        return self

    # =========================================================
    # Operators
    # =========================================================
    def __and__(self, o):
        return self.clone().and_(o) if isinstance(o, BitInteger) else NotImplemented

    def __or__(self, o):
        return self.clone().or_(o) if isinstance(o, BitInteger) else NotImplemented

    def __xor__(self, o):
        return self.clone().xor(o) if isinstance(o, BitInteger) else NotImplemented

    def __add__(self, o):
        return self.clone().add(o) if isinstance(o, BitInteger) else NotImplemented

    def __sub__(self, o):
        return self.clone().sub(o) if isinstance(o, BitInteger) else NotImplemented

    def __mul__(self, o):
        return self.clone().mul(o) if isinstance(o, BitInteger) else NotImplemented

    def __neg__(self):
        return self.clone().negate()

    def __iand__(self, o):
        return self.and_(o) if isinstance(o, BitInteger) else NotImplemented

    def __ior__(self, o):
        return self.or_(o) if isinstance(o, BitInteger) else NotImplemented

    def __ixor__(self, o):
        return self.xor(o) if isinstance(o, BitInteger) else NotImplemented

    def __iadd__(self, o):
        return self.add(o) if isinstance(o, BitInteger) else NotImplemented

    def __isub__(self, o):
        return self.sub(o) if isinstance(o, BitInteger) else NotImplemented

    def __imul__(self, o):
        return self.mul(o) if isinstance(o, BitInteger) else NotImplemented


def _int01(bit):
    int_bit = int(bit)
    if int_bit not in (0, 1):
        raise ValueError(f"Value {bit!r} is not a bit")
    return int_bit


def _whole(num):
    int_num = int(num)
    if int_num != num:
        raise ValueError(f"Value {num!r} is not a whole number")
    return int_num


def _check_count(num_bits):
    num_bits = _whole(num_bits)
    if num_bits < 0:
        raise ValueError(f"Negative bit count {num_bits}")
    return num_bits
