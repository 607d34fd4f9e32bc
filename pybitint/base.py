#!/usr/bin/env python
# -*- coding: utf-8 -*-

import numpy as np

'''
Stateless functions on MSB-first bit arrays that are used throughout the
BitInteger class.
'''

# Width of the native unsigned integer that to_int() and mul() fall back on.
NATIVE_BITS = 64


def empty_bits(width, fill=False):
    '''
    New boolean bit array of a certain width, every bit set to the fill value.
    '''
    return np.full(int(width), bool(fill), dtype=bool)


def calc_int_bits(num):
    '''
    MSB-first bit array for a positive integer, built by repeatedly taking the
    low-order bit and shifting right. No guard bit is added here.
    '''
    num = int(num)
    bits = empty_bits(num.bit_length())
    for idx in range(len(bits) - 1, -1, -1):
        bits[idx] = num % 2 == 1
        num >>= 1
    return bits


def calc_bits_int(bits):
    '''
    Fold an MSB-first bit array into a Python integer.
    '''
    acc = 0
    for bit in bits.tolist():
        acc = acc * 2 + int(bit)
    return acc


def check_native(num, native_bits):
    '''
    Raise an OverflowError if an integer does not fit a native unsigned
    integer of the given width. A width of None means unbounded.
    '''
    if native_bits is not None and num.bit_length() > native_bits:
        raise OverflowError(f"Value needs {num.bit_length():d} bits, native width is {native_bits:d}")
    return num


def extend_bits(bits, num_bits, fill=False):
    '''
    Copy of a bit array with num_bits leading bits of the fill value prepended.
    False-fill is zero-extension, true-fill sign-extends a two's-complement
    negative.
    '''
    return np.concatenate((empty_bits(num_bits, fill), bits))


def align_bits(bits, width, fill=False):
    '''
    Copy of a bit array extended at the most-significant end to a certain width.
    '''
    return extend_bits(bits, max(0, width - len(bits)), fill)


def count_leading_zeros(bits):
    '''
    Number of false bits before the first set bit, the full width if none is set.
    '''
    set_idxs = np.flatnonzero(bits)
    return int(set_idxs[0]) if len(set_idxs) else len(bits)


def ripple_add(a_bits, b_bits):
    '''
    Ripple-carry sum of two equal-width bit arrays, scanning from the least- to
    the most-significant bit. Returns the sum bits, of the same width, and the
    carry out of the top bit.
    '''
    assert len(a_bits) == len(b_bits), f"Width mismatch {len(a_bits)} vs {len(b_bits)}"
    sum_bits = empty_bits(len(a_bits))
    a_list, b_list = a_bits.tolist(), b_bits.tolist()
    carry = False
    for idx in range(len(a_list) - 1, -1, -1):
        a, b = a_list[idx], b_list[idx]
        sum_bits[idx] = a ^ b ^ carry
        # majority of the three inputs
        carry = (a and b) or (carry and (a ^ b))
    return sum_bits, carry
