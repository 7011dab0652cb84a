#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## utils.py
##
"""
Internal utilities for expression handling.

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        is_bool
        is_int
        is_num
        is_any_list
        flatlist
        argval
        argvals
        eval_comparison
"""

import numpy as np
from collections.abc import Iterable  # for flatten


def is_bool(arg):
    """ is it a boolean (incl numpy variants)
    """
    return isinstance(arg, (bool, np.bool_))


def is_int(arg):
    """ can it be interpreted as an integer? (incl bool and numpy variants)
    """
    return isinstance(arg, (bool, np.bool_, int, np.integer))


def is_num(arg):
    """ is it an int or float? (incl numpy variants)
    """
    return isinstance(arg, (bool, np.bool_, int, np.integer, float, np.floating))


def is_any_list(arg):
    """ is it a list or tuple or numpy array?
    """
    return isinstance(arg, (list, tuple, np.ndarray))


def flatlist(args):
    """ recursively flatten arguments into one single list
    """
    return list(_flatten(args))


def _flatten(args):
    """ flattens the irregular nested list into an iterator

        from: https://stackoverflow.com/questions/2158395/flatten-an-irregular-list-of-lists
    """
    for el in args:
        if isinstance(el, Iterable) and not isinstance(el, (str, bytes)):
            yield from _flatten(el)
        else:
            yield el


def argval(a):
    """ returns .value() of Expression, otherwise the argument itself

        We check with hasattr instead of isinstance to avoid circular dependency
    """
    val = a.value() if hasattr(a, "value") else a
    if isinstance(val, np.generic):
        return val.item() # ensure it is a Python native value
    return val


def argvals(arr):
    if is_any_list(arr):
        return [argvals(arg) for arg in arr]
    return argval(arr)


def eval_comparison(str_op, lhs, rhs):
    """
        Internal function: evaluates the textual `str_op` comparison operator
        lhs <str_op> rhs

        Valid str_op's:
        * '=='
        * '>'
        * '>='
        * '<'
        * '<='
    """
    if isinstance(lhs, (np.integer, np.bool_)):
        lhs = int(lhs)
    if isinstance(rhs, (np.integer, np.bool_)):
        rhs = int(rhs)

    if str_op == '==':
        return lhs == rhs
    elif str_op == '>':
        return lhs > rhs
    elif str_op == '>=':
        return lhs >= rhs
    elif str_op == '<':
        return lhs < rhs
    elif str_op == '<=':
        return lhs <= rhs
    else:
        raise ValueError(f"Not a known comparison: {str_op}")
