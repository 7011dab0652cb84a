#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## variables.py
##
"""
    Boolean, integer and continuous decision variables (as n-dimensional numpy objects)

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        boolvar
        intvar
        floatvar

    ==================
    Module description
    ==================

    A decision variable is a variable whose value will be determined by the solver.

    All variables in amlpy are n-dimensional array objects and have defined dimensions.
    Following the numpy library, the dimension sizes of an n-dimensional array is called its __shape__.
    For 'single' variables the shape is '1'. For an array of length `n` the shape is 'n'.
    An `n*m` matrix has shape (n,m), and tensors with more than 2 dimensions are all supported too.
    amlpy builds on numpy's ndarray for this and inherits its vectorized operators and advanced indexing,
    which is what makes a Sudoku model as short as its mathematical formulation:

    .. code-block:: python

        x = boolvar(shape=(9,9,9), name="x")
        cell_constraints = [x[i,j,:].sum() == 1 for i in range(9) for j in range(9)]

    None of the classes in this module should be directly created; they are created by
    `boolvar()`, `intvar()` and `floatvar()`.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        NullShapeError
        _NumVarImpl
        _FloatVarImpl
        _IntVarImpl
        _BoolVarImpl
        NDVarArray
"""
import math
from collections.abc import Iterable

import numpy as np
from .core import Expression, Operator
from .utils import is_num, is_int


def boolvar(shape=1, name=None):
    """
    Boolean decision variables will take either the value `0` or `1`.

    Arguments:
    shape -- the shape of the n-dimensional array of variables (int or tuple of ints, default: 1)
    name -- name to give to the variables (string, default: None)

    If name is None then a name 'BV<unique number>' will be assigned to it.

    If shape is different from 1, then each element of the array will have the location
    of this specific variable in the array append to its name.

    For example, `print(boolvar(shape=3, name="x"))` will print `[x[0] x[1] x[2]]`
    """
    if shape == 0 or shape is None:
        raise NullShapeError(shape)
    if shape == 1:
        return _BoolVarImpl(name=name)

    # create base data
    data = np.array([_BoolVarImpl(name=_genname(name, idxs)) for idxs in np.ndindex(shape)]) # repeat new instances
    # insert into custom ndarray
    return NDVarArray(shape, dtype=object, buffer=data)


def intvar(lb, ub, shape=1, name=None):
    """
    Integer decision variables are constructed by specifying the lowest (lb)
    the decision variable can take, as well as the highest value (ub).

    Arguments:
    lb -- lower bound on the values the variable can take (int)
    ub -- upper bound on the values the variable can take (int)
    shape -- the shape of the n-dimensional array of variables (int or tuple of ints, default: 1)
    name -- name to give to the variables (string, default: None)

    If name is None then a name 'IV<unique number>' will be assigned to it.
    """
    if shape == 0 or shape is None:
        raise NullShapeError(shape)
    if shape == 1:
        return _IntVarImpl(lb, ub, name=name)

    # create base data
    data = np.array([_IntVarImpl(lb, ub, name=_genname(name, idxs)) for idxs in np.ndindex(shape)]) # repeat new instances
    # insert into custom ndarray
    return NDVarArray(shape, dtype=object, buffer=data)


def floatvar(lb=0, ub=math.inf, shape=1, name=None, start=None):
    """
    Continuous decision variables, with a lower bound (lb) and upper bound (ub)
    that may be infinite.

    Arguments:
    lb -- lower bound (number, default: 0)
    ub -- upper bound (number, default: +infinity)
    shape -- the shape of the n-dimensional array of variables (int or tuple of ints, default: 1)
    name -- name to give to the variables (string, default: None)
    start -- initial value for local (nonlinear) solvers (number, default: None)

    If name is None then a name 'FV<unique number>' will be assigned to it.

    .. code-block:: python

        x = floatvar(0, name="x")           # x >= 0
        y = floatvar(0, 3, name="y")        # 0 <= y <= 3
        z = floatvar(-math.inf, shape=2)    # free variables
    """
    if shape == 0 or shape is None:
        raise NullShapeError(shape)
    if shape == 1:
        return _FloatVarImpl(lb, ub, name=name, start=start)

    data = np.array([_FloatVarImpl(lb, ub, name=_genname(name, idxs), start=start) for idxs in np.ndindex(shape)])
    return NDVarArray(shape, dtype=object, buffer=data)


class NullShapeError(Exception):
    """
    Error returned when providing an empty or size 0 shape for numpy arrays of variables
    """
    def __init__(self, shape, message="Shape should be non-zero"):
        self.shape = shape
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f'{self.shape}: {self.message}'


class _NumVarImpl(Expression):
    """
    Abstract **numerical** variable with given lowerbound and upperbound.

    Abstract class, only mean to be subclassed
    """
    def __init__(self, lb, ub, name):
        assert (is_num(lb) and is_num(ub))
        assert (lb <= ub), f"lower bound {lb} larger than upper bound {ub}"
        self.lb = lb
        self.ub = ub
        self._domain = (lb, ub)  # original domain, restored by unfix()
        self.name = name
        self._value = None

    def is_bool(self):
        """ is it a Boolean (return type) Operator?
        """
        return False

    def is_integer(self):
        """ does the variable only take integral values?
        """
        return False

    @property
    def args(self):
        return []

    def value(self):
        """ the value obtained in the last solve call
            (or 'None')
        """
        return self._value

    def get_bounds(self):
        """ the lower and upper bounds"""
        return self.lb, self.ub

    def is_fixed(self):
        return self.lb == self.ub

    def fix(self, val):
        """ fix the variable to `val` by collapsing both bounds onto it

            the value has to lie within the variable's original domain
        """
        lb, ub = self._domain
        if not (lb <= val <= ub):
            raise ValueError(f"Can not fix {self} to {val}, outside of its domain {lb}..{ub}")
        self.lb = self.ub = val

    def unfix(self):
        """ restore the domain the variable was created with
        """
        self.lb, self.ub = self._domain

    def clear(self):
        """ clear the value obtained from the last solve call
        """
        self._value = None

    def __repr__(self):
        return self.name

    # for sets/dicts. Because names are unique, so is the str repr
    def __hash__(self):
        return hash(self.name)


class _FloatVarImpl(_NumVarImpl):
    """
    **Continuous** variable with given lowerbound and upperbound.

    Do not create this object directly, use `floatvar()` instead
    """
    counter = 0

    def __init__(self, lb, ub, name=None, start=None):
        if name is None:
            name = "FV{}".format(_FloatVarImpl.counter)
            _FloatVarImpl.counter = _FloatVarImpl.counter + 1 # static counter
        super().__init__(float(lb), float(ub), name=name)
        self.start = start

    def __hash__(self):
        return hash(self.name)


class _IntVarImpl(_NumVarImpl):
    """
    **Integer** variable with given lowerbound and upperbound.

    Do not create this object directly, use `intvar()` instead
    """
    counter = 0

    def __init__(self, lb, ub, name=None):
        assert is_int(lb), "IntVar lowerbound must be integer {} {}".format(type(lb), lb)
        assert is_int(ub), "IntVar upperbound must be integer {} {}".format(type(ub), ub)

        if name is None:
            name = "IV{}".format(_IntVarImpl.counter)
            _IntVarImpl.counter = _IntVarImpl.counter + 1 # static counter

        super().__init__(int(lb), int(ub), name=name) # explicit cast: can be numpy

    def is_integer(self):
        return True

    def fix(self, val):
        if not is_int(val):
            raise ValueError(f"Can not fix integer variable {self} to non-integer {val}")
        super().fix(int(val))

    def __hash__(self):
        return hash(self.name)


class _BoolVarImpl(_IntVarImpl):
    """
    **Boolean** variable, an integer variable with domain 0..1.

    Do not create this object directly, use `boolvar()` instead
    """
    counter = 0

    def __init__(self, lb=0, ub=1, name=None):
        assert(lb == 0 or lb == 1)
        assert(ub == 0 or ub == 1)

        if name is None:
            name = "BV{}".format(_BoolVarImpl.counter)
            _BoolVarImpl.counter = _BoolVarImpl.counter + 1 # static counter
        _IntVarImpl.__init__(self, lb, ub, name=name)

    def is_bool(self):
        """ is it a Boolean (return type) Operator?
        """
        return True

    # when redefining __eq__, must redefine custom__hash__
    # https://stackoverflow.com/questions/53518981/inheritance-hash-sets-to-none-in-a-subclass
    def __hash__(self):
        return hash(self.name)


# subclass numericexpression for operators (first), ndarray for all the rest
class NDVarArray(Expression, np.ndarray):
    """
    N-dimensional numpy array of variables.

    Do not create this object directly, use one of the functions in this module
    """
    def __init__(self, shape, **kwargs):
        # 'self' is the list_of_arguments
        Expression.__init__(self, "NDVarArray", self)
        # no need to call ndarray __init__ method as specified in the np.ndarray documentation:
        # "No ``__init__`` method is needed because the array is fully initialized
        #         after the ``__new__`` method."

    @property
    def args(self):
        return self

    def is_bool(self):
        """ is it a Boolean (return type) Operator?
        """
        return False

    def value(self):
        """ the values, for each of the stored variables, obtained in the last solve call
            (or 'None')
        """
        return np.reshape([x.value() for x in self.flat], self.shape)

    def clear(self):
        """ clear, for each of the stored variables, the value obtained from the last solve call
        """
        for e in self.flat:
            e.clear()

    def __repr__(self):
        return np.ndarray.__repr__(self)

    def __str__(self):
        return np.ndarray.__str__(self)

    def __hash__(self):
        return id(self)

    def __getitem__(self, index):
        ret = super().__getitem__(index)
        # np.int and np.bool do not play well with > overloading
        if isinstance(ret, np.integer):
            return int(ret)
        elif isinstance(ret, np.bool_):
            return bool(ret)
        return ret

    def __axis(self, axis):
        """
        make the given array the first dimension in the returned array
        """
        arr = self

        # correct type and value checks
        if not isinstance(axis, int):
            raise TypeError("Axis keyword argument in .sum() should always be an integer")
        if axis >= arr.ndim:
            raise ValueError("Axis out of range")

        if axis < 0:
            axis += arr.ndim

        # Change the array to make the selected axis the first dimension
        if axis > 0:
            iter_axis = list(range(arr.ndim))
            iter_axis.remove(axis)
            iter_axis.insert(0, axis)
            arr = arr.transpose(iter_axis)

        return arr

    def sum(self, axis=None, out=None):
        """
            overwrite np.sum(NDVarArray) as people might use it
        """
        if out is not None:
            raise NotImplementedError()

        if axis is None:    # simple case where we want the sum over the whole array
            arr = self.flatten()
            return Operator("sum", arr)

        # reduce the selected axis, as numpy does: one sum per index of the other axes
        arr = self.__axis(axis=axis)

        out = []
        for idx in np.ndindex(arr.shape[1:]):
            out.append(Operator("sum", arr[(slice(None),) + idx]))

        return out

    # VECTORIZED master function (delegate)
    def _vectorized(self, other, attr):
        if not isinstance(other, Iterable):
            other = [other]*len(self)
        # this is a bit cryptic, but it calls 'attr' on s with o as arg
        # s.__eq__(o) <-> getattr(s, '__eq__')(o)
        return _as_array([getattr(s, attr)(o) for s, o in zip(self, other)])

    # VECTORIZED comparisons
    def __eq__(self, other):
        return self._vectorized(other, '__eq__')

    def __lt__(self, other):
        return self._vectorized(other, '__lt__')

    def __le__(self, other):
        return self._vectorized(other, '__le__')

    def __gt__(self, other):
        return self._vectorized(other, '__gt__')

    def __ge__(self, other):
        return self._vectorized(other, '__ge__')

    # VECTORIZED math operators
    def __neg__(self):
        return _as_array([-s for s in self])

    def __add__(self, other):
        return self._vectorized(other, '__add__')

    def __radd__(self, other):
        return self._vectorized(other, '__radd__')

    def __sub__(self, other):
        return self._vectorized(other, '__sub__')

    def __rsub__(self, other):
        return self._vectorized(other, '__rsub__')

    def __mul__(self, other):
        return self._vectorized(other, '__mul__')

    def __rmul__(self, other):
        return self._vectorized(other, '__rmul__')

    def __truediv__(self, other):
        return self._vectorized(other, '__truediv__')

    def __pow__(self, other, modulo=None):
        assert (modulo is None), "Power operator: modulo not supported"
        return self._vectorized(other, '__pow__')


def _as_array(lst):
    """ wrap the result of a vectorized operation back into an NDVarArray """
    arr = np.array(lst, dtype=object)
    return NDVarArray(shape=arr.shape, dtype=object, buffer=arr)


def _genname(basename, idxs):
    """
    Helper function to 'name' array variables
    - idxs: list of indices, one for every dimension of the array
    - basename: base name to prepend

    if basename is 'None', then it returns None

    output: something like "basename[0,1]"
    """
    if basename is None:
        return None
    stridxs = ",".join(map(str, idxs))
    return f"{basename}[{stridxs}]" # "<name>[<idx0>,<idx1>,...]"
