#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## functions.py
##
"""
    User-defined functions conveniently express nonlinear terms in function form.

    Any plain Python function of scalar arguments can be made available to the modeling
    layer with :func:`register`. Calling the registered function on expressions creates a
    :class:`FunctionCall` expression, which can be nested in objectives and constraints
    like any other numerical expression.

    Example:

    .. code-block:: python

        def my_squareroot(x):
            ...

        my_sqrt = register("my_squareroot", my_squareroot)
        x = floatvar(-math.inf, shape=2, start=0.5)
        m = Model(my_sqrt(x[0]**2 + x[1]**2) <= 1, maximize=x.sum())

    Solver perspective
    ------------------

    Only nonlinear backends (see :mod:`amlpy.solvers.scipy`) accept function calls. They
    evaluate the function through :meth:`FunctionCall.value` and, unless a derivative was
    registered, estimate its derivatives with finite differences.
    Linear backends raise :class:`~amlpy.exceptions.NotSupportedError`.

    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        UserFunction
        FunctionCall
"""
from .core import Expression
from .utils import argvals, is_num


def register(name, func, arity=1, derivative=None):
    """
        Register the Python function `func` under the symbolic `name`.

        - arity: number of (scalar) arguments the function takes
        - derivative: optional function returning the gradient, a list with
          one partial derivative per argument

        Returns a :class:`UserFunction`, call it on expressions to use it in a model.
    """
    return UserFunction(name, func, arity=arity, derivative=derivative)


class UserFunction(object):
    """
        A registered Python function, callable on expressions
    """
    def __init__(self, name, func, arity=1, derivative=None):
        if not callable(func):
            raise TypeError(f"Can not register {func!r} as '{name}', it is not callable")
        assert arity >= 1, "Registered functions take at least one argument"
        self.name = name
        self.func = func
        self.arity = arity
        self.derivative = derivative

    def __call__(self, *args):
        if len(args) != self.arity:
            raise TypeError(f"{self.name}() takes {self.arity} argument(s), got {len(args)}")
        if all(is_num(a) for a in args):
            # constant folding
            return self.func(*args)
        return FunctionCall(self, list(args))

    def __repr__(self):
        return f"UserFunction({self.name}/{self.arity})"


class FunctionCall(Expression):
    """
        Application of a :class:`UserFunction` to (numerical) expressions
    """
    def __init__(self, function, arg_list):
        self.function = function
        super().__init__(function.name, arg_list)

    def is_bool(self):
        return False

    def value(self):
        arg_vals = argvals(self.args)
        if any(a is None for a in arg_vals):
            return None
        return self.function.func(*arg_vals)

    def gradient(self):
        """ the registered derivative at the current argument values, or None if not registered """
        if self.function.derivative is None:
            return None
        arg_vals = argvals(self.args)
        if any(a is None for a in arg_vals):
            return None
        return list(self.function.derivative(*arg_vals))
