"""
    Symbolic first-order derivatives of numerical expressions.

    Nonlinear solvers need the gradient of the objective and of every constraint function.
    :func:`gradient` walks the expression tree and applies the chain rule at the current
    variable values (as set through `var._value`). User functions contribute through the
    derivative given to :func:`~amlpy.expressions.functions.register`; when one of them has
    none, :func:`is_differentiable` returns False and the solver falls back on finite
    differences.
"""
import numpy as np

from ..exceptions import NotSupportedError
from ..expressions.core import Operator
from ..expressions.functions import FunctionCall
from ..expressions.variables import _NumVarImpl
from ..expressions.utils import is_num, argval


def is_differentiable(expr):
    """ can :func:`gradient` compute the derivative of `expr` symbolically? """
    if is_num(expr) or isinstance(expr, _NumVarImpl):
        return True
    if isinstance(expr, FunctionCall):
        return expr.function.derivative is not None and all(is_differentiable(a) for a in expr.args)
    if isinstance(expr, Operator):
        if expr.name == "wsum":
            return all(is_differentiable(a) for a in expr.args[1])
        return all(is_differentiable(a) for a in expr.args)
    return False


def gradient(expr, index):
    """
        Gradient of `expr` at the current variable values.

        - index: dict mapping each variable to its position in the returned vector

        :return: numpy vector of length `len(index)`
    """
    grad = np.zeros(len(index))
    _accumulate(expr, 1.0, index, grad)
    return grad


def _accumulate(expr, seed, index, grad):
    """ add seed * d(expr)/d(var) into grad, for every variable in expr """
    if is_num(expr):
        return

    if isinstance(expr, _NumVarImpl):
        if expr in index:
            grad[index[expr]] += seed
        return

    if isinstance(expr, FunctionCall):
        partials = expr.gradient()
        if partials is None:
            raise NotSupportedError(f"No derivative registered for '{expr.function.name}'")
        for arg, d in zip(expr.args, partials):
            _accumulate(arg, seed * d, index, grad)
        return

    if not isinstance(expr, Operator):
        raise NotSupportedError(f"Can not differentiate {expr}")

    if expr.name == "sum":
        for arg in expr.args:
            _accumulate(arg, seed, index, grad)
    elif expr.name == "wsum":
        for w, arg in zip(*expr.args):
            _accumulate(arg, seed * w, index, grad)
    elif expr.name == "-":
        _accumulate(expr.args[0], -seed, index, grad)
    elif expr.name == "mul":
        a, b = expr.args
        _accumulate(a, seed * argval(b), index, grad)
        _accumulate(b, seed * argval(a), index, grad)
    elif expr.name == "div":
        a, b = expr.args
        va, vb = argval(a), argval(b)
        _accumulate(a, seed / vb, index, grad)
        _accumulate(b, -seed * va / (vb * vb), index, grad)
    elif expr.name == "pow":
        a, b = expr.args
        va, vb = argval(a), argval(b)
        if is_num(b):
            _accumulate(a, seed * vb * va ** (vb - 1), index, grad)
        else:
            # d(a^b) = a^b * (b' ln a + b a'/a)
            _accumulate(a, seed * vb * va ** (vb - 1), index, grad)
            _accumulate(b, seed * va ** vb * np.log(va), index, grad)
    else:
        raise NotSupportedError(f"Can not differentiate operator '{expr.name}' in {expr}")
