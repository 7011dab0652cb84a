#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## core.py
##
"""
    The :class:`~amlpy.expressions.core.Expression` superclass and common subclasses :class:`~amlpy.expressions.core.Comparison` and :class:`~amlpy.expressions.core.Operator`.

    None of these objects should be directly created, they are automatically created through operator
    overloading on variables and expressions.

    Here is a list of standard python operators and what object (with what expr.name) it creates:

    Comparisons
    -----------
    ===================  ==========================
    Python Operator      amlpy Object
    ===================  ==========================
    `x == y`             `Comparison("==", x, y)`
    `x < y`              `Comparison("<", x, y)`
    `x <= y`             `Comparison("<=", x, y)`
    `x > y`              `Comparison(">", x, y)`
    `x >= y`             `Comparison(">=", x, y)`
    ===================  ==========================

    There is no `!=`: a disequality is not a convex set and none of the linear or nonlinear
    backends can represent it.

    Arithmetic Operators
    --------------------
    ===========================  ===============================================
    Python Operator              amlpy Object
    ===========================  ===============================================
    `-x`                         `Operator("-", [x])`
    `x + y`                      `Operator("sum", [x, y])`
    `sum([x,y,z])`               `Operator("sum", [x, y, z])`
    `sum([c0*x, c1*y, c2*z])`    `Operator("wsum", [[c0, c1, c2], [x, y, z]])`
    `x - y`                      `Operator("sum", [x, -y])`
    `x * y`                      `Operator("mul", [x, y])`
    `x / y`                      `Operator("div", [x, y])` (true division)
    `x ** y`                     `Operator("pow", [x, y])` (power)
    ===========================  ===============================================

    Apart from operator overloading, expressions implement two important functions:

    - :func:`~amlpy.expressions.core.Expression.is_bool`
        which returns whether the return type of the expression is Boolean.
        If it does, the expression can be used as top-level constraint.

    - :func:`~amlpy.expressions.core.Expression.value`
        computes the value of this expression, by calling .value() on its
        subexpressions and doing the appropriate computation
        this is used to conveniently print variable values, objective values
        and any other expression value (e.g. during debugging).

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        Expression
        Comparison
        Operator
"""
from types import GeneratorType
import numpy as np

from .utils import is_int, is_num, is_any_list, flatlist, argvals, eval_comparison


class Expression(object):
    """
    An Expression represents a symbolic function with a `self.name` and `self.args` (arguments)

    Each Expression is considered to be a function whose value can be used
      in other expressions

    Expressions may implement:

    - :func:`~amlpy.expressions.core.Expression.is_bool`:   whether its return type is Boolean
    - :func:`~amlpy.expressions.core.Expression.value`:     the value of the expression, default None
    - :func:`~amlpy.expressions.core.Expression.__repr__`:  for pretty printing the expression
    - any ``__op__`` python operator overloading
    """

    def __init__(self, name, arg_list):
        self.name = name

        if isinstance(arg_list, (tuple, GeneratorType)):
            arg_list = list(arg_list)
        elif isinstance(arg_list, np.ndarray):
            # must flatten
            arg_list = arg_list.reshape(-1)
        for i in range(len(arg_list)):
            if isinstance(arg_list[i], np.ndarray):
                # must flatten
                arg_list[i] = arg_list[i].reshape(-1)

        assert (is_any_list(arg_list)), "_list_ of arguments required, even if of length one e.g. [arg]"
        self._args = arg_list

    @property
    def args(self):
        return self._args

    @args.setter
    def args(self, args):
        raise AttributeError("Cannot modify read-only attribute 'args', use 'update_args()'")

    def update_args(self, args):
        """ Allows in-place update of the expression's arguments.
        """
        self._args = args

    def set_description(self, txt, override_print=True, full_print=False):
        """ Attach a description to this expression.

            For constraints the description doubles as the constraint name
            in solver output (e.g. when asking for its dual value).
            Returns the expression itself so it can be used inline.
        """
        self.desc = txt
        self._override_print = override_print
        self._full_print = full_print
        return self

    def __str__(self):
        if not hasattr(self, "desc") or self._override_print is False:
            return self.__repr__()
        out = self.desc
        if self._full_print:
            out += " -- "+self.__repr__()
        return out

    def __repr__(self):
        strargs = []
        for arg in self.args:
            if isinstance(arg, np.ndarray):
                # flatten
                strarg = ",".join(map(str, arg.flat))
                strargs.append(f"[{strarg}]")
            else:
                strargs.append(f"{arg}")
        return "{}({})".format(self.name, ",".join(strargs))

    def __hash__(self):
        return hash(self.__repr__())

    def is_bool(self):
        """ is it a Boolean (return type) Operator?
            Default: yes
        """
        return True

    def value(self):
        return None # default

    # Comparisons
    def __eq__(self, other):
        return Comparison("==", self, other)

    def __ne__(self, other):
        raise TypeError(f"{self} != {other}: disequalities are not supported, "
                        "use two inequalities with a Boolean switch instead")

    def __lt__(self, other):
        return Comparison("<", self, other)

    def __le__(self, other):
        return Comparison("<=", self, other)

    def __gt__(self, other):
        return Comparison(">", self, other)

    def __ge__(self, other):
        return Comparison(">=", self, other)

    # Mathematical Operators, including 'r'everse if it exists
    # Addition
    def __add__(self, other):
        if is_num(other) and other == 0:
            return self
        return Operator("sum", [self, other])

    def __radd__(self, other):
        if is_num(other) and other == 0:
            return self
        return Operator("sum", [other, self])

    # substraction
    def __sub__(self, other):
        return self.__add__(-other)

    def __rsub__(self, other):
        return (-self).__radd__(other)

    # multiplication, puts the 'constant' (other) first
    def __mul__(self, other):
        if is_num(other) and other == 1:
            return self
        return Operator("mul", [other, self]) if is_num(other) else Operator("mul", [self, other])

    def __rmul__(self, other):
        if is_num(other) and other == 1:
            return self
        return Operator("mul", [other, self])

    def __truediv__(self, other):
        if is_num(other) and other == 1:
            return self
        return Operator("div", [self, other])

    def __rtruediv__(self, other):
        return Operator("div", [other, self])

    def __floordiv__(self, other):
        raise TypeError("Integer division is not supported, use / with a constant divisor")

    def __pow__(self, other, modulo=None):
        assert (modulo is None), "Power operator: modulo not supported"
        if is_num(other) and other == 1:
            return self
        return Operator("pow", [self, other])

    def __rpow__(self, other, modulo=None):
        assert (modulo is None), "Power operator: modulo not supported"
        return Operator("pow", [other, self])

    # unary mathematical operators
    def __neg__(self):
        # special case, -(w*x) -> -w*x
        if self.name == 'mul' and is_num(self.args[0]):
            return Operator(self.name, [-self.args[0], self.args[1]])
        elif self.name == 'wsum':
            # negate the constant weights
            return Operator(self.name, [[-a for a in self.args[0]], self.args[1]])
        return Operator("-", [self])

    def __pos__(self):
        return self

    def __bool__(self):
        raise ValueError(f"__bool__ should not be called on an amlpy expression {self} as it will always return True\n"
                         "Do not use an expression as argument in an `if` statement")


class Comparison(Expression):
    """Represents a comparison between two sub-expressions
    """
    allowed = {'==', '<=', '<', '>=', '>'}

    def __init__(self, name, left, right):
        assert (name in Comparison.allowed), f"Symbol {name} not allowed"
        super().__init__(name, [left, right])

    def __repr__(self):
        if all(isinstance(x, Expression) for x in self.args):
            return "({}) {} ({})".format(self.args[0], self.name, self.args[1])
        # if not: prettier printing without braces
        return "{} {} {}".format(self.args[0], self.name, self.args[1])

    def __bool__(self):
        # will be called when comparing elements in a container, but always with `==`
        if self.name == "==":
            return repr(self.args[0]) == repr(self.args[1])
        super().__bool__() # default to exception

    # return the value of the expression
    # optional, default: None
    def value(self):
        arg_vals = argvals(self.args)
        if any(a is None for a in arg_vals): return None
        return eval_comparison(self.name, arg_vals[0], arg_vals[1])


class Operator(Expression):
    """
    Mathematical operators on expressions

    Convention for 2-ary operators: if one of the two is a constant,
    it is stored first (as expr[0]), this eases weighted sum detection
    """
    allowed = {
        #name: (arity, is_bool)       arity 0 = n-ary, min 1
        'sum': (0, False),
        'wsum': (2, False),
        'mul': (2, False),
        'div': (2, False),
        'pow': (2, False),
        '-':   (1, False), # -x
    }
    printmap = {'sum': '+', 'mul': '*', 'div': '/', 'pow': '**'}

    def __init__(self, name, arg_list):
        # sanity checks
        assert (name in Operator.allowed), "Operator {} not allowed".format(name)
        arity, _ = Operator.allowed[name]
        if arity == 0:
            arg_list = flatlist(arg_list)
            assert (len(arg_list) >= 1), "Operator: n-ary operators require at least one argument"
        else:
            assert (len(arg_list) == arity), "Operator: {}, number of arguments must be {}".format(name, arity)

        # automatic weighted sum (wsum) creation:
        # if all args are an expression (not a constant)
        #    and one of the args is a wsum,
        #                    or a product of a constant and an expression,
        # then create a wsum of weights,expressions over all
        if name == 'sum' and \
                all(not is_num(a) for a in arg_list) and \
                any(_wsum_should(a) for a in arg_list):
            we = [_wsum_make(a) for a in arg_list]
            w = [wi for w, _ in we for wi in w]
            e = [ei for _, e in we for ei in e]
            name = 'wsum'
            arg_list = [w, e]

        # we have the requirement that weighted sums are [weights, expressions]
        if name == 'wsum':
            assert all(is_num(a) for a in arg_list[0]), "wsum: arg0 has to be all constants but is: "+str(arg_list[0])
            weights = []
            for w in arg_list[0]:
                if is_int(w):
                    weights.append(int(w)) # bool or int, simplifies things later on
                else:
                    weights.append(float(w))
            arg_list = (weights, list(arg_list[1]))

        # nested n-ary operators are merged into the toplevel
        if arity == 0:
            i = 0 # length can change
            while i < len(arg_list):
                if isinstance(arg_list[i], Operator) and arg_list[i].name == name:
                    # merge args in at this position
                    l = len(arg_list[i].args)
                    arg_list[i:i+1] = arg_list[i].args
                    i += l
                else:
                    i += 1

        super().__init__(name, arg_list)

    def is_bool(self):
        """ is it a Boolean (return type) Operator?
        """
        return Operator.allowed[self.name][1]

    def __repr__(self):
        printname = self.name
        if printname in Operator.printmap:
            printname = Operator.printmap[printname]

        # special cases
        if self.name == '-': # unary -
            return "-({})".format(self.args[0])

        # weighted sum
        if self.name == 'wsum':
            return f"sum({self.args[0]} * {self.args[1]})"

        # infix printing of two arguments
        if len(self.args) == 2:
            # bracketed printing of non-constants
            def wrap_bracket(arg):
                if isinstance(arg, Expression):
                    return f"({arg})"
                return arg
            return "{} {} {}".format(wrap_bracket(self.args[0]),
                                     printname,
                                     wrap_bracket(self.args[1]))

        return "{}({})".format(self.name, self.args)

    def value(self):
        if self.name == "wsum":
            # wsum: arg0 is list of constants, no .value() use as is
            arg_vals = [self.args[0], argvals(self.args[1])]
            if any(a is None for a in arg_vals[1]): return None
        else:
            arg_vals = argvals(self.args)
            if any(a is None for a in arg_vals): return None

        if self.name == "sum": return sum(arg_vals)
        elif self.name == "wsum":
            val = np.dot(arg_vals[0], arg_vals[1]).item()
            if round(val) == val and all(is_int(a) for a in arg_vals[1]): # it is an integer
                return int(val)
            return val # can be a float
        elif self.name == "mul": return arg_vals[0] * arg_vals[1]
        elif self.name == "div": return arg_vals[0] / arg_vals[1]
        elif self.name == "pow": return arg_vals[0] ** arg_vals[1]
        elif self.name == "-":   return -arg_vals[0]
        return None # default


def _wsum_should(arg):
    """ Internal helper: should the arg be in a wsum instead of sum

    True if the arg is already a wsum,
    or if it is a product of a constant and an expression
    (negation '-' does not mean it SHOULD be a wsum, because then
     all substractions are transformed into less readable wsums)
    """
    return isinstance(arg, Operator) and \
           (arg.name == 'wsum' or \
            (arg.name == 'mul' and len(arg.args) == 2 and \
             any(is_num(a) for a in arg.args)
            ) )

def _wsum_make(arg):
    """ Internal helper: prep the arg for wsum

    returns ([weights], [expressions]) where 'weights' are constants
    """
    if isinstance(arg, Operator):
        if arg.name == 'wsum':
            return arg.args
        elif arg.name == 'sum':
            return [1]*len(arg.args), arg.args
        elif arg.name == 'mul':
            if is_num(arg.args[0]):
                return [arg.args[0]], [arg.args[1]]
            elif is_num(arg.args[1]):
                return [arg.args[1]], [arg.args[0]]
            # else falls through to default below
        elif arg.name == '-':
            return [-1], [arg.args[0]]
    # default
    return [1], [arg]
