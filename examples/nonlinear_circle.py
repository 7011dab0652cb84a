#!/usr/bin/python3
"""
A nonlinear model with a user-defined function in amlpy

Maximize x1 + x2 over the unit disc, where the disc is described with a square
root computed by Newton's method. The optimum is x1 = x2 = 1/sqrt(2).
"""
import math
from amlpy import *


def my_squareroot(x):
    z = x # starting point
    for _ in range(100): # rounding can keep the residual above the tolerance
        if abs(z*z - x) <= 1e-13:
            break
        z = z - (z*z - x) / (2*z)
    return z

my_sqrt = register("my_sqrt", my_squareroot)

x = floatvar(-math.inf, math.inf, shape=2, name="x", start=0.5)

model = Model(my_sqrt(x[0]**2 + x[1]**2) <= 1, maximize=x.sum())

if model.solve("scipy"):
    print(f"Status: {model.status()}")
    print(f"x = {x.value()}, objective {model.objective_value()}")
else:
    print("No solution found")
