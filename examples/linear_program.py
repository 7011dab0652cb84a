#!/usr/bin/python3
"""
A production-planning LP in amlpy, with dual values

    min  12x + 20y
    s.t. c1: 6x +  8y >= 100
         c2: 7x + 12y >= 120
         x >= 0, 0 <= y <= 3
"""
from amlpy import *

x = floatvar(0, name="x")
y = floatvar(0, 3, name="y")

c1 = (6*x + 8*y >= 100).set_description("c1")
c2 = (7*x + 12*y >= 120).set_description("c2")

model = Model(c1, c2, minimize=12*x + 20*y)
print(model)

# dual values need an LP solver, so ask for one explicitly
s = SolverLookup.get("ortools:glop", model)
if s.solve():
    print(f"Status: {s.status()}")
    print(f"Cost: {s.objective_value()}")
    print(f"x = {x.value()}, y = {y.value()}")
    for c in (c1, c2):
        print(f"{c}: dual value {s.dual_value(c)}, shadow price {s.shadow_price(c)}")
else:
    print("No solution found")
