"""Leaves created inside a scope implicitly depend on its condition.

    entitytrace tree examples/scope_demo.py
"""

from entitytrace import Entity

ready = Entity("Ready", True)
steady = Entity("Steady", True)
go_condition = ready & steady

with go_condition.as_scope():
    thrust = Entity("Thrust", 7600)

burn_seconds = Entity("BurnSeconds", 160)
impulse = thrust * burn_seconds
impulse.description = "Impulse"


if __name__ == "__main__":
    print(impulse.dependency_expression)
    print(impulse.dependency_names())
    impulse.print_graph()
