"""Leaves carrying metadata, combined into a described result.

Print the graph with:

    entitytrace tree examples/state_demo.py
"""

from decimal import Decimal

from entitytrace import Entity

revenue = Entity(
    "Revenue",
    Decimal("1000.00"),
    arbitrary_state={"Region": "EU", "Quarter": "Q1"},
    value_state={"Target": Decimal("1200.00")},
)
sales = Entity("Sales", Decimal("250.00"), arbitrary_state={"Channel": "Online"})
costs = Entity("Costs", Decimal("400.00"))

# Profit = Revenue + Sales - Costs
profit = revenue + sales - costs
profit.description = "Profit"


if __name__ == "__main__":
    print(profit.dependency_expression)
    profit.print_graph()

    revenue.reset(Decimal("1100.00"))
    print(f"After revenue update: {profit.resolve()}")
