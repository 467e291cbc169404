"""Function-form entities built with transform and split.

This module defines several independent results, so pick one:

    entitytrace show examples/transform_demo.py --entity doubled_floor
    entitytrace tree examples/transform_demo.py --entity fahrenheit --format rich
"""

import math

from entitytrace import Entity, transform

price = Entity("Price", 19.99)
rounded_price = price.transform("Round", round)

first_name = Entity("FirstName", "Ada")
last_name = Entity("LastName", "Lovelace")
full_name = transform("Combine", lambda first, last: f"{first} {last}", first_name, last_name)
initial, surname = full_name.split(str.split, "Initial", "Surname")

a = Entity("A", 7.5)
b = Entity("B", 1.25)
two = Entity("Two", 2)
doubled_floor = (a + b).transform("Floor", math.floor, output_type=int) * two

v1 = Entity("V1", 10.0)
v2 = Entity("V2", 20.0)
v3 = Entity("V3", 30.0)
weighted_average = transform("WeightedAvg", lambda x, y, z: (x * 1 + y * 2 + z * 3) / 6, v1, v2, v3)

celsius = Entity("Celsius", 21.0)
fahrenheit = celsius.transform("ToFahrenheit", lambda c: c * 9 / 5 + 32)


if __name__ == "__main__":
    for entity in (rounded_price, full_name, surname, doubled_floor, weighted_average, fahrenheit):
        print(f"{entity.dependency_expression} = {entity.resolve()}")

    celsius.reset(-40.0)
    print(f"{fahrenheit.dependency_expression} = {fahrenheit.resolve()}")
