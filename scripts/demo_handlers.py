# scripts/demo_handlers.py
# Targets referenced by demo_table.yaml.


def hello(p):
    return f"Hello {p['name']}"


def goodbye(p):
    return f"Goodbye {p['name']}"


def is_even(n):
    return n % 2 == 0


def halve(n):
    return n // 2


def triple_plus_one(n):
    return 3 * n + 1
