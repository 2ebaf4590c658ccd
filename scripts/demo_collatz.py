# scripts/demo_collatz.py
import argparse
from typing import List

from valuedispatch.core import log
from valuedispatch.core.multimethod import defmethod, defmulti


@defmulti
def collatz_step(n: int) -> bool:
    return n % 2 == 0


defmethod(collatz_step, True, lambda n: n // 2)
defmethod(collatz_step, False, lambda n: 3 * n + 1)


def collatz(n: int) -> List[int]:
    # not proven to terminate, but it has for every n anyone has tried
    if n <= 0:
        raise ValueError("n must be positive")
    steps = [n]
    while n != 1:
        n = collatz_step(n)
        steps.append(n)
    return steps


def main():
    ap = argparse.ArgumentParser(description="Print the Collatz sequence of n")
    ap.add_argument("n", type=int, nargs="?", default=27)
    args = ap.parse_args()

    log.setup()
    lg = log.get("demo.collatz")
    steps = collatz(args.n)
    lg.info("n=%d steps=%d peak=%d", args.n, len(steps) - 1, max(steps))
    print(" ".join(str(s) for s in steps))


if __name__ == "__main__":
    main()
