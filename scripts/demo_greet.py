# scripts/demo_greet.py
from valuedispatch.core import log
from valuedispatch.core.contracts import DispatchMiss
from valuedispatch.core.multimethod import defmethod, defmulti


def main():
    log.setup()
    lg = log.get("demo.greet")

    greet = defmulti(lambda person: person["kind"], name="greet")
    defmethod(greet, "foo", lambda p: f"Hello {p['name']}")
    defmethod(greet, "bar", lambda p: f"Goodbye {p['name']}")

    for person in ({"kind": "foo", "name": "Alice"},
                   {"kind": "bar", "name": "Bob"},
                   {"kind": "baz", "name": "Carl"}):
        try:
            lg.info(greet(person))
        except DispatchMiss as e:
            lg.warning("miss: %s", e)


if __name__ == "__main__":
    main()
