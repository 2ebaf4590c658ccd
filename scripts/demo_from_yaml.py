# scripts/demo_from_yaml.py
import os
import sys
from pathlib import Path

from valuedispatch.core import log
from valuedispatch.core.metrics import force_emit
from valuedispatch.wire_config import build_from_yaml

HERE = Path(__file__).resolve().parent


def main():
    log.setup()
    lg = log.get("demo.yaml")

    # demo_handlers.py lives next to this script
    sys.path.insert(0, str(HERE))
    table = build_from_yaml(os.getenv("DISPATCH_TABLE", str(HERE / "demo_table.yaml")))

    greet, step = table["greet"], table["collatz_step"]
    lg.info(greet({"kind": "foo", "name": "Alice"}))
    lg.info(greet({"kind": "bar", "name": "Bob"}))
    lg.info("collatz_step(6)=%d collatz_step(7)=%d", step(6), step(7))

    force_emit(json_mode=(os.getenv("LOG_JSON", "0") == "1"))


if __name__ == "__main__":
    main()
