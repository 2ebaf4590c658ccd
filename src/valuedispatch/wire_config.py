# src/valuedispatch/wire_config.py
from __future__ import annotations
import importlib
import operator
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import yaml  # PyYAML

from valuedispatch.core import log
from valuedispatch.core.contracts import WiringError
from valuedispatch.core.multimethod import MultiMethod, defmethod, defmulti

l = log.get("valuedispatch.wire_config")


def _imp(path: str) -> Any:
    """Resolve "pkg.mod:attr.sub" (or "pkg.mod.attr") to the object it names."""
    if not isinstance(path, str) or not path:
        raise WiringError(f"import path must be a non-empty string, got {path!r}")
    if ":" in path:
        module, _, attrs = path.partition(":")
    else:
        module, _, attrs = path.rpartition(".")
    if not module or not attrs:
        raise WiringError(f"import path {path!r} must name a module and an attribute")
    try:
        obj = importlib.import_module(module)
    except ImportError as e:
        raise WiringError(f"cannot import module {module!r} for {path!r}") from e
    for part in attrs.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise WiringError(f"{path!r}: {part!r} not found") from e
    return obj


def _mk_dispatch(entry: Any) -> Callable[[Any], Any]:
    # "mod:fn" | {key: k} | {attr: a}
    if isinstance(entry, str):
        fn = _imp(entry)
    elif isinstance(entry, Mapping) and len(entry) == 1 and "key" in entry:
        fn = operator.itemgetter(entry["key"])
    elif isinstance(entry, Mapping) and len(entry) == 1 and "attr" in entry:
        fn = operator.attrgetter(entry["attr"])
    else:
        raise WiringError(f"dispatch must be an import path, {{key: ...}} or {{attr: ...}}, got {entry!r}")
    if not callable(fn):
        raise WiringError(f"dispatch {entry!r} is not callable")
    return fn


def build_multimethod(name: str, entry: Mapping[str, Any]) -> MultiMethod:
    """Build one multimethod from a table entry: {dispatch: ..., methods: {value: "mod:fn"}}."""
    if not isinstance(entry, Mapping) or "dispatch" not in entry:
        raise WiringError(f"multimethod {name!r} needs a 'dispatch' entry")
    multi = defmulti(_mk_dispatch(entry["dispatch"]), name=name)

    methods = entry.get("methods") or {}
    if not isinstance(methods, Mapping):
        raise WiringError(f"multimethod {name!r}: 'methods' must be a mapping")
    for value, target in methods.items():
        fn = _imp(target)
        if not callable(fn):
            raise WiringError(f"multimethod {name!r}: {target!r} is not callable")
        defmethod(multi, value, fn)

    l.info("wired multimethod=%s methods=%d", name, len(methods))
    return multi


def build_from_yaml(yaml_path: str | Path) -> Dict[str, MultiMethod]:
    """Read a dispatch table YAML file and build every multimethod it lists."""
    try:
        data = yaml.safe_load(Path(yaml_path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise WiringError(f"{yaml_path}: invalid YAML") from e
    if not isinstance(data, Mapping):
        raise WiringError(f"{yaml_path}: top level must be a mapping")

    table = data.get("multimethods") or {}
    if not isinstance(table, Mapping):
        raise WiringError(f"{yaml_path}: 'multimethods' must be a mapping")

    return {str(name): build_multimethod(str(name), entry) for name, entry in table.items()}
