# core/schema_registry.py
from __future__ import annotations
from typing import Callable, List, Tuple
from sqlalchemy.engine import Engine
import importlib
import logging
import pkgutil

logger = logging.getLogger(__name__)

# Schema installer type
SchemaInstaller = Callable[[Engine], None]

# Registry: (name, installer_func)
_REGISTRY: List[Tuple[str, SchemaInstaller]] = []

def register(
    name: str | SchemaInstaller, installer: SchemaInstaller | None = None
) -> SchemaInstaller | Callable[[SchemaInstaller], SchemaInstaller]:
    """
    Registers a schema installer function.
    Can be used as a decorator (@register) or a function call (register("name", fn)).
    """
    # @register("name")
    if isinstance(name, str) and installer is None:
        def decorator(fn: SchemaInstaller) -> SchemaInstaller:
            _add(name, fn)
            return fn
        return decorator

    # @register
    elif callable(name) and installer is None:
        _add(name.__name__, name)
        return name

    # register("name", fn)
    elif isinstance(name, str) and callable(installer):
        _add(name, installer)
        return installer

    raise TypeError("Invalid usage of @register")

def _add(name: str, fn: SchemaInstaller) -> None:
    # modules can be imported more than once (auto_discover + direct import)
    if any(existing == name for existing, _ in _REGISTRY):
        return
    _REGISTRY.append((name, fn))

def installers() -> List[str]:
    return [name for name, _ in _REGISTRY]

def run_all(engine: Engine):
    """Runs all registered schema installers in order."""
    logger.info("SchemaRegistry: running %d installers", len(_REGISTRY))
    for name, installer_fn in _REGISTRY:
        logger.debug("Applying schema: %s", name)
        installer_fn(engine)

def auto_discover(package: str = "schemas"):
    """Import every module of `package` so their @register decorators run."""
    pkg = importlib.import_module(package)
    for _, module_name, is_pkg in pkgutil.walk_packages(pkg.__path__, prefix=f"{package}."):
        if is_pkg:
            continue
        importlib.import_module(module_name)
        logger.debug("Discovered schema module %s", module_name)
