"""Object registry mapping object names to module classes.

Manifesto:
    The engine addresses objects by name. Call mode needs the class behind
    a name without guessing at import paths, so classes register themselves
    (``@module_object``) under a normalized key and the entry point looks
    them up here.

Tags:
    modrun, framework, registry, object-discovery, lookup

Doc-Types:
    api-reference
"""

from modrun.core.errors import ObjectNotFoundError
from modrun.core.settings import get_settings
from modrun.framework.logging import get_logger
from modrun.framework.schema import ModuleObject

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "main"

_registry: dict[str, ModuleObject] = {}


def normalize_classname(qualified_name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """
    Map a dotted class name to its object key.

    The namespace package prefix is stripped and the remaining dots become
    colons:

        main.Ci            -> Ci
        main.ci.tools.Lint -> ci:tools:Lint
        other.Foo          -> other:Foo
    """
    name = qualified_name
    if namespace:
        if name == namespace:
            name = ""
        elif name.startswith(namespace + "."):
            name = name[len(namespace) + 1 :]
    return name.strip(".").replace(".", ":")


def register_object(cls: type, name: str | None = None, namespace: str | None = None) -> type:
    """
    Register ``cls`` under ``name`` or its normalized class name.

    The namespace defaults to the configured ``module_namespace``.
    """
    if namespace is None:
        namespace = get_settings().module_namespace
    key = name or normalize_classname(f"{cls.__module__}.{cls.__qualname__}", namespace)
    if key in _registry:
        raise ValueError(f"Object '{key}' is already registered")
    _registry[key] = ModuleObject(key, cls)
    logger.debug("object_registered", name=key, cls=cls.__qualname__)
    return cls


def get_object(name: str) -> ModuleObject:
    """Get a registered object by name."""
    if name not in _registry:
        raise ObjectNotFoundError(name, list_object_names())
    return _registry[name]


def list_objects() -> list[ModuleObject]:
    """All registered objects, sorted by name."""
    return [_registry[key] for key in sorted(_registry)]


def list_object_names() -> list[str]:
    """Registered object names, sorted."""
    return sorted(_registry)


def clear_registry() -> None:
    """Clear registry (for testing)."""
    _registry.clear()
