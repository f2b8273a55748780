"""
modrun client - lazy query paths over the engine session.
"""

from modrun.client.client import Client, connect
from modrun.client.objects import (
    AbstractObject,
    Container,
    Directory,
    File,
    Function,
    FunctionCall,
    FunctionCallArgValue,
    IdAble,
    Module,
    Service,
    Terminal,
    TypeDef,
    TypeDefKind,
)
from modrun.client.query import Json, QueryChain, Selection
from modrun.client.transport import Transport

__all__ = [
    "Client",
    "connect",
    "Transport",
    "Json",
    "QueryChain",
    "Selection",
    "AbstractObject",
    "IdAble",
    "TypeDefKind",
    "Container",
    "Directory",
    "File",
    "Service",
    "Terminal",
    "Module",
    "TypeDef",
    "Function",
    "FunctionCall",
    "FunctionCallArgValue",
]
