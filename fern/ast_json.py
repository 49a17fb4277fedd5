"""JSON serialization/deserialization for the Fern AST.

Nodes become dicts tagged with their class name, e.g.
``{"type": "Ident", "name": "a"}``; lists of nodes become JSON arrays.
The conversion round-trips every node type.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Type

from . import ast as fern_ast
from .ast import Node


NODE_TYPES: Dict[str, Type[Node]] = {
    cls.__name__: cls
    for cls in vars(fern_ast).values()
    if isinstance(cls, type) and issubclass(cls, Node) and cls is not Node
}


def ast_to_obj(node: Any) -> Any:
    if node is None or isinstance(node, (bool, int, str)):
        return node
    if isinstance(node, (list, tuple)):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Node):
        obj = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    return cls(**{f.name: ast_from_obj(obj[f.name]) for f in fields(cls)})
