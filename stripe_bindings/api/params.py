"""Form encoding of nested request parameters.

Parameters are first converted into a closed value tree (Scalar, Array,
Mapping) and the tree is then flattened into bracketed form pairs:

    {"card": {"number": "4242"}, "expand": ["customer"]}
    -> card%5Bnumber%5D=4242&expand%5B%5D=customer

Encoding never raises. Values that have no string form (None, arbitrary
objects, undecodable bytes) are dropped together with their key.
"""

from collections.abc import Iterator
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from urllib.parse import quote


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class Array:
    items: tuple["ParamNode", ...]


@dataclass(frozen=True)
class Mapping:
    items: tuple[tuple[str, "ParamNode"], ...]


ParamNode = Scalar | Array | Mapping


def to_param_tree(value) -> ParamNode | None:
    """Convert an arbitrary Python value into a parameter tree node.

    Returns None for values that cannot be represented.
    """
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return Scalar("true" if value else "false")
    if isinstance(value, str):
        return Scalar(value)
    if isinstance(value, (int, float, Decimal)):
        return Scalar(str(value))
    if isinstance(value, bytes):
        try:
            return Scalar(value.decode("utf-8"))
        except UnicodeDecodeError:
            return None
    if isinstance(value, MappingABC):
        children = []
        for key, child in value.items():
            node = to_param_tree(child)
            if node is not None:
                children.append((str(key), node))
        return Mapping(tuple(children))
    if isinstance(value, (list, tuple)):
        nodes = (to_param_tree(item) for item in value)
        return Array(tuple(node for node in nodes if node is not None))
    return None


def _pairs(prefix: str, node: ParamNode) -> Iterator[tuple[str, str]]:
    if isinstance(node, Scalar):
        yield prefix, node.text
    elif isinstance(node, Mapping):
        for key, child in node.items:
            yield from _pairs(f"{prefix}[{key}]" if prefix else key, child)
    else:
        for index, item in enumerate(node.items):
            if isinstance(item, Scalar):
                yield f"{prefix}[]", item.text
            else:
                # Containers inside arrays keep their index so fields stay grouped
                yield from _pairs(f"{prefix}[{index}]", item)


def query_pairs(parameters) -> list[tuple[str, str]]:
    """Flatten parameters into (bracketed key, value) pairs, unescaped."""
    tree = to_param_tree(parameters)
    if not isinstance(tree, Mapping):
        return []
    return list(_pairs("", tree))


def _escape(text: str) -> str:
    return quote(text, safe="")


def query_string(parameters) -> str:
    """Form-encode a nested parameter mapping. Empty input gives ""."""
    return "&".join(f"{_escape(key)}={_escape(value)}" for key, value in query_pairs(parameters))
