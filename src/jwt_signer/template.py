"""
Claim templates.

A claim template is the pre-substitution shape of the claims embedded in every
issued token. It is built once from configuration and shared, read-only, by
all requests. Each node is one of:

- ``StringLeaf``: a string which may reference placeholders
- ``ScalarLeaf``: a boolean or number copied into the claims verbatim
- ``NestedNode``: a mapping of claim names to child nodes
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

from jwt_signer.errors import ConfigurationError

Scalar = Union[bool, int, float]


@dataclass(frozen=True)
class StringLeaf:
    template: str


@dataclass(frozen=True)
class ScalarLeaf:
    value: Scalar


@dataclass(frozen=True)
class NestedNode:
    children: Mapping[str, "ClaimNode"] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate the shared template.
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def __len__(self) -> int:
        return len(self.children)

    def to_raw(self) -> Dict[str, Any]:
        """Render the template back into plain dictionaries."""
        raw: Dict[str, Any] = {}
        for key, node in self.children.items():
            if isinstance(node, StringLeaf):
                raw[key] = node.template
            elif isinstance(node, ScalarLeaf):
                raw[key] = node.value
            else:
                raw[key] = node.to_raw()
        return raw


ClaimNode = Union[StringLeaf, ScalarLeaf, NestedNode]

# The root of a template is a nested node which is allowed to be empty.
ClaimTemplate = NestedNode


def build_template(raw: Mapping[str, Any]) -> ClaimTemplate:
    """
    Build a claim template from JSON-shaped data.

    Args:
        raw: Mapping of claim names to strings, booleans, numbers or
            further mappings

    Returns:
        ClaimTemplate: The immutable template

    Raises:
        ConfigurationError: If a key or value is malformed
    """
    if raw is None:
        return NestedNode()
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"malformed claims: expected a mapping, got {type(raw).__name__}"
        )
    return NestedNode(_build_children(raw, path=()))


def _build_children(raw: Mapping[str, Any], path: Tuple[str, ...]) -> Dict[str, ClaimNode]:
    children: Dict[str, ClaimNode] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            where = f" under {'.'.join(path)}" if path else ""
            raise ConfigurationError(f"malformed claims: no key found{where}")
        children[key] = _build_node(key, value, path + (key,))
    return children


def _build_node(key: str, value: Any, path: Tuple[str, ...]) -> ClaimNode:
    name = ".".join(path)

    # bool is checked before the numeric types since it is a subclass of int
    if isinstance(value, bool):
        return ScalarLeaf(value)
    if isinstance(value, str):
        if value == "":
            raise ConfigurationError(f"malformed claim {name}: value is empty")
        return StringLeaf(value)
    if isinstance(value, (int, float)):
        return ScalarLeaf(value)
    if isinstance(value, Mapping):
        if not value:
            raise ConfigurationError(f"malformed claim {name}: no value")
        return NestedNode(_build_children(value, path))
    if value is None:
        raise ConfigurationError(f"malformed claim {name}: no value")

    raise ConfigurationError(
        f"malformed claim {name}: unsupported value type {type(value).__name__}"
    )


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise ConfigurationError(f"malformed claims: duplicate key {key}")
        obj[key] = value
    return obj


def load_claims_json(text: str) -> ClaimTemplate:
    """Build a claim template from a JSON object, rejecting duplicate keys."""
    if not text or not text.strip():
        return NestedNode()
    try:
        raw = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"malformed claims: invalid JSON: {e}") from e
    return build_template(raw)
