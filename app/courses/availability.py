"""
Access-restriction trees for course modules

A module's `availability` column holds a JSON tree such as

    {"op": "&", "c": [{"type": "group", "id": 5}, {"type": "date", ...}], "showc": [true, true]}

parse_availability() turns it into Leaf / Combinator nodes and is the only
place that looks at raw keys. is_satisfied() evaluates only the group
conditions of a tree against the groups a user belongs to; every other
condition type counts as met.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Optional, Tuple, Union

GROUP_CONDITION = "group"


class Operator(str, Enum):
    AND = "&"
    OR = "|"
    NAND = "!&"
    NOR = "!|"


class AvailabilityParseError(ValueError):
    """Raised when an availability tree is malformed"""


@dataclass(frozen=True)
class Leaf:
    condition_type: str
    group_id: Optional[int] = None

    @property
    def is_group(self) -> bool:
        return self.condition_type == GROUP_CONDITION


@dataclass(frozen=True)
class Combinator:
    operator: Operator
    children: Tuple["ExpressionNode", ...] = ()

    def has_group_leaf(self) -> bool:
        """True when a direct child is a group condition"""
        return any(isinstance(child, Leaf) and child.is_group for child in self.children)


ExpressionNode = Union[Leaf, Combinator]


# ==================== PARSER ====================

def parse_availability(raw: Any) -> ExpressionNode:
    """
    Parse a stored availability tree

    Raises:
        AvailabilityParseError: invalid JSON, wrong shapes, missing fields
            or an unknown operator
    """
    try:
        if isinstance(raw, (str, bytes)):
            raw = json.loads(raw)
        return _parse_node(raw)
    except RecursionError as e:
        raise AvailabilityParseError("Availability tree is nested too deeply") from e
    except AvailabilityParseError:
        raise
    except ValueError as e:
        raise AvailabilityParseError(f"Invalid availability JSON: {e}") from e


def _parse_node(node) -> ExpressionNode:
    if not isinstance(node, dict):
        raise AvailabilityParseError(f"Expected an object, got {type(node).__name__}")

    if "op" not in node:
        return _parse_leaf(node)

    try:
        operator = Operator(node["op"])
    except ValueError:
        raise AvailabilityParseError(f"Unknown operator: {node['op']!r}")

    children = node.get("c")
    if not isinstance(children, list):
        raise AvailabilityParseError("Combinator 'c' must be a list")

    return Combinator(operator, tuple(_parse_node(child) for child in children))


def _parse_leaf(node: dict) -> Leaf:
    condition_type = node.get("type")
    if not isinstance(condition_type, str):
        raise AvailabilityParseError("Condition is missing its 'type'")

    group_id = node.get("id")
    if group_id is not None and (isinstance(group_id, bool) or not isinstance(group_id, int)):
        raise AvailabilityParseError(f"Condition id must be an integer, got {group_id!r}")

    return Leaf(condition_type, group_id)


# ==================== EVALUATOR ====================

def is_satisfied(node: ExpressionNode, user_groups: AbstractSet[int]) -> bool:
    """
    Decide whether the group conditions in `node` let the user through

    AND/OR both reduce to "some group condition is met" and NAND/NOR to its
    negation. Non-group siblings never change the result, and a combinator
    with no group condition (directly, or one level down) is unrestricted.
    """
    if isinstance(node, Leaf):
        return _leaf_satisfied(node, user_groups)

    has_group_restriction = False
    group_condition_met = False

    for child in node.children:
        if isinstance(child, Leaf):
            if child.is_group:
                has_group_restriction = True
                if _leaf_satisfied(child, user_groups):
                    group_condition_met = True
        elif child.has_group_leaf():
            has_group_restriction = True
            if is_satisfied(child, user_groups):
                group_condition_met = True

    if not has_group_restriction:
        return True

    if node.operator in (Operator.NAND, Operator.NOR):
        return not group_condition_met
    return group_condition_met


def _leaf_satisfied(leaf: Leaf, user_groups: AbstractSet[int]) -> bool:
    if not leaf.is_group:
        return True
    if leaf.group_id is None:
        # "member of any group"
        return len(user_groups) > 0
    return leaf.group_id in user_groups
