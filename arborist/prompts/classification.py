"""Placement classification prompts and response schema.

The oracle is asked for exactly one of three decisions for a new item:
AddAsChild (attach to an existing node), CreateParent (start a new category
with the item as its first child) or AddAsRoot (leave at top level).
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from arborist.core.exceptions import ClassificationError
from arborist.core.models import (
    ClassificationDecision,
    ItemContent,
    PlacementDecision,
    SuggestedParent,
    WorkItem,
)


@dataclass
class HierarchyNode:
    """An existing node as presented to the oracle."""

    id: str
    title: str
    description: str | None = None
    vision: str | None = None
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)


class ClassificationResponse(BaseModel):
    """Raw structured oracle output."""

    decision: Literal["AddAsChild", "CreateParent", "AddAsRoot"]
    parent_id: str | None = Field(
        description="ID of the parent node when decision is AddAsChild, null otherwise"
    )
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
    new_parent_title: str | None = None
    new_parent_description: str | None = None

    def to_decision(self) -> ClassificationDecision:
        suggested = None
        if (
            self.decision == PlacementDecision.CREATE_PARENT.value
            and self.new_parent_title
            and self.new_parent_description
        ):
            suggested = SuggestedParent(
                title=self.new_parent_title,
                description=self.new_parent_description,
            )
        return ClassificationDecision(
            decision=PlacementDecision(self.decision),
            parent_id=self.parent_id,
            confidence=self.confidence,
            reasoning=self.reasoning,
            suggested_parent=suggested,
        )


# OpenAI strict mode requires every property listed and no extras
CLASSIFICATION_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "decision": {
            "type": "string",
            "enum": ["AddAsChild", "CreateParent", "AddAsRoot"],
            "description": "The classification decision for item placement",
        },
        "parent_id": {
            "type": ["string", "null"],
            "description": "ID of the parent node when decision is AddAsChild, null otherwise",
        },
        "confidence": {
            "type": "number",
            "description": "Confidence between 0 and 1 for the decision",
        },
        "reasoning": {
            "type": "string",
            "description": "Clear explanation of why this classification was chosen",
        },
        "new_parent_title": {
            "type": ["string", "null"],
            "description": "Title for the new parent when decision is CreateParent",
        },
        "new_parent_description": {
            "type": ["string", "null"],
            "description": "Description for the new parent when decision is CreateParent",
        },
    },
    "required": [
        "decision",
        "parent_id",
        "confidence",
        "reasoning",
        "new_parent_title",
        "new_parent_description",
    ],
    "additionalProperties": False,
}


CLASSIFICATION_SYSTEM = """You are an intelligent classification system that determines optimal placement for new work items in hierarchical task structures.

Analyze the new item and return exactly one of three decisions:

1. **AddAsChild**: Add the item as a child of an existing node
   - Use when the item is a specific implementation detail or subtask
   - The parent represents a broader category that encompasses this work
   - Example: "Create login form" under "User Authentication System"

2. **CreateParent**: Create a new parent category with this item as its first child
   - Use when the item represents a functional domain not covered by the existing structure
   - Several related items would benefit from this new category
   - Example: "Analytics Dashboard" when no analytics category exists

3. **AddAsRoot**: Add the item at the root level
   - Use when the item is a major independent initiative
   - It represents a top-level objective or system component
   - Example: "Launch Mobile Application" as a new product initiative

**Decision Criteria:**
- Semantic similarity: items in the same functional domain belong together
- Scope alignment: children are narrower in scope than their parents
- Architectural layers: group by technical domain (frontend, backend, infrastructure)

**Quality Requirements:**
- Confidence must reflect actual certainty about the placement
- Reasoning must explain the semantic logic behind the decision
- Only use the three decision types above

Respond with JSON matching the provided schema exactly."""


CLASSIFICATION_USER = """
**New Item to Classify:**
Title: {title}
{description_line}
{vision_line}
{hierarchy_section}
**Classification Instructions:**
1. Analyze the semantic meaning and scope of the new item
2. Compare it against the existing hierarchy for a logical placement
3. Consider functional domains (auth, payments, UI, database, etc.)
4. Decide whether it fits as a child, needs a new parent, or stands alone
5. Use a confidence threshold of {threshold}; lower confidence suggests CreateParent or AddAsRoot

**Decision Rules:**
- AddAsChild: there is a clear semantic parent with confidence >= {threshold}
- CreateParent: the item opens a new domain that should gain children
- AddAsRoot: the item is a major independent initiative or has no good fit

Respond with JSON matching the schema exactly. No text outside the JSON structure."""


def build_hierarchy_nodes(items: list[WorkItem]) -> list[HierarchyNode]:
    """Convert a flat item list to oracle nodes with their direct children titles."""
    children: dict[str, list[str]] = {}
    for item in items:
        if item.parent_id:
            children.setdefault(item.parent_id, []).append(item.title)

    return [
        HierarchyNode(
            id=item.id,
            title=item.title,
            description=item.description,
            vision=item.vision,
            parent_id=item.parent_id,
            children=children.get(item.id, []),
        )
        for item in items
    ]


def format_hierarchy(nodes: list[HierarchyNode]) -> str:
    """Render nodes as an indented tree: ``- title (ID: id) - description``.

    Nodes whose parent is not part of ``nodes`` are rendered as roots.
    """
    known = {node.id for node in nodes}
    by_parent: dict[str | None, list[HierarchyNode]] = {}
    for node in nodes:
        parent = node.parent_id if node.parent_id in known else None
        by_parent.setdefault(parent, []).append(node)

    lines: list[str] = []
    visited: set[str] = set()

    def render(node: HierarchyNode, level: int) -> None:
        if node.id in visited:
            return
        visited.add(node.id)
        line = f"{'  ' * level}- {node.title} (ID: {node.id})"
        if node.description:
            line += f" - {node.description}"
        lines.append(line)
        for child in by_parent.get(node.id, []):
            render(child, level + 1)

    for root in by_parent.get(None, []):
        render(root, 0)

    # Nodes only reachable through a parent cycle
    for node in nodes:
        if node.id not in visited:
            render(node, 0)

    return "\n".join(lines)


def build_classification_prompt(
    item: ItemContent,
    nodes: list[HierarchyNode],
    confidence_threshold: float = 0.7,
) -> tuple[str, str]:
    """Build the (system, user) message pair for a classification request."""
    if nodes:
        hierarchy_section = (
            f"\n**Existing Hierarchy:**\n{format_hierarchy(nodes)}\n"
        )
    else:
        hierarchy_section = "**No existing items in the hierarchy.**\n"

    user = CLASSIFICATION_USER.format(
        title=item.title,
        description_line=f"Description: {item.description}" if item.description else "",
        vision_line=f"Vision: {item.vision}" if item.vision else "",
        hierarchy_section=hierarchy_section,
        threshold=confidence_threshold,
    )
    return CLASSIFICATION_SYSTEM, user


def parse_classification_response(payload: str | dict[str, Any]) -> ClassificationDecision:
    """Validate raw oracle output and convert it to a ClassificationDecision.

    Raises:
        ClassificationError: If the payload is not valid JSON or breaks the schema
    """
    try:
        if isinstance(payload, str):
            response = ClassificationResponse.model_validate_json(payload)
        else:
            response = ClassificationResponse.model_validate(payload)
    except ValidationError as e:
        raise ClassificationError(f"Invalid classification response: {e}") from e

    return response.to_decision()
