"""
Static conversation graph checks for script authors.

The interpreter tolerates every problem reported here: missing targets
end the conversation, bad expressions lock content. These checks surface
the same problems before anyone plays through the script.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from convo_framework.components.dialogue import DialogueNode
from convo_framework.dialogue.expressions import is_valid_condition, is_valid_mutation
from convo_framework.dialogue.parser import ConversationGraph

ERROR = "ERROR"
WARNING = "WARNING"


@dataclass(frozen=True)
class GraphIssue:
    """A problem found in a parsed graph, with where it was found."""
    severity: str
    code: str
    message: str
    context: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        context = " ".join(f"{key}={value}" for key, value in self.context.items())
        suffix = f" ({context})" if context else ""
        return f"[{self.severity}] {self.code}: {self.message}{suffix}"


def validate_graph(
    graph: ConversationGraph,
    starting_conversation: Optional[str] = None,
) -> list[GraphIssue]:
    """
    Report structural and expression problems in a parsed graph.

    Args:
        graph: Parsed conversations
        starting_conversation: When given, also check it exists and report
            conversations no choice path reaches from it
    """
    issues: list[GraphIssue] = []

    if starting_conversation is not None and starting_conversation not in graph:
        issues.append(GraphIssue(
            ERROR,
            "MISSING_START",
            "Starting conversation does not exist.",
            {"conversation": starting_conversation},
        ))

    for conversation_id, nodes in graph.conversations.items():
        if not nodes:
            issues.append(GraphIssue(
                WARNING,
                "EMPTY_CONVERSATION",
                "Conversation has no nodes.",
                {"conversation": conversation_id},
            ))
        for index, node in enumerate(nodes):
            _check_node(graph, conversation_id, index, node, issues)

    if starting_conversation is not None and starting_conversation in graph:
        reachable = _reachable_from(graph, starting_conversation)
        for conversation_id in graph:
            if conversation_id not in reachable:
                issues.append(GraphIssue(
                    WARNING,
                    "UNREACHABLE_CONVERSATION",
                    "No choice leads to this conversation.",
                    {"conversation": conversation_id},
                ))

    return issues


def _check_node(
    graph: ConversationGraph,
    conversation_id: str,
    index: int,
    node: DialogueNode,
    issues: list[GraphIssue],
) -> None:
    where = {"conversation": conversation_id, "node": str(index)}

    if not is_valid_condition(node.required_condition):
        issues.append(GraphIssue(
            ERROR,
            "BAD_CONDITION",
            "Node condition is malformed and will always fail.",
            {**where, "condition": node.required_condition},
        ))
    for expression in node.variable_changes:
        if not is_valid_mutation(expression):
            issues.append(GraphIssue(
                ERROR,
                "BAD_MUTATION",
                "Node mutation is malformed and will be ignored.",
                {**where, "expression": expression},
            ))

    if node.has_choice_container and not node.choices:
        issues.append(GraphIssue(
            WARNING,
            "EMPTY_CHOICE",
            "#Choice has no options and will show as an empty line.",
            where,
        ))

    for choice_index, choice in enumerate(node.choices or []):
        choice_where = {**where, "choice": str(choice_index)}
        target = choice.target_conversation_id
        if target is not None and target not in graph:
            issues.append(GraphIssue(
                ERROR,
                "MISSING_TARGET",
                "Choice targets a conversation that does not exist.",
                {**choice_where, "target": target},
            ))
        if not is_valid_condition(choice.required_condition):
            issues.append(GraphIssue(
                ERROR,
                "BAD_CONDITION",
                "Choice condition is malformed; the choice will stay locked.",
                {**choice_where, "condition": choice.required_condition},
            ))
        for expression in choice.variable_changes:
            if not is_valid_mutation(expression):
                issues.append(GraphIssue(
                    ERROR,
                    "BAD_MUTATION",
                    "Choice mutation is malformed and will be ignored.",
                    {**choice_where, "expression": expression},
                ))


def _reachable_from(graph: ConversationGraph, start: str) -> set[str]:
    seen = {start}
    queue = deque([start])
    while queue:
        conversation_id = queue.popleft()
        for node in graph.get(conversation_id) or []:
            for choice in node.choices or []:
                target = choice.target_conversation_id
                if target is not None and target in graph and target not in seen:
                    seen.add(target)
                    queue.append(target)
    return seen
