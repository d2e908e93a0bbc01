"""
Dialogue module - branching conversation scripts.

Provides:
- Script parsing into a conversation graph
- Condition evaluation and variable mutations
- Conversation interpreter (advance / select choice)
- Typewriter text reveal
- Graph validation for script authors
"""

from convo_framework.dialogue.parser import (
    ConversationGraph,
    ParseDiagnostic,
    ScriptParser,
    parse_script,
)
from convo_framework.dialogue.expressions import (
    apply_mutation,
    apply_mutations,
    conjoin_conditions,
    evaluate_condition,
    is_valid_condition,
    is_valid_mutation,
)
from convo_framework.dialogue.interpreter import DialogueInterpreter
from convo_framework.dialogue.typewriter import Typewriter
from convo_framework.dialogue.validator import GraphIssue, validate_graph

__all__ = [
    "ConversationGraph",
    "ParseDiagnostic",
    "ScriptParser",
    "parse_script",
    "apply_mutation",
    "apply_mutations",
    "conjoin_conditions",
    "evaluate_condition",
    "is_valid_condition",
    "is_valid_mutation",
    "DialogueInterpreter",
    "Typewriter",
    "GraphIssue",
    "validate_graph",
]
