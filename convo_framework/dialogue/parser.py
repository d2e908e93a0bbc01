"""
Dialogue parser - converts dialogue scripts into a conversation graph.

Supports a line-oriented text format, one directive per line:

```
-- comments start with two dashes
#Conversation start
Character_Ann
"Hi there."
#Set met_ann = true
#Choice
"Go left" -> left
"Go right" -> right|score += 1
"Open the vault" -> vault||gold >= 100

#Conversation left
"You went left."
#If score > 0
```

Choice lines read `text -> target|mutations|condition`. Mutations are
separated by `;`. Segments may be left empty, so `vault||gold >= 100`
has no mutations. Everything after the second `|` is the condition,
which may contain its own `||`.

The parser is lenient: anything it does not understand is skipped and
reported in `diagnostics`. Choice targets are not checked here; the
interpreter resolves them when a choice is followed.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from convo_framework.components.dialogue import Choice, DialogueNode
from convo_framework.dialogue.expressions import conjoin_conditions


@dataclass
class ParseDiagnostic:
    """A script line the parser skipped or only partly understood."""
    line_number: int
    line: str
    message: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.message}: {self.line!r}"


@dataclass
class ConversationGraph:
    """Conversation id -> ordered dialogue nodes."""
    conversations: dict[str, list[DialogueNode]] = field(default_factory=dict)

    def get(self, conversation_id: Optional[str]) -> Optional[list[DialogueNode]]:
        """Get a conversation's nodes, None if it does not exist."""
        if conversation_id is None:
            return None
        return self.conversations.get(conversation_id)

    @property
    def node_count(self) -> int:
        return sum(len(nodes) for nodes in self.conversations.values())

    def copy(self) -> ConversationGraph:
        """Deep copy, runtime flags included."""
        return copy.deepcopy(self)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self.conversations

    def __iter__(self) -> Iterator[str]:
        return iter(self.conversations)

    def __len__(self) -> int:
        return len(self.conversations)


@dataclass
class _ConversationCursor:
    """Attachment points inside the conversation being parsed."""
    conversation_id: str
    nodes: list[DialogueNode]
    last_node: Optional[int] = None
    last_choice_node: Optional[int] = None

    def append(self, node: DialogueNode) -> None:
        self.nodes.append(node)
        self.last_node = len(self.nodes) - 1
        if node.has_choice_container:
            self.last_choice_node = self.last_node


class ScriptParser:
    """
    Parses dialogue scripts from the line-oriented text format.
    """

    COMMENT_PREFIX = '--'
    SPEAKER_PREFIX = 'Character_'
    QUOTE = '"'
    ARROW = '->'
    SEGMENT_SEPARATOR = '|'
    MUTATION_SEPARATOR = ';'

    CONVERSATION = '#Conversation'
    CHOICE = '#Choice'
    SET = '#Set'
    IF = '#If'
    SET_FLAG = '#SetFlag'
    REQUIRES = '#Requires'
    REQUIRES_NOT = '#RequiresNot'

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.diagnostics: list[ParseDiagnostic] = []

    def parse(self, text: str) -> ConversationGraph:
        """Parse a dialogue script string."""
        self.diagnostics = []
        graph = ConversationGraph()
        cursor: Optional[_ConversationCursor] = None
        speaker = ""

        for line_number, raw_line in enumerate(text.split('\n'), start=1):
            line = raw_line.strip()

            # Skip empty lines and comments
            if not line or line.startswith(self.COMMENT_PREFIX):
                continue

            parts = line.split(None, 1)
            keyword = parts[0]
            argument = parts[1].strip() if len(parts) > 1 else ""

            # Conversation header
            if keyword == self.CONVERSATION:
                cursor = self._open_conversation(graph, argument, line_number, line)
                continue

            # Speaker
            if line.startswith(self.SPEAKER_PREFIX):
                speaker = line[len(self.SPEAKER_PREFIX):].strip()
                continue

            # Everything below needs an open conversation
            is_line = self._is_quoted(line)
            if cursor is None:
                self._report(line_number, line, "outside of any conversation")
                continue

            # Dialogue line
            if is_line:
                cursor.append(DialogueNode(speaker=speaker, text=line[1:-1]))
                continue

            # Choice node
            if keyword == self.CHOICE:
                cursor.append(DialogueNode(choices=[]))
                continue

            # Choice option
            if self.ARROW in line:
                self._add_choice(cursor, line, line_number)
                continue

            # Node modifiers
            if keyword == self.SET:
                changes = self._split_mutations(argument)
                if not changes:
                    self._report(line_number, line, "#Set without expressions")
                    continue
                self._add_mutations(cursor, changes, line_number, line)
                continue

            if keyword == self.SET_FLAG:
                if not argument:
                    self._report(line_number, line, "#SetFlag without a flag name")
                    continue
                self._add_mutations(cursor, [f"{argument} = true"], line_number, line)
                continue

            if keyword == self.IF:
                if not argument:
                    self._report(line_number, line, "#If without a condition")
                    continue
                self._add_condition(cursor, argument, line_number, line)
                continue

            if keyword == self.REQUIRES:
                if not argument:
                    self._report(line_number, line, "#Requires without a flag name")
                    continue
                self._add_condition(cursor, f"{argument} == true", line_number, line)
                continue

            if keyword == self.REQUIRES_NOT:
                if not argument:
                    self._report(line_number, line, "#RequiresNot without a flag name")
                    continue
                self._add_condition(cursor, f"{argument} == false", line_number, line)
                continue

            if keyword.startswith('#'):
                self._report(line_number, line, f"unknown directive {keyword}")
            else:
                self._report(line_number, line, "unrecognized line")

        self.logger.info(
            f"Parsed {len(graph)} conversations, "
            f"{graph.node_count} nodes, "
            f"{len(self.diagnostics)} diagnostics."
        )
        return graph

    def _open_conversation(
        self,
        graph: ConversationGraph,
        conversation_id: str,
        line_number: int,
        line: str,
    ) -> Optional[_ConversationCursor]:
        if not conversation_id:
            self._report(line_number, line, "#Conversation without an id")
            return None

        if conversation_id in graph:
            self._report(line_number, line, f"conversation {conversation_id!r} redefined")

        nodes: list[DialogueNode] = []
        graph.conversations[conversation_id] = nodes
        return _ConversationCursor(conversation_id, nodes)

    def _is_quoted(self, line: str) -> bool:
        return len(line) >= 2 and line.startswith(self.QUOTE) and line.endswith(self.QUOTE)

    def _split_mutations(self, text: str) -> list[str]:
        return [
            expression.strip()
            for expression in text.split(self.MUTATION_SEPARATOR)
            if expression.strip()
        ]

    def _add_choice(self, cursor: _ConversationCursor, line: str, line_number: int) -> None:
        if cursor.last_choice_node is None:
            self._report(line_number, line, "choice without a preceding #Choice")
            return

        left, _, right = line.partition(self.ARROW)
        # At most three segments: the condition keeps any `||` it contains
        segments = right.split(self.SEGMENT_SEPARATOR, 2)

        target = segments[0].strip() or None
        changes = self._split_mutations(segments[1]) if len(segments) > 1 else []
        condition = segments[2].strip() if len(segments) > 2 else ""

        choice = Choice(
            choice_text=left.strip().strip(self.QUOTE),
            target_conversation_id=target,
            variable_changes=changes,
            required_condition=condition or None,
        )
        cursor.nodes[cursor.last_choice_node].choices.append(choice)

    def _add_mutations(
        self,
        cursor: _ConversationCursor,
        changes: list[str],
        line_number: int,
        line: str,
    ) -> None:
        if cursor.last_node is None:
            self._report(line_number, line, "no node to attach to")
            return
        cursor.nodes[cursor.last_node].variable_changes.extend(changes)

    def _add_condition(
        self,
        cursor: _ConversationCursor,
        condition: str,
        line_number: int,
        line: str,
    ) -> None:
        if cursor.last_node is None:
            self._report(line_number, line, "no node to attach to")
            return
        node = cursor.nodes[cursor.last_node]
        node.required_condition = conjoin_conditions(node.required_condition, condition)

    def _report(self, line_number: int, line: str, message: str) -> None:
        diagnostic = ParseDiagnostic(line_number, line, message)
        self.diagnostics.append(diagnostic)
        self.logger.warning(f"Dialogue script {diagnostic}")


def parse_script(text: str) -> ConversationGraph:
    """Parse a dialogue script string with a fresh parser."""
    return ScriptParser().parse(text)
