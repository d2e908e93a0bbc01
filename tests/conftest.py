import os
import sys
import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())


SAMPLE_SCRIPT = """
-- Sample used across the dialogue tests
#Conversation start
Character_Ann
"Hi"
#Choice
"Go left" -> left
"Go right" -> right|score += 1

#Conversation left
Character_Bob
"Left it is."

#Conversation right
Character_Cid
"Right it is."
#Set visited_right = true
"Score checked."
#If score >= 1
"""


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from convo_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def variables():
    """Empty VariableStore for each test."""
    from convo_framework.components.variables import VariableStore
    return VariableStore()


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT


@pytest.fixture
def sample_graph(sample_script):
    """Parsed sample script."""
    from convo_framework.dialogue.parser import parse_script
    return parse_script(sample_script)


@pytest.fixture
def recorder(event_bus):
    """Subscribe to every DialogueEvent and collect what gets published."""
    received = []
    event_bus.subscribe_all(received.append)
    return received
