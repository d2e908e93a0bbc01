"""
Test the conversation interpreter state machine.
"""

import pytest

from convo_engine.core.config import EngineConfig
from convo_engine.core.events import DialogueEvent
from convo_framework.components.dialogue import (
    ChoicesEvent,
    ChoiceView,
    EndedEvent,
    InterpreterState,
    LineEvent,
)
from convo_framework.components.variables import VariableStore
from convo_framework.dialogue.interpreter import DialogueInterpreter
from convo_framework.dialogue.parser import parse_script


def make(script, start="start", **kwargs):
    return DialogueInterpreter(parse_script(script), start, **kwargs)


def test_initial_state(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")

    assert interpreter.state == InterpreterState.AT_LINE
    assert interpreter.conversation_id == "start"
    assert interpreter.line_index == 0
    assert interpreter.current_event is None
    assert interpreter.current_node is None
    assert not interpreter.is_ended


def test_starting_conversation_defaults_to_config(sample_graph):
    assert DialogueInterpreter(sample_graph).conversation_id == "start"

    config = EngineConfig(starting_conversation="left")
    assert DialogueInterpreter(sample_graph, config=config).conversation_id == "left"


def test_end_to_end_right_branch(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")

    assert interpreter.advance() == LineEvent(speaker="Ann", text="Hi")

    assert interpreter.advance() == ChoicesEvent((
        ChoiceView("Go left", True),
        ChoiceView("Go right", True),
    ))
    assert interpreter.state == InterpreterState.AT_CHOICE

    event = interpreter.select_choice(1)
    assert interpreter.get_int("score") == 1
    assert interpreter.conversation_id == "right"
    assert event == LineEvent(speaker="Cid", text="Right it is.")
    assert interpreter.get_bool("visited_right") is True

    assert interpreter.advance() == LineEvent(speaker="Cid", text="Score checked.")
    assert interpreter.advance() == EndedEvent(conversation_id="right")
    assert interpreter.is_ended


def test_end_to_end_left_branch(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")
    interpreter.advance()
    interpreter.advance()

    assert interpreter.select_choice(0) == LineEvent(speaker="Bob", text="Left it is.")
    assert interpreter.get_int("score") == 0

    ended = interpreter.advance()
    assert isinstance(ended, EndedEvent)
    # Stays ended
    assert interpreter.advance() == ended
    assert interpreter.select_choice(0) is None


def test_unresolved_target_ends_instead_of_raising(recorder, event_bus):
    interpreter = make(
        '#Conversation start\n#Choice\n"Into the void" -> void\n',
        event_bus=event_bus,
    )
    interpreter.advance()

    event = interpreter.select_choice(0)

    assert isinstance(event, EndedEvent)
    assert interpreter.state == InterpreterState.ENDED
    assert interpreter.conversation_id == "void"
    ended = [e for e in recorder if e.type == DialogueEvent.CONVERSATION_ENDED]
    assert ended[-1]["reason"] == "missing"


def test_missing_starting_conversation_ends():
    interpreter = make('#Conversation other\n"Hi"\n', start="nowhere")

    assert interpreter.advance() == EndedEvent(conversation_id="nowhere")


def test_empty_conversation_ends():
    interpreter = make("#Conversation start\n")

    assert isinstance(interpreter.advance(), EndedEvent)


def test_skip_scan_never_stops_on_false_condition():
    interpreter = make("""
#Conversation start
"Gold only"
#If gold > 0
"Always"
"Flag only"
#If flag == true
"Either"
#If gold > 0 || flag == true
""")

    shown = []
    event = interpreter.advance()
    while isinstance(event, LineEvent):
        shown.append(event.text)
        event = interpreter.advance()

    assert shown == ["Always"]


def test_conditions_reevaluated_on_every_visit():
    interpreter = make("""
#Conversation start
"One"
"Secret"
#If unlocked == true
"Two"
""")

    assert interpreter.advance().text == "One"
    interpreter.set_bool("unlocked", True)
    assert interpreter.advance().text == "Secret"


def test_host_variables_bootstrap_conditions():
    variables = VariableStore()
    variables.set_int("reputation", 10)
    interpreter = make("""
#Conversation start
"Stranger"
#If reputation < 5
"Friend"
#If reputation >= 5
""", variables=variables)

    assert interpreter.advance().text == "Friend"
    assert interpreter.variables is variables


def test_all_nodes_skipped_ends():
    interpreter = make('#Conversation start\n"Hidden"\n#If never == true\n')

    assert isinstance(interpreter.advance(), EndedEvent)


def test_node_mutations_apply_once_across_revisits():
    interpreter = make("""
#Conversation start
"Welcome"
#Set visits += 1
#Choice
"Again" -> start
"Restart here" ->
""")

    interpreter.advance()
    interpreter.advance()
    assert interpreter.get_int("visits") == 1

    # Jump back into the same conversation twice
    assert interpreter.select_choice(0).text == "Welcome"
    interpreter.advance()
    assert interpreter.select_choice(1).text == "Welcome"
    assert interpreter.conversation_id == "start"

    assert interpreter.get_int("visits") == 1


def test_choice_mutations_apply_on_every_selection():
    interpreter = make("""
#Conversation start
#Choice
"Donate" -> start|gold -= 1
""")
    interpreter.set_int("gold", 3)

    interpreter.advance()
    interpreter.select_choice(0)
    interpreter.select_choice(0)

    assert interpreter.get_int("gold") == 1


def test_locked_choice_is_displayed_but_inert(event_bus, recorder):
    interpreter = make("""
#Conversation start
#Choice
"Buy sword" -> shop|gold -= 100|gold >= 100
"Leave" -> outside
""", event_bus=event_bus)
    interpreter.set_int("gold", 10)

    event = interpreter.advance()
    assert event.choices == (ChoiceView("Buy sword", False), ChoiceView("Leave", True))
    assert event.choices[0].locked

    assert interpreter.select_choice(0) is None
    assert interpreter.get_int("gold") == 10
    assert interpreter.conversation_id == "start"
    assert interpreter.state == InterpreterState.AT_CHOICE

    rejected = [e for e in recorder if e.type == DialogueEvent.CHOICE_REJECTED]
    assert rejected[-1]["reason"] == "locked"


def test_lock_state_evaluated_when_choices_open():
    interpreter = make("""
#Conversation start
"Intro"
#Choice
"Secret" -> secret||key == true
#Conversation secret
"Found it"
""")

    interpreter.advance()
    interpreter.set_bool("key", True)
    event = interpreter.advance()

    assert event.choices[0].unlocked
    assert interpreter.select_choice(0).text == "Found it"


def test_choice_node_mutations_run_before_locks():
    interpreter = make("""
#Conversation start
#Choice
"Use key" -> door||key == true
#Set key = true
#Conversation door
"Opened"
""")

    event = interpreter.advance()

    assert event.choices[0].unlocked


@pytest.mark.parametrize("index", [-1, 2, 99])
def test_out_of_range_selection_ignored(sample_graph, index):
    interpreter = DialogueInterpreter(sample_graph, "start")
    interpreter.advance()
    interpreter.advance()

    assert interpreter.select_choice(index) is None
    assert interpreter.state == InterpreterState.AT_CHOICE
    assert interpreter.get_int("score") == 0


def test_select_choice_while_at_line_ignored(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")
    interpreter.advance()

    assert interpreter.select_choice(0) is None
    assert interpreter.line_index == 0


def test_advance_while_choosing_is_no_op(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")
    interpreter.advance()
    choices = interpreter.advance()

    assert interpreter.advance() is choices
    assert interpreter.line_index == 1
    assert interpreter.state == InterpreterState.AT_CHOICE


def test_choice_order_and_positional_index():
    interpreter = make("""
#Conversation start
#Choice
"First" -> a|picked = 1
"Locked middle" -> b|picked = 2|never == true
"Last" -> c|picked = 3
#Conversation c
"C"
""")

    event = interpreter.advance()
    assert [c.text for c in event.choices] == ["First", "Locked middle", "Last"]

    interpreter.select_choice(2)
    assert interpreter.get_int("picked") == 3
    assert interpreter.conversation_id == "c"


def test_skip_typing_returns_final_text(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")
    assert interpreter.skip_typing() == ""

    interpreter.advance()
    assert interpreter.typewriter.displayed_text == ""
    assert interpreter.skip_typing() == "Hi"
    assert interpreter.typewriter.is_complete
    assert interpreter.state == InterpreterState.AT_LINE
    assert interpreter.line_index == 0

    interpreter.advance()
    assert interpreter.skip_typing() == "1. Go left\n2. Go right"


def test_locked_choices_marked_in_display_text():
    interpreter = make('#Conversation start\n#Choice\n"Open" -> a||key == true\n"Leave" -> b\n')
    interpreter.advance()

    assert interpreter.skip_typing() == "1. Open (locked)\n2. Leave"


def test_reveal_restarts_on_each_event(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start", config=EngineConfig(chars_per_second=10))
    interpreter.advance()
    interpreter.typewriter.tick(0.1)
    assert interpreter.typewriter.displayed_text == "H"

    interpreter.advance()
    assert interpreter.typewriter.displayed_text == ""
    assert interpreter.typewriter.full_text.startswith("1. Go left")


def test_interpreters_sharing_a_graph_are_independent():
    graph = parse_script('#Conversation start\n"Hello"\n#Set greeted += 1\n')

    first = DialogueInterpreter(graph, "start")
    second = DialogueInterpreter(graph, "start")
    first.advance()
    second.advance()

    assert first.get_int("greeted") == 1
    assert second.get_int("greeted") == 1
    assert first.variables is not second.variables
    assert graph.get("start")[0].has_executed is False


def test_current_node_tracks_position(sample_graph):
    interpreter = DialogueInterpreter(sample_graph, "start")
    interpreter.advance()
    assert interpreter.current_node.text == "Hi"

    interpreter.advance()
    assert interpreter.current_node.is_choice_node
    assert interpreter.choices == interpreter.current_event.choices


def test_published_event_sequence(sample_graph, event_bus, recorder):
    interpreter = DialogueInterpreter(sample_graph, "start", event_bus=event_bus)

    interpreter.advance()
    interpreter.advance()
    interpreter.select_choice(1)

    assert [e.type for e in recorder] == [
        DialogueEvent.CONVERSATION_ENTERED,
        DialogueEvent.LINE_SHOWN,
        DialogueEvent.CHOICES_SHOWN,
        DialogueEvent.VARIABLES_CHANGED,
        DialogueEvent.CHOICE_SELECTED,
        DialogueEvent.CONVERSATION_ENTERED,
        DialogueEvent.VARIABLES_CHANGED,
        DialogueEvent.LINE_SHOWN,
    ]
    line = recorder[1]
    assert (line["speaker"], line["text"], line["conversation_id"], line["index"]) == ("Ann", "Hi", "start", 0)
    selected = recorder[4]
    assert (selected["index"], selected["text"], selected["target"]) == (1, "Go right", "right")
    assert recorder[3]["expressions"] == ["score += 1"]


def test_malformed_mutation_does_not_publish_change(event_bus, recorder):
    interpreter = make('#Conversation start\n"Hi"\n#Set gold ++\n', event_bus=event_bus)

    interpreter.advance()

    assert DialogueEvent.VARIABLES_CHANGED not in [e.type for e in recorder]
    assert interpreter.get_int("gold") == 0
