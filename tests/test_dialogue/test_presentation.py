import pytest

from runtime.core.actions import Action
from runtime.ui.surface import WidgetSurface
from dialogue.errors import NoTreeAssignedError
from dialogue.models import AssignmentRecord
from dialogue.presentation import PresentationAdapter


class QueuedInput:
    """Input source fed by the test."""

    def __init__(self):
        self.pending = []

    def press(self, *actions):
        self.pending.extend(actions)

    def poll(self):
        actions, self.pending = self.pending, []
        return actions


@pytest.fixture
def inputs():
    return QueuedInput()


@pytest.fixture
def surface():
    return WidgetSurface()


@pytest.fixture
def adapter(engine, surface, inputs):
    return PresentationAdapter(engine, surface, inputs)


def tick(adapter, inputs, *actions, dt=0.0):
    inputs.press(*actions)
    adapter.update(dt)


def to_options(adapter, inputs, assignment):
    adapter.begin(assignment)
    tick(adapter, inputs, dt=1.0)
    tick(adapter, inputs, Action.CONFIRM)


def test_container_hidden_until_begin(adapter, surface):
    assert not surface.container.is_shown

    adapter.sync()
    assert not surface.container.visible


def test_begin_shows_npc_panel(adapter, surface, assignment):
    adapter.begin(assignment)

    assert surface.container.visible
    assert surface.npc_panel.is_shown
    assert not surface.player_panel.is_shown
    assert surface.npc_name.text == "Crazy Cap"
    assert surface.npc_text.text == ""


def test_text_follows_reveal(adapter, surface, inputs, assignment, engine):
    adapter.begin(assignment)

    tick(adapter, inputs, dt=engine.config.reveal_char_delay * 2.5)
    assert surface.npc_text.text == "He"

    tick(adapter, inputs, dt=1.0)
    assert surface.npc_text.text == "Hello Bob"


def test_confirm_on_npc_turn_advances(adapter, surface, inputs, assignment, engine):
    adapter.begin(assignment)
    tick(adapter, inputs, dt=1.0)

    tick(adapter, inputs, Action.CONFIRM)

    assert engine.node_data.is_player_turn
    assert surface.player_panel.is_shown
    assert not surface.npc_panel.is_shown
    assert surface.visible_option_texts == ["Yes", "No", "Maybe"]
    assert surface.selected_index == 0


def test_options_laid_out_downwards(adapter, surface, inputs, assignment):
    to_options(adapter, inputs, assignment)

    assert [label.rect.y for label in surface.option_labels] == [20, 0, -20]


def test_scroll_down_clamps(adapter, surface, inputs, assignment):
    to_options(adapter, inputs, assignment)

    highlighted = []
    for _ in range(3):
        tick(adapter, inputs, Action.SCROLL_DOWN)
        highlighted.append(surface.selected_index)

    assert highlighted == [1, 2, 2]

    tick(adapter, inputs, Action.SCROLL_UP)
    assert surface.selected_index == 1


def test_no_option_widgets_leak_across_cycle(adapter, surface, inputs, assignment):
    to_options(adapter, inputs, assignment)
    tick(adapter, inputs, Action.SCROLL_DOWN, Action.SCROLL_DOWN)

    # "Maybe" loops back round to the same options
    tick(adapter, inputs, Action.CONFIRM)
    assert surface.visible_option_texts == []

    tick(adapter, inputs, dt=1.0)
    tick(adapter, inputs, Action.CONFIRM)

    assert len(surface.created_options) == 6
    assert surface.visible_option_texts == ["Yes", "No", "Maybe"]
    assert sum(1 for label in surface.created_options if label.disposed) == 3
    assert surface.selected_index == 0


def test_pause_indicator_and_scroll_ignored(adapter, surface, inputs, assignment, engine):
    to_options(adapter, inputs, assignment)
    tick(adapter, inputs, Action.CONFIRM)  # "Yes"
    tick(adapter, inputs, dt=1.0)

    tick(adapter, inputs, Action.CONFIRM)
    assert engine.node_data.action_paused
    assert surface.pause_indicator.is_shown

    tick(adapter, inputs, Action.SCROLL_DOWN, Action.CONFIRM)
    assert engine.node_data.action_paused
    assert engine.node_data.active_line_index == 0

    engine.confirm_action("item")
    tick(adapter, inputs, Action.CONFIRM)

    assert not surface.pause_indicator.is_shown
    assert engine.node_data.active_line_index == 1


def test_end_hides_container(adapter, surface, inputs, assignment):
    to_options(adapter, inputs, assignment)
    tick(adapter, inputs, Action.SCROLL_DOWN, Action.CONFIRM)  # "No"
    tick(adapter, inputs, dt=1.0)

    tick(adapter, inputs, Action.CONFIRM)

    assert not surface.container.visible
    assert surface.option_labels == []


def test_skip_finishes_line(adapter, surface, inputs, assignment):
    adapter.begin(assignment)

    tick(adapter, inputs, Action.SKIP)

    assert surface.npc_text.text == "Hello Bob"


def test_begin_without_tree(adapter, surface):
    with pytest.raises(NoTreeAssignedError):
        adapter.begin(AssignmentRecord(identity="Nobody"))

    assert not surface.container.visible


def test_input_ignored_when_idle(adapter, inputs, engine):
    tick(adapter, inputs, Action.CONFIRM, Action.SCROLL_DOWN)

    assert engine.is_idle
