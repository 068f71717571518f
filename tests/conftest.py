import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure runtime/dialogue packages can be imported
sys.path.append(os.getcwd())


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests so nothing touches a display or audio device.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.key'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)

        yield


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from runtime.core.events import EventBus
    return EventBus()


@pytest.fixture
def world():
    from dialogue.models import WorldState
    return WorldState()


@pytest.fixture
def cap_tree():
    """
    Small tree exercising every stock tag.

    0 (itemLookUp) -> 1 player [Yes -> 2, No -> 3, Maybe -> 4]
    2 (item, two lines) -> end
    3 (insanity) -> end
    4 -> 1 (loops back)
    16, 17: alternate entry points
    """
    from dialogue.models import DialogueNode, DialogueTree, PlayerOption

    return DialogueTree.from_nodes("crazy_cap", [
        DialogueNode(id=0, speaker_tag="Crazy Cap", text="Hello [NAME]",
                     extra_data="itemLookUp", next_node=1),
        DialogueNode(id=1, is_player=True, options=[
            PlayerOption(text="Yes", next_node=2),
            PlayerOption(text="No", next_node=3),
            PlayerOption(text="Maybe", next_node=4),
        ]),
        DialogueNode(id=2, speaker_tag="Crazy Cap", text="Take this.<br>Now go!",
                     extra_data="item"),
        DialogueNode(id=3, speaker_tag="Crazy Cap", text="Then you are mad!",
                     extra_data="insanity"),
        DialogueNode(id=4, speaker_tag="Crazy Cap", text="Hmm.", next_node=1),
        DialogueNode(id=16, speaker_tag="Crazy Cap", text="You again? Still mad."),
        DialogueNode(id=17, speaker_tag="Crazy Cap", text="Enjoying the item?"),
    ])


@pytest.fixture
def store(cap_tree):
    from dialogue.store import DialogueStore
    store = DialogueStore()
    store.add_tree(cap_tree)
    return store


@pytest.fixture
def assignment():
    from dialogue.models import AssignmentRecord
    return AssignmentRecord(identity="Crazy Cap", display_name="Bob", tree_id="crazy_cap")


@pytest.fixture
def router():
    from dialogue.routing import RepeatVisitRouter, flag_is_set
    router = RepeatVisitRouter()
    router.add_rule("Crazy Cap", flag_is_set("got_item"), 17)
    return router


@pytest.fixture
def engine(store, router, world, event_bus):
    from dialogue.engine import DialogueEngine
    return DialogueEngine(store, router=router, world=world, event_bus=event_bus)


@pytest.fixture
def finish_reveal():
    """Run the active reveal to completion one character at a time."""

    def finish(engine):
        while engine.is_revealing:
            engine.reveal.step()

    return finish
