import pytest

from dialogue.dispatcher import (
    ActionContext,
    ActionDispatcher,
    ActionResult,
    ItemAction,
    NO_ACTION,
    StartNodeOverrideAction,
    name_substitution,
)
from dialogue.models import AssignmentRecord, NodeData, WorldState


@pytest.fixture
def context():
    return ActionContext(
        assignment=AssignmentRecord(identity="Crazy Cap", display_name="Bob", tree_id="t"),
        world=WorldState(),
        node=NodeData(node_id=0, npc_lines=["one", "two"]),
    )


@pytest.fixture
def dispatcher():
    return ActionDispatcher.with_defaults()


def test_unknown_tag_is_noop(dispatcher, context):
    result = dispatcher.dispatch("dance", 0, context)

    assert result == NO_ACTION
    assert not result.pause
    assert not result.advances_automatically


def test_item_pauses_on_first_line(dispatcher, context):
    result = dispatcher.dispatch("item", 0, context)

    assert result.pause
    assert context.world.has_flag("got_item")


def test_item_resume_waits_for_confirmation(dispatcher, context):
    dispatcher.dispatch("item", 0, context)

    assert dispatcher.resume("item", 0, context) is None

    context.world.confirm("item")
    result = dispatcher.resume("item", 0, context)

    assert result.advances_automatically
    assert not result.pause
    # Confirmation is used up
    assert "item" not in context.world.confirmations


def test_item_later_line_advances(dispatcher, context):
    result = dispatcher.dispatch("item", 1, context)

    assert result == ActionResult(advances_automatically=True)
    assert not context.world.has_flag("got_item")


def test_item_already_owned_does_not_pause(context):
    context.world.set_flag("got_item")
    result = ItemAction().handle(context, 0)

    assert not result.pause
    assert result.advances_automatically


def test_insanity_overrides_start_node(dispatcher, context):
    result = dispatcher.dispatch("insanity", 0, context)

    assert result.advances_automatically
    assert context.assignment.override_start_node == 16


def test_start_override_target_configurable(context):
    StartNodeOverrideAction(start_node=3).handle(context, 0)

    assert context.assignment.override_start_node == 3


def test_register_plain_function(dispatcher, context):
    calls = []

    def wave(ctx, line_index):
        calls.append(line_index)
        return ActionResult(advances_automatically=True)

    dispatcher.register("wave", wave)
    result = dispatcher.dispatch("wave", 1, context)

    assert calls == [1]
    assert result.advances_automatically


def test_register_empty_tag_rejected(dispatcher):
    with pytest.raises(ValueError):
        dispatcher.register("", lambda ctx, i: NO_ACTION)


def test_unregister(dispatcher, context):
    dispatcher.unregister("item")

    assert not dispatcher.has_handler("item")
    assert dispatcher.dispatch("item", 0, context) == NO_ACTION


def test_resume_for_unregistered_tag_releases(dispatcher, context):
    result = dispatcher.resume("gone", 0, context)

    assert result.advances_automatically


def test_substitution_not_an_action(dispatcher, context):
    assert dispatcher.dispatch("itemLookUp", 0, context) == NO_ACTION
    assert dispatcher.has_substitution("itemLookUp")


def test_name_substitution(dispatcher, context):
    line = dispatcher.substitute("itemLookUp", "Hello [NAME]", context)

    assert line == "Hello Bob"


def test_name_substitution_is_idempotent(dispatcher, context):
    once = dispatcher.substitute("itemLookUp", "Hello [NAME]", context)
    twice = dispatcher.substitute("itemLookUp", once, context)

    assert once == twice == "Hello Bob"


def test_name_falls_back_to_identity(context):
    context.assignment.display_name = ""

    assert name_substitution()("Hi [NAME]", context) == "Hi Crazy Cap"


def test_substitute_without_rule_returns_line(dispatcher, context):
    assert dispatcher.substitute("item", "unchanged", context) == "unchanged"


def test_item_drops_confirmation_made_before_pause(dispatcher, context):
    context.world.confirm("item")

    assert dispatcher.dispatch("item", 0, context).pause
    assert dispatcher.resume("item", 0, context) is None
