from types import SimpleNamespace

import pygame
import pytest

from runtime.core.actions import Action
from runtime.input.handler import InputEvent, InputHandler


def key_down(key):
    return SimpleNamespace(type=pygame.KEYDOWN, key=key)


def key_up(key):
    return SimpleNamespace(type=pygame.KEYUP, key=key)


@pytest.fixture
def handler(event_bus):
    return InputHandler(event_bus)


def test_default_bindings(handler):
    handler.process_event(key_down(pygame.K_s))

    assert handler.is_action_pressed(Action.SCROLL_DOWN)
    assert handler.is_key_pressed(pygame.K_s)
    assert handler.poll() == [Action.SCROLL_DOWN]


def test_poll_drains(handler):
    handler.process_event(key_down(pygame.K_w))

    assert handler.poll() == [Action.SCROLL_UP]
    assert handler.poll() == []


def test_held_key_fires_once(handler):
    handler.process_event(key_down(pygame.K_s))
    handler.process_event(key_down(pygame.K_s))

    assert handler.poll() == [Action.SCROLL_DOWN]

    handler.process_event(key_down(pygame.K_s))
    assert handler.poll() == []


def test_repress_after_release(handler):
    for _ in range(3):
        handler.process_event(key_down(pygame.K_s))
        handler.process_event(key_up(pygame.K_s))

    # One entry per action per tick
    assert handler.poll() == [Action.SCROLL_DOWN]


def test_actions_keep_arrival_order(handler):
    handler.process_event(key_down(pygame.K_DOWN))
    handler.process_event(key_down(pygame.K_RETURN))

    assert handler.poll() == [Action.SCROLL_DOWN, Action.CONFIRM]


def test_action_held_while_other_key_down(handler):
    handler.process_event(key_down(pygame.K_s))
    handler.process_event(key_down(pygame.K_DOWN))
    handler.process_event(key_up(pygame.K_s))

    assert handler.is_action_pressed(Action.SCROLL_DOWN)

    handler.process_event(key_up(pygame.K_DOWN))
    assert not handler.is_action_pressed(Action.SCROLL_DOWN)


def test_unbound_key_ignored(handler):
    handler.process_event(key_down(pygame.K_q))

    assert handler.poll() == []
    assert handler.is_key_pressed(pygame.K_q)


def test_rebinding(handler):
    handler.bind_key(Action.CONFIRM, pygame.K_e)
    handler.unbind_key(Action.CONFIRM, pygame.K_SPACE)

    assert pygame.K_e in handler.get_bindings(Action.CONFIRM)
    assert pygame.K_SPACE not in handler.get_bindings(Action.CONFIRM)

    handler.process_event(key_down(pygame.K_SPACE))
    handler.process_event(key_down(pygame.K_e))
    assert handler.poll() == [Action.CONFIRM]


def test_bindings_are_per_handler():
    first = InputHandler()
    first.bind_key(Action.SKIP, pygame.K_q)

    assert pygame.K_q not in InputHandler().get_bindings(Action.SKIP)


def test_publishes_input_events(handler, event_bus):
    pressed = []
    released = []
    event_bus.subscribe(InputEvent.ACTION_PRESSED, lambda e: pressed.append(e["action"]), weak=False)
    event_bus.subscribe(InputEvent.ACTION_RELEASED, lambda e: released.append(e["action"]), weak=False)

    handler.process_event(key_down(pygame.K_x))
    handler.poll()
    handler.process_event(key_up(pygame.K_x))

    assert pressed == [Action.SKIP]
    assert released == [Action.SKIP]


def test_non_key_events_ignored(handler):
    handler.process_event(SimpleNamespace(type=pygame.MOUSEBUTTONDOWN))

    assert handler.poll() == []
