import pytest
from pydantic import ValidationError

from runtime.core.component import Component


class Mood(Component):
    level: int = 0
    tags: list[str] = []


def test_type_name():
    assert Mood.get_type_name() == "Mood"


def test_clone_is_deep():
    mood = Mood(level=2, tags=["calm"])
    copy = mood.clone()

    copy.tags.append("angry")

    assert copy.level == 2
    assert mood.tags == ["calm"]


def test_assignment_is_validated():
    mood = Mood()

    with pytest.raises(ValidationError):
        mood.level = "very"


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        Mood(temper=3)
