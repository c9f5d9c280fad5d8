import pytest

from adventure.errors import NoSuchNodeError
from adventure.logic.scene_tree import SceneTree
from adventure.services.play_engine import PlaySession, play_through


def _seed_tree() -> SceneTree:
    tree = SceneTree()
    tree.add_scene("Start", "You wake up.")
    tree.add_scene("Forest", "Trees everywhere.")
    tree.add_scene("Village", "Quiet houses.")
    tree.move_cursor_forward("A")
    tree.add_scene("Wolf", "A wolf appears.")
    tree.move_cursor_back()
    return tree


def test_play_through_reaches_ending():
    tree = _seed_tree()
    session = play_through(tree, ["A", "a"])

    assert session.current.title == "Wolf"
    assert session.is_over is True
    assert session.path_titles() == ["Start", "Forest", "Wolf"]
    assert tree.cursor is tree.root


def test_options_use_storage_labels():
    tree = _seed_tree()
    tree.add_scene("Cave", "Dark.")
    tree.remove_child("B")
    tree.remove_child("A")

    session = PlaySession(tree)

    assert [(label, node.title) for label, node in session.options()] == [("C", "Cave")]
    with pytest.raises(NoSuchNodeError) as excinfo:
        session.choose("A")
    assert str(excinfo.value) == "That option does not exist."
    assert session.choose("C").title == "Cave"


def test_invalid_choice_and_choosing_after_end():
    session = PlaySession(_seed_tree())

    with pytest.raises(NoSuchNodeError) as excinfo:
        session.choose("Q")
    assert str(excinfo.value) == "Invalid choice."
    assert session.current.title == "Start"

    session.choose("B")
    assert session.is_over
    with pytest.raises(NoSuchNodeError):
        session.choose("A")


def test_empty_tree_cannot_be_played():
    with pytest.raises(NoSuchNodeError):
        PlaySession(SceneTree())
