"""游玩模式：从根节点出发按选项走到结局，不改动编辑游标。"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from adventure.constants import SLOT_LABELS
from adventure.errors import NoSuchNodeError
from adventure.logic.scene_tree import SceneTree
from adventure.models import SceneNode

logger = logging.getLogger(__name__)


class PlaySession:
    """一次游玩过程。选项标签对应存储槽位（A=left、B=middle、C=right）。"""

    def __init__(self, tree: SceneTree):
        if tree.root is None:
            raise NoSuchNodeError("The adventure has no scenes to play.")
        self.tree = tree
        self.current: SceneNode = tree.root
        self.history: List[SceneNode] = [tree.root]

    @property
    def is_over(self) -> bool:
        return self.current.is_ending()

    def options(self) -> List[Tuple[str, SceneNode]]:
        return self.current.labelled_children()

    def choose(self, option: str) -> SceneNode:
        if self.is_over:
            raise NoSuchNodeError("The story has already ended.")
        normalized = option.strip().upper() if isinstance(option, str) else ""
        if normalized not in SLOT_LABELS:
            raise NoSuchNodeError("Invalid choice.")
        nxt = self.current.get_slot(normalized)
        if nxt is None:
            raise NoSuchNodeError("That option does not exist.")
        self.current = nxt
        self.history.append(nxt)
        logger.debug("play moved to #%s", nxt.id)
        return nxt

    def path_titles(self) -> List[str]:
        return [node.title for node in self.history]


def play_through(tree: SceneTree, choices: Iterable[str]) -> PlaySession:
    """依次执行 choices，返回停留位置的会话；非法选项直接抛出。"""
    session = PlaySession(tree)
    for option in choices:
        session.choose(option)
    return session
