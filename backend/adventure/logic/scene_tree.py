"""场景树：维护根节点、游标与场景计数，负责全部结构性操作。"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from adventure.config import CURSOR_MARKER, OUTLINE_INDENT
from adventure.constants import PATH_SEPARATOR, SLOT_FIELDS, SLOT_LABELS
from adventure.errors import FullSceneError, NoSuchNodeError
from adventure.models import SceneNode, slot_index

logger = logging.getLogger(__name__)


class SceneTree:
    """分支叙事树。

    游标（cursor）是编辑时的“当前场景”：新增场景挂在游标下，删除作用于游标的子节点，
    移动则把游标所在子树整体迁移到另一个场景下。所有操作要么完整成功，要么在抛出异常
    前不改动任何状态。
    """

    def __init__(self) -> None:
        self._root: Optional[SceneNode] = None
        self._cursor: Optional[SceneNode] = None
        self._scene_count = 0

    @property
    def root(self) -> Optional[SceneNode]:
        return self._root

    @property
    def cursor(self) -> Optional[SceneNode]:
        return self._cursor

    @property
    def scene_count(self) -> int:
        return self._scene_count

    def is_empty(self) -> bool:
        return self._root is None

    def _require_cursor(self) -> SceneNode:
        if self._cursor is None:
            raise NoSuchNodeError("The adventure has no scenes yet.")
        return self._cursor

    # ------------------------------------------------------------------
    # 查找
    # ------------------------------------------------------------------

    def iter_scenes(self) -> Iterator[SceneNode]:
        """深度优先（A、B、C 顺序）遍历整棵树。"""
        if self._root is None:
            return
        stack: List[SceneNode] = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def find_parent(self, node: SceneNode) -> Optional[SceneNode]:
        for candidate in self.iter_scenes():
            if any(child is node for child in candidate.slots()):
                return candidate
        return None

    def find_by_id(self, scene_id: int) -> Optional[SceneNode]:
        for candidate in self.iter_scenes():
            if candidate.id == scene_id:
                return candidate
        return None

    @staticmethod
    def _subtree_contains(subtree: SceneNode, node: SceneNode) -> bool:
        stack = [subtree]
        while stack:
            current = stack.pop()
            if current is node:
                return True
            stack.extend(current.children())
        return False

    # ------------------------------------------------------------------
    # 结构修改
    # ------------------------------------------------------------------

    def add_scene(self, title: str, description: str) -> int:
        """新增场景并返回其编号。

        空树时新场景成为根节点与游标；否则追加到游标最左侧的空槽位。
        """
        if self._cursor is None:
            self._scene_count += 1
            node = SceneNode(id=self._scene_count, title=title, description=description)
            self._root = node
            self._cursor = node
            logger.info("scene #%s created as root", node.id)
            return node.id

        cursor = self._cursor
        if not cursor.has_room():
            logger.warning("scene #%s is full; add rejected", cursor.id)
            raise FullSceneError("You cannot add another scene!")
        node = SceneNode(id=self._scene_count + 1, title=title, description=description)
        cursor.add_child(node)
        self._scene_count += 1
        logger.info("scene #%s added under #%s", node.id, cursor.id)
        return node.id

    def remove_child(self, option: str) -> SceneNode:
        """删除游标在 A/B/C 槽位上的子节点（连同其子树）并返回它。

        删除 A 或 B 后执行一次左移：仅当 A 为空且 B 有节点时，B→A、C→B、C 清空。
        删除 C 不做任何移位。
        """
        cursor = self._require_cursor()
        index = slot_index(option)
        field = SLOT_FIELDS[index]
        removed = getattr(cursor, field)
        if removed is None:
            raise NoSuchNodeError(f"No {field} child to remove.")

        setattr(cursor, field, None)
        if index < 2:
            self._shift_children(cursor)
        logger.info(
            "scene #%s removed from slot %s of #%s", removed.id, SLOT_LABELS[index], cursor.id
        )
        return removed

    @staticmethod
    def _shift_children(node: SceneNode) -> None:
        if node.left is None and node.middle is not None:
            node.left = node.middle
            node.middle = node.right
            node.right = None

    def move_subtree(self, target_id: int) -> SceneNode:
        """把游标所在子树移动到编号为 target_id 的场景下，返回新的父节点。

        原父节点的槽位直接清空，不做左移。
        """
        cursor = self._cursor
        if cursor is None or cursor is self._root:
            raise NoSuchNodeError("Cannot move the root node or a null cursor.")
        old_parent = self.find_parent(cursor)
        if old_parent is None:
            raise NoSuchNodeError("Could not find parent of cursor.")
        target = self.find_by_id(target_id)
        if target is None:
            raise NoSuchNodeError(f"No scene with ID {target_id} found.")
        if self._subtree_contains(cursor, target):
            raise NoSuchNodeError(
                f"Scene #{target_id} is inside the subtree being moved."
            )
        if target is not old_parent and not target.has_room():
            logger.warning("scene #%s is full; move rejected", target.id)
            raise FullSceneError(f"Scene #{target_id} has no available child slots.")

        for field in SLOT_FIELDS:
            if getattr(old_parent, field) is cursor:
                setattr(old_parent, field, None)
                break
        target.add_child(cursor)
        logger.info("scene #%s moved from #%s to #%s", cursor.id, old_parent.id, target.id)
        return target

    # ------------------------------------------------------------------
    # 游标导航
    # ------------------------------------------------------------------

    def move_cursor_back(self) -> SceneNode:
        cursor = self._require_cursor()
        if cursor is self._root:
            raise NoSuchNodeError("Already at the root; no parent exists.")
        parent = self.find_parent(cursor)
        if parent is None:
            raise NoSuchNodeError("Parent not found.")
        self._cursor = parent
        logger.debug("cursor moved back to #%s", parent.id)
        return parent

    def move_cursor_forward(self, option: str) -> SceneNode:
        """按“已占用子节点”的紧凑顺序前进：B 指第二个现存子节点，而非 middle 槽位。"""
        cursor = self._require_cursor()
        available = cursor.children()
        if not available:
            raise NoSuchNodeError("No children available.")
        try:
            index = slot_index(option)
        except NoSuchNodeError as exc:
            raise NoSuchNodeError("That option does not exist.") from exc
        if index >= len(available):
            raise NoSuchNodeError("That option does not exist.")
        self._cursor = available[index]
        logger.debug("cursor moved forward to #%s", self._cursor.id)
        return self._cursor

    # ------------------------------------------------------------------
    # 展示
    # ------------------------------------------------------------------

    def path_titles(self) -> List[str]:
        if self._root is None or self._cursor is None:
            return []
        return [node.title for node in self._build_path(self._root, self._cursor)]

    def path_from_root(self) -> str:
        return PATH_SEPARATOR.join(self.path_titles())

    @staticmethod
    def _build_path(start: SceneNode, goal: SceneNode) -> List[SceneNode]:
        """显式栈深度优先查找 goal，再沿记录的父链回溯；找不到时返回空列表。"""
        parents: dict[int, SceneNode] = {}
        stack = [start]
        while stack:
            node = stack.pop()
            if node is goal:
                path = [node]
                while id(path[-1]) in parents:
                    path.append(parents[id(path[-1])])
                path.reverse()
                return path
            for child in reversed(node.children()):
                parents[id(child)] = node
                stack.append(child)
        return []

    def render_outline(self, indent: int = OUTLINE_INDENT, marker: str = CURSOR_MARKER) -> str:
        if self._root is None:
            return ""
        lines: List[str] = []
        stack: List[Tuple[SceneNode, Optional[str], int]] = [(self._root, None, 0)]
        while stack:
            node, label, depth = stack.pop()
            prefix = " " * (indent * depth)
            text = node.display_name() if label is None else f"{label}) {node.display_name()}"
            if node is self._cursor:
                text = f"{text} {marker}"
            lines.append(f"{prefix}{text}\n")
            for child_label, child in reversed(node.labelled_children()):
                stack.append((child, child_label, depth + 1))
        return "".join(lines)

    def __str__(self) -> str:
        return self.render_outline()
