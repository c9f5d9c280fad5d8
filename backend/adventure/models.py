"""核心领域模型：三叉场景节点。"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from adventure.constants import ENDING_MARKER, SLOT_FIELDS, SLOT_LABELS
from adventure.errors import FullSceneError, NoSuchNodeError


def slot_index(label: str) -> int:
    """把 A/B/C 选项（大小写不敏感）转换为 0/1/2。"""
    if not isinstance(label, str):
        raise NoSuchNodeError(f"Invalid option: {label!r}; must be 'A', 'B', or 'C'.")
    normalized = label.strip().upper()
    if normalized not in SLOT_LABELS:
        raise NoSuchNodeError(f"Invalid option: {label!r}; must be 'A', 'B', or 'C'.")
    return SLOT_LABELS.index(normalized)


class SceneNode(BaseModel):
    """场景节点：编号、标题、描述，以及 left/middle/right 三个子槽位。

    子节点由父节点独占；同一节点在任意时刻最多出现在一个槽位中。
    """

    id: int = Field(..., ge=1)
    title: str
    description: str
    left: Optional[SceneNode] = None
    middle: Optional[SceneNode] = None
    right: Optional[SceneNode] = None

    def slots(self) -> Tuple[Optional[SceneNode], Optional[SceneNode], Optional[SceneNode]]:
        return (self.left, self.middle, self.right)

    def get_slot(self, label: str) -> Optional[SceneNode]:
        return getattr(self, SLOT_FIELDS[slot_index(label)])

    def set_slot(self, label: str, node: Optional[SceneNode]) -> None:
        setattr(self, SLOT_FIELDS[slot_index(label)], node)

    def children(self) -> List[SceneNode]:
        """按槽位顺序返回已占用的子节点（紧凑视图，前进导航以此为索引）。"""
        return [child for child in self.slots() if child is not None]

    def labelled_children(self) -> List[Tuple[str, SceneNode]]:
        """按存储槽位返回 (标签, 子节点)，标签不随紧凑视图重排。"""
        return [
            (label, child)
            for label, child in zip(SLOT_LABELS, self.slots())
            if child is not None
        ]

    def add_child(self, child: SceneNode) -> None:
        """放入最左侧的空槽位；三个槽位都被占用时抛出 FullSceneError。"""
        for field in SLOT_FIELDS:
            if getattr(self, field) is None:
                setattr(self, field, child)
                return
        raise FullSceneError("No available child slots in this SceneNode.")

    def has_room(self) -> bool:
        return any(child is None for child in self.slots())

    def is_ending(self) -> bool:
        return self.left is None and self.middle is None and self.right is None

    def display_name(self) -> str:
        return f"{self.title} (#{self.id})"

    def render_summary(self) -> str:
        lines = [
            f"Scene ID #{self.id}",
            f"Title: {self.title}",
            f"Scene: {self.description}",
        ]
        children = self.children()
        if children:
            leads_to = ", ".join(f"'{child.title}' (#{child.id})" for child in children)
        else:
            leads_to = ENDING_MARKER
        lines.append(f"Leads to: {leads_to}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.display_name()


SceneNode.model_rebuild()
