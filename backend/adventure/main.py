"""FastAPI 入口，暴露场景树编辑与游玩接口。"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Path
from pydantic import BaseModel, Field

from adventure.errors import FullSceneError, NoSuchNodeError
from adventure.logic.scene_tree import SceneTree
from adventure.models import SceneNode
from adventure.services.play_engine import play_through

app = FastAPI(title="Adventure Designer API", version="0.1.0")

logger = logging.getLogger(__name__)


class AddScenePayload(BaseModel):
    title: str
    description: str


class EditScenePayload(BaseModel):
    title: str | None = None
    description: str | None = None


class MoveScenePayload(BaseModel):
    target_id: int = Field(..., ge=1)


class PlayPayload(BaseModel):
    choices: List[str] = Field(default_factory=list)


class ChildView(BaseModel):
    option: str
    id: int
    title: str


class SceneView(BaseModel):
    id: int
    title: str
    description: str
    is_ending: bool
    children: List[ChildView] = Field(default_factory=list)
    summary: str


class TreeView(BaseModel):
    scene_count: int
    root_id: int | None = None
    cursor_id: int | None = None
    outline: str


class PathView(BaseModel):
    titles: List[str] = Field(default_factory=list)
    path: str


class OutlineView(BaseModel):
    outline: str


class PlayStepView(BaseModel):
    scene: SceneView
    options: List[ChildView] = Field(default_factory=list)
    is_ending: bool
    path: List[str] = Field(default_factory=list)


def _scene_view(node: SceneNode) -> SceneView:
    return SceneView(
        id=node.id,
        title=node.title,
        description=node.description,
        is_ending=node.is_ending(),
        children=[
            ChildView(option=label, id=child.id, title=child.title)
            for label, child in node.labelled_children()
        ],
        summary=node.render_summary(),
    )


def _require_cursor(tree: SceneTree) -> SceneNode:
    if tree.cursor is None:
        raise HTTPException(status_code=404, detail="The adventure has no scenes yet.")
    return tree.cursor


@lru_cache(maxsize=1)
def get_scene_tree() -> SceneTree:
    """进程内唯一的场景树，可在测试中 override。"""
    return SceneTree()


@app.get("/api/v1/tree", response_model=TreeView)
async def get_tree_endpoint(tree: SceneTree = Depends(get_scene_tree)) -> TreeView:
    return TreeView(
        scene_count=tree.scene_count,
        root_id=tree.root.id if tree.root is not None else None,
        cursor_id=tree.cursor.id if tree.cursor is not None else None,
        outline=tree.render_outline(),
    )


@app.post("/api/v1/scenes", response_model=SceneView)
async def add_scene_endpoint(
    payload: AddScenePayload, tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    try:
        scene_id = tree.add_scene(payload.title, payload.description)
    except FullSceneError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    node = tree.find_by_id(scene_id)
    if node is None:
        raise HTTPException(status_code=500, detail="new scene is not reachable")
    return _scene_view(node)


@app.get("/api/v1/scenes/{scene_id}", response_model=SceneView)
async def get_scene_endpoint(
    scene_id: int = Path(..., ge=1), tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    node = tree.find_by_id(scene_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"No scene with ID {scene_id} found.")
    return _scene_view(node)


@app.get("/api/v1/cursor", response_model=SceneView)
async def get_cursor_endpoint(tree: SceneTree = Depends(get_scene_tree)) -> SceneView:
    return _scene_view(_require_cursor(tree))


@app.patch("/api/v1/cursor", response_model=SceneView)
async def edit_cursor_endpoint(
    payload: EditScenePayload, tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    cursor = _require_cursor(tree)
    if payload.title is not None:
        cursor.title = payload.title
    if payload.description is not None:
        cursor.description = payload.description
    logger.info("scene #%s edited", cursor.id)
    return _scene_view(cursor)


@app.delete("/api/v1/cursor/children/{option}", response_model=SceneView)
async def remove_child_endpoint(
    option: str, tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    try:
        tree.remove_child(option)
    except NoSuchNodeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _scene_view(_require_cursor(tree))


@app.post("/api/v1/cursor/back", response_model=SceneView)
async def move_back_endpoint(tree: SceneTree = Depends(get_scene_tree)) -> SceneView:
    try:
        node = tree.move_cursor_back()
    except NoSuchNodeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _scene_view(node)


@app.post("/api/v1/cursor/forward/{option}", response_model=SceneView)
async def move_forward_endpoint(
    option: str, tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    try:
        node = tree.move_cursor_forward(option)
    except NoSuchNodeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _scene_view(node)


@app.post("/api/v1/cursor/move", response_model=SceneView)
async def move_scene_endpoint(
    payload: MoveScenePayload, tree: SceneTree = Depends(get_scene_tree)
) -> SceneView:
    try:
        tree.move_subtree(payload.target_id)
    except NoSuchNodeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except FullSceneError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _scene_view(_require_cursor(tree))


@app.get("/api/v1/cursor/path", response_model=PathView)
async def get_path_endpoint(tree: SceneTree = Depends(get_scene_tree)) -> PathView:
    return PathView(titles=tree.path_titles(), path=tree.path_from_root())


@app.get("/api/v1/outline", response_model=OutlineView)
async def get_outline_endpoint(tree: SceneTree = Depends(get_scene_tree)) -> OutlineView:
    return OutlineView(outline=tree.render_outline())


@app.post("/api/v1/play", response_model=PlayStepView)
async def play_endpoint(
    payload: PlayPayload, tree: SceneTree = Depends(get_scene_tree)
) -> PlayStepView:
    try:
        session = play_through(tree, payload.choices)
    except NoSuchNodeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return PlayStepView(
        scene=_scene_view(session.current),
        options=[
            ChildView(option=label, id=child.id, title=child.title)
            for label, child in session.options()
        ],
        is_ending=session.is_over,
        path=session.path_titles(),
    )
