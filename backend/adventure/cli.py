"""命令行菜单：交互式创建、编辑并游玩冒险故事。"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Sequence

from adventure.config import LOG_LEVEL
from adventure.errors import AdventureError, NoSuchNodeError
from adventure.logic.scene_tree import SceneTree
from adventure.services.play_engine import PlaySession

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

MENU = (
    "",
    "A) Add Scene",
    "R) Remove Scene",
    "S) Show Current Scene",
    "P) Print Adventure Tree",
    "B) Go Back A Scene",
    "F) Go Forward A Scene",
    "G) Play Game",
    "N) Print Path To Cursor",
    "M) Move scene",
    "Q) Quit",
)


def _add_scene(tree: SceneTree, read: Reader, write: Writer) -> None:
    title = read("\nPlease enter a title: ")
    description = read("Please enter a scene: ")
    scene_id = tree.add_scene(title, description)
    write(f"\nScene #{scene_id} added.")


def _remove_scene(tree: SceneTree, read: Reader, write: Writer) -> None:
    option = read("Please enter an option (A, B, or C): ").strip().upper()
    removed = tree.remove_child(option)
    write(f"{removed.title} removed.")


def _move_scene(tree: SceneTree, read: Reader, write: Writer) -> None:
    raw = read("Move current scene to: ").strip()
    try:
        target_id = int(raw)
    except ValueError:
        write(f"Invalid scene id: {raw!r}.")
        return
    tree.move_subtree(target_id)
    write("Successfully moved scene.")


def play_game(tree: SceneTree, read: Reader, write: Writer) -> None:
    """从根节点开始游玩，直到结局或输入了不存在的选项。"""
    session = PlaySession(tree)
    while True:
        write(session.current.title)
        write(session.current.description)
        if session.is_over:
            write("\nThe End")
            return
        write("")
        for label, child in session.options():
            write(f"{label}) {child.title}")
        option = read("\nPlease enter an option: ")
        try:
            session.choose(option)
        except NoSuchNodeError as exc:
            write(f"{exc} Returning to main menu.")
            return


def run_menu(tree: SceneTree, read: Reader = input, write: Writer = print) -> None:
    """创建根场景后进入主菜单循环，直到用户输入 Q。"""
    write("Creating a story...")
    if tree.is_empty():
        title = read("Please enter a title: ")
        description = read("Please enter a scene: ")
        tree.add_scene(title, description)
    write(f"Scene #{tree.cursor.id} added.")

    while True:
        write("\n".join(MENU))
        choice = read("\nPlease enter a selection: ").strip().upper()
        try:
            if choice == "A":
                _add_scene(tree, read, write)
            elif choice == "R":
                _remove_scene(tree, read, write)
            elif choice == "S":
                write(tree.cursor.render_summary())
            elif choice == "P":
                write("")
                write(tree.render_outline())
            elif choice == "B":
                node = tree.move_cursor_back()
                write(f"Successfully moved back to {node.title}.")
            elif choice == "F":
                option = read("Which option do you wish to go to: ").strip().upper()
                node = tree.move_cursor_forward(option)
                write(f"Successfully moved to {node.title}.")
            elif choice == "G":
                write("\nNow beginning game...\n")
                play_game(tree, read, write)
                write("\nReturning back to creation mode...")
            elif choice == "N":
                write("\n" + tree.path_from_root())
            elif choice == "M":
                _move_scene(tree, read, write)
            elif choice == "Q":
                write("Program terminating normally...")
                return
            else:
                write("Invalid menu option.")
        except AdventureError as exc:
            write(str(exc))


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Design and play branching adventure stories."
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default from ADVENTURE_LOG_LEVEL).",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_menu(SceneTree())
    except (EOFError, KeyboardInterrupt):
        logger.info("input closed; exiting")


if __name__ == "__main__":
    main()
