"""场景树共享常量。"""

SLOT_LABELS: tuple[str, str, str] = ("A", "B", "C")
SLOT_FIELDS: tuple[str, str, str] = ("left", "middle", "right")

ENDING_MARKER = "NONE"
PATH_SEPARATOR = ", "
