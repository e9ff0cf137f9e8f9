# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "nogo"


def records_key(root: str = ROOT) -> str:
    return f"{root}:records"


def paused_key(root: str = ROOT) -> str:
    return f"{root}:paused"
