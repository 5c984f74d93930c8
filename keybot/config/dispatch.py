import os
from typing import List

from keybot.commands.types import DispatchSettings


def _split_ids(raw: str) -> List[str]:
    return [aid.strip() for aid in raw.split(",") if aid.strip()]


class Dispatch:
    def __init__(self, config: dict | None = None) -> None:
        dispatch_cfg = (config or {}).get("keybot", {}).get("dispatch", {})
        self.COMMAND_DELIMITER: str = str(
            dispatch_cfg.get("command_delimiter", os.getenv("COMMAND_DELIMITER", "!"))
        )
        admin_ids_cfg = dispatch_cfg.get("admin_ids")
        if admin_ids_cfg:
            self.ADMIN_IDS: List[str] = [str(aid) for aid in admin_ids_cfg]
        else:
            self.ADMIN_IDS = _split_ids(os.getenv("ADMIN_IDS", ""))
        self.SUGGEST_THRESHOLD: float = float(
            dispatch_cfg.get("suggest_threshold", os.getenv("SUGGEST_THRESHOLD", "0.6"))
        )

        if not self.COMMAND_DELIMITER:
            raise ValueError("COMMAND_DELIMITER must not be empty")

    def settings(self) -> DispatchSettings:
        """Return the immutable settings handed to the command engine."""
        return DispatchSettings(
            delimiter=self.COMMAND_DELIMITER,
            admin_ids=frozenset(self.ADMIN_IDS),
            suggest_threshold=self.SUGGEST_THRESHOLD,
        )
