import logging
import os

logger = logging.getLogger(__name__)


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("keybot", {})
        discord_cfg = cfg.get("discord", {})

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)

        # Empty means the bundled English table
        self.LANGUAGE_FILE: str = str(cfg.get("language_file", os.getenv("LANGUAGE_FILE", "")))

        required = [
            ("DISCORD_API_TOKEN", self.DISCORD_API_TOKEN),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")
