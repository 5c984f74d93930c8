"""Run the bot: ``python -m keybot``."""

from keybot.clients import disc


def main() -> None:
    disc.run()


if __name__ == "__main__":
    main()
