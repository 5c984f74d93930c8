"""Built-in command handlers (imported by ``keybot.commands``)."""
