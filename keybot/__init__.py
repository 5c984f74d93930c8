"""Chat command dispatcher bot."""
