"""Personal finance tracker: transactions, categories, recurring entries,
reports and undo/redo history over a local key-value store."""

__version__ = "1.0.0"
