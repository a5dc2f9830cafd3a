"""Core presentation engine: word model, ORP, timing, and playback.

WHY: These modules hold all of the algorithmic and temporal logic of
the reader. Everything else (terminal output, storage of positions,
configuration) calls into them.

HOW: models.py defines the value types, orp.py and tokenizer.py build
words from text, timing.py turns positions into display durations, and
engine.py runs the playback state machine on top of them.

RULES:
- Only engine.py holds mutable state
- No module here performs I/O or reads the wall clock
"""
