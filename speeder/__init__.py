"""Speeder — RSVP speed reading engine.

WHY: Reading one word at a time at a fixed fixation point removes eye
movement from reading. The hard part is not the window that shows the
word but the engine behind it: splitting text into words, picking the
focus letter, pacing the words with a warm-up ramp, and answering
pause/seek/speed requests from a UI that fires them in any order.

HOW: Four small stages — tokenize (text → WordSequence), ORP (word →
before/focus/after), timing (position → display duration), and the
playback state machine (tick-driven). Position memory sits at the
session boundary so a re-opened text resumes where the reader stopped.

RULES:
- The engine never reads the clock; callers drive it with tick(elapsed_ms)
- Rendering, hotkeys, and clipboard capture live outside this package
- Invalid input is normalized or rejected, never fatal
"""

__version__ = "0.1.0"
