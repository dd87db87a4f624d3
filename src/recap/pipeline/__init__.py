"""Recap generation pipeline.

One request runs strictly in sequence: create session -> submit run -> poll
until terminal -> parse assistant reply -> synthesize audio (audio mode
only) -> compose the response. Any failure aborts the remaining steps.
"""
