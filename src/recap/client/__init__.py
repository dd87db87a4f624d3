"""Client-side recap logic -- everything that consumes a RecapResponse.

Talks to ``POST /recap``, keeps a bounded local history of generations in a
single persisted key, remembers the display theme, loads transcript files
and packages notes plus audio into a ZIP on demand. Nothing here talks to
the conversation service directly.
"""
