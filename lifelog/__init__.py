"""
Lifelog Query Core

Answers questions about a user's personal data (health, locations, voice
notes, text notes, photos, events) in nine languages. Numeric questions are
computed exactly against the structured store; everything else falls back
to vector search.

Principles:
- Exact answers are never approximated: a failed direct query is an error,
  not a vector search
- Every language pack is tried; the caller never declares a language
- Records are counted once regardless of how their timestamp was stored

Usage:
    from lifelog.common import load_config
    from lifelog.router import QueryEngine

    engine = QueryEngine.from_config(load_config())
    context = await engine.run("How many voice notes did I record yesterday?", user_id)
"""

__version__ = "0.1.0"
