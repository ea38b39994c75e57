"""
Fixed topic vocabulary used by the arXiv fetcher.

When the feed has no pinned topic yet, one of these is drawn uniformly at
random; afterwards the feed keeps querying the topic of its first page.
"""
from __future__ import annotations

import random
from typing import List, Optional

TOPICS: List[str] = [
    "artificial intelligence",
    "machine learning",
    "computer vision",
    "natural language processing",
    "cybersecurity",
    "blockchain",
    "quantum computing",
    "computer graphics",
    "software engineering",
    "human-computer interaction",
]


def pick_topic(rng: Optional[random.Random] = None) -> str:
    """Return one topic from TOPICS, uniformly at random."""
    return (rng or random).choice(TOPICS)


def resolve_topic(topic: Optional[str], rng: Optional[random.Random] = None) -> str:
    """Use the given topic when it is non-blank, otherwise pick one."""
    cleaned = str(topic or "").strip()
    return cleaned or pick_topic(rng)
