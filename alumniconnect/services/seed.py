"""Demo roster and feed written to an empty store on first use."""
from __future__ import annotations

from typing import Any

from ..helpers import now_ms

_HOUR_MS = 60 * 60 * 1000

DEMO_USERS: list[dict[str, Any]] = [
    {
        "id": "user_1",
        "name": "Sarah Jenkins",
        "email": "sarah@example.com",
        "role": "Alumni",
        "headline": "Software Engineer at Google | CS Class of 2020",
        "about": (
            "I specialize in distributed systems and cloud computing. "
            "Happy to mentor students interested in FAANG interviews."
        ),
        "location": "Mountain View, CA",
        "skills": ["Java", "Distributed Systems", "Cloud Architecture"],
        "connections": [],
        "incoming_requests": [],
        "avatar_url": "https://picsum.photos/id/64/200/200",
        "profile_views": 12,
    },
    {
        "id": "user_2",
        "name": "David Chen",
        "email": "david@example.com",
        "role": "Alumni",
        "headline": "Product Manager at Spotify | MBA 2019",
        "about": (
            "Transitioned from engineering to product management. "
            "I love helping engineers understand the business side."
        ),
        "location": "New York, NY",
        "skills": ["Product Management", "Agile", "Strategy"],
        "connections": [],
        "incoming_requests": [],
        "avatar_url": "https://picsum.photos/id/91/200/200",
        "profile_views": 8,
    },
    {
        "id": "user_3",
        "name": "Elena Rodriguez",
        "email": "elena@example.com",
        "role": "Alumni",
        "headline": "AI Researcher at OpenAI | PhD in ML",
        "about": "Researching large language models and reinforcement learning.",
        "location": "San Francisco, CA",
        "skills": ["Python", "PyTorch", "Machine Learning"],
        "connections": [],
        "incoming_requests": [],
        "avatar_url": "https://picsum.photos/id/65/200/200",
        "profile_views": 45,
    },
]


def demo_posts(reference_ms: int | None = None) -> list[dict[str, Any]]:
    """Two starter posts, timestamped relative to ``reference_ms``."""

    now = now_ms() if reference_ms is None else reference_ms
    return [
        {
            "id": "post_1",
            "author_id": "user_1",
            "author_name": "Sarah Jenkins",
            "author_headline": "Software Engineer at Google",
            "content": (
                "Just finished a great workshop on Kubernetes scaling. If any juniors are "
                "struggling with container orchestration concepts, feel free to reach out!"
            ),
            "timestamp": now - _HOUR_MS,
            "likes": ["user_2", "user_3"],
            "comments": [
                {
                    "id": "c1",
                    "author_id": "user_2",
                    "author_name": "David Chen",
                    "content": "This is super helpful, Sarah! Shared with my mentees.",
                    "timestamp": now - 3_000_000,
                }
            ],
        },
        {
            "id": "post_2",
            "author_id": "user_2",
            "author_name": "David Chen",
            "author_headline": "Product Manager at Spotify",
            "content": (
                "Hiring season is coming up! Here are my top 5 tips for cracking the PM "
                "interview. #career #productmanagement"
            ),
            "timestamp": now - 2 * _HOUR_MS,
            "likes": ["user_1"],
            "comments": [],
        },
    ]


def initial_collections() -> dict[str, list[dict[str, Any]]]:
    return {
        "users": [dict(user) for user in DEMO_USERS],
        "posts": demo_posts(),
        "messages": [],
        "notifications": [],
    }


__all__ = ["DEMO_USERS", "demo_posts", "initial_collections"]
