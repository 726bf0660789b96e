# src/chetana/services/seed.py
"""Default community rules and welcome posts."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from chetana.db.session import atomic
from chetana.services import forum, membership

logger = logging.getLogger(__name__)

DEFAULT_RULES: dict[str, str] = {
    "depression": "\n".join(
        [
            "1. Be respectful and supportive to all members",
            "2. No medical advice - encourage professional help when needed",
            "3. Use trigger warnings for sensitive content",
            "4. No spam, self-promotion, or off-topic posts",
            "5. Respect privacy - don't share personal information",
            "6. Report harmful or inappropriate content",
            "7. Be patient with others who are struggling",
        ]
    ),
    "anxiety": "\n".join(
        [
            "1. Create a safe and supportive environment",
            "2. No judgment or dismissive comments about anxiety",
            "3. Share coping strategies and resources respectfully",
            "4. Use content warnings for panic attack descriptions",
            "5. No medical advice - suggest professional consultation",
            "6. Respect different anxiety experiences and triggers",
            "7. Keep discussions focused on anxiety-related topics",
        ]
    ),
    "stress": "\n".join(
        [
            "1. Maintain a supportive and understanding community",
            "2. Share stress management techniques constructively",
            "3. No work-specific complaints without solutions",
            "4. Respect different stress levels and coping methods",
            "5. Encourage healthy stress management practices",
            "6. No promotion of unhealthy coping mechanisms",
            "7. Keep content relevant to stress management and wellness",
        ]
    ),
}

WELCOME_POSTS: dict[str, tuple[str, str]] = {
    "depression": (
        "Welcome to the Depression Support Community",
        "Welcome to our safe space for depression support. Here you can share your "
        "experiences, find encouragement, and connect with others who understand. "
        "Please read our community guidelines and remember that professional help is "
        "always recommended for serious concerns.",
    ),
    "anxiety": (
        "Welcome to the Anxiety Support Community",
        "Welcome to our anxiety support community. This is a judgment-free zone where "
        "you can share your struggles, coping strategies, and victories. Please be "
        "mindful of triggers and always encourage professional help when needed.",
    ),
    "stress": (
        "Welcome to the Stress Management Community",
        "Welcome to our stress management community. Share your stress management "
        "techniques, workplace challenges, and wellness tips. Let us support each "
        "other in building healthier, more balanced lives.",
    ),
}


def seed_forum(db: Session) -> dict[str, int]:
    """Install default rules and welcome posts without duplicating either."""
    with atomic(db):
        rules_added = membership.seed_rules(db, DEFAULT_RULES)
        duplicates_removed = forum.remove_duplicate_welcome_posts(db)
        posts_added = forum.seed_welcome_posts(db, WELCOME_POSTS)

    logger.info(
        "Forum seeded: %d rules, %d welcome posts, %d duplicates removed",
        rules_added,
        posts_added,
        duplicates_removed,
    )
    return {
        "rules_added": rules_added,
        "posts_added": posts_added,
        "duplicates_removed": duplicates_removed,
    }


def cleanup_duplicate_welcome_posts(db: Session) -> int:
    """Remove repeated admin welcome posts, keeping the oldest per community."""
    with atomic(db):
        removed = forum.remove_duplicate_welcome_posts(db)
    logger.info("Removed %d duplicate welcome posts", removed)
    return removed
