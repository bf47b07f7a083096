from __future__ import annotations

from idea_planner.core.model import FeatureTags


WEB_STACK: tuple[str, ...] = ("React", "TypeScript", "Tailwind CSS", "Next.js")
MOBILE_STACK: tuple[str, ...] = ("React Native", "Expo")
BACKEND_STACK: tuple[str, ...] = ("Node.js", "Express", "TypeScript", "PostgreSQL")
AI_STACK: tuple[str, ...] = ("Python", "TensorFlow", "OpenAI API")
ECOMMERCE_STACK: tuple[str, ...] = ("Stripe", "Shopify API")
DELIVERY_STACK: tuple[str, ...] = ("Docker", "GitHub Actions", "AWS")


def infer_tech_stack(tags: FeatureTags) -> list[str]:
    """Recommended technologies for the tags, deduplicated in first-seen order.

    Groups are appended as: web, mobile, backend, AI, ecommerce, delivery.
    Backend and delivery groups are always present.
    """

    stack: list[str] = []
    if tags.is_web_app:
        stack.extend(WEB_STACK)
    if tags.is_mobile_app:
        stack.extend(MOBILE_STACK)
    stack.extend(BACKEND_STACK)
    if tags.is_ai:
        stack.extend(AI_STACK)
    if tags.is_ecommerce:
        stack.extend(ECOMMERCE_STACK)
    stack.extend(DELIVERY_STACK)

    return list(dict.fromkeys(stack))
