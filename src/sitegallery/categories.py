"""Canonical gallery categories and case-insensitive category matching."""

from __future__ import annotations

_RAW_CATEGORIES = [
    # Industry
    "SaaS", "E-commerce", "Finance", "Healthcare", "Education",
    "Technology", "Marketing", "Design", "Startup", "Agency",
    "Nonprofit", "Real Estate", "Food & Beverage", "Fitness",
    "Travel", "Entertainment", "Media", "Consulting", "Legal",
    "Manufacturing", "Retail", "Fashion", "Beauty",
    "Home Services", "Automotive", "AI", "UI/UX",
    # Page type
    "Landing Page", "Dashboard", "Mobile App", "Web App", "Blog",
    "Portfolio", "Personal", "Docs", "Marketing", "Pricing",
    "Auth", "Onboarding", "Careers", "Contact", "About",
    "Case Studies", "Help Center", "Knowledge Base", "Status Page",
    "Blog Platform", "Checkout", "Booking", "Directory",
    "Newsletter", "Community",
    # Style
    "Minimal", "Bold", "Dark Mode", "Light Mode", "Gradient",
    "3D", "Motion", "Illustration", "Photography", "Typography",
    "Neumorphism", "Glassmorphism", "Brutalist", "Vintage", "Modern",
    "Retro", "Futuristic", "Playful", "Corporate", "Elegant",
    "Hand-drawn", "Geometric", "Abstract", "Creative",
]  # fmt: skip

# "Marketing" is listed under two groups; keep the first occurrence only.
ALL_CATEGORIES: tuple[str, ...] = tuple(dict.fromkeys(_RAW_CATEGORIES))


def normalize_category_name(name: str) -> str:
    """Canonicalise a category name for comparison: ``" SaaS "`` → ``"saas"``."""
    return name.strip().lower()


def canonical_lookup(categories: tuple[str, ...] = ALL_CATEGORIES) -> dict[str, str]:
    """Map normalised name → canonical display name."""
    return {normalize_category_name(cat): cat for cat in categories}


def has_category(categories: list[str], wanted: str) -> bool:
    """True if ``wanted`` matches any entry of ``categories`` after normalisation."""
    target = normalize_category_name(wanted)
    return any(normalize_category_name(cat) == target for cat in categories)
