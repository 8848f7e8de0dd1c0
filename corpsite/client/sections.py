"""
Known section shapes.

Each schema names a (page, section) key and the default payload the site
renders before, or instead of, stored content.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from corpsite.domain.entities import ContentKey
from corpsite.domain.merge import fill_blank_fields, merge_with_defaults


@dataclass(frozen=True)
class SectionSchema:
    page: str
    section: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    # Blank stored values fall back to the default
    fill_blank: bool = False

    @property
    def key(self) -> ContentKey:
        return ContentKey(self.page, self.section)

    def render(self, data: Mapping[str, Any] | None) -> dict[str, Any]:
        if self.fill_blank:
            return fill_blank_fields(self.defaults, data)
        return merge_with_defaults(self.defaults, data)


_REGISTRY: dict[ContentKey, SectionSchema] = {}


def register(schema: SectionSchema) -> SectionSchema:
    _REGISTRY[schema.key] = schema
    return schema


def get_schema(page: str, section: str) -> SectionSchema | None:
    return _REGISTRY.get(ContentKey(page, section))


def registered() -> Mapping[ContentKey, SectionSchema]:
    return MappingProxyType(_REGISTRY)


# --- Site sections ---

CAREERS_HERO = register(SectionSchema("careers", "hero", {"title": "Careers"}))

CAREERS_APPLICATION = register(
    SectionSchema(
        "careers",
        "application",
        {
            "title": "Make a Difference",
            "subtitle": "Shape your future with Venwind Refex",
        },
        fill_blank=True,
    )
)

CAREERS_MAP = register(
    SectionSchema(
        "careers",
        "map",
        {
            "title": "Visit Our Office",
            "description": (
                "6th Floor, Refex Towers, Sterling Road Signal, 313, Valluvar Kottam "
                "High Road, Nungambakkam, Chennai - 600034, Tamil Nadu"
            ),
            "address": "6th Floor, Refex Towers\nNungambakkam, Chennai - 600034",
            "phone": "+91 (44) 69908410",
            "email": "contact@venwindrefex.com",
        },
        fill_blank=True,
    )
)

ABOUT_HERO = register(SectionSchema("about", "hero", {"title": "About Us"}))

CONTACT_HERO = register(SectionSchema("contact", "hero", {"title": "Contact"}))

HOME_HERO = register(
    SectionSchema(
        "home",
        "hero",
        {
            "title": "Revolutionizing Wind Energy",
            "subtitle": (
                "Explore the power of cutting-edge wind turbine manufacturing "
                "technology in partnership with Vensys Energy AG, Germany"
            ),
            "buttonText": "Learn More",
            "buttonLink": "/products",
            "videoUrl": (
                "https://venwindrefex.com/wp-content/uploads/2025/01/"
                "5097121_Aerial-View_Alternative_1920x1080-1.mp4"
            ),
        },
    )
)

# Four counters, stored flat as statNNumber / statNLabel
HOME_STATS = register(
    SectionSchema(
        "home",
        "stats",
        {
            "stat1Number": "5.3",
            "stat1Label": (
                "Permanent Magnet Generator with Medium-Speed Gearbox Hybrid "
                "Technology - Best in Class"
            ),
            "stat2Number": "183.4",
            "stat2Label": "Rotor Diameter and 130m Tower Height - Capturing Optimal Wind Energy",
            "stat3Number": "128",
            "stat3Label": "Operational Worldwide based on Vensys technology",
            "stat4Number": "38",
            "stat4Label": "Countries Operating globally utilizing wind turbine technology by Vensys",
        },
    )
)

HOME_DIFFERENTIATORS = register(
    SectionSchema(
        "home",
        "differentiators",
        {
            "feature1Title": "Hybrid drive-train",
            "feature1Desc": "Gearbox + medium speed PMG for superior performance",
            "feature2Title": "Proven technology",
            "feature2Desc": (
                "Global installations in Australia, South Africa, Brazil and the Middle East"
            ),
            "feature3Title": "Rapid delivery",
            "feature3Desc": "Reduced Opex costs due to PMG and hybrid drive-train",
        },
    )
)

SUSTAINABILITY_FUTURE_GOALS = register(
    SectionSchema(
        "sustainability",
        "future-goals",
        {
            "title": "Future Goals",
            "description": (
                "Scale up production to meet India's renewable targets and continue "
                "R&D investments for enhanced turbine efficiency."
            ),
            "bgImageUrl": (
                "https://static.readdy.ai/image/d0ead66ce635a168f1e83b108be94826/"
                "1068d46b1e389bbe3b4192e16de71e05.png"
            ),
        },
        fill_blank=True,
    )
)
