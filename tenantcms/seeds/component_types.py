# tenantcms/seeds/component_types.py
# Built-in system component types. seed_system_component_types() is the only
# path that creates is_system rows.
from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from tenantcms.models.content import ComponentType
from tenantcms.services.component_registry import seed_system_type

log = logging.getLogger(__name__)

_COLUMNS = {"2": "2 Columns", "3": "3 Columns", "4": "4 Columns"}

SYSTEM_COMPONENT_TYPES: List[Dict[str, Any]] = [
    {
        "name": "Hero Section", "slug": "hero", "icon": "layout-template", "order": 1,
        "description": "Full-width hero with background image and text",
        "fields": [
            {"name": "title", "label": "Title", "type": "text", "required": True, "placeholder": "Enter headline..."},
            {"name": "subtitle", "label": "Subtitle", "type": "textarea"},
            {"name": "background_image", "label": "Background Image", "type": "media"},
            {"name": "cta_text", "label": "Button Text", "type": "text", "placeholder": "Get Started"},
            {"name": "cta_link", "label": "Button Link", "type": "url", "placeholder": "/contact"},
            {"name": "overlay_opacity", "label": "Overlay Opacity", "type": "number", "default": 50, "min": 0, "max": 100},
        ],
    },
    {
        "name": "Text Block", "slug": "text", "icon": "type", "order": 2,
        "description": "Rich text content section",
        "fields": [
            {"name": "title", "label": "Title", "type": "text"},
            {"name": "content", "label": "Content", "type": "richtext", "required": True},
            {"name": "alignment", "label": "Text Alignment", "type": "select",
             "options": {"left": "Left", "center": "Center", "right": "Right"}, "default": "left"},
        ],
    },
    {
        "name": "Services Grid", "slug": "services_grid", "icon": "package", "order": 3,
        "description": "Grid display of services",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text", "placeholder": "Our Services"},
            {"name": "subtitle", "label": "Subtitle", "type": "textarea"},
            {"name": "columns", "label": "Number of Columns", "type": "select", "options": _COLUMNS, "default": "3"},
            {"name": "show_popular", "label": "Show Popular Only", "type": "toggle", "default": False},
            {"name": "limit", "label": "Max Items", "type": "number", "default": 6, "min": 1, "max": 24},
        ],
    },
    {
        "name": "Testimonials", "slug": "testimonials", "icon": "message-square-quote", "order": 4,
        "description": "Customer testimonials carousel",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text", "placeholder": "What Our Clients Say"},
            {"name": "layout", "label": "Layout", "type": "select",
             "options": {"carousel": "Carousel", "grid": "Grid", "masonry": "Masonry"}, "default": "carousel"},
            {"name": "limit", "label": "Max Testimonials", "type": "number", "default": 6},
            {"name": "show_rating", "label": "Show Star Rating", "type": "toggle", "default": True},
        ],
    },
    {
        "name": "FAQ Section", "slug": "faq", "icon": "help-circle", "order": 5,
        "description": "Frequently asked questions accordion",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text", "placeholder": "Frequently Asked Questions"},
            {"name": "category", "label": "Filter by Category", "type": "text"},
            {"name": "limit", "label": "Max Questions", "type": "number", "default": 10},
            {"name": "expand_first", "label": "Expand First Item", "type": "toggle", "default": True},
        ],
    },
    {
        "name": "Team Section", "slug": "team", "icon": "users", "order": 6,
        "description": "Team members grid",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text", "placeholder": "Meet Our Team"},
            {"name": "columns", "label": "Number of Columns", "type": "select", "options": _COLUMNS, "default": "3"},
            {"name": "show_social", "label": "Show Social Links", "type": "toggle", "default": True},
        ],
    },
    {
        "name": "Contact Section", "slug": "contact", "icon": "phone", "order": 7,
        "description": "Contact form and information",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text", "placeholder": "Get In Touch"},
            {"name": "show_form", "label": "Show Contact Form", "type": "toggle", "default": True},
            {"name": "show_map", "label": "Show Map", "type": "toggle", "default": False},
            {"name": "form_endpoint", "label": "Form Submission URL", "type": "url"},
        ],
    },
    {
        "name": "Call to Action", "slug": "cta", "icon": "megaphone", "order": 8,
        "description": "Call to action banner",
        "fields": [
            {"name": "title", "label": "Headline", "type": "text", "required": True},
            {"name": "button_text", "label": "Button Text", "type": "text", "required": True, "placeholder": "Contact Us"},
            {"name": "button_link", "label": "Button Link", "type": "url", "required": True, "placeholder": "/contact"},
            {"name": "background_color", "label": "Background Color", "type": "color", "default": "#c9a962"},
            {"name": "background_image", "label": "Background Image", "type": "media"},
        ],
    },
    {
        "name": "Image Gallery", "slug": "image_gallery", "icon": "images", "order": 9,
        "description": "Image gallery grid",
        "fields": [
            {"name": "title", "label": "Section Title", "type": "text"},
            {"name": "images", "label": "Gallery Images", "type": "repeater", "required": True, "fields": [
                {"name": "image", "label": "Image", "type": "image"},
                {"name": "caption", "label": "Caption", "type": "text"},
            ]},
            {"name": "lightbox", "label": "Enable Lightbox", "type": "boolean", "default": True},
        ],
    },
]


def seed_system_component_types(db: Session) -> list[ComponentType]:
    out = [seed_system_type(db, definition) for definition in SYSTEM_COMPONENT_TYPES]
    log.info("seeded %d system component types", len(out))
    return out
