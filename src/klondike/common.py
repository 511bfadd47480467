# common.py - shared display settings, card drawing and scene base for the front end
import os
import json
import logging
import pygame
from typing import Optional

from klondike.cards import CLUB, DIAMOND, HEART, RANK_TO_TEXT, SPADE, SUIT_GLYPHS, is_red

logger = logging.getLogger(__name__)

# --- Persisted display settings ---
CARD_SIZES = ("Small", "Medium", "Large")
BACK_COLORS = {
    "Blue": (34, 96, 200),
    "Grey": (110, 110, 120),
    "Red": (170, 30, 40),
    "Green": (20, 120, 60),
}

# Defaults (may be overridden by persisted settings)
_DEFAULT_SETTINGS = {
    "card_size": "Medium",   # Small | Medium | Large
    "back_color": "Blue",    # key of BACK_COLORS
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)


def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_patience
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikePatience")
    return os.path.join(os.path.expanduser("~"), ".klondike_patience")


def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")


def get_current_settings():
    return dict(_CURRENT_SETTINGS)


def _clean_setting(key, value):
    if key == "card_size":
        value = str(value).capitalize()
        return value if value in CARD_SIZES else None
    if key == "back_color":
        value = str(value).capitalize()
        return value if value in BACK_COLORS else None
    return None


def load_settings():
    try:
        with open(_settings_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", _settings_path(), exc)
        return
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected an object", _settings_path())
        return
    for key in _DEFAULT_SETTINGS:
        if key in data:
            cleaned = _clean_setting(key, data[key])
            if cleaned is None:
                logger.warning("Ignoring invalid %s=%r in settings", key, data[key])
                continue
            _CURRENT_SETTINGS[key] = cleaned


def save_settings(new_values: dict):
    # Merge and write to disk
    for key in _DEFAULT_SETTINGS:
        if key in new_values:
            cleaned = _clean_setting(key, new_values[key])
            if cleaned is not None:
                _CURRENT_SETTINGS[key] = cleaned
    try:
        os.makedirs(_settings_dir(), exist_ok=True)
        with open(_settings_path(), "w", encoding="utf-8") as f:
            json.dump(_CURRENT_SETTINGS, f, indent=2)
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", _settings_path(), exc)


def _size_to_dims(size_name: str):
    size_name = (size_name or "Medium").capitalize()
    if size_name == "Small":
        return 75, 105
    if size_name == "Large":
        return 150, 210
    return 100, 140


def invalidate_card_caches():
    global _card_face_cache, _card_back_cache
    _card_face_cache = {}
    _card_back_cache = None


def apply_card_settings(size_name: Optional[str] = None, back_color: Optional[str] = None):
    # Update globals for gameplay rendering
    global BACK_COLOR, CARD_W, CARD_H
    if size_name is not None:
        CARD_W, CARD_H = _size_to_dims(size_name)
    if back_color is not None and back_color in BACK_COLORS:
        BACK_COLOR = back_color
    invalidate_card_caches()


def next_back_color(current: str) -> str:
    names = list(BACK_COLORS)
    try:
        return names[(names.index(current) + 1) % len(names)]
    except ValueError:
        return names[0]


# Load any persisted settings and apply now
load_settings()
BACK_COLOR = _CURRENT_SETTINGS["back_color"]


# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 1280, 800
GREEN_TABLE = (2, 100, 40)
TABLE_BG = GREEN_TABLE

CARD_W, CARD_H = _size_to_dims(_CURRENT_SETTINGS.get("card_size", "Medium"))
CARD_RADIUS = 10
CARD_GAP_X = 18
CARD_GAP_Y = 26

# Fonts are initialized via setup_fonts() AFTER pygame.init() in __main__.py
FONT_NAME = None
FONT_SMALL = None
FONT_UI = None
FONT_TITLE = None
FONT_CORNER_RANK = None
FONT_CORNER_SUIT = None


def setup_fonts():
    global FONT_NAME, FONT_SMALL, FONT_UI, FONT_TITLE, FONT_CORNER_RANK, FONT_CORNER_SUIT
    FONT_NAME = pygame.font.get_default_font()
    FONT_SMALL = pygame.font.SysFont(FONT_NAME, 20, bold=True)
    FONT_UI = pygame.font.SysFont(FONT_NAME, 26, bold=True)
    FONT_TITLE = pygame.font.SysFont(FONT_NAME, 44, bold=True)
    FONT_CORNER_RANK = pygame.font.SysFont(FONT_NAME, 28, bold=True)
    # Suit glyphs need a Unicode-capable font; SysFont falls back to the default
    FONT_CORNER_SUIT = pygame.font.SysFont("Segoe UI Symbol,DejaVu Sans", 26, bold=True)


# UI bar heights
TOP_BAR_H = 60

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
GOLD = (230, 190, 80)
LIGHT = (220, 220, 220)


# ---------- Card drawing ----------
_card_face_cache = {}
_card_back_cache = None


def draw_suit_shape(surface, center, suit, color, size=42):
    x, y = center
    if suit == DIAMOND:
        half = size//2
        points = [(x, y - half), (x + half, y), (x, y + half), (x - half, y)]
        pygame.draw.polygon(surface, color, points)
    elif suit == HEART:
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y - r), r)
        pygame.draw.circle(surface, color, (x + r, y - r), r)
        tri = [(x - 2*r, y - r), (x + 2*r, y - r), (x, y + 2*r)]
        pygame.draw.polygon(surface, color, tri)
    elif suit == SPADE:
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y), r)
        pygame.draw.circle(surface, color, (x + r, y), r)
        tri = [(x - 2*r, y), (x + 2*r, y), (x, y - 2*r)]
        pygame.draw.polygon(surface, color, tri)
        stem_w = max(6, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))
    elif suit == CLUB:
        r = size//3
        pygame.draw.circle(surface, color, (x, y - r), r)
        pygame.draw.circle(surface, color, (x - r, y + r//3), r)
        pygame.draw.circle(surface, color, (x + r, y + r//3), r)
        stem_w = max(6, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))


def get_card_surface(card):
    if not card.face_up:
        return get_back_surface()
    key = (card.suit, card.value)
    if key in _card_face_cache:
        return _card_face_cache[key]
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    color = RED if is_red(card.suit) else BLACK
    margin = 10
    rtxt = FONT_CORNER_RANK.render(RANK_TO_TEXT[card.value], True, color)
    stxt = FONT_CORNER_SUIT.render(SUIT_GLYPHS[card.suit], True, color)
    surf.blit(rtxt, (margin, margin))
    surf.blit(stxt, (margin, margin + rtxt.get_height() - 2))
    r180 = pygame.transform.rotate(rtxt, 180)
    s180 = pygame.transform.rotate(stxt, 180)
    surf.blit(r180, (CARD_W - margin - r180.get_width(), CARD_H - margin - r180.get_height() - s180.get_height() + 2))
    surf.blit(s180, (CARD_W - margin - s180.get_width(), CARD_H - margin - s180.get_height()))
    draw_suit_shape(surf, (CARD_W//2, CARD_H//2), card.suit, color, size=CARD_W // 2)
    _card_face_cache[key] = surf
    return surf


def get_back_surface():
    global _card_back_cache
    if _card_back_cache is not None:
        return _card_back_cache
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    inset = 8
    inner_rect = pygame.Rect(inset, inset, CARD_W-2*inset, CARD_H-2*inset)
    pygame.draw.rect(surf, BACK_COLORS.get(BACK_COLOR, BACK_COLORS["Blue"]), inner_rect, border_radius=8)
    for i in range(-CARD_H, CARD_W, 12):
        pygame.draw.line(surf, LIGHT, (i, 8), (i+CARD_H, CARD_H-8), 1)
        pygame.draw.line(surf, LIGHT, (i+6, 8), (i+CARD_H+6, CARD_H-8), 1)
    _card_back_cache = surf
    return surf


def draw_empty_slot(screen, x, y, label=None):
    pygame.draw.rect(screen, (255, 255, 255), (x, y, CARD_W, CARD_H), border_radius=CARD_RADIUS, width=2)
    if label:
        t = FONT_SMALL.render(label, True, WHITE)
        screen.blit(t, (x + (CARD_W - t.get_width())//2, y + (CARD_H - t.get_height())//2))


# ---------- Base Scene ----------
class Scene:
    def __init__(self, app):
        self.app = app
        self.next_scene = None
    def handle_event(self, e): pass
    def update(self, dt): pass
    def draw(self, screen): pass
