"""
cascade_layout.constants
------------------------

Centralised enums, policy tables and tunables shared across the engine.

Every number that shapes a layout lives here so the heuristics stay auditable
in one place.  Fractions are relative to the screen (0..1).
"""

from enum import Enum
from typing import Final
import re

# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #


class Archetype(str, Enum):
    """Behavioural category of an application."""

    CODE_WORKSPACE = "code_workspace"
    TEXT_STREAM = "text_stream"
    CONTENT_CANVAS = "content_canvas"
    GLANCEABLE_MONITOR = "glanceable_monitor"
    UNKNOWN = "unknown"


class ContextCategory(str, Enum):
    """Coarse classification of the user's stated intent."""

    CODING = "coding"
    DESIGN = "design"
    RESEARCH = "research"
    COMMUNICATION = "communication"
    GENERAL = "general"


class Role(str, Enum):
    """Layout function assigned to an app for one invocation."""

    PRIMARY = "primary"
    SIDE_COLUMN = "sideColumn"
    PEEK_LAYER = "peekLayer"
    CORNER = "corner"


class PreferredSide(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Stacking rank per role: lower rank sits higher in the window stack.
ROLE_STACK_RANK: Final[dict[Role, int]] = {
    Role.PRIMARY: 0,
    Role.SIDE_COLUMN: 1,
    Role.PEEK_LAYER: 2,
    Role.CORNER: 3,
}

# --------------------------------------------------------------------------- #
# Classifier tables
# --------------------------------------------------------------------------- #

# Exact (lower-cased, whitespace-collapsed) names of well-known applications.
KNOWN_APPS: Final[dict[str, Archetype]] = {
    "cursor": Archetype.CODE_WORKSPACE,
    "xcode": Archetype.CODE_WORKSPACE,
    "zed": Archetype.CODE_WORKSPACE,
    "nova": Archetype.CODE_WORKSPACE,
    "vim": Archetype.CODE_WORKSPACE,
    "emacs": Archetype.CODE_WORKSPACE,
    "terminal": Archetype.TEXT_STREAM,
    "iterm": Archetype.TEXT_STREAM,
    "iterm2": Archetype.TEXT_STREAM,
    "warp": Archetype.TEXT_STREAM,
    "kitty": Archetype.TEXT_STREAM,
    "alacritty": Archetype.TEXT_STREAM,
    "ghostty": Archetype.TEXT_STREAM,
    "hyper": Archetype.TEXT_STREAM,
    "slack": Archetype.TEXT_STREAM,
    "discord": Archetype.TEXT_STREAM,
    "telegram": Archetype.TEXT_STREAM,
    "signal": Archetype.TEXT_STREAM,
    "arc": Archetype.CONTENT_CANVAS,
    "safari": Archetype.CONTENT_CANVAS,
    "firefox": Archetype.CONTENT_CANVAS,
    "figma": Archetype.CONTENT_CANVAS,
    "sketch": Archetype.CONTENT_CANVAS,
    "notion": Archetype.CONTENT_CANVAS,
    "obsidian": Archetype.CONTENT_CANVAS,
    "logseq": Archetype.CONTENT_CANVAS,
    "spotify": Archetype.GLANCEABLE_MONITOR,
    "finder": Archetype.GLANCEABLE_MONITOR,
    "htop": Archetype.GLANCEABLE_MONITOR,
    "top": Archetype.GLANCEABLE_MONITOR,
}

# Ordered (pattern, archetype) rules; the first matching pattern wins.
ARCHETYPE_PATTERNS: Final[tuple[tuple[re.Pattern[str], Archetype], ...]] = (
    (
        re.compile(r"term|shell|console|iterm|bash|zsh|\bcmd\b"),
        Archetype.TEXT_STREAM,
    ),
    (
        re.compile(r"chat|messag|messenger|\btalk|\bteams\b|\bmail\b|slack|\blog(s| viewer)\b"),
        Archetype.TEXT_STREAM,
    ),
    (
        re.compile(r"code|studio|\bide\b|editor|storm|charm|intellij|sublime|vim|emacs"),
        Archetype.CODE_WORKSPACE,
    ),
    (
        re.compile(r"browser|\bweb|chrome|chromium|edge\b|brave|opera|vivaldi"),
        Archetype.CONTENT_CANVAS,
    ),
    (
        re.compile(r"design|photo|image|draw|paint|illustrat|preview|pdf|reader|viewer"),
        Archetype.CONTENT_CANVAS,
    ),
    (
        re.compile(r"\bnotes?\b|docs?\b|word|pages|keynote|powerpoint|excel|sheets"),
        Archetype.CONTENT_CANVAS,
    ),
    (
        re.compile(r"music|audio|media|player|radio|podcast"),
        Archetype.GLANCEABLE_MONITOR,
    ),
    (
        re.compile(r"monitor|activity|stats|meter|clock|timer|weather|settings|preferences"),
        Archetype.GLANCEABLE_MONITOR,
    ),
)

# --------------------------------------------------------------------------- #
# Intent → context
# --------------------------------------------------------------------------- #

# Evaluated in insertion order; substring containment on the normalised intent.
CONTEXT_KEYWORDS: Final[dict[ContextCategory, tuple[str, ...]]] = {
    ContextCategory.CODING: (
        "cod",
        "program",
        "develop",
        "debug",
        "refactor",
        "compile",
        "build",
        "script",
        "hack",
    ),
    ContextCategory.DESIGN: (
        "design",
        "draw",
        "sketch",
        "mockup",
        "prototype",
        "illustrat",
        "artwork",
    ),
    ContextCategory.RESEARCH: (
        "research",
        "browse",
        "read",
        "study",
        "learn",
        "investigat",
        "explore",
        "search",
    ),
    ContextCategory.COMMUNICATION: (
        "chat",
        "message",
        "email",
        "mail",
        "meeting",
        "call",
        "talk",
        "communicat",
        "reply",
    ),
}

# --------------------------------------------------------------------------- #
# Relevance filter tables
# --------------------------------------------------------------------------- #

_A = Archetype
_C = ContextCategory

RELEVANCE_TABLE: Final[dict[tuple[Archetype, ContextCategory], float]] = {
    (_A.CODE_WORKSPACE, _C.CODING): 10.0,
    (_A.TEXT_STREAM, _C.CODING): 9.0,
    (_A.CONTENT_CANVAS, _C.CODING): 8.0,
    (_A.UNKNOWN, _C.CODING): 3.0,
    (_A.GLANCEABLE_MONITOR, _C.CODING): 2.0,
    (_A.CONTENT_CANVAS, _C.DESIGN): 10.0,
    (_A.CODE_WORKSPACE, _C.DESIGN): 5.0,
    (_A.TEXT_STREAM, _C.DESIGN): 4.0,
    (_A.UNKNOWN, _C.DESIGN): 3.0,
    (_A.GLANCEABLE_MONITOR, _C.DESIGN): 2.0,
    (_A.CONTENT_CANVAS, _C.RESEARCH): 10.0,
    (_A.TEXT_STREAM, _C.RESEARCH): 5.0,
    (_A.CODE_WORKSPACE, _C.RESEARCH): 4.0,
    (_A.UNKNOWN, _C.RESEARCH): 3.0,
    (_A.GLANCEABLE_MONITOR, _C.RESEARCH): 2.0,
    (_A.TEXT_STREAM, _C.COMMUNICATION): 10.0,
    (_A.CONTENT_CANVAS, _C.COMMUNICATION): 7.0,
    (_A.CODE_WORKSPACE, _C.COMMUNICATION): 4.0,
    (_A.UNKNOWN, _C.COMMUNICATION): 3.0,
    (_A.GLANCEABLE_MONITOR, _C.COMMUNICATION): 3.0,
    (_A.CODE_WORKSPACE, _C.GENERAL): 6.0,
    (_A.CONTENT_CANVAS, _C.GENERAL): 6.0,
    (_A.TEXT_STREAM, _C.GENERAL): 5.0,
    (_A.UNKNOWN, _C.GENERAL): 4.0,
    (_A.GLANCEABLE_MONITOR, _C.GENERAL): 3.0,
}

# Minimum relevance an app needs to survive filtering, per context.
RELEVANCE_THRESHOLDS: Final[dict[ContextCategory, float]] = {
    _C.CODING: 5.0,
    _C.DESIGN: 4.0,
    _C.RESEARCH: 4.0,
    _C.COMMUNICATION: 4.0,
    _C.GENERAL: 2.5,
}

# Amount the threshold drops per retry when nothing clears it.
THRESHOLD_STEP: Final[float] = 1.0

PRIORITY_TABLE: Final[dict[tuple[Archetype, ContextCategory], int]] = {
    (_A.CODE_WORKSPACE, _C.CODING): 60,
    (_A.TEXT_STREAM, _C.CODING): 50,
    (_A.CONTENT_CANVAS, _C.CODING): 40,
    (_A.UNKNOWN, _C.CODING): 20,
    (_A.GLANCEABLE_MONITOR, _C.CODING): 10,
    (_A.CONTENT_CANVAS, _C.DESIGN): 60,
    (_A.CODE_WORKSPACE, _C.DESIGN): 40,
    (_A.TEXT_STREAM, _C.DESIGN): 30,
    (_A.UNKNOWN, _C.DESIGN): 20,
    (_A.GLANCEABLE_MONITOR, _C.DESIGN): 10,
    (_A.CONTENT_CANVAS, _C.RESEARCH): 60,
    (_A.TEXT_STREAM, _C.RESEARCH): 40,
    (_A.CODE_WORKSPACE, _C.RESEARCH): 35,
    (_A.UNKNOWN, _C.RESEARCH): 20,
    (_A.GLANCEABLE_MONITOR, _C.RESEARCH): 10,
    (_A.TEXT_STREAM, _C.COMMUNICATION): 60,
    (_A.CONTENT_CANVAS, _C.COMMUNICATION): 45,
    (_A.CODE_WORKSPACE, _C.COMMUNICATION): 35,
    (_A.UNKNOWN, _C.COMMUNICATION): 20,
    (_A.GLANCEABLE_MONITOR, _C.COMMUNICATION): 15,
    (_A.CODE_WORKSPACE, _C.GENERAL): 45,
    (_A.TEXT_STREAM, _C.GENERAL): 40,
    (_A.CONTENT_CANVAS, _C.GENERAL): 35,
    (_A.UNKNOWN, _C.GENERAL): 30,
    (_A.GLANCEABLE_MONITOR, _C.GENERAL): 20,
}

# Focus priority per (archetype, context); separate from relevance.
FOCUS_TABLE: Final[dict[tuple[Archetype, ContextCategory], int]] = {
    (_A.CODE_WORKSPACE, _C.CODING): 100,
    (_A.CONTENT_CANVAS, _C.CODING): 60,
    (_A.TEXT_STREAM, _C.CODING): 50,
    (_A.UNKNOWN, _C.CODING): 30,
    (_A.GLANCEABLE_MONITOR, _C.CODING): 10,
    (_A.CONTENT_CANVAS, _C.DESIGN): 100,
    (_A.CODE_WORKSPACE, _C.DESIGN): 60,
    (_A.TEXT_STREAM, _C.DESIGN): 40,
    (_A.UNKNOWN, _C.DESIGN): 30,
    (_A.GLANCEABLE_MONITOR, _C.DESIGN): 10,
    (_A.CONTENT_CANVAS, _C.RESEARCH): 100,
    (_A.TEXT_STREAM, _C.RESEARCH): 50,
    (_A.CODE_WORKSPACE, _C.RESEARCH): 45,
    (_A.UNKNOWN, _C.RESEARCH): 30,
    (_A.GLANCEABLE_MONITOR, _C.RESEARCH): 10,
    (_A.TEXT_STREAM, _C.COMMUNICATION): 100,
    (_A.CONTENT_CANVAS, _C.COMMUNICATION): 60,
    (_A.CODE_WORKSPACE, _C.COMMUNICATION): 50,
    (_A.UNKNOWN, _C.COMMUNICATION): 30,
    (_A.GLANCEABLE_MONITOR, _C.COMMUNICATION): 10,
    (_A.CODE_WORKSPACE, _C.GENERAL): 80,
    (_A.CONTENT_CANVAS, _C.GENERAL): 75,
    (_A.TEXT_STREAM, _C.GENERAL): 60,
    (_A.UNKNOWN, _C.GENERAL): 40,
    (_A.GLANCEABLE_MONITOR, _C.GENERAL): 10,
}

# Name-pattern sub-rules that separate apps sharing an archetype.
# (archetype, pattern, bonus, contexts-or-None); first match per archetype wins.
NAME_BONUS_RULES: Final[
    tuple[tuple[Archetype, re.Pattern[str], int, frozenset[ContextCategory] | None], ...]
] = (
    # Heavyweight, platform-bound IDEs rank below lighter modern editors.
    (_A.CODE_WORKSPACE, re.compile(r"xcode|eclipse|netbeans|android studio"), 0, None),
    (_A.CODE_WORKSPACE, re.compile(r"cursor|zed|windsurf|fleet|code"), 15, None),
    (_A.CODE_WORKSPACE, re.compile(r"storm|charm|intellij|sublime|nova"), 8, None),
    (
        _A.TEXT_STREAM,
        re.compile(r"term|iterm|warp|kitty|alacritty|ghostty|shell|console"),
        12,
        frozenset({_C.CODING, _C.GENERAL}),
    ),
    (
        _A.TEXT_STREAM,
        re.compile(r"slack|discord|messag|chat|mail|teams|telegram|signal"),
        12,
        frozenset({_C.COMMUNICATION}),
    ),
    (
        _A.CONTENT_CANVAS,
        re.compile(r"arc|safari|chrome|firefox|brave|edge|browser|opera|vivaldi"),
        10,
        frozenset({_C.CODING, _C.RESEARCH, _C.GENERAL}),
    ),
    (
        _A.CONTENT_CANVAS,
        re.compile(r"figma|sketch|photoshop|illustrator|affinity|design|canva"),
        12,
        frozenset({_C.DESIGN}),
    ),
    (
        _A.CONTENT_CANVAS,
        re.compile(r"notion|obsidian|notes|logseq|pdf|preview"),
        6,
        frozenset({_C.RESEARCH}),
    ),
)

del _A, _C

# --------------------------------------------------------------------------- #
# Geometry policy
# --------------------------------------------------------------------------- #

# Primary window: width shrinks with app count inside this range.
PRIMARY_WIDTH_RANGE: Final[tuple[float, float]] = (0.55, 0.75)
PRIMARY_HEIGHT_RANGE: Final[tuple[float, float]] = (0.85, 1.0)
PRIMARY_SHRINK_PER_APP: Final[float] = 0.05

# Text streams read vertically; width is capped.
SIDE_COLUMN_WIDTHS: Final[dict[int, float]] = {1: 0.35, 2: 0.35, 3: 0.30}
SIDE_COLUMN_WIDTH_MANY: Final[float] = 0.25
SIDE_COLUMN_CAP: Final[float] = 0.35
TEXT_STREAM_FOCUSED_CAP: Final[float] = 0.55
SIDE_COLUMN_MIN_PX: Final[int] = 400

# Content canvases must keep a functional width.
PEEK_MIN_WIDTH: Final[float] = 0.45
PEEK_MIN_PX: Final[int] = 640
PEEK_HEIGHT_RANGE: Final[tuple[float, float]] = (0.80, 0.95)
PEEK_OFFSET_RANGE: Final[tuple[float, float]] = (0.15, 0.25)

# Corner windows.
CORNER_MIN_FRACTION: Final[float] = 0.15
CORNER_MIN_PX: Final[tuple[int, int]] = (240, 180)
CORNER_DEFAULT_FRACTION: Final[float] = 0.30
CORNER_MAX_FRACTION: Final[float] = 0.50

# --------------------------------------------------------------------------- #
# Engine defaults (override via environment, see config.EngineConfig)
# --------------------------------------------------------------------------- #

MAX_APPS_ENV: Final[str] = "CASCADE_LAYOUT_MAX_APPS"
TARGET_COVERAGE_ENV: Final[str] = "CASCADE_LAYOUT_TARGET_COVERAGE"
MIN_VISIBLE_AREA_ENV: Final[str] = "CASCADE_LAYOUT_MIN_VISIBLE_AREA"
HINT_THRESHOLD_ENV: Final[str] = "CASCADE_LAYOUT_HINT_THRESHOLD"

DEFAULT_MAX_APPS: Final[int] = 4
DEFAULT_TARGET_COVERAGE: Final[float] = 0.95
DEFAULT_MIN_VISIBLE_AREA: Final[float] = 0.01
DEFAULT_HINT_THRESHOLD: Final[float] = 0.5
EPSILON: Final[float] = 1e-6

# Default screen used by the CLI when --screen is omitted.
DEFAULT_SCREEN: Final[tuple[int, int]] = (1440, 900)
