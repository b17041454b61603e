"""Global constants for the application."""

# Animation settings
DEFAULT_FPS = 40  # Default frames per second for offline rendering
AUTO_ADVANCE_INTERVAL_MS = 100  # Milliseconds between autonomous period steps
BAR_TRANSITION_MS = 90  # Shared duration of every bar transition
MAX_BARS = 10  # Number of ranked bars shown per period (top-K)

# Canvas dimensions in pixels
CANVAS_WIDTH = 1500
CANVAS_HEIGHT = 500
MARGIN_TOP = 30
MARGIN_RIGHT = 220
MARGIN_LEFT = 110
BAR_HEIGHT = 42  # Height of one band slot (bar plus padding)
BAND_PADDING = 0.1  # Fraction of a slot left empty between bars

# Top axis
AXIS_TICK_COUNT = 6
AXIS_GRID_COLOR = (204, 204, 204)
AXIS_DOMAIN_COLOR = (153, 153, 153)
AXIS_TEXT_COLOR = (102, 102, 102)

# Timeline
TIMELINE_STEP = 3  # Periods divisible by this get a major tick and a label
TIMELINE_BASELINE_OFFSET = 32  # Baseline distance from the bottom edge
TIMELINE_MAJOR_TICK = 10
TIMELINE_MINOR_TICK = 6
TIMELINE_POINTER_SIZE = 8
TIMELINE_COLOR = (136, 136, 136)
TIMELINE_LABEL_COLOR = (119, 119, 119)

# Period and total labels
LABEL_RIGHT = CANVAS_WIDTH - 230
PERIOD_LABEL_Y = CANVAS_HEIGHT - 120
TOTAL_LABEL_Y = CANVAS_HEIGHT - 80
PERIOD_LABEL_SIZE = 96
TOTAL_LABEL_SIZE = 30
SUMMARY_LABEL_COLOR = (197, 197, 197)

# Play/pause control
PLAY_BUTTON_LEFT = 30
PLAY_BUTTON_BOTTOM = 35
PLAY_BUTTON_SIZE = 46
PLAY_BUTTON_COLOR = (51, 51, 51)

# Colors
BACKGROUND_COLOR = (255, 255, 255)
LABEL_COLOR = (34, 34, 34)
BADGE_STROKE_COLOR = (255, 255, 255)
FALLBACK_COLOR = (204, 204, 204)  # Categories without a palette entry
REGION_COLORS = {
    "Africa": (228, 78, 157),
    "Americas": (41, 169, 255),
    "Asia": (30, 127, 229),
    "Europe": (165, 87, 216),
    "Oceania": (255, 107, 0),
}
LEGEND_TITLE = "Region"

# Input columns
VALUE_COLUMNS = ("Value", "Population", "all years")  # First present wins
ENTITY_COLUMN = "Entity"
PERIOD_COLUMN = "Year"
CATEGORY_COLUMN = "region"
DECORATION_COLUMN = "flag"

# Rows describing aggregates rather than individual entities
RESERVED_AGGREGATE_LABELS = frozenset({"World"})
AGGREGATE_NAME_MARKERS = ("developed", "countries", "Asia")
NAME_ANNOTATIONS = ("UN",)  # Parenthetical qualifiers stripped from names
UNCATEGORIZED_LABEL = "Uncategorized"
