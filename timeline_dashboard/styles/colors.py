"""Timeline design constants."""

DEFAULT_ITEM_COLOR = "#4287f5"
ITEM_TEXT_COLOR = "#FFFFFF"

LANE_HEIGHT = 48  # px
ITEM_HEIGHT = 40  # px
HEADER_HEIGHT = 32  # px

BORDER_COLOR = "#E5E7EB"
LANE_BORDER_COLOR = "#F3F4F6"
HEADER_BACKGROUND = "#F9FAFB"
MONTH_LABEL_COLOR = "#6B7280"
BUTTON_COLOR = "#3B82F6"
ERROR_COLOR = "#EF4444"
