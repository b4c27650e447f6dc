"""
Application constants with documented reasoning.

This file centralizes "magic numbers" used throughout the codebase,
providing clear documentation for why each value was chosen.
"""

# =============================================================================
# EVENT LOG
# =============================================================================

# Number of notification attempts kept in memory and shown to observers
MAX_EVENTS = 10

# Non-API messages (cron, test, system) are cut to this many characters
# in the event log; API messages are shown in full
DISPLAY_MESSAGE_LENGTH = 25

# =============================================================================
# LIVE UPDATES
# =============================================================================

# Pending snapshots buffered per subscriber before it is considered stuck
# and dropped. Each snapshot replaces the previous one, so a deep buffer
# only delays the drop of a dead connection
SUBSCRIBER_QUEUE_SIZE = 16

# SSE keep-alive comment interval, keeps proxies from closing idle streams
SSE_PING_INTERVAL_SECONDS = 15

# =============================================================================
# WEBHOOK DELIVERY
# =============================================================================

# Maximum characters per delivered part (Discord field length)
MAX_CONTENT_LENGTH = 1024

# A message needing more parts than this is rejected before sending anything
MAX_MESSAGE_PARTS = 5

# Webhook timeout - if Discord takes >10s, something is wrong
WEBHOOK_TIMEOUT_SECONDS = 10

# Discord answers a successful webhook execution with 204 No Content
WEBHOOK_SUCCESS_STATUS = 204

EMBED_COLOR = 0x89B4FA
FOOTER_TEXT = "via Nottif"
DEFAULT_AVATAR_URL = "https://raw.githubusercontent.com/tanq16/nottif/main/.github/assets/logo.png"

DEFAULT_USERNAME = "Nottif Notification"
CRON_USERNAME = "Nottif Cron"
TEST_USERNAME = "Nottif Test"

TEST_MESSAGE = "This is a test notification from Nottif!"
TEST_EVENT_MESSAGE = "Test Notification"

# =============================================================================
# CRON
# =============================================================================

# Firings of the same job may overlap when delivery is slower than the
# schedule; past this many concurrent runs APScheduler skips the tick
CRON_MAX_CONCURRENT_RUNS = 3

# A tick delayed by a busy event loop still runs if it is this late
CRON_MISFIRE_GRACE_SECONDS = 30
