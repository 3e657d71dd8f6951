"""
Shared constants for staffdesk.

Centralises collection names, status vocabularies and user-facing messages
used across the store, the query engine and the tool executors.
"""

# ── Collections ─────────────────────────────────────────────────────────────────
COLLECTION_BOOKINGS = "bookings"
COLLECTION_STAFF = "staff"
COLLECTION_CLIENTS = "clients"
COLLECTION_SHOWS = "shows"
COLLECTION_AVAILABILITY = "availability"

COLLECTIONS = frozenset({
    COLLECTION_BOOKINGS,
    COLLECTION_STAFF,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_AVAILABILITY,
})


# ── Status vocabularies ─────────────────────────────────────────────────────────
BOOKING_STATUSES = ("pending", "booked", "confirmed", "completed", "cancelled")
SHOW_STATUSES = ("upcoming", "ongoing", "completed", "cancelled")
DEFAULT_BOOKING_STATUS = "pending"

ANALYTICS_TYPE_NAMES = (
    "summary",
    "total_bookings",
    "bookings_by_status",
    "staff_by_role",
    "upcoming_shows",
    "top_staff_by_days",
    "top_clients_by_bookings",
    "booking_fill_status",
)


# ── Sanitisation ────────────────────────────────────────────────────────────────
# Document ids and foreign keys never shown to the model or the user
HIDDEN_ID_KEYS = frozenset({
    "id",
    "clientId",
    "primaryContactId",
    "primaryLocationId",
    "showId",
    "staffIds",
})


# ── Rendering hints ─────────────────────────────────────────────────────────────
UI_BOOKING_LIST = "booking_list"
UI_STAFF_RECOMMENDATIONS = "staff_recommendations"


# ── Standardised error messages ─────────────────────────────────────────────────
ERROR_MESSAGES = {
    "generic_failure": "Something went wrong while processing your request. Please try again.",
    "service_unavailable": "The assistant is temporarily unavailable. Please try again later.",
    "not_configured": "The assistant is not configured. Set ANTHROPIC_API_KEY first.",
    "empty_message": "Please provide a message.",
    "no_changes": "No changes detected - the record already has these values.",
    "unknown_action": "Unknown action type.",
}
