"""
Tool catalog for model function calling.

This list is the only description of the back office the model receives.
Every name here must have a handler in ToolRegistry and vice versa
(tests/test_tool_registry.py enforces it).

Tools available:
  Reads (no confirmation)
    get_bookings                 → bookings, optionally by client/show/status/dates
    get_staff                    → staff, optionally by role/skill
    get_clients                  → clients, optionally by company
    get_shows                    → shows, optionally by venue/status/upcoming
    get_document_by_id           → one document from any collection
    find_staff_by_name           → resolve a staff member by name
    find_client_by_name          → resolve a client by name
    query_collection             → generic filter/sort/project/expand query
    search_records               → substring search on one field
    list_names                   → id/name pairs for name matching
    get_analytics                → counts and rankings
    recommend_staff              → staff ranked by availability coverage
    count_shows_worked_by_staff  → distinct shows one staff member worked
    clients_for_staff_shows      → clients of the shows a staff member worked

  Direct writes (exact id supplied, executed immediately)
    update_staff / update_client / update_show / delete_record
    batch_create                 → create full records in one batch

  Proposed writes (return a confirm action, never write)
    create_booking / create_staff / create_client / create_show
    update_booking               → by booking id
    update_booking_by_names      → by client + show names, optional date row
    update_staff_by_name / update_mentioned_staff
    update_client_by_name
    update_mentioned_show
    update_record / update_record_by_name

Entries use the provider-neutral ``parameters`` key; anthropic_tools()
re-keys it to ``input_schema`` for the Messages API.
"""

from __future__ import annotations

from ...constants import ANALYTICS_TYPE_NAMES

_COLLECTION = {
    "type": "string",
    "description": "Collection name (bookings, staff, clients, shows, availability)",
}

_UPDATES = {
    "type": "object",
    "description": "Arbitrary key-value pairs to update on the document",
}

_STAFF_UPDATE_FIELDS = {
    "newName": {"type": "string", "description": "New name to update to (alias for 'name')"},
    "email": {"type": "string", "description": "New email address"},
    "phone": {"type": "string", "description": "New phone number"},
    "role": {"type": "string", "description": "New staff role/position"},
    "skills": {"type": "array", "items": {"type": "string"}, "description": "New array of skills"},
    "payRate": {"type": "number", "description": "New hourly pay rate"},
    "updates": {
        "type": "object",
        "description": (
            "Other fields to update on the staff document. Colloquial keys such as "
            "'payrate', 'wage' or 'shoe size' are accepted."
        ),
    },
}

_SHOW_FIELDS = {
    "date": {"type": "string", "description": "Show date in YYYY-MM-DD format"},
    "startDate": {"type": "string", "description": "First show day (YYYY-MM-DD)"},
    "endDate": {"type": "string", "description": "Last show day (YYYY-MM-DD)"},
    "venue": {"type": "string", "description": "Venue name"},
    "description": {"type": "string", "description": "Show description"},
    "status": {"type": "string", "description": "Show status (upcoming, ongoing, completed, cancelled)"},
}


def _staff_name_param(description: str) -> dict:
    return {"type": "string", "description": description}


TOOL_SCHEMAS: list[dict] = [
    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #
    {
        "name": "get_bookings",
        "description": "Get all bookings or filter by client, show, status or a date range.",
        "parameters": {
            "type": "object",
            "properties": {
                "clientName": {"type": "string", "description": "Filter by client name"},
                "showName": {"type": "string", "description": "Filter by show name"},
                "status": {"type": "string", "description": "Filter by booking status"},
                "startDate": {"type": "string", "description": "Filter by start date (YYYY-MM-DD)"},
                "endDate": {"type": "string", "description": "Filter by end date (YYYY-MM-DD)"},
            },
            "required": [],
        },
    },
    {
        "name": "get_staff",
        "description": "Get all staff members or filter by role or skill.",
        "parameters": {
            "type": "object",
            "properties": {
                "role": {"type": "string", "description": "Filter by staff role"},
                "skill": {"type": "string", "description": "Filter by specific skill"},
            },
            "required": [],
        },
    },
    {
        "name": "get_clients",
        "description": "Get all clients or filter by company.",
        "parameters": {
            "type": "object",
            "properties": {
                "company": {"type": "string", "description": "Filter by company name"},
            },
            "required": [],
        },
    },
    {
        "name": "get_shows",
        "description": "Get all shows or filter by venue, status, or only upcoming shows.",
        "parameters": {
            "type": "object",
            "properties": {
                "venue": {"type": "string", "description": "Filter by venue name"},
                "status": {"type": "string", "description": "Filter by show status"},
                "upcoming": {"type": "boolean", "description": "Get only upcoming shows"},
            },
            "required": [],
        },
    },
    {
        "name": "get_document_by_id",
        "description": "Get a specific document by ID from any collection.",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "id": {"type": "string", "description": "Document ID"},
            },
            "required": ["collection", "id"],
        },
    },
    {
        "name": "find_staff_by_name",
        "description": "Find a staff member by name (exact or partial match).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": _staff_name_param("Staff member name to search for"),
            },
            "required": ["name"],
        },
    },
    {
        "name": "find_client_by_name",
        "description": "Find a client by name (exact or partial match).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Client name to search for"},
            },
            "required": ["name"],
        },
    },
    {
        "name": "query_collection",
        "description": (
            "Generic query over a collection with filters, date range, sort, projection, "
            "limit and optional name expansions. Booking results always include client "
            "and show names."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "filters": {
                    "type": "array",
                    "description": "Optional filters, all of which must match",
                    "items": {
                        "type": "object",
                        "properties": {
                            "field": {"type": "string"},
                            "op": {
                                "type": "string",
                                "description": "==, !=, >, <, >=, <=, contains, in, array_contains",
                            },
                            "value": {},
                        },
                        "required": ["field", "op", "value"],
                    },
                },
                "dateRange": {
                    "type": "object",
                    "description": "Optional inclusive date range on one field (YYYY-MM-DD)",
                    "properties": {
                        "field": {"type": "string"},
                        "startDate": {"type": "string"},
                        "endDate": {"type": "string"},
                    },
                },
                "select": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Fields to include in the response",
                },
                "orderBy": {
                    "type": "object",
                    "properties": {
                        "field": {"type": "string"},
                        "direction": {"type": "string", "description": "asc or desc"},
                    },
                },
                "limit": {"type": "number", "description": "Max number of results"},
                "expand": {
                    "type": "object",
                    "description": "Optional name expansions for bookings and availability",
                    "properties": {
                        "expandClientName": {"type": "boolean"},
                        "expandShowName": {"type": "boolean"},
                        "expandStaffNames": {
                            "type": "boolean",
                            "description": "For bookings: add staffNames to each date row",
                        },
                        "expandStaffName": {
                            "type": "boolean",
                            "description": "For availability: add staffName from staffId if missing",
                        },
                        "expandAvailabilityShowName": {
                            "type": "boolean",
                            "description": "For availability: add showName from showId if missing",
                        },
                    },
                },
            },
            "required": ["collection"],
        },
    },
    {
        "name": "search_records",
        "description": "Case-insensitive substring search on one field of a collection.",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "field": {"type": "string", "description": "Field to search in (name, email, etc.)"},
                "searchTerm": {"type": "string", "description": "Term to search for"},
            },
            "required": ["collection", "field", "searchTerm"],
        },
    },
    {
        "name": "list_names",
        "description": "List every name in a collection to help with name matching.",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": {"type": "string", "description": "Collection name (staff, clients, shows)"},
            },
            "required": ["collection"],
        },
    },
    {
        "name": "get_analytics",
        "description": "Get counts and rankings about bookings, staff, clients and shows.",
        "parameters": {
            "type": "object",
            "properties": {
                "type": {
                    "type": "string",
                    "enum": list(ANALYTICS_TYPE_NAMES),
                    "description": "Analytics type: " + ", ".join(ANALYTICS_TYPE_NAMES),
                },
                "startDate": {
                    "type": "string",
                    "description": "Optional start date (YYYY-MM-DD) for date-bounded analytics",
                },
                "endDate": {
                    "type": "string",
                    "description": "Optional end date (YYYY-MM-DD) for date-bounded analytics",
                },
                "limit": {
                    "type": "number",
                    "description": "Optional number of top results for ranking analytics",
                },
            },
            "required": ["type"],
        },
    },
    {
        "name": "recommend_staff",
        "description": (
            "Recommend staff for a show and/or dates based on availability coverage, "
            "role and skills."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "showName": {"type": "string", "description": "Show name (optional if showId or dates provided)"},
                "showId": {"type": "string", "description": "Show ID (used when present)"},
                "date": {"type": "string", "description": "Single target date (YYYY-MM-DD)"},
                "dates": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Explicit list of target dates (YYYY-MM-DD)",
                },
                "startDate": {"type": "string", "description": "Start of a target date range (YYYY-MM-DD)"},
                "endDate": {"type": "string", "description": "End of a target date range (YYYY-MM-DD)"},
                "role": {"type": "string", "description": "Preferred role to match"},
                "requiredSkills": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Skills required",
                },
                "limit": {"type": "number", "description": "Max number of recommendations"},
            },
            "required": [],
        },
    },
    {
        "name": "count_shows_worked_by_staff",
        "description": "Return the number of distinct shows a staff member has worked.",
        "parameters": {
            "type": "object",
            "properties": {
                "name": _staff_name_param("Staff display name (e.g., 'Jack Smith')"),
            },
            "required": ["name"],
        },
    },
    {
        "name": "clients_for_staff_shows",
        "description": "List distinct client names for shows a staff member has worked.",
        "parameters": {
            "type": "object",
            "properties": {
                "name": _staff_name_param("Staff display name (e.g., 'Jack Smith')"),
            },
            "required": ["name"],
        },
    },

    # ------------------------------------------------------------------ #
    # Direct writes                                                        #
    # ------------------------------------------------------------------ #
    {
        "name": "update_staff",
        "description": "Update a staff member by exact ID. Applied immediately.",
        "parameters": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Staff member ID"},
                "name": {"type": "string", "description": "Staff member name"},
                "email": {"type": "string", "description": "Email address"},
                "phone": {"type": "string", "description": "Phone number"},
                "role": {"type": "string", "description": "Staff role/position"},
                "skills": {"type": "array", "items": {"type": "string"}, "description": "Array of skills"},
            },
            "required": ["id"],
        },
    },
    {
        "name": "update_client",
        "description": "Update a client by exact ID. Applied immediately.",
        "parameters": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Client ID"},
                "name": {"type": "string", "description": "Client name"},
                "email": {"type": "string", "description": "Email address"},
                "phone": {"type": "string", "description": "Phone number"},
                "company": {"type": "string", "description": "Company name"},
                "notes": {"type": "string", "description": "Additional notes"},
            },
            "required": ["id"],
        },
    },
    {
        "name": "update_show",
        "description": "Update a show by exact ID. Applied immediately.",
        "parameters": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Show ID"},
                "name": {"type": "string", "description": "Show name"},
                **_SHOW_FIELDS,
            },
            "required": ["id"],
        },
    },
    {
        "name": "delete_record",
        "description": "Delete a record by ID.",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "id": {"type": "string", "description": "Record ID to delete"},
            },
            "required": ["collection", "id"],
        },
    },
    {
        "name": "batch_create",
        "description": "Create multiple complete records at once.",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "records": {
                    "type": "array",
                    "description": "Array of record objects to create",
                    "items": {"type": "object"},
                },
            },
            "required": ["collection", "records"],
        },
    },

    # ------------------------------------------------------------------ #
    # Proposed writes                                                      #
    # ------------------------------------------------------------------ #
    {
        "name": "create_booking",
        "description": (
            "Prepare to create a new booking (returns a confirm action). "
            "Needs either assignedDate or datesNeeded."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "clientId": {"type": "string", "description": "Client ID"},
                "showId": {"type": "string", "description": "Show ID"},
                "clientName": {"type": "string", "description": "Client display name (optional if clientId provided)"},
                "showName": {"type": "string", "description": "Show display name (optional if showId provided)"},
                "assignedDate": {
                    "type": "string",
                    "description": "Single assigned date (YYYY-MM-DD). Optional if using datesNeeded",
                },
                "datesNeeded": {
                    "type": "array",
                    "description": "Dates and staffing requirements",
                    "items": {
                        "type": "object",
                        "properties": {
                            "date": {"type": "string", "description": "YYYY-MM-DD"},
                            "staffCount": {"type": "number", "description": "Number of staff needed"},
                            "staffIds": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Pre-assigned staff IDs (optional)",
                            },
                            "staffNames": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Pre-assigned staff display names (optional)",
                            },
                            "role": {"type": "string"},
                            "shift": {"type": "string"},
                        },
                        "required": ["date", "staffCount"],
                    },
                },
                "status": {
                    "type": "string",
                    "description": "Booking status (pending, booked, confirmed, completed, cancelled)",
                },
                "notes": {"type": "string", "description": "Additional notes"},
            },
            "required": [],
        },
    },
    {
        "name": "create_staff",
        "description": "Prepare to create a new staff member (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Staff member name"},
                "email": {"type": "string", "description": "Email address"},
                "phone": {"type": "string", "description": "Phone number"},
                "role": {"type": "string", "description": "Staff role/position"},
                "skills": {"type": "array", "items": {"type": "string"}, "description": "Array of skills"},
                "payRate": {"type": "number", "description": "Hourly pay rate"},
            },
            "required": ["name", "email"],
        },
    },
    {
        "name": "create_client",
        "description": "Prepare to create a new client (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Client name"},
                "email": {"type": "string", "description": "Email address"},
                "phone": {"type": "string", "description": "Phone number"},
                "company": {"type": "string", "description": "Company name"},
                "industry": {"type": "string", "description": "Industry or market segment"},
                "location": {"type": "string", "description": "City or address"},
                "notes": {"type": "string", "description": "Additional notes"},
            },
            "required": ["name"],
        },
    },
    {
        "name": "create_show",
        "description": "Prepare to create a new show (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Show name"},
                **_SHOW_FIELDS,
            },
            "required": ["name", "date"],
        },
    },
    {
        "name": "update_booking",
        "description": "Prepare to update a booking by ID (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Booking ID"},
                "status": {"type": "string", "description": "New booking status"},
                "notes": {"type": "string", "description": "New notes"},
                "updates": {"type": "object", "description": "Other key-value pairs to update on the booking"},
            },
            "required": ["id"],
        },
    },
    {
        "name": "update_booking_by_names",
        "description": (
            "Prepare to update a booking identified by client and show names. "
            "With a date, staffIds/staffCount/role/shift in updates patch that date's row "
            "(a new row is added when the date is not on the booking)."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "clientName": {"type": "string", "description": "Client display name"},
                "showName": {"type": "string", "description": "Show display name"},
                "date": {"type": "string", "description": "Optional date within the booking (YYYY-MM-DD)"},
                "updates": {"type": "object", "description": "Key-value pairs to update on the booking"},
            },
            "required": ["clientName", "showName", "updates"],
        },
    },
    {
        "name": "update_staff_by_name",
        "description": "Prepare to update a staff member found by name (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": _staff_name_param("Staff member name to find and update"),
                **_STAFF_UPDATE_FIELDS,
            },
            "required": ["name"],
        },
    },
    {
        "name": "update_mentioned_staff",
        "description": (
            "Update a staff member mentioned with @ (e.g. 'Jack Smith' from '@Jack Smith'). "
            "Supports 'newName' and arbitrary 'updates'."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "mentionedName": _staff_name_param("The exact name that was mentioned with @"),
                **_STAFF_UPDATE_FIELDS,
            },
            "required": ["mentionedName"],
        },
    },
    {
        "name": "update_client_by_name",
        "description": "Prepare to update a client found by name (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Client name to find and update"},
                "email": {"type": "string", "description": "New email address"},
                "phone": {"type": "string", "description": "New phone number"},
                "company": {"type": "string", "description": "New company name"},
                "notes": {"type": "string", "description": "New notes"},
                "updates": _UPDATES,
            },
            "required": ["name"],
        },
    },
    {
        "name": "update_mentioned_show",
        "description": (
            "Update a show mentioned with # (e.g. 'Dallas Summer Apparel 2025' from "
            "'#Dallas Summer Apparel 2025'). Supports 'newName' and arbitrary 'updates'."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "mentionedName": {"type": "string", "description": "The exact show name mentioned with #"},
                "newName": {"type": "string", "description": "New show name (alias for 'name')"},
                **_SHOW_FIELDS,
                "updates": _UPDATES,
            },
            "required": ["mentionedName"],
        },
    },
    {
        "name": "update_record",
        "description": "Prepare to update any record by ID (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": _COLLECTION,
                "id": {"type": "string", "description": "Document ID"},
                "updates": _UPDATES,
            },
            "required": ["collection", "id", "updates"],
        },
    },
    {
        "name": "update_record_by_name",
        "description": "Prepare to update a staff member or client found by name (returns a confirm action).",
        "parameters": {
            "type": "object",
            "properties": {
                "collection": {"type": "string", "description": "Collection name (staff, clients)"},
                "name": {"type": "string", "description": "Display name to find"},
                "updates": _UPDATES,
            },
            "required": ["collection", "name", "updates"],
        },
    },
]


def anthropic_tools(schemas: list[dict] | None = None) -> list[dict]:
    """Catalog entries in Anthropic ToolParam form (``input_schema``)."""
    return [
        {
            "name": entry["name"],
            "description": entry["description"],
            "input_schema": entry["parameters"],
        }
        for entry in (schemas if schemas is not None else TOOL_SCHEMAS)
    ]
