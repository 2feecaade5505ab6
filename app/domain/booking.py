"""Booking and complaint vocabularies"""

BOOKING_SCHEDULED = "Scheduled"
BOOKING_COMPLETED = "Completed"
BOOKING_STATUSES = (BOOKING_SCHEDULED, BOOKING_COMPLETED)

SLOT_MORNING = "Morning"
SLOT_AFTERNOON = "Afternoon"
TIME_SLOTS = (SLOT_MORNING, SLOT_AFTERNOON)

BOOKING_EVENT_WASTE = "Event Waste"
BOOKING_BULK_HOUSEHOLD = "Bulk Household"
BOOKING_GARDEN_WASTE = "Garden Waste"
BOOKING_WASTE_TYPES = (BOOKING_EVENT_WASTE, BOOKING_BULK_HOUSEHOLD, BOOKING_GARDEN_WASTE)

COMPLAINT_PENDING = "Pending"
COMPLAINT_IN_PROGRESS = "In Progress"
COMPLAINT_RESOLVED = "Resolved"
COMPLAINT_STATUSES = (COMPLAINT_PENDING, COMPLAINT_IN_PROGRESS, COMPLAINT_RESOLVED)
