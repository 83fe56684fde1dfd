"""HTTP API for scheduling and dispatching follow-up reminders."""
