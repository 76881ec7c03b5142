"""orgcal - outline documents to iCalendar."""
