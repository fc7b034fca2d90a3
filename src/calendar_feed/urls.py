CALENDAR_FEED_URL = "/api/calendar/{token}.ics"
CALENDAR_FILENAME = "sargaux-wedding.ics"
