HOME_URL = "/"
REGISTRY_URL = "/registry"

PUBLIC_ROUTES = ("/", "/api/login", "/api/logout")
PROTECTED_PREFIXES = ("/nyc", "/france", "/registry")
# Reachable while the site is switched off
ALWAYS_OPEN_PREFIXES = ("/_", "/healthz")
