LOGIN_URL = "/api/login"
LOGOUT_URL = "/api/logout"
