class InternalURIs:
    ROOT = "/"
    RECORD = "/{key}"
    API = "/api"
    API_INDEX = API + "/"
    API_RECORD = API + "/{key}"
    CSS = "/css/nogo.css"
    HEALTH = "/healthz"


class Limits:
    MIN_KEY_LENGTH = 4
    MIN_QUERY_LENGTH = 3


ADMIN_USERNAME = "admin"
AUTH_REALM = "Restricted"
CSS_CACHE_CONTROL = "public, max-age=31536000"
