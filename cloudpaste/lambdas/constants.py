# Log event / error codes shared by the paste Lambdas
PASTE_CREATED = 'PASTE_CREATED'
PASTE_SERVED = 'PASTE_SERVED'
PASTE_PREVIEWED = 'PASTE_PREVIEWED'
PASTE_NOT_FOUND = 'PASTE_NOT_FOUND'
MISSING_PASTE_ID = 'MISSING_PASTE_ID'
PASTE_ID_COLLISION = 'PASTE_ID_COLLISION'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
HEALTHCHECK_OK = 'HEALTHCHECK_OK'
HEALTHCHECK_FAILED = 'HEALTHCHECK_FAILED'
