from typing import Tuple

# Remote endpoints
AUTHENTICATE_PATH = "/api/Users/authenticate"
ORDERS_SEND_PATH = "/api/Orders/createorupdate"
ORDERS_READ_PATH = "/api/Orders"

AUTHENTICATE_METHOD = "POST"
ORDERS_SEND_METHOD = "PUT"
ORDERS_READ_METHOD = "GET"

HTTP_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")

PLANNING_AREA_PREFIX = "PlanningArea"

# Token handling
TOKEN_VALIDITY_MILLIS = 10_000
ACCESS_TOKEN_FIELD = "jwtToken"
REFRESH_TOKEN_FIELD = "refreshToken"

# Vehicle order wire fields
ORDER_NUMBER_FIELD = "orderNumber"
MODEL_FIELD = "model"
DESCRIPTION_FIELD = "description"
DATES_FIELD = "dates"
FEATURES_FIELD = "features"
DATE_FIELD = "date"
LOCATION_FIELD = "location"
TYPE_FIELD = "type"

ORDER_NUMBER_LENGTH = 9
SERIES_NUMBER_LENGTH = 4

# Segmentation
PLAN_LOCATION = "Station1"
PLAN_DATE_TYPE = "PLAN"
