PROJECT_NAME = "SignFlow"
API_V1_STR = "/api/v1"
API_STR = "/api"
VERSION = "1.0.0"
