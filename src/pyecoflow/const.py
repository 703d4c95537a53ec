"""Constants for pyecoflow library."""

from __future__ import annotations


# API Configuration
DEFAULT_BASE_URL = "https://api-a.ecoflow.com"
DEFAULT_TIMEOUT = 30  # seconds, transport only

# Endpoints
DEVICE_LIST_PATH = "/iot-open/sign/device/list"
DEVICE_QUOTA_PATH = "/iot-open/sign/device/quota"
DEVICE_QUOTA_ALL_PATH = "/iot-open/sign/device/quota/all"

# Response envelope
SUCCESS_CODE = "0"

# Request signing
NONCE_MIN = 100000
NONCE_MAX = 999999
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"

# Command envelope
COMMAND_VERSION = "1.0"
COMMAND_MODULE_TYPE = 1
OPERATE_TYPE_POWER_MODE = "powerMode"
OPERATE_TYPE_SUB_MODE = "subMode"

# Environment variables
ENV_ACCESS_KEY = "ECOFLOW_ACCESS_KEY"
ENV_SECRET_KEY = "ECOFLOW_SECRET_KEY"
ENV_SERIAL = "ECOFLOW_SERIAL"
ENV_BASE_URL = "ECOFLOW_BASE_URL"
ENV_TIMEOUT = "ECOFLOW_TIMEOUT"

# Signature self-test, from the EcoFlow open-platform signing example
SELF_TEST_PARAMS = (
    ("params.cmdSet", "11"),
    ("params.eps", "0"),
    ("params.id", "24"),
    ("sn", "123456789"),
)
SELF_TEST_ACCESS_KEY = "Fp4SvIprYSDPXtYJidEtUAd1o"
SELF_TEST_SECRET_KEY = "WIbFEKre0s6sLnh4ei7SPUeYnptHG6V"
SELF_TEST_NONCE = "345164"
SELF_TEST_TIMESTAMP = 1671171709428
SELF_TEST_SIGNATURE = "07c13b65e037faf3b153d51613638fa80003c4c38d2407379a7f52851af1473e"
