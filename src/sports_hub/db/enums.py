from __future__ import annotations

from enum import StrEnum


class DataTypeEnum(StrEnum):
    FIXTURES = "fixtures"
    RESULTS = "results"
    STANDINGS = "standings"
    TEAMS = "teams"


class ProviderKindEnum(StrEnum):
    FOOTBALL_DATA_ORG = "football-data-org"
    API_FOOTBALL = "api-football"
    APIFOOTBALL = "apifootball"
    SOCCERSAPI = "soccersapi"


class ApiResultStatusEnum(StrEnum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"
    SKIPPED = "skipped"


class SessionStateEnum(StrEnum):
    INITIALIZING = "initializing"
    SCANNING = "scanning"
    COMPLETED = "completed"
    EXPIRED = "expired"
