"""Application constants."""

USER_AGENT = "typed-pipeline/0.3 (+source-loader)"
STAGES = (
    "load",
    "validate",
    "process",
)
VALIDATED_PREFIX = "Validated: "
DEFAULT_PARSE_MARKERS = ("malformed",)
DEFAULT_FORBIDDEN_FIELDS = ("invalid_field",)
DEFAULT_INVALID_VALUE = "contains disallowed value"
DEFAULT_MIN_LENGTH = 10
DEFAULT_TASK_NAME = "Data Processing"
EXCERPT_MAX_CHARS = 80
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "duration_ms",
    "error_kind",
    "message",
)
