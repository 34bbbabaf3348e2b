"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    NOT_FOUND = 4
    INVALID_INPUT = 5


class OutputFormats(Enum):
    """Output formats supported by the program.

    Args:
        Enum (string): Output formats selectable from the CLI.
    """

    TEXT = "text"
    PRETTY = "pretty"
    CSV = "csv"
    INTERACTIVE = "interactive"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    PROJECT_URL_PYPI = "https://pypi.org/project/"
    SUPPORTED_FORMATS = [
        OutputFormats.TEXT.value,
        OutputFormats.PRETTY.value,
        OutputFormats.CSV.value,
        OutputFormats.INTERACTIVE.value,
    ]
    DEFAULT_FORMAT = OutputFormats.TEXT.value
    DEFAULT_VERBOSITY = 2
    MAX_VERBOSITY = 6
    SOURCE_SELECTOR = "sdist"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    MAX_ARCHIVE_BYTES = 256 * 1024 * 1024
    MAX_RECORD_BYTES = 16 * 1024 * 1024

    # Interactive mode
    POLL_INTERVAL_SEC = 0.05
    FETCH_WORKERS = 2
    PAGE_SIZE = 10
    SCROLL_STEP = 1

    # Environment overrides
    ENV_INDEX_URL = "KAYAK_INDEX_URL"
    ENV_REQUEST_TIMEOUT = "KAYAK_REQUEST_TIMEOUT"
    ENV_CONFIG = "KAYAK_CONFIG"
    ENV_LOG_LEVEL = "KAYAK_LOG_LEVEL"
    ENV_LOG_FORMAT = "KAYAK_LOG_FORMAT"

    CSV_SEPARATOR = " | "
    USE_COLOR = False
    PRETTY_WIDTH = 88
