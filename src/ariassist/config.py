"""Configuration constants.

Centralizes magic numbers shared by the engine, the coordinator and the CLI.
Runtime settings (provider, keys, storage path) come from the environment,
see ``ariassist.cli.providers``.
"""

# Conversation context sent with every generation
CONTEXT_TURN_LIMIT = 10  # Most recent turns included in the prompt

# Thread titles
THREAD_TITLE_MAX_LENGTH = 40  # Messages up to this length become the title verbatim
THREAD_TITLE_CUT_LENGTH = 60  # Prefix considered when shortening longer messages
RETITLE_TURN_THRESHOLD = 2  # Threads with at most this many turns get retitled

# Attachments
PDF_MAX_PAGES = 50
TEXT_ATTACHMENT_EXTENSIONS = {".txt", ".md", ".markdown"}

# Library summaries
LIBRARY_PREVIEW_LENGTH = 80  # Characters shown in list views

# Logging
LOG_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
LOG_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
