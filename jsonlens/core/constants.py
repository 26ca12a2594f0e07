APP_NAME = "jsonlens"
APP_VERSION = "1.0.0"

# Environment overrides read by core.settings.load_settings().
ENV_MAX_DIAGNOSTICS = "JSONLENS_MAX_DIAGNOSTICS"
ENV_INPUT_MAX_CHARS = "JSONLENS_INPUT_MAX_CHARS"
ENV_EXPAND_DEPTH = "JSONLENS_EXPAND_DEPTH"
ENV_REJECT_DUPLICATE_KEYS = "JSONLENS_REJECT_DUPLICATE_KEYS"
ENV_LOG_LEVEL = "JSONLENS_LOG_LEVEL"

# Diagnostics caps: results above the limit are never admitted.
MAX_DIAGNOSTICS_DEFAULT = 15
MAX_DIAGNOSTICS_CEILING = 500

# Heuristic line scanners only run below this size; the native decoder always runs.
EDITOR_INPUT_MAX_CHARS = 2_000_000

# Comma diagnoser windows.
STRUCTURE_COMMA_LOOKAHEAD_LINES = 2
MISSING_COMMA_LOOKBACK_LINES = 24

# Literal typo matching (difflib ratio) for bare-word values like `flase`.
LITERAL_TYPO_CUTOFF = 0.62

EDITOR_ALLOWED_CONTROL_CHARS = ("\t", "\n", "\r")
EDITOR_HIDDEN_UNICODE_CHARS = (
    "\u200b",  # zero width space
    "\u200c",
    "\u200d",
    "\u2060",
    "\ufeff",  # BOM / zero width no-break space
    "\u202e",
    "\u2028",
    "\u2029",
)

TREE_ROOT_KEY = "root"
TREE_ROOT_PATH = "$"
TREE_DEFAULT_EXPAND_DEPTH = 3
TREE_NODE_ID_PREFIX = "n"
# Object keys matching this are written as `.key`; anything else as `["key"]`.
TREE_IDENTIFIER_KEY_PATTERN = r"[A-Za-z_$][A-Za-z0-9_$]*"

# Short technical seeds; presentation layers map kinds to their own wording.
DIAGNOSTIC_SUGGESTIONS = {
    "SYNTAX_ERROR": "check JSON syntax",
    "UNEXPECTED_TOKEN": "check token placement and quoting",
    "UNEXPECTED_END": "complete the JSON document",
    "UNTERMINATED_STRING": "add the closing quote",
    "INVALID_CHARACTER": "remove the invalid character",
    "INVALID_ESCAPE_SEQUENCE": "use a valid escape: \\\" \\\\ \\/ \\b \\f \\n \\r \\t",
    "INVALID_UNICODE_ESCAPE": "unicode escapes use the form \\uXXXX",
    "INVALID_NUMBER": "use JSON number syntax",
    "TRAILING_COMMA": "remove the comma after the last element",
    "DUPLICATE_KEY": "remove or rename the duplicate key",
    "INVALID_VALUE": "use a valid JSON value",
    "NEWLINE_IN_STRING": "escape the line break as \\n",
}
